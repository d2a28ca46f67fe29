import math

import pytest
from hypothesis import given, strategies as st

from humanoid_op2.soccer import (
    FallDetector,
    GaitAmplitudes,
    Posture,
    SoccerPlayer,
    clamp,
    normalize_ball_center,
)


class FakeRobot:
    def __init__(self, max_steps=None, acc_y=512.0):
        self.ts = 32
        self.now = 0.0
        self.steps = 0
        self.max_steps = max_steps
        self.acc_y = acc_y
        self.enabled = {}
        self.leds = {}
        self.led_history = []
        self.positions = {}
        self.spoken = []

    def basic_time_step(self):
        return self.ts

    def step(self, duration):
        if self.max_steps is not None and self.steps >= self.max_steps:
            return -1
        self.steps += 1
        self.now += duration / 1000.0
        return 0

    def time(self):
        return self.now

    def enable(self, device, period):
        self.enabled[device] = period

    def motor_limits(self, motor):
        return (-1.0, 1.0)

    def set_motor_position(self, motor, position):
        self.positions[motor] = position

    def set_led(self, led, color):
        self.leds[led] = color
        self.led_history.append((led, color))

    def camera_size(self):
        return (160, 120)

    def camera_image(self):
        return b"\x00" * 16

    def accelerometer(self):
        return (512.0, self.acc_y, 512.0)

    def speak(self, text, volume):
        self.spoken.append((text, volume))


class FakeMotion:
    def __init__(self):
        self.pages = []

    def play_page(self, page):
        self.pages.append(int(page))


class FakeGait:
    def __init__(self):
        self.calls = []
        self.x = None
        self.a = None

    def start(self):
        self.calls.append("start")

    def stop(self):
        self.calls.append("stop")

    def step(self, duration):
        self.calls.append(("step", duration))

    def set_x_amplitude(self, x):
        self.x = x

    def set_a_amplitude(self, a):
        self.a = a


class FakeVision:
    def __init__(self, center=None):
        self.center = center

    def ball_center(self, image):
        return self.center


def make_player(center=None, max_steps=None, acc_y=512.0):
    robot = FakeRobot(max_steps=max_steps, acc_y=acc_y)
    motion = FakeMotion()
    gait = FakeGait()
    player = SoccerPlayer(robot, motion, gait, FakeVision(center))
    return player, robot, motion, gait


def test_clamp_inside_and_outside():
    assert clamp(0.5, -1.0, 1.0) == 0.5
    assert clamp(-3.0, -1.0, 1.0) == -1.0
    assert clamp(3.0, -1.0, 1.0) == 1.0


def test_clamp_empty_range_raises():
    with pytest.raises(ValueError):
        clamp(0.0, 1.0, -1.0)


@given(st.floats(-1e6, 1e6), st.floats(-1e3, 0), st.floats(0, 1e3))
def test_clamp_stays_in_range(value, low, high):
    result = clamp(value, low, high)
    assert low <= result <= high


def test_normalize_ball_center_corners():
    assert normalize_ball_center(0, 0, 160, 120) == (-1.0, -1.0)
    assert normalize_ball_center(160, 120, 160, 120) == (1.0, 1.0)
    assert normalize_ball_center(80, 60, 160, 120) == (0.0, 0.0)


def test_gait_amplitudes_full_scale():
    amp = GaitAmplitudes.from_normalized(1.0, 1.0, 1.0)
    assert (amp.x, amp.y, amp.a) == (20.0, 40.0, 50.0)


def test_gait_amplitudes_are_bounded():
    assert GaitAmplitudes.from_normalized(5.0, -7.0, 3.0) == GaitAmplitudes.from_normalized(1.0, -1.0, 1.0)


def test_fall_detector_needs_more_than_twenty_steps():
    detector = FallDetector()
    results = [detector.update(400.0) for _ in range(21)]
    assert results[:20] == [Posture.UPRIGHT] * 20
    assert results[20] is Posture.FACE_DOWN
    assert detector.face_down_count == 0


def test_fall_detector_back_down():
    detector = FallDetector()
    results = [detector.update(600.0) for _ in range(21)]
    assert results[-1] is Posture.BACK_DOWN


def test_fall_detector_interrupted_count_resets():
    detector = FallDetector()
    for _ in range(15):
        detector.update(400.0)
    detector.update(512.0)
    assert detector.face_down_count == 0
    assert all(detector.update(400.0) is Posture.UPRIGHT for _ in range(20))


def test_constructor_enables_devices():
    player, robot, _, _ = make_player()
    assert robot.enabled["Camera"] == 2 * robot.ts
    assert robot.enabled["Accelerometer"] == robot.ts
    assert robot.enabled["HeadS"] == robot.ts
    assert robot.leds["HeadLed"] == 0x00FF00


def test_search_when_no_ball():
    player, robot, _, gait = make_player(center=None)
    assert player.control_step() is True
    assert robot.leds["EyeLed"] == 0xFF0000
    assert gait.x == 0.0
    assert gait.a == -0.3
    assert -1.0 <= robot.positions["Head"] <= 1.0


def test_chase_far_ball_walks_fast():
    player, robot, _, gait = make_player(center=(80, 0))
    assert player.control_step() is True
    assert robot.leds["EyeLed"] == 0x0000FF
    assert gait.x == 1.0
    assert robot.positions["Neck"] == 0.0


def test_close_ball_is_kicked_with_right_foot():
    player, robot, motion, gait = make_player(center=(80, 120))
    for _ in range(40):
        player.control_step()
        if motion.pages:
            break
    assert motion.pages == [12, 9]
    assert "stop" in gait.calls
    assert gait.calls[-1] == "start" or "start" in gait.calls


def test_fall_triggers_stand_up_pages():
    player, _, motion, _ = make_player(acc_y=300.0)
    for _ in range(21):
        player.control_step()
    assert motion.pages == [1, 10, 9]


def test_control_step_reports_end_of_simulation():
    player, _, _, _ = make_player(max_steps=0)
    assert player.control_step() is False


def test_run_greets_and_stops_when_simulation_ends():
    player, robot, motion, gait = make_player(max_steps=30)
    player.run()
    assert motion.pages[:3] == [1, 24, 9]
    assert gait.calls[0] == "start"
    assert robot.spoken and robot.spoken[0][1] == 1.0
    assert robot.steps == 30


def test_search_head_follows_sine():
    player, robot, _, _ = make_player(center=None)
    player.control_step()
    # The head is set before the step advances the clock.
    assert math.isclose(robot.positions["Head"], 0.0)