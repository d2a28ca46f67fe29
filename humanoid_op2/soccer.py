"""A soccer player: find the ball with the camera, walk to it and kick it."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

MOTOR_NAMES = (
    "ShoulderR", "ShoulderL", "ArmUpperR", "ArmUpperL", "ArmLowerR",
    "ArmLowerL", "PelvYR", "PelvYL", "PelvR", "PelvL",
    "LegUpperR", "LegUpperL", "LegLowerR", "LegLowerL", "AnkleR",
    "AnkleL", "FootR", "FootL", "Neck", "Head",
)
NECK = "Neck"
HEAD = "Head"

GREEN = 0x00FF00
BLUE = 0x0000FF
RED = 0xFF0000

_GREETING = (
    "Hi, my name is ROBOTIS OP2. I can walk, use my camera to find the ball, "
    "and perform complex motion like kicking the ball for example."
)
_INTRO = (
    "---------------Demo of ROBOTIS OP2---------------",
    "This demo illustrates all the possibilities available for the ROBOTIS OP2.",
    "This includes motion playback, walking algorithm and image processing.",
)

# The head turns by at most this much (rad) per time step.
_HEAD_GAIN = 0.015


class _Page(enum.IntEnum):
    INIT = 1
    WALK_READY = 9
    STAND_UP_FROM_FRONT = 10
    STAND_UP_FROM_BACK = 11
    RIGHT_KICK = 12
    LEFT_KICK = 13
    HELLO = 24


class Posture(enum.Enum):
    """What the accelerometer says about the robot's body."""

    UPRIGHT = "upright"
    FACE_DOWN = "face_down"
    BACK_DOWN = "back_down"


class Robot(Protocol):
    """The devices the player uses."""

    def basic_time_step(self) -> int: ...

    def step(self, duration: int) -> int: ...

    def time(self) -> float: ...

    def enable(self, device: str, period: int) -> None: ...

    def motor_limits(self, motor: str) -> Tuple[float, float]: ...

    def set_motor_position(self, motor: str, position: float) -> None: ...

    def set_led(self, led: str, color: int) -> None: ...

    def camera_size(self) -> Tuple[int, int]: ...

    def camera_image(self) -> bytes: ...

    def accelerometer(self) -> Sequence[float]: ...

    def speak(self, text: str, volume: float) -> None: ...


class MotionPlayer(Protocol):
    def play_page(self, page: int) -> None: ...


class Gait(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...

    def step(self, duration: int) -> None: ...

    def set_x_amplitude(self, x: float) -> None: ...

    def set_a_amplitude(self, a: float) -> None: ...


class BallFinder(Protocol):
    def ball_center(self, image: bytes) -> Optional[Tuple[float, float]]: ...


class _SimulationEnded(Exception):
    pass


def clamp(value: float, low: float, high: float) -> float:
    """Limit a value to [low, high]; raises ValueError if low exceeds high."""
    if low > high:
        raise ValueError(f"empty range: {low} > {high}")
    return min(max(value, low), high)


def normalize_ball_center(x: float, y: float, width: int, height: int) -> Tuple[float, float]:
    """Map pixel coordinates to [-1, 1] across the image."""
    return 2.0 * x / width - 1.0, 2.0 * y / height - 1.0


@dataclass
class FallDetector:
    """Counts consecutive steps in which the robot lies on its front or back."""

    tolerance: float = 80.0
    steps: int = 20
    center: float = 512.0
    face_down_count: int = 0
    back_down_count: int = 0

    def update(self, acc_y: float) -> Posture:
        """Feed one forward accelerometer reading; report a fall once confirmed."""
        if acc_y < self.center - self.tolerance:
            self.face_down_count += 1
        else:
            self.face_down_count = 0
        if acc_y > self.center + self.tolerance:
            self.back_down_count += 1
        else:
            self.back_down_count = 0

        if self.face_down_count > self.steps:
            self.face_down_count = 0
            return Posture.FACE_DOWN
        if self.back_down_count > self.steps:
            self.back_down_count = 0
            return Posture.BACK_DOWN
        return Posture.UPRIGHT


@dataclass(frozen=True)
class GaitAmplitudes:
    """Walking amplitudes in the gait generator's units."""

    x: float = 0.0
    y: float = 0.0
    a: float = 0.0

    @staticmethod
    def from_normalized(x: float, y: float, a: float) -> GaitAmplitudes:
        """Convert amplitudes in [-1, 1], bounding them first."""
        return GaitAmplitudes(
            clamp(x, -1.0, 1.0) * 20.0,
            clamp(y, -1.0, 1.0) * 40.0,
            clamp(a, -1.0, 1.0) * 50.0,
        )


class SoccerPlayer:
    """Searches for the ball, walks towards it and kicks it."""

    def __init__(self, robot: Robot, motion: MotionPlayer, gait: Gait, vision: BallFinder) -> None:
        self.robot = robot
        self.motion = motion
        self.gait = gait
        self.vision = vision
        self.time_step = int(robot.basic_time_step())
        self.fall_detector = FallDetector()
        self._head_x = 0.0
        self._head_y = 0.0

        robot.set_led("HeadLed", GREEN)
        robot.enable("Camera", 2 * self.time_step)
        robot.enable("Accelerometer", self.time_step)
        robot.enable("Gyro", self.time_step)
        self.limits = {}
        for name in MOTOR_NAMES:
            robot.enable(name + "S", self.time_step)
            self.limits[name] = robot.motor_limits(name)

    def _my_step(self) -> None:
        if self.robot.step(self.time_step) == -1:
            raise _SimulationEnded

    def _wait(self, ms: int) -> None:
        start = self.robot.time()
        seconds = ms / 1000.0
        while seconds + start >= self.robot.time():
            self._my_step()

    def _play(self, *pages: int) -> None:
        for page in pages:
            self.motion.play_page(page)

    def _clamped(self, motor: str, value: float) -> float:
        low, high = self.limits[motor]
        return clamp(value, low, high)

    def _ball_center(self) -> Optional[Tuple[float, float]]:
        found = self.vision.ball_center(self.robot.camera_image())
        if found is None:
            return None
        width, height = self.robot.camera_size()
        return normalize_ball_center(found[0], found[1], width, height)

    def _chase(self, ball: Tuple[float, float]) -> None:
        self.robot.set_led("EyeLed", BLUE)
        x = _HEAD_GAIN * ball[0] + self._head_x
        y = _HEAD_GAIN * ball[1] + self._head_y
        self._head_x, self._head_y = x, y
        neck = self._clamped(NECK, -x)
        head = self._clamped(HEAD, -y)

        self.gait.set_x_amplitude(1.0 if y < 0.1 else 0.5)
        self.gait.set_a_amplitude(neck)
        self.gait.step(self.time_step)

        self.robot.set_motor_position(NECK, neck)
        self.robot.set_motor_position(HEAD, head)

        if y > 0.35:
            self.gait.stop()
            self._wait(500)
            self.robot.set_led("EyeLed", GREEN)
            self._play(_Page.LEFT_KICK if x < 0.0 else _Page.RIGHT_KICK, _Page.WALK_READY)
            self.gait.start()
            self._head_x = 0.0
            self._head_y = 0.0

    def _search(self) -> None:
        self.robot.set_led("EyeLed", RED)
        self.gait.set_x_amplitude(0.0)
        self.gait.set_a_amplitude(-0.3)
        self.gait.step(self.time_step)
        head = self._clamped(HEAD, 0.7 * math.sin(2.0 * self.robot.time()))
        self.robot.set_motor_position(HEAD, head)

    def control_step(self) -> bool:
        """Run one cycle of the control loop; False once the simulation has ended."""
        try:
            ball = self._ball_center()
            posture = self.fall_detector.update(self.robot.accelerometer()[1])
            if posture is Posture.FACE_DOWN:
                self._play(_Page.INIT, _Page.STAND_UP_FROM_FRONT, _Page.WALK_READY)
            elif posture is Posture.BACK_DOWN:
                self._play(_Page.INIT, _Page.STAND_UP_FROM_BACK, _Page.WALK_READY)
            elif ball is not None:
                self._chase(ball)
            else:
                self._search()
            self._my_step()
        except _SimulationEnded:
            return False
        return True

    def run(self) -> None:
        """Greet, get ready to walk, then play until the simulation ends."""
        for line in _INTRO:
            print(line)
        self.robot.speak(_GREETING, 1.0)
        try:
            self._my_step()
            self.robot.set_led("EyeLed", GREEN)
            self._play(_Page.INIT, _Page.HELLO, _Page.WALK_READY)
            self._wait(200)
            self.gait.start()
            self.gait.step(self.time_step)
        except _SimulationEnded:
            return
        while self.control_step():
            pass