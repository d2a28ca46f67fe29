# humanoid_op2

A pure-Python toolkit for driving a small humanoid robot. It has no
third-party dependencies and covers:

- **Points**: immutable `Point2D` and `Point3D` with arithmetic and distances.
- **INI settings**: a small, forgiving INI reader and writer, plus an `IniFile`
  object that wraps one file.
- **Servo bus packets**: checksums, byte and colour packing, and the full
  request/response exchange with the CM-730 sub-controller board through a
  `Platform` that you provide.
- **Soccer behaviour**: a controller that looks for a ball, walks towards it,
  kicks it and gets back up after a fall.

## Modules

| Module                    | What it holds                                                                    |
|---------------------------|----------------------------------------------------------------------------------|
| `humanoid_op2.point`      | `Point2D`, `Point3D`                                                             |
| `humanoid_op2.ini_reader` | `read_string`, `read_int`, `read_float`, `section_name`, `key_name`              |
| `humanoid_op2.ini_writer` | `write_string`, `write_int`, `write_float`, `delete_key`, `delete_section`       |
| `humanoid_op2.inifile`    | `IniFile`                                                                        |
| `humanoid_op2.packet`     | `calculate_checksum`, `make_word`, `low_byte`, `high_byte`, `make_color`, `tx_rx_packet`, `CommResult`, `CommError`, `ServoSpec`, `MX28_1024`, `MX28_4096`, `Platform`, `BulkReadData` |
| `humanoid_op2.cm730`      | `CM730`                                                                          |
| `humanoid_op2.paths`      | `data_directory`                                                                 |
| `humanoid_op2.soccer`     | `SoccerPlayer`, `FallDetector`, `GaitAmplitudes`, `Posture`, `clamp`, `normalize_ball_center` |

## Points

```python
from humanoid_op2.point import Point2D, Point3D

a = Point2D(3.0, 4.0)
print(a.distance(Point2D()))          # 5.0
print(a + 1, a * 2, a / 2)            # arithmetic with numbers or other points
x, y, z = Point3D(1.0, 2.0, 3.0)      # points unpack into their coordinates
```

## Reading and writing settings

```python
from humanoid_op2.inifile import IniFile

config = IniFile("config.ini")
config.put("Walking Config", "period_time", 600)
period = config.get_int("Walking Config", "period_time", 0)
first_section = config.section(0)
first_key = config.key("Walking Config", 0)
config.delete("Walking Config", "period_time")   # remove one key
config.delete("Walking Config")                  # remove the whole section
```

`put` accepts strings, integers and floats (floats are written with six
decimals) and raises `TypeError` for anything else. `get_int` wraps the value
to a 32-bit signed integer.

The module-level functions do the same work without an object:

```python
from humanoid_op2.ini_reader import read_float
from humanoid_op2.ini_writer import write_float

write_float("config.ini", "Walking Config", "hip_pitch_offset", 13.0)
offset = read_float("config.ini", "Walking Config", "hip_pitch_offset", 0.0)
```

Rules of the format:

- Section and key names are matched without regard to ASCII case.
- A section of `None` or `""` means the keys before the first section header.
- Keys are separated from values by `=` or `:`.
- Comments start with `;` or `#`; values in double quotes may contain them.
- A missing file, section or key gives back the default you pass in.
- Numbers are read from the leading part of a value, so `"12abc"` reads as 12.

Writing creates the file, section or key as needed. It rewrites the file
through a temporary copy whose name ends in `~`, and it drops blank lines
except for one before each section header. Deleting from a missing file
leaves it missing.

## Packet helpers

```python
from humanoid_op2.packet import make_color, make_word, low_byte, high_byte, calculate_checksum

color = make_color(255, 128, 0)      # 15-bit colour for the head LED
word = make_word(0x34, 0x12)         # 0x1234
assert (low_byte(word), high_byte(word)) == (0x34, 0x12)
```

`ServoSpec` holds the resolution constants of an MX-28 servo. Two instances
are given: `MX28_1024` and `MX28_4096`.

## Talking to the board

`CM730` needs an object that follows the `Platform` protocol. That object
opens and closes the port, reads and writes bytes, handles packet timeouts and
priority locks, and sleeps. `CM730` then builds each packet, sends it with
`tx_rx_packet` and checks the reply:

- `ping`, `write_byte`, `write_word` and `write_table` return the error byte
  of the status packet, which is 0 for broadcasts.
- `read_byte`, `read_word` and `read_table` return the values that were read.
- `sync_write` writes to many devices in one broadcast.
- `connect`, `change_baud` and `dxl_power_on` return `True` on success.
- Used as a context manager, `CM730` calls `disconnect()` on exit. This turns
  the head LED green and closes the port.

Any failed exchange raises `CommError`; its `result` attribute holds a
`CommResult`.

`bulk_read()` reads the board and the foot pressure sensors in one go into
`bulk_read_data`, a mapping from device id to `BulkReadData`. The first call
only probes the devices and prepares the request, and raises `CommError` with
`TX_FAIL`. Later calls do the reading.

## Data directory

`data_directory(webots_home=None, cross_compilation=False, macos=None)`
returns the folder that holds the motion files:

- On the robot (`cross_compilation=True`) it is `/robotis/Data/`.
- Otherwise it lies under the simulator's install directory. That directory
  is taken from `webots_home`, or from the `WEBOTS_HOME` environment variable.
  On macOS a `/Contents` bundle segment is added.
- If neither `webots_home` nor `WEBOTS_HOME` is set, `KeyError` is raised.

## Soccer controller

`SoccerPlayer(robot, motion, gait, vision)` works through four objects that
you supply, each following a protocol in `humanoid_op2.soccer`:

- a robot (`Robot`) for devices, time stepping, LEDs, camera, accelerometer
  and speech;
- a motion player (`MotionPlayer`, with `play_page`);
- a gait generator (`Gait`);
- a ball finder (`BallFinder`, which returns the ball's pixel centre or
  `None`).

Each call to `control_step()` runs one pass of the behaviour:

- stand up when `FallDetector` confirms a fall;
- walk towards the ball and steer with the head;
- kick once the ball is close;
- turn on the spot and sweep the head when no ball is seen.

`control_step()` returns `False` once the robot's `step` reports the end of
the simulation. `run()` prints an introduction, greets, plays the hello
motion, starts walking and then loops until the end.

`GaitAmplitudes.from_normalized(x, y, a)` converts amplitudes in [-1, 1] to
the gait generator's units.

## What this package does not do

- It has no 3D vector or 4×4 transformation-matrix types. Only points are
  provided.
- It contains no gait generator, motion-file player, image processing or
  ball detection of its own. `SoccerPlayer` only drives the objects you pass
  to it.
- It opens no serial port itself. All hardware access goes through your
  `Platform`.
- It provides no command-line program.