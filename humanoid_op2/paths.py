"""Where the robot framework keeps its data files."""

from __future__ import annotations

import os
import sys
from typing import Optional

ROBOT_DATA_DIRECTORY = "/robotis/Data/"
_SIMULATION_DATA_SUFFIX = "/projects/robots/robotis/darwin-op/libraries/robotis-op2/robotis/Data/"
_MACOS_BUNDLE = "/Contents"


def data_directory(
    webots_home: Optional[str] = None,
    cross_compilation: bool = False,
    macos: Optional[bool] = None,
) -> str:
    """The directory holding the motion files and other framework data.

    On the real robot (``cross_compilation``) this is a fixed path. In the
    simulator it lies under the simulator's installation directory, taken
    from ``webots_home`` or else from the ``WEBOTS_HOME`` environment
    variable; on macOS the installation is an application bundle. Raises
    KeyError when no installation directory is known.
    """
    if cross_compilation:
        return ROBOT_DATA_DIRECTORY
    if webots_home is None:
        webots_home = os.environ.get("WEBOTS_HOME")
        if webots_home is None:
            raise KeyError("WEBOTS_HOME is not set")
    if macos is None:
        macos = sys.platform == "darwin"
    bundle = _MACOS_BUNDLE if macos else ""
    return webots_home + bundle + _SIMULATION_DATA_SUFFIX