"""An INI file addressed by its path."""

from __future__ import annotations

import os
from typing import Optional, Union

from humanoid_op2 import ini_reader, ini_writer


def _to_c_int(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


class IniFile:
    """Reads and writes settings in one INI file."""

    def __init__(self, path) -> None:
        self.path = os.fspath(path)

    def __repr__(self) -> str:
        return f"IniFile({self.path!r})"

    def get_float(self, section: Optional[str], key: str, default: float = 0.0) -> float:
        return ini_reader.read_float(self.path, section, key, default)

    def get_int(self, section: Optional[str], key: str, default: int = 0) -> int:
        """The integer value of a key, wrapped to a 32-bit signed integer."""
        return _to_c_int(ini_reader.read_int(self.path, section, key, default))

    def get_string(self, section: Optional[str], key: str, default: str = "") -> str:
        return ini_reader.read_string(self.path, section, key, default)

    def section(self, index: int) -> str:
        """The name of the section at a zero-based position, or ""."""
        return ini_reader.section_name(self.path, index)

    def key(self, section: Optional[str], index: int) -> str:
        """The name of the key at a zero-based position in a section, or ""."""
        return ini_reader.key_name(self.path, section, index)

    def put(self, section: Optional[str], key: str, value: Union[str, int, float]) -> None:
        """Store a string, integer or number; raises TypeError for other values."""
        if isinstance(value, str):
            ini_writer.write_string(self.path, section, key, value)
        elif isinstance(value, int):
            ini_writer.write_int(self.path, section, key, value)
        elif isinstance(value, float):
            ini_writer.write_float(self.path, section, key, value)
        else:
            raise TypeError(f"cannot store a value of type {type(value).__name__}")

    def delete(self, section: Optional[str], key: Optional[str] = None) -> None:
        """Remove a key, or the whole section when no key is given."""
        if key is None:
            ini_writer.delete_section(self.path, section)
        else:
            ini_writer.delete_key(self.path, section, key)