"""Writing and deleting values in INI files.

A file is rewritten through a temporary copy whose name ends in ``~``.
Blank lines are dropped on rewriting, except for a single blank line that
is kept before each section header. Sections and keys are matched without
regard to ASCII case; a section of ``None`` or ``""`` refers to the keys
before the first section header.
"""

from __future__ import annotations

import os
from typing import Iterable, Iterator, List, Optional

from humanoid_op2.ini_reader import (
    BUFFER_SIZE,
    _BLANKS,
    _same_name,
    _search,
    _skip_leading,
)

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_LINE_END = "\n"
_SPECIAL = '";#'


def _copy(source: str, max_length: int, enquote: bool) -> str:
    """Copy a string into a field of limited size, optionally quoting it."""
    if enquote and max_length < 3:
        enquote = False
    if not enquote:
        return source[:max_length - 1]
    chars = ['"']
    used = 1
    for ch in source:
        if used >= max_length - 2:
            break
        if ch == '"':
            if used >= max_length - 3:
                break
            chars.append("\\")
            used += 1
        chars.append(ch)
        used += 1
    chars.append('"')
    return "".join(chars)


def _needs_quotes(value: str) -> bool:
    return any(ch in _SPECIAL for ch in value) or value.endswith(" ")


def _quoted(value: str) -> str:
    if not _needs_quotes(value):
        return value
    return '"' + value.replace('"', '\\"') + '"'


def _section_line(section: Optional[str]) -> str:
    if not section:
        return ""
    return "[" + section[:BUFFER_SIZE - 5] + "]" + _LINE_END


def _key_line(key: str, value: str) -> str:
    name = key[:BUFFER_SIZE - 4]
    room = BUFFER_SIZE - (len(name) + 1) - 2
    return f"{name}={_copy(value, room, _needs_quotes(value))}{_LINE_END}"


def _temp_name(path: str) -> str:
    return path[:BUFFER_SIZE - 1][:-1] + "~"


def _rewrite(path: str, lines: Iterable[str]) -> None:
    temp = _temp_name(path)
    with open(temp, "w", encoding=_ENCODING, errors=_ERRORS, newline=_LINE_END) as out:
        out.writelines(lines)
    os.replace(temp, path)


def _edited_lines(
    lines: List[str], section: Optional[str], key: Optional[str], value: Optional[str]
) -> Iterator[str]:
    """Yield the lines of the file with the change applied."""
    rest = iter(lines)
    name = section or ""
    writing = key is not None and value is not None

    if name:
        count = 0
        for line in rest:
            sp = _skip_leading(line)
            end = sp.find("]")
            match = sp.startswith("[") and end >= 0 and _same_name(sp[1:end], name)
            if (not match or key is not None) and sp:
                if sp.startswith("[") and count > 0:
                    yield _LINE_END
                yield sp
                count += 1
            if match:
                break
        else:
            if writing:
                yield _LINE_END
                yield _section_line(name)
                yield _key_line(key, value)
            return

    wanted = key or ""
    sp = ""
    for line in rest:
        sp = _skip_leading(line)
        sep = sp.find("=")
        if sep < 0:
            sep = sp.find(":")
        match = sep >= 0 and _same_name(sp[:sep].rstrip(_BLANKS), wanted)
        if (key is not None and match) or sp.startswith("["):
            break
        if key is not None and sp:
            yield sp
    else:
        if writing:
            yield _LINE_END
            yield _key_line(key, value)
        return

    if sp.startswith("["):
        if writing:
            yield f"{key}={_quoted(value)}{_LINE_END}{_LINE_END}"
        yield sp
    elif writing:
        yield _key_line(key, value)

    for line in rest:
        sp = _skip_leading(line)
        if sp:
            if sp.startswith("["):
                yield _LINE_END
            yield sp


def _put(filename, section: Optional[str], key: Optional[str], value: Optional[str]) -> None:
    path = os.fspath(filename)
    writing = key is not None and value is not None
    try:
        with open(path, encoding=_ENCODING, errors=_ERRORS, newline=_LINE_END) as handle:
            lines = handle.readlines()
    except OSError:
        if writing:
            with open(path, "w", encoding=_ENCODING, errors=_ERRORS, newline=_LINE_END) as out:
                out.write(_section_line(section))
                out.write(_key_line(key, value))
        return

    if writing:
        current = _search(lines, section, key, -1, -1)
        if current is not None and current[:BUFFER_SIZE - 1] == value:
            return

    _rewrite(path, list(_edited_lines(lines, section, key, value)))


def write_string(filename, section: Optional[str], key: str, value: str) -> None:
    """Set a key to a string, creating the file, section or key as needed.

    Raises OSError when the file cannot be written.
    """
    _put(filename, section, key, value)


def write_int(filename, section: Optional[str], key: str, value: int) -> None:
    """Set a key to an integer written in decimal."""
    _put(filename, section, key, str(int(value)))


def write_float(filename, section: Optional[str], key: str, value: float) -> None:
    """Set a key to a number written with six decimals."""
    _put(filename, section, key, "%f" % value)


def delete_key(filename, section: Optional[str], key: str) -> None:
    """Remove a key from a section; a missing file is left missing."""
    _put(filename, section, key, None)


def delete_section(filename, section: Optional[str]) -> None:
    """Remove a section with all its keys; a missing file is left missing."""
    _put(filename, section, None, None)