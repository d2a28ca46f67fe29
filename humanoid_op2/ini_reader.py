"""Reading values, section names and key names from INI files.

Sections and keys are matched without regard to ASCII case. A section of
``None`` or ``""`` refers to the keys that stand before the first section
header. Missing files, sections and keys fall back to the default.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

BUFFER_SIZE = 512
_NUMBER_BUFFER_SIZE = 64

# Everything up to and including the space counts as blank.
_BLANKS = "".join(chr(code) for code in range(33))
_ASCII_FOLD = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_FLOAT_SPACE = re.compile(r"[ \t\n\v\f\r]*")
_HEX_FLOAT = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?"
)
_DEC_FLOAT = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_SPECIAL_FLOAT = re.compile(r"[+-]?(?:infinity|inf|nan)", re.IGNORECASE)


def _skip_leading(text: str) -> str:
    return text.lstrip(_BLANKS)


def _same_name(candidate: str, name: str) -> bool:
    return len(candidate) == len(name) and (
        candidate.translate(_ASCII_FOLD) == name.translate(_ASCII_FOLD)
    )


def _dequote(text: str) -> str:
    chars = []
    i = 0
    while i < len(text):
        if text[i] in '"\\' and text[i + 1:i + 2] == '"':
            i += 1
        chars.append(text[i])
        i += 1
    return "".join(chars)


def _parse_value(text: str) -> str:
    """Strip a trailing comment, blanks and surrounding quotes from a value."""
    sp = _skip_leading(text)
    in_string = False
    i = 0
    while i < len(sp):
        ch = sp[i]
        if ch in ";#" and not in_string:
            break
        if ch == '"':
            if sp[i + 1:i + 2] == '"':
                i += 1
            else:
                in_string = not in_string
        elif ch == "\\" and sp[i + 1:i + 2] == '"':
            i += 1
        i += 1
    value = sp[:i].rstrip(_BLANKS)
    if value.startswith('"') and value.endswith('"'):
        return _dequote(value[1:-1])
    return value


def _search(
    lines: Iterable[str],
    section: Optional[str],
    key: Optional[str],
    section_index: int,
    key_index: int,
) -> Optional[str]:
    lines = iter(lines)
    name = section or ""

    if name or section_index >= 0:
        index = -1
        for line in lines:
            sp = _skip_leading(line)
            end = sp.find("]")
            if not sp.startswith("[") or end < 0:
                continue
            if _same_name(sp[1:end], name):
                break
            index += 1
            if index == section_index:
                break
        else:
            return None
        if section_index >= 0:
            return sp[1:end] if index == section_index else None

    wanted = key or ""
    index = -1
    for line in lines:
        sp = _skip_leading(line)
        if sp.startswith("["):
            return None
        sep = sp.find("=")
        if sep < 0:
            sep = sp.find(":")
        if sp[:1] in (";", "#") or sep < 0:
            continue
        if _same_name(sp[:sep].rstrip(_BLANKS), wanted):
            break
        index += 1
        if index == key_index:
            break
    else:
        return None

    if key_index >= 0:
        return sp[:sep].rstrip(_BLANKS) if index == key_index else None
    return _parse_value(sp[sep + 1:])


def _lookup(
    filename,
    section: Optional[str],
    key: Optional[str],
    section_index: int = -1,
    key_index: int = -1,
) -> Optional[str]:
    try:
        handle = open(filename, encoding="utf-8", errors="surrogateescape")
    except OSError:
        return None
    with handle:
        try:
            return _search(handle, section, key, section_index, key_index)
        except OSError:
            return None


def _strtol(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        return 0
    return max(_LONG_MIN, min(_LONG_MAX, int(match.group(1))))


def _atof(text: str) -> float:
    start = _FLOAT_SPACE.match(text).end()
    hex_match = _HEX_FLOAT.match(text, start)
    if hex_match is not None:
        return float.fromhex(hex_match.group(0))
    dec_match = _DEC_FLOAT.match(text, start)
    if dec_match is not None:
        return float(dec_match.group(0))
    special = _SPECIAL_FLOAT.match(text, start)
    if special is not None:
        return float(special.group(0))
    return 0.0


def read_string(filename, section: Optional[str], key: str, default: str = "") -> str:
    """The value of a key, or the default when it cannot be found."""
    value = _lookup(filename, section, key)
    if value is None:
        value = default
    return value[:BUFFER_SIZE - 1]


def read_int(filename, section: Optional[str], key: str, default: int = 0) -> int:
    """The leading decimal integer of a key's value, or the default if it is empty."""
    value = _lookup(filename, section, key)
    if not value:
        return default
    return _strtol(value[:_NUMBER_BUFFER_SIZE - 1])


def read_float(filename, section: Optional[str], key: str, default: float = 0.0) -> float:
    """The leading number of a key's value, or the default if it is empty."""
    value = _lookup(filename, section, key)
    if not value:
        return default
    return _atof(value[:_NUMBER_BUFFER_SIZE - 1])


def section_name(filename, index: int) -> str:
    """The name of the section at a zero-based position, or "" if there is none."""
    if index < 0:
        return ""
    name = _lookup(filename, None, None, section_index=index)
    return (name or "")[:BUFFER_SIZE - 1]


def key_name(filename, section: Optional[str], index: int) -> str:
    """The name of the key at a zero-based position in a section, or "" if there is none."""
    if index < 0:
        return ""
    name = _lookup(filename, section, None, key_index=index)
    return (name or "")[:BUFFER_SIZE - 1]