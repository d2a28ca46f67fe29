import string

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from humanoid_op2.ini_reader import (
    BUFFER_SIZE,
    key_name,
    read_float,
    read_int,
    read_string,
    section_name,
)

SAMPLE = """\
top = global value
; a comment line
# another comment
[Walking Config]
x_offset = -10.0
period_time : 600
name = "quoted ; value"
escaped = "say \\"hi\\""
note = plain ; trailing comment
count = -17xyz
empty =
word = abc

[Robot Info]
Model = OP2
"""


@pytest.fixture
def ini(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(SAMPLE)
    return path


def test_read_string_in_section(ini):
    assert read_string(ini, "Walking Config", "x_offset") == "-10.0"


def test_sections_and_keys_ignore_case(ini):
    assert read_string(ini, "walking config", "X_OFFSET") == "-10.0"
    assert read_string(ini, "ROBOT INFO", "model") == "OP2"


def test_colon_separator(ini):
    assert read_string(ini, "Walking Config", "period_time") == "600"


def test_global_keys(ini):
    assert read_string(ini, None, "top") == "global value"
    assert read_string(ini, "", "top") == "global value"


def test_global_lookup_stops_at_first_section(ini):
    assert read_string(ini, None, "x_offset", "none") == "none"


def test_key_in_other_section_is_not_found(ini):
    assert read_string(ini, "Robot Info", "x_offset", "missing") == "missing"


def test_missing_file_gives_default(tmp_path):
    assert read_string(tmp_path / "absent.ini", "a", "b", "fallback") == "fallback"
    assert read_int(tmp_path / "absent.ini", "a", "b", 5) == 5
    assert read_float(tmp_path / "absent.ini", "a", "b", 2.5) == 2.5


def test_missing_section_gives_default(ini):
    assert read_string(ini, "Nowhere", "x_offset", "dflt") == "dflt"


def test_trailing_comment_removed(ini):
    assert read_string(ini, "Walking Config", "note") == "plain"


def test_quoted_value_keeps_semicolon(ini):
    assert read_string(ini, "Walking Config", "name") == "quoted ; value"


def test_escaped_quotes(ini):
    assert read_string(ini, "Walking Config", "escaped") == 'say "hi"'


def test_empty_value_is_empty_string(ini):
    assert read_string(ini, "Walking Config", "empty", "dflt") == ""


def test_comment_lines_are_not_keys(tmp_path):
    path = tmp_path / "c.ini"
    path.write_text("[s]\n;k=1\nk=2\n")
    assert read_string(path, "s", ";k", "none") == "none"
    assert read_string(path, "s", "k") == "2"


def test_read_int(ini):
    assert read_int(ini, "Walking Config", "period_time") == 600


def test_read_int_takes_leading_digits(ini):
    assert read_int(ini, "Walking Config", "count") == -17


def test_read_int_non_numeric_is_zero(ini):
    assert read_int(ini, "Walking Config", "word", 99) == 0


def test_read_int_empty_gives_default(ini):
    assert read_int(ini, "Walking Config", "empty", 99) == 99


def test_read_float(ini):
    assert read_float(ini, "Walking Config", "x_offset") == -10.0


def test_read_float_non_numeric_is_zero(ini):
    assert read_float(ini, "Walking Config", "word", 1.5) == 0.0


def test_read_float_exponent(tmp_path):
    path = tmp_path / "f.ini"
    path.write_text("[s]\nv=2.5e2rest\n")
    assert read_float(path, "s", "v") == 2.5e2


def test_section_names(ini):
    assert section_name(ini, 0) == "Walking Config"
    assert section_name(ini, 1) == "Robot Info"
    assert section_name(ini, 2) == ""
    assert section_name(ini, -1) == ""


def test_key_names_in_order(ini):
    names = [key_name(ini, "Walking Config", i) for i in range(9)]
    assert names == [
        "x_offset",
        "period_time",
        "name",
        "escaped",
        "note",
        "count",
        "empty",
        "word",
        "",
    ]


def test_global_key_names(ini):
    assert key_name(ini, None, 0) == "top"
    assert key_name(ini, None, 1) == ""
    assert key_name(ini, "Robot Info", -1) == ""


def test_long_value_is_truncated(tmp_path):
    path = tmp_path / "long.ini"
    path.write_text("[s]\nv=" + "a" * 600 + "\n")
    value = read_string(path, "s", "v")
    assert value == "a" * (BUFFER_SIZE - 1)


@settings(max_examples=50)
@given(
    key=st.text(alphabet=string.ascii_letters, min_size=1, max_size=20),
    value=st.text(alphabet=string.ascii_letters + string.digits, min_size=1, max_size=50),
)
def test_round_trip_written_values(tmp_path_factory, key, value):
    path = tmp_path_factory.mktemp("ini") / "r.ini"
    path.write_text(f"[Section]\n{key} = {value}\n")
    assert read_string(path, "Section", key) == value
    assert key_name(path, "Section", 0) == key


@settings(max_examples=50)
@given(number=st.integers(min_value=-(2**62), max_value=2**62))
def test_round_trip_integers(tmp_path_factory, number):
    path = tmp_path_factory.mktemp("ini") / "n.ini"
    path.write_text(f"[n]\nvalue={number}\n")
    assert read_int(path, "n", "value") == number
    assert read_float(path, "n", "value") == float(number)