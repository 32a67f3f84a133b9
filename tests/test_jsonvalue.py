import json

from lspwire.jsonvalue import (
    get_array,
    get_bool,
    get_int,
    get_object,
    get_string,
    get_value,
    stringify,
)


def test_get_value():
    assert get_value({"a": 1}, "a") == 1
    assert get_value({"a": 1}, "b") is None
    assert get_value([1, 2], "a") is None


def test_get_string():
    assert get_string({"uri": "file:///x"}, "uri") == "file:///x"
    assert get_string({"uri": 3}, "uri") == ""
    assert get_string("text", "uri") == ""


def test_get_int():
    assert get_int({"line": 7}, "line") == 7
    assert get_int({"line": "7"}, "line") == -1
    assert get_int({}, "line", 0) == 0
    assert get_int({"line": True}, "line") == -1
    assert get_int({"line": 2.0}, "line", 5) == 5


def test_get_int_out_of_range():
    assert get_int({"n": 2**31}, "n") == -1
    assert get_int({"n": -(2**31)}, "n") == -(2**31)


def test_get_bool():
    assert get_bool({"flag": True}, "flag") is True
    assert get_bool({"flag": 1}, "flag") is False
    assert get_bool({}, "flag") is False


def test_get_object_and_array():
    assert get_object({"o": {"k": 1}}, "o") == {"k": 1}
    assert get_object({"o": [1]}, "o") == {}
    assert get_array({"a": [1, 2]}, "a") == [1, 2]
    assert get_array({"a": {}}, "a") == []


def test_stringify_round_trip():
    value = {"b": [1, 2, {"c": None}], "a": "é"}
    text = stringify(value)
    assert json.loads(text) == value
    assert " " not in text


def test_stringify_compact():
    assert stringify([1, {"x": True}]) == '[1,{"x":true}]'