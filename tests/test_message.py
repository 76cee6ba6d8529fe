"""Tests for the Message model."""

import pytest

from gar_apt.message import Message, escape_value


class TestMessageGet:
    """Test field lookups."""

    def test_get_returns_first_value(self):
        msg = Message(code=123, description="Fake", fields={"key": ["val1", "val2"]})
        assert msg.get("key") == "val1"

    def test_get_missing_key(self):
        msg = Message(code=123, description="Fake", fields={"some-other-key": ["val1"]})
        assert msg.get("key") == ""

    def test_get_empty_value_list(self):
        msg = Message(code=123, description="Fake", fields={"key": []})
        assert msg.get("key") == ""

    def test_get_all_preserves_order(self):
        msg = Message(code=601, description="Configuration")
        msg.add("Config-Item", "b=2")
        msg.add("Config-Item", "a=1")
        msg.add("Config-Item", "b=2")

        # Repeats are kept, never merged
        assert msg.get_all("Config-Item") == ["b=2", "a=1", "b=2"]

    def test_get_all_returns_copy(self):
        msg = Message(code=601, description="Configuration", fields={"Config-Item": ["a=1"]})
        msg.get_all("Config-Item").append("b=2")
        assert msg.fields["Config-Item"] == ["a=1"]

    def test_field_names_are_case_sensitive(self):
        msg = Message(code=1, description="x", fields={"URI": ["a"]})
        assert msg.get("uri") == ""


class TestMessageToWire:
    """Test canonical serialization."""

    def test_sorted_fields_capitals_first(self):
        """Capital letters sort before lowercase, then alphabetical."""
        msg = Message(
            code=123,
            description="Fake",
            fields={
                "akey": ["val1", "val2"],
                "zkey": ["val4"],
                "Zkey": ["val3"],
            },
        )
        assert msg.to_wire() == "123 Fake\nZkey: val3\nakey: val1\nakey: val2\nzkey: val4\n\n"

    def test_output_independent_of_insertion_order(self):
        first = Message(code=1, description="x")
        first.add("b", "2")
        first.add("A", "1")
        second = Message(code=1, description="x")
        second.add("A", "1")
        second.add("b", "2")
        assert first.to_wire() == second.to_wire()

    @pytest.mark.parametrize("msg,expected", [
        (Message(code=123, fields={"akey": ["val1"]}), "123 \nakey: val1\n\n"),
        (Message(description="Fake", fields={"akey": ["val1"]}), "0 Fake\nakey: val1\n\n"),
        (Message(code=123, description="Fake"), "123 Fake\n\n"),
        (Message(code=123, description="Fake", fields={"akey": []}), "123 Fake\n\n"),
    ])
    def test_missing_parts(self, msg, expected):
        assert msg.to_wire() == expected

    def test_str_is_wire_form(self):
        msg = Message(code=101, description="Log", fields={"Message": ["hi"]})
        assert str(msg) == msg.to_wire()

    def test_newlines_in_values_are_escaped(self):
        msg = Message(code=101, description="Log", fields={"Message": ["line1\nline2\r\nline3"]})
        assert msg.to_wire() == "101 Log\nMessage: line1\\nline2\\nline3\n\n"

    def test_escaped_value_keeps_single_terminator(self):
        msg = Message(code=101, description="Log", fields={"Message": ["a\n\nb"]})
        wire = msg.to_wire()
        assert wire.count("\n\n") == 1
        assert wire.endswith("\n\n")


class TestEscapeValue:
    """Test newline escaping."""

    def test_plain_value_unchanged(self):
        assert escape_value("Mon, 01 Mar 2021 03:05:06 GMT") == "Mon, 01 Mar 2021 03:05:06 GMT"

    def test_carriage_return_escaped(self):
        assert escape_value("a\rb") == "a\\nb"

    def test_crlf_is_one_escape(self):
        assert escape_value("a\r\nb") == "a\\nb"
