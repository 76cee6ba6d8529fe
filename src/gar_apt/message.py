"""Data model for apt method messages.

An apt message is an RFC822-like block: one header line carrying a numeric
status code and a description, any number of "Name: value" field lines, and
a terminating blank line. Field names may repeat; every occurrence is kept
as a separate value in the order it was seen.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

# Longest sequences first so "\r\n" is a single escape
_NEWLINES = ("\r\n", "\n", "\r")


def escape_value(value: str) -> str:
    """Replace embedded newlines with the two characters backslash and n.

    A blank line terminates a message on the wire, so values must never
    contain a raw line break.
    """
    for newline in _NEWLINES:
        value = value.replace(newline, "\\n")
    return value


class Message(BaseModel):
    """A single apt message.

    Attributes:
        code: Status or command code; 0 means no header parsed yet
        description: Free text following the code (e.g. "URI Acquire")
        fields: Field name -> ordered list of values
    """
    code: int = 0
    description: str = ""
    fields: Dict[str, List[str]] = Field(default_factory=dict)

    @property
    def has_header(self) -> bool:
        """True once a header has been parsed into this message."""
        return self.code != 0 or self.description != ""

    def get(self, name: str) -> str:
        """Return the first value for `name`, or ""."""
        values = self.fields.get(name)
        if values:
            return values[0]
        return ""

    def get_all(self, name: str) -> List[str]:
        """Return every value for `name` in encounter order."""
        return list(self.fields.get(name, []))

    def add(self, name: str, value: str) -> None:
        """Append a value to `name`, creating the field if needed."""
        self.fields.setdefault(name, []).append(value)

    def to_wire(self) -> str:
        """Canonical text form of the message.

        Field names are sorted by code point, so upper-case names come
        before lower-case ones. Values keep their insertion order within
        a name. The result always ends with the blank terminator line.
        """
        lines = [f"{self.code} {self.description}"]
        for name in sorted(self.fields):
            for value in self.fields[name]:
                lines.append(f"{name}: {escape_value(value)}")
        lines.append("")
        lines.append("")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_wire()


__all__ = ["Message", "escape_value"]
