"""Streaming reader for apt method messages."""

import logging
import re
import threading
from typing import BinaryIO, Optional

from .errors import (
    CancelledError,
    DoubleHeaderError,
    EmptyMessageError,
    EndOfInputError,
    MalformedFieldError,
    MalformedHeaderError,
)
from .message import Message

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(r"[+-]?[0-9]+")


class MessageReader:
    """Assembles Message values from a line-oriented byte stream.

    Each call to read_message() returns one complete message. The reader
    keeps the partially parsed message between lines and resets once the
    terminating blank line arrives, so the same reader serves every call.

    Cancellation is cooperative: the event is checked before each blocking
    readline(). A readline() that is already blocked is only released by
    closing the underlying stream.
    """

    def __init__(self, stream: BinaryIO, encoding: str = "utf-8"):
        """Initialize reader.

        Args:
            stream: Binary stream supporting readline()
            encoding: Text encoding of the wire format
        """
        self.stream = stream
        self.encoding = encoding
        self.message: Optional[Message] = None

    def read_message(self, cancel: Optional[threading.Event] = None) -> Message:
        """Read lines until a complete message is received.

        Args:
            cancel: Optional event; when set, no further read is attempted

        Returns:
            The completed Message

        Raises:
            CancelledError: If `cancel` was set before a read
            EndOfInputError: If the stream ended (a partial message is dropped)
            MessageError: On any framing error
        """
        while True:
            if cancel is not None and cancel.is_set():
                raise CancelledError("Read cancelled")

            raw = self.stream.readline()
            if not raw:
                if self.message is not None:
                    logger.debug("Discarding partial message at end of input: %s", self.message.code)
                    self.message = None
                raise EndOfInputError("End of input")

            line = raw.decode(self.encoding, errors="replace").strip()
            if not line:
                if self.message is None:
                    raise EmptyMessageError("Empty message")
                # Message is done, return and reset
                message, self.message = self.message, None
                return message

            if self.message is None:
                self.parse_header(line)
            else:
                self.parse_field(line)

    def parse_header(self, line: str) -> None:
        """Parse a "<code> <description>" line into the pending message."""
        if self.message is None:
            self.message = Message()
        elif self.message.has_header:
            raise DoubleHeaderError("Double parsing header")

        line = line.strip()
        if not line:
            raise MalformedHeaderError("Empty message header")
        parts = line.split(" ", 1)
        if len(parts) != 2:
            raise MalformedHeaderError(f"Malformed header {line!r}, not enough parts")
        code = parts[0].strip()
        if not _CODE_RE.fullmatch(code):
            raise MalformedHeaderError(f"Malformed header {line!r}, code is not an integer")

        self.message.code = int(code)
        self.message.description = parts[1].strip()

    def parse_field(self, line: str) -> None:
        """Parse a "<Name>: <value>" line and append it to the pending message."""
        if self.message is None or not self.message.has_header:
            raise MalformedFieldError("Field parsed before header")

        line = line.strip()
        if not line:
            raise MalformedFieldError("Empty message field")
        parts = line.split(":", 1)
        if len(parts) != 2:
            raise MalformedFieldError(f"Malformed field {line!r}, not enough parts")
        name = parts[0].strip()
        value = parts[1].strip()
        if not name or not value:
            raise MalformedFieldError(f"Malformed field {line!r}, empty key or value")

        self.message.add(name, value)


__all__ = ["MessageReader"]
