"""Custom exceptions for gar-apt-method.

Framing errors end the current read and are fatal to the method. Everything
else is reported to apt as a failure message and the method keeps running.
"""


class MethodError(RuntimeError):
    """Base class for all method errors."""
    pass


# Framing Errors
class MessageError(MethodError):
    """Base class for wire format errors."""
    pass


class MalformedHeaderError(MessageError):
    """Header line is not "<code> <description>" with an integer code."""
    pass


class DoubleHeaderError(MessageError):
    """A second header was parsed into a message that already has one."""
    pass


class MalformedFieldError(MessageError):
    """Field line is not "<Name>: <value>" or appeared before a header."""
    pass


class EmptyMessageError(MessageError):
    """Blank line received while no message was pending."""
    pass


# Stream Errors
class EndOfInputError(MethodError):
    """Input stream reached end-of-file."""
    pass


class CancelledError(MethodError):
    """Cancellation was requested before the next read."""
    pass


# Configuration Errors
class ConfigItemError(MethodError):
    """Config-Item is not of the form Key=Value."""

    def __init__(self, item: str):
        self.item = item
        super().__init__(f"Invalid config item: {item}")


# Transport Errors
class CredentialError(MethodError):
    """No credential source could be obtained."""
    pass


class DownloadError(MethodError):
    """Response body could not be written to the target file."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Failed to write {filename}: {reason}")
