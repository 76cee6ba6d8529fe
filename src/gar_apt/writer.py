"""Serialization of apt method messages to the output stream.

The capabilities_message() ... general_failure_message() helpers build the
outbound messages; MessageWriter puts them on the wire.
"""

import logging
from typing import BinaryIO

from .constants import (
    CAPABILITIES,
    GENERAL_FAILURE,
    LOG,
    PROTOCOL_VERSION,
    URI_DONE,
    URI_FAILURE,
    URI_START,
)
from .message import Message

logger = logging.getLogger(__name__)


def capabilities_message() -> Message:
    """100 Capabilities: accepts configuration, speaks protocol 1.0."""
    return Message(
        code=CAPABILITIES,
        description="Capabilities",
        fields={"Send-Config": ["true"], "Version": [PROTOCOL_VERSION]},
    )


def log_message(text: str) -> Message:
    """101 Log."""
    return Message(code=LOG, description="Log", fields={"Message": [text]})


def uri_start_message(uri: str, size: str, last_modified: str = "") -> Message:
    """200 URI Start.

    Resumable downloads are not supported, so Resume-Point is always 0.
    Empty Size and Last-Modified values are left out.
    """
    fields = {"URI": [uri], "Resume-Point": ["0"]}
    if size:
        fields["Size"] = [size]
    if last_modified:
        fields["Last-Modified"] = [last_modified]
    return Message(code=URI_START, description="URI Start", fields=fields)


def uri_done_message(
    uri: str,
    size: str,
    last_modified: str,
    md5_hash: str,
    filename: str,
    ims_hit: bool = False,
) -> Message:
    """201 URI Done.

    An IMS hit (304 Not Modified) carries IMS-Hit instead of Size/MD5-Hash.
    An empty Last-Modified is left out.
    """
    fields = {"URI": [uri], "Filename": [filename]}
    if last_modified:
        fields["Last-Modified"] = [last_modified]
    if ims_hit:
        fields["IMS-Hit"] = ["true"]
    else:
        fields["Size"] = [size]
        fields["MD5-Hash"] = [md5_hash]
    return Message(code=URI_DONE, description="URI Done", fields=fields)


def uri_failure_message(uri: str, text: str) -> Message:
    """400 URI Failure."""
    return Message(
        code=URI_FAILURE,
        description="URI Failure",
        fields={"URI": [uri], "Message": [text]},
    )


def general_failure_message(text: str) -> Message:
    """401 General Failure."""
    return Message(code=GENERAL_FAILURE, description="General Failure", fields={"Message": [text]})


class MessageWriter:
    """Writes Message values to a binary sink in canonical wire form."""

    def __init__(self, stream: BinaryIO, encoding: str = "utf-8"):
        self.stream = stream
        self.encoding = encoding

    def write_message(self, message: Message) -> None:
        """Write one message and flush it.

        Raises:
            OSError: If the sink cannot be written (e.g. apt closed the pipe)
        """
        logger.debug("-> %d %s", message.code, message.description)
        self.stream.write(message.to_wire().encode(self.encoding))
        self.stream.flush()

    def send_capabilities(self) -> None:
        self.write_message(capabilities_message())

    def log(self, text: str) -> None:
        self.write_message(log_message(text))

    def uri_start(self, uri: str, size: str, last_modified: str = "") -> None:
        self.write_message(uri_start_message(uri, size, last_modified))

    def uri_done(
        self,
        uri: str,
        size: str,
        last_modified: str,
        md5_hash: str,
        filename: str,
        ims_hit: bool = False,
    ) -> None:
        self.write_message(uri_done_message(uri, size, last_modified, md5_hash, filename, ims_hit))

    def fail_uri(self, uri: str, text: str) -> None:
        self.write_message(uri_failure_message(uri, text))

    def fail(self, text: str) -> None:
        self.write_message(general_failure_message(text))


__all__ = [
    "MessageWriter",
    "capabilities_message",
    "log_message",
    "uri_start_message",
    "uri_done_message",
    "uri_failure_message",
    "general_failure_message",
]
