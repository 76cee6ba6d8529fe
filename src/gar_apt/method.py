"""The apt method: reads commands from apt and fetches URIs.

AptMethod owns the whole process state: the MethodConfig built from 601
Configuration messages and the lazily created authenticated HTTP client.
Messages are handled strictly one at a time, and every reply is written
before the next message is read.
"""

import logging
import threading
from typing import BinaryIO, Callable, Dict, Optional, Protocol

import google.auth.exceptions
import requests

from .auth import CredentialSource, authorized_session, select_credential_source
from .config import MethodConfig
from .constants import CONFIGURATION, PSEUDO_SCHEME, REAL_SCHEME, URI_ACQUIRE
from .download import Downloader, FileDownloader
from .errors import (
    CancelledError,
    ConfigItemError,
    CredentialError,
    DownloadError,
    EndOfInputError,
)
from .message import Message
from .reader import MessageReader
from .writer import MessageWriter

logger = logging.getLogger(__name__)

# Raised by AuthorizedSession requests on network or token refresh failure
TRANSPORT_ERRORS = (requests.RequestException, google.auth.exceptions.GoogleAuthError)


class HttpClient(Protocol):
    """Anything that can issue a GET like requests.Session."""

    def get(self, url: str, **kwargs) -> requests.Response:
        ...


def real_uri(uri: str) -> str:
    """Map an ar+https URI to the https URL that is actually fetched."""
    return uri.replace(PSEUDO_SCHEME, REAL_SCHEME, 1)


class AptMethod:
    """apt acquire method for Artifact Registry."""

    def __init__(
        self,
        input_stream: BinaryIO,
        output_stream: BinaryIO,
        config: Optional[MethodConfig] = None,
        client: Optional[HttpClient] = None,
        downloader: Optional[Downloader] = None,
        session_factory: Callable[[CredentialSource], HttpClient] = authorized_session,
    ):
        """Initialize method.

        Args:
            input_stream: Stream apt writes commands to (stdin)
            output_stream: Stream replies go to (stdout)
            config: Starting configuration (defaults to empty)
            client: Pre-built HTTP client; skips credential resolution
            downloader: Body-to-file capability (defaults to FileDownloader)
            session_factory: Builds the client from a credential source
        """
        self.reader = MessageReader(input_stream)
        self.writer = MessageWriter(output_stream)
        self.config = config or MethodConfig()
        self.client = client
        self.downloader = downloader or FileDownloader()
        self.session_factory = session_factory

    def run(self, cancel: Optional[threading.Event] = None) -> None:
        """Advertise capabilities, then serve messages until input ends.

        Args:
            cancel: Checked before each read. A read that is already
                blocked only returns when the input stream is closed.

        Raises:
            MessageError: On malformed input from apt
            OSError: If replies cannot be written
        """
        self.writer.send_capabilities()
        while True:
            try:
                message = self.reader.read_message(cancel)
            except EndOfInputError:
                logger.debug("Input closed, exiting")
                return
            except CancelledError:
                logger.debug("Cancelled, exiting")
                return
            self.handle_message(message)

    def handle_message(self, message: Message) -> None:
        """Dispatch one inbound message by code."""
        logger.debug("<- %d %s", message.code, message.description)
        if message.code == URI_ACQUIRE:
            self.handle_acquire(message)
        elif message.code == CONFIGURATION:
            self.handle_configure(message)
        else:
            self.writer.fail(f"Unsupported message code {message.code} received from apt")

    def handle_configure(self, message: Message) -> None:
        """Apply Config-Item values to the method configuration."""
        items = message.get_all("Config-Item")
        if not items:
            return
        try:
            self.config.apply_items(items)
        except ConfigItemError as e:
            # Items after the malformed one are not applied
            logger.warning("%s", e)
            self.writer.log(str(e))

    def handle_acquire(self, message: Message) -> None:
        """Fetch one URI to the filename apt asked for."""
        uri = message.get("URI")
        if not uri:
            self.writer.fail("No URI provided in Acquire message")
            return
        filename = message.get("Filename")
        if not filename:
            self.writer.fail_uri(uri, "No filename provided in Acquire message")
            return
        if_modified_since = message.get("Last-Modified")

        try:
            client = self._ensure_client()
        except CredentialError as e:
            logger.info("%s", e)
            self.writer.fail_uri(uri, str(e))
            return

        url = real_uri(uri)
        headers: Dict[str, str] = {}
        if if_modified_since:
            # Passed through as apt formatted it
            headers["If-Modified-Since"] = if_modified_since
        self._debug(f"Requesting {url}")
        try:
            response = client.get(url, headers=headers, stream=True)
        except TRANSPORT_ERRORS as e:
            logger.info("Request for %s failed: %s", url, e)
            self.writer.fail_uri(uri, str(e))
            return

        status = response.status_code
        # A Content-Encoding body is decoded while streaming, so its
        # Content-Length is not the size that lands on disk
        size = response.headers.get("Content-Length", "")
        if response.headers.get("Content-Encoding"):
            size = ""
        last_modified = response.headers.get("Last-Modified", "")
        self._debug(f"Response {status} for {url}")

        if status == 200:
            # Sent after the request completes because Size comes from the response
            self.writer.uri_start(uri, size, last_modified)
            try:
                result = self.downloader.download(response, filename)
            except DownloadError as e:
                logger.info("%s", e)
                self.writer.fail_uri(uri, str(e))
                return
            self.writer.uri_done(uri, str(result.size), last_modified, result.md5_hash, filename)
        elif status == 304:
            # Unchanged since Last-Modified; apt keeps its existing file
            response.close()
            self.writer.uri_done(uri, "", last_modified, "", filename, ims_hit=True)
        else:
            response.close()
            reason = f" {response.reason}" if response.reason else ""
            self.writer.fail_uri(uri, f"Error downloading: code {status}{reason}")

    def _ensure_client(self) -> HttpClient:
        """Return the HTTP client, creating it on first use.

        Raises:
            CredentialError: If no credential source can be resolved
        """
        if self.client is not None:
            return self.client
        source = select_credential_source(self.config)
        self._debug(source.describe())
        self.client = self.session_factory(source)
        return self.client

    def _debug(self, text: str) -> None:
        """Log to stderr, and to apt as 101 Log when Debug::Acquire::gar is set."""
        logger.debug("%s", text)
        if self.config.debug:
            self.writer.log(text)


__all__ = ["AptMethod", "HttpClient", "real_uri"]
