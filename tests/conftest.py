"""Shared test fixtures and utilities."""

import io

import pytest

from gar_apt.message import Message
from gar_apt.method import AptMethod
from tests.fixtures.apt_fakes import FakeDownloader, FakeHttpClient, read_all, wire


@pytest.fixture
def fake_client():
    """Fake HTTP client answering 200 with Content-Length 200."""
    return FakeHttpClient()


@pytest.fixture
def fake_downloader():
    """Fake downloader reporting hash ABCDEFGHI."""
    return FakeDownloader()


@pytest.fixture
def run_method(fake_client, fake_downloader):
    """Factory fixture: run a method over the given inbound messages.

    Returns the method and the outbound messages it wrote.
    """
    def _run(*messages: Message, **kwargs):
        kwargs.setdefault("client", fake_client)
        kwargs.setdefault("downloader", fake_downloader)
        output = io.BytesIO()
        method = AptMethod(wire(*messages), output, **kwargs)
        method.run()
        return method, read_all(output.getvalue())
    return _run
