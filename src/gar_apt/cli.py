"""CLI entry point for gar-apt-method.

apt starts the method with no arguments and talks to it over stdin and
stdout, so stdout carries only protocol messages. Diagnostics go to stderr.
"""

import logging
import signal
import sys
import threading

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import MethodConfig
from .errors import MethodError
from .method import AptMethod

app = typer.Typer(
    add_completion=False,
    help="""\
apt transport for Google Artifact Registry (ar+https:// URIs).
Install as /usr/lib/apt/methods/ar+https; apt drives it over stdin/stdout.""",
)

err_console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    """Send gar_apt logs to stderr, never to the protocol stream."""
    logger = logging.getLogger("gar_apt")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False


def _install_signal_handlers(cancel: threading.Event):
    """Request a cooperative stop on SIGTERM; returns the previous handler."""
    def _handle(signum, frame):
        cancel.set()

    if threading.current_thread() is not threading.main_thread():
        return None
    return signal.signal(signal.SIGTERM, _handle)


@app.command()
def main(
    debug: bool = typer.Option(
        False, "--debug", envvar="GAR_APT_DEBUG",
        help="Log diagnostics to stderr and echo them to apt as 101 Log messages",
    ),
):
    """Serve apt acquire requests until apt closes the pipe."""
    _configure_logging(debug)

    cancel = threading.Event()
    previous_handler = _install_signal_handlers(cancel)

    method = AptMethod(
        sys.stdin.buffer,
        sys.stdout.buffer,
        config=MethodConfig(debug=debug),
    )
    try:
        method.run(cancel)
    except KeyboardInterrupt:
        raise typer.Exit(130)
    except (MethodError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)


if __name__ == "__main__":
    app()
