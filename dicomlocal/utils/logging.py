"""
Package-level logging configuration.

* Rich console output (colourised, nicely formatted).
* Optional plain-text mirror controlled via ``--log-file`` on the CLI.
* *structlog* wired on top of the standard library so CLI commands can emit
  key/value events while library modules keep using ``logging``.

The public helper :func:`setup_logging` wires everything and should be the
sole entry-point used by the CLI.
"""

from __future__ import annotations

import atexit
import logging
from pathlib import Path
from typing import Optional

import structlog
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

__all__ = ["setup_logging"]


def _plain_text_file_handler(
    path: Optional[Path], level: int
) -> logging.Handler | None:
    """Return a plain-text file handler or *None* when *path* is *None*.

    Args:
        path: Destination file.
        level: Log-level for the handler.
    """
    if path is None:
        return None

    path = Path(path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    atexit.register(handler.close)
    return handler


def setup_logging(
    *,
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """Configure rich console logging and an optional file mirror.

    Args:
        verbose: Emit INFO-level messages to the console.
        debug: Emit DEBUG-level messages plus rich tracebacks.
        log_file: Optional path for a plain-text mirror of the log.
    """
    console_lvl = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )

    handlers: list[logging.Handler] = [
        RichHandler(
            level=console_lvl,
            rich_tracebacks=debug,
            tracebacks_show_locals=False,
            markup=False,
        )
    ]

    txt_handler = _plain_text_file_handler(log_file, logging.DEBUG if debug else logging.INFO)
    if txt_handler:
        handlers.append(txt_handler)

    # force=True: the group callback may run more than once per process.
    logging.basicConfig(
        level=logging.DEBUG,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )
    # urllib3 is chatty at DEBUG (one line per connection).
    logging.getLogger("urllib3").setLevel(max(console_lvl, logging.INFO))

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            (
                StructlogConsoleRenderer()
                if verbose or debug
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(console_lvl),
        logger_factory=LoggerFactory(),
    )
