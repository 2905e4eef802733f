"""
Argot logging.

Every engine module logs through logging.getLogger(__name__) below the "argot"
logger, at DEBUG level only: tokens as they are classified, bindings, defaults,
subcommand switches and validation. The package installs a NullHandler, so
nothing is printed unless the host application configures logging.

configure_logging() is a shortcut for interactive debugging: it attaches a
rich handler to the "argot" logger.

Quick example:
    >>> import argot
    >>> argot.configure_logging()
    >>> argot.parse(spec, ["--name=a", "-v"])  # traces every phase on stderr
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("argot")


def configure_logging(level=logging.DEBUG, /, *, console=None):
    """
    Attach a RichHandler to the "argot" logger and set its level.

    Calling it again replaces the handler installed by the previous call.
    Returns the handler.
    """
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console or Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


__all__ = (
    "configure_logging",
)
