# ttlsort/log.py
import logging

from rich.console import Console
from rich.logging import RichHandler

FORMAT = "%(message)s"


def configure_logging(settings, console=None) -> logging.Logger:
    """Attach a rich handler to the package logger, sized by settings.verbose."""
    logger = logging.getLogger("ttlsort")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=False,
    )
    handler.setFormatter(logging.Formatter(FORMAT, datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if settings.verbose else logging.INFO)
    return logger
