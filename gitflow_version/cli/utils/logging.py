import logging
import sys

from gitflow_version.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

_HANDLER_MARK = "_gitflow_version_handler"


class _BelowErrorFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def _handler(stream, level: int = logging.NOTSET) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)
    setattr(handler, _HANDLER_MARK, True)
    return handler


def reset_logging() -> None:
    """Remove the handlers installed by configure_logging."""
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)


def configure_logging(verbose: bool, structured: bool = False):
    """
    Configures the logging system for one invocation.

    In structured mode every record goes to stderr so that stdout only carries the
    JSON record. Otherwise errors go to stderr and everything else to stdout.
    """
    reset_logging()

    if structured:
        logger.addHandler(_handler(sys.stderr))
    else:
        out = _handler(sys.stdout)
        out.addFilter(_BelowErrorFilter())
        logger.addHandler(out)
        logger.addHandler(_handler(sys.stderr, logging.ERROR))

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
