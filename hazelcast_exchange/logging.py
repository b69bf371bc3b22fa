"""Package loggers under the ``hazelcast_exchange`` namespace.

Nothing here installs a handler on import; records flow to whatever the
host application configured until :func:`configure_logging` is called.

Example:
    >>> from hazelcast_exchange.logging import configure_logging, get_logger
    >>> configure_logging("DEBUG")
    >>> get_logger("dispatcher.map").debug("bound to orders")
"""

import logging
from typing import Optional, Union


ROOT_LOGGER_NAME = "hazelcast_exchange"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

Level = Union[int, str]


def _coerce_level(level: Level) -> Level:
    return level.upper() if isinstance(level, str) else level


def get_logger(component: str = "") -> logging.Logger:
    """Get the logger of a package component, or the package root logger.

    Args:
        component: Dotted component name such as ``"dispatcher.map"``.
    """
    if not component:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")


def set_level(level: Level, component: str = "") -> None:
    """Set the level of a component logger, accepting names like ``"info"``."""
    get_logger(component).setLevel(_coerce_level(level))


def configure_logging(
    level: Level = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Attach a formatted handler to the package root logger.

    Calling it again only changes the level; a second handler is never
    added.

    Args:
        level: Level for the root package logger and the new handler.
        format_string: Format of emitted records.
        handler: Handler to attach. Defaults to a ``StreamHandler``.

    Returns:
        The package root logger.
    """
    logger = get_logger()
    level = _coerce_level(level)
    logger.setLevel(level)
    if not logger.handlers:
        handler = handler or logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(handler)
    return logger
