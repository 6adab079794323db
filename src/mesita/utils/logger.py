"""Minimal logging utilities for mesita.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from mesita.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Aligning table at line %d", 12)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "mesita." prefix. The library
    never installs handlers; hosts decide where records go.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("session")
        >>> logger.name
        'mesita.session'
    """
    if not (name == "mesita" or name.startswith("mesita.")):
        name = f"mesita.{name}"
    return logging.getLogger(name)
