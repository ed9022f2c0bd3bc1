"""
Logging setup shared by every marketplace module.

    from marketplace.logging import get_logger
    logger = get_logger(__name__)

Configuration happens once, on first import: a stdout handler on the root
logger at ``LOG_LEVEL`` (INFO by default). JSON-RPC client libraries log
every request, so they are held at WARNING.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_COMPACT = "[%(levelname)s] %(name)s: %(message)s"

QUIET_LOGGERS = ("web3", "web3.providers", "aiohttp", "urllib3", "httpx", "httpcore")

# Characters that would let user-supplied text fake extra log lines
_UNSAFE_CHARS = {"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""}


def configure_logging(level: str | None = None) -> None:
    """Attach the stdout handler unless the root logger already has one."""
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    compact = os.environ.get("ENVIRONMENT") == "production"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_COMPACT if compact else LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _neutralize(value: str) -> str:
    for char, replacement in _UNSAFE_CHARS.items():
        value = value.replace(char, replacement)
    return value


def sanitize_address_for_logging(address: str | None) -> str:
    """
    Abbreviate an account address or transaction hash: ``0x1234...abcd``.

    Returns "N/A" for an empty value.
    """
    if not address:
        return "N/A"
    text = _neutralize(str(address))
    return text if len(text) <= 12 else f"{text[:6]}...{text[-4:]}"


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Product names and other free text, escaped and cut to ``max_length``."""
    if not value:
        return "N/A"
    text = _neutralize(str(value))
    return text if len(text) <= max_length else f"{text[:max_length]}..."


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "get_logger",
    "sanitize_address_for_logging",
    "sanitize_string_for_logging",
]
