from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Final

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

TAG: Final = "[post-switch]"
_LEVEL_TAGS: Final = {"WARNING": "[WARN]", "ERROR": "[ERROR]", "CRITICAL": "[ERROR]"}
_WARNING_NO: Final = 30


def _format(record: Record) -> str:
    tag = TAG + _LEVEL_TAGS.get(record["level"].name, "")
    if record["extra"].get("uncaught"):
        tag += "[UNCAUGHT]"
    return tag + " {message}\n{exception}"


def _is_info(record: Record) -> bool:
    return record["level"].no < _WARNING_NO


def setup_logging(level: str = "INFO") -> None:
    """
    Configures loguru for post-switch.

    Informational records go to stdout and warnings or errors to stderr,
    each line prefixed with the post-switch tag.
    """
    logger.remove()
    logger.add(sys.stdout, format=_format, level=level, filter=_is_info)
    logger.add(sys.stderr, format=_format, level=max(_WARNING_NO, logger.level(level).no))
    logger.enable("post_switch")
