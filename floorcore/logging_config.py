"""Log sinks for the CLI and for applications embedding the kernel.

Kernel modules only emit records through ``loguru.logger``. Sinks are
installed here from a :class:`~floorcore.settings.LoggingSettings` section.
"""

from __future__ import annotations

import json
import sys
from typing import Any

from loguru import logger

from floorcore.settings import LoggingSettings

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def record_to_dict(record: dict[str, Any]) -> dict[str, Any]:
    """Flatten a loguru record; values bound with ``logger.bind`` become top-level keys."""
    data: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "message": record["message"],
        "function": record["function"],
        "line": record["line"],
    }
    exception = record["exception"]
    if exception is not None and exception.type is not None:
        data["error"] = f"{exception.type.__name__}: {exception.value}"
    data.update(record["extra"])
    return data


def json_format(record: dict[str, Any]) -> str:
    # loguru formats the returned string again, so literal braces are doubled
    line = json.dumps(record_to_dict(record), ensure_ascii=False, default=str)
    return line.replace("{", "{{").replace("}", "}}") + "\n"


def setup_logging(config: LoggingSettings | None = None, *, level: str | None = None) -> None:
    """Replace every loguru sink with the ones described by ``config``.

    ``level`` overrides ``config.level`` (used by the CLI's ``--log-level``).
    A configured ``log_file`` gets a rotating file sink next to stderr.
    """
    config = config or LoggingSettings()
    level = (level or config.level).upper()
    fmt: Any = json_format if config.json_format else TEXT_FORMAT

    logger.remove()
    logger.add(sys.stderr, format=fmt, level=level, colorize=not config.json_format)

    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(config.log_file, format=fmt, level=level, rotation="10 MB", retention="7 days")
    logger.debug("Logging configured at {} (json={})", level, config.json_format)
