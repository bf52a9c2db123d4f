# logging_setup.py
from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

LOG_FILE_NAME = "toolchat.log"
LEVEL_ENV = "TOOLCHAT_LOG_LEVEL"

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "{level:<7} | "
    "{name}:{function}:{line} | "
    "{message}"
)
_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LogSettings:
    # The REPL owns the terminal, so stderr logging is opt-in.
    console: bool = False
    # None → <toolchat home>/logs/toolchat.log; False → no file sink.
    log_file: Union[str, Path, None, bool] = None
    rotation: str = "5 MB"
    retention: Union[int, str] = 10
    enqueue: bool = False
    backtrace: bool = False
    diagnose: bool = False


_settings = LogSettings()
_sinks: List[int] = []
_stock_sink_dropped = False


def _resolve_level(level: Optional[str]) -> str:
    """Explicit arg, else $TOOLCHAT_LOG_LEVEL, else INFO. Unknown names fall back to INFO."""
    val = (level or os.getenv(LEVEL_ENV) or "INFO").strip().upper()
    if val == "WARN":
        val = "WARNING"
    return val if val in _LEVELS else "INFO"


def _normalize_retention(value: Union[int, str]) -> Union[int, str]:
    # loguru takes an int for "keep N files"; allow the friendlier "10 files" in config too
    if isinstance(value, str):
        m = re.fullmatch(r"(\d+)\s*files?", value.strip().lower())
        if m:
            return int(m.group(1))
    return value


def _log_path(target: Union[str, Path, None]) -> Path:
    if target is None:
        from config_home import log_dir
        path = log_dir() / LOG_FILE_NAME
    else:
        path = Path(target)
        if not path.suffix:
            path = path / LOG_FILE_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _install(level: str) -> None:
    global _stock_sink_dropped
    if not _stock_sink_dropped:
        logger.remove()  # loguru's stock stderr sink
        _stock_sink_dropped = True
    while _sinks:
        sid = _sinks.pop()
        try:
            logger.remove(sid)
        except ValueError:
            logger.debug("sink {} already removed", sid)

    opts = dict(
        level=level,
        format=_FORMAT,
        enqueue=_settings.enqueue,
        backtrace=_settings.backtrace,
        diagnose=_settings.diagnose,
    )
    if _settings.console:
        _sinks.append(logger.add(sys.stderr, **opts))
    if _settings.log_file is not False:
        path = _log_path(_settings.log_file)
        _sinks.append(logger.add(
            str(path),
            rotation=_settings.rotation,
            retention=_normalize_retention(_settings.retention),
            encoding="utf-8",
            **opts,
        ))
        logger.debug("logging to '{}' at level {}", str(path), level)


def configure_logging(
    level: Optional[str] = None,
    *,
    console: bool = False,
    log_file: Union[str, Path, None, bool] = None,
    rotation: str = "5 MB",
    retention: Union[int, str] = 10,
    enqueue: bool = False,
    backtrace: bool = False,
    diagnose: bool = False,
) -> None:
    """
    Set up loguru sinks once at start-up; calling again replaces them.

    level:     "DEBUG"/"INFO"/... (falls back to $TOOLCHAT_LOG_LEVEL, then INFO)
    log_file:  file or directory; None → toolchat home; False → no file sink
    rotation:  loguru rotation policy, e.g. "5 MB"
    retention: file count or a duration string such as "7 days"
    """
    global _settings
    _settings = LogSettings(
        console=console,
        log_file=log_file,
        rotation=rotation,
        retention=retention,
        enqueue=enqueue,
        backtrace=backtrace,
        diagnose=diagnose,
    )
    _install(_resolve_level(level))

