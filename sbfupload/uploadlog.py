"""Log levels and the upload log writer."""

from __future__ import annotations

import os
import sys
import time
from datetime import datetime
from enum import IntEnum

__all__ = ["LogLevel", "timestamp", "log"]


class LogLevel(IntEnum):
    """Severity of a log message, lowest first."""

    NONE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4

    @property
    def label(self) -> str:
        """The text written in front of a message of this level."""
        return "" if self is LogLevel.NONE else self.name


def timestamp(now: datetime | None = None) -> str:
    """Format ``now`` (default: the local time) as ``[HH:MM:SS.mmm] ``."""
    if now is None:
        now = datetime.now()
    return f"[{now:%H:%M:%S}.{now.microsecond // 1000:03d}] "


def log(config, text: str, level: LogLevel) -> bool:
    """Write ``text`` at ``level`` to the daily log file in ``config.log_dir``.

    Messages below ``config.log_level`` are dropped. Outside Windows an
    empty log directory sends messages to standard output instead.
    Returns True when the message was written.
    """
    level = LogLevel(level)
    if level < config.log_level:
        return False

    if not sys.platform.startswith("win") and not config.log_dir:
        print(f"{level.label}: {text}", flush=True)
        return True

    filename = time.strftime("SBFspotUpload%Y%m%d.log", time.localtime())
    fullpath = os.path.join(config.log_dir, filename)
    try:
        with open(fullpath, "a", encoding="utf-8") as fs_log:
            fs_log.write(f"{timestamp()}{level.label}: {text}\n")
    except OSError:
        print(f"Unable to write to logfile [{fullpath}]", file=sys.stderr)
        return False
    return True