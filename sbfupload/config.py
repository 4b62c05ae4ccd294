"""Reading the upload daemon's configuration file."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field

from sbfupload.uploadlog import LogLevel

__all__ = [
    "UPLOAD_VERSION",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_QUERY_INTERVAL",
    "ConfigError",
    "Configuration",
    "read_settings",
]

UPLOAD_VERSION = "3.0.4"
DEFAULT_CONFIG_NAME = "SBFspotUpload.cfg"
DEFAULT_QUERY_INTERVAL = 300
QUERY_INTERVAL_RANGE = (60, 3600)

_LOG_LEVELS = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warning": LogLevel.WARNING,
    "error": LogLevel.ERROR,
}

_UINT_RE = re.compile(r"\d+")
_UINT_MAX = 0xFFFFFFFF


class ConfigError(Exception):
    """The configuration file is missing, unreadable or invalid."""

    def __init__(self, message: str, line: int | None = None, path: str | None = None):
        self.message = message
        self.line = line
        self.path = path
        text = message
        if line is not None:
            text = f"{message} on line {line} [{path}]"
        super().__init__(text)


@dataclass
class Configuration:
    """Settings of the upload daemon."""

    version: str = UPLOAD_VERSION
    config_file: str = ""
    app_path: str = ""
    log_dir: str = ""
    log_level: LogLevel = LogLevel.INFO
    sql_database: str = ""
    sql_hostname: str = ""
    sql_username: str = ""
    sql_password: str = ""
    sql_port: int = 3306
    pvo_sids: dict[int, int] = field(default_factory=dict)
    pvo_api_key: str = ""
    sql_query_interval: int = DEFAULT_QUERY_INTERVAL


def _parse_uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"not an unsigned integer: {text!r}")
    value = int(text)
    if value > _UINT_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _app_path(me: str) -> str:
    pos = max(me.rfind("/"), me.rfind("\\"))
    return me[: pos + 1] if pos >= 0 else ""


def _strip_comment(line: str) -> str:
    line = line.strip()
    cut = [pos for pos in (line.find("#"), line.find("\r")) if pos >= 0]
    return line[: min(cut)] if cut else line


def _apply(cfg: Configuration, key: str, value: str, line_no: int) -> None:
    """Store one key/value pair; raise ValueError on a malformed value."""
    lc_value = value.lower()

    if key == "logdir":
        if value and not value.endswith(("\\", "/")):
            value += "/"
        cfg.log_dir = value
    elif key == "loglevel":
        if lc_value not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {value!r}")
        cfg.log_level = _LOG_LEVELS[lc_value]
    elif key == "pvoutput_sid":
        for system in value.split(","):
            parts = system.split(":")
            if len(parts) != 2:
                raise ValueError(f"expected serial:sid, got {system!r}")
            serial, sid = (_parse_uint(part) for part in parts)
            cfg.pvo_sids[serial] = sid
    elif key == "pvoutput_key":
        cfg.pvo_api_key = value
    elif key == "sql_database":
        cfg.sql_database = value
    elif key == "sql_hostname":
        cfg.sql_hostname = value
    elif key == "sql_username":
        cfg.sql_username = value
    elif key == "sql_password":
        cfg.sql_password = value
    elif key == "sql_port":
        cfg.sql_port = _parse_uint(value)
    elif key == "sql_queryinterval":
        interval = _parse_uint(value)
        low, high = QUERY_INTERVAL_RANGE
        if not low <= interval <= high:
            print(
                f"WARNING: SqlQueryInterval out of range ({low}-{high})",
                file=sys.stderr,
            )
            interval = DEFAULT_QUERY_INTERVAL
        cfg.sql_query_interval = interval
    else:
        print(f"WARNING: Ignoring '{key}'", file=sys.stderr)


def read_settings(me: str, filename: str | os.PathLike | None = None) -> Configuration:
    """Read the configuration for the program at path ``me``.

    Without ``filename`` the file ``SBFspotUpload.cfg`` next to ``me`` is
    read. Raises ConfigError when the file cannot be read, holds an invalid
    value, or lacks a required setting.
    """
    cfg = Configuration(app_path=_app_path(os.fspath(me) if me else ""))
    path = os.fspath(filename) if filename else ""
    cfg.config_file = path or cfg.app_path + DEFAULT_CONFIG_NAME

    try:
        with open(cfg.config_file, encoding="utf-8", errors="replace", newline="") as fs:
            content = fs.read()
    except OSError as exc:
        raise ConfigError(f"Could not open file {cfg.config_file}") from exc

    for line_no, raw in enumerate(content.split("\n"), start=1):
        line = _strip_comment(raw)
        if not line:
            continue
        parts = line.split("=")
        if len(parts) != 2:
            print(
                f"Configuration Error: Syntax error on line {line_no} [{cfg.config_file}]",
                file=sys.stderr,
            )
            continue
        key, value = parts[0].lower(), parts[1]
        try:
            _apply(cfg, key, value, line_no)
        except ValueError as exc:
            raise ConfigError("Syntax error", line_no, cfg.config_file) from exc

    if sys.platform.startswith("win") and not cfg.log_dir:
        raise ConfigError("Missing 'LogDir'")
    if not cfg.pvo_sids:
        raise ConfigError("Missing 'PVoutput_SID'")
    if not cfg.pvo_api_key:
        raise ConfigError("Missing 'PVoutput_Key'")
    if not cfg.sql_database:
        raise ConfigError("Missing 'SQL_Database'")
    return cfg