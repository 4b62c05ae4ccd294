"""Command-line entry point of the upload daemon."""

from __future__ import annotations

import getopt
import signal
import sys
from typing import Callable, Sequence

from sbfupload.config import ConfigError, Configuration, read_settings
from sbfupload.service import UploadService, UploadStore
from sbfupload.uploadlog import LogLevel, log

__all__ = [
    "SCHEMA_VERSION",
    "MINIMUM_SCHEMA_VERSION",
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "SchemaError",
    "parse_args",
    "check_schema",
    "run",
]

SCHEMA_VERSION = "SchemaVersion"
MINIMUM_SCHEMA_VERSION = 1

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class SchemaError(Exception):
    """The database schema is older than the daemon requires."""

    def __init__(self, version: int, minimum: int):
        super().__init__(f"Upgrade your database to version {minimum}")
        self.version = version
        self.minimum = minimum


def parse_args(argv: Sequence[str]) -> str:
    """Return the configuration file given with -c/--config-file, or "".

    Raises getopt.GetoptError on an unknown option or a missing value.
    """
    options, _ = getopt.gnu_getopt(list(argv), "c:", ["config-file="])
    config_file = ""
    for _, value in options:
        config_file = value
    return config_file


def check_schema(store: UploadStore, minimum: int) -> int:
    """Return the database schema version; raise SchemaError if below ``minimum``."""
    value = store.get_config(SCHEMA_VERSION)
    try:
        version = int(value) if value is not None else 0
    except ValueError:
        version = 0
    if version < minimum:
        raise SchemaError(version, minimum)
    return version


def _upload(config: Configuration, service: UploadService) -> None:
    if config.log_dir:
        log(config, "Starting Daemon...", LogLevel.INFO)
    service.run()
    if config.log_dir:
        log(config, "Stopping Daemon...", LogLevel.INFO)


def run(
    argv: Sequence[str] | None = None,
    open_store: Callable[[Configuration], UploadStore] | None = None,
    minimum_schema: int = MINIMUM_SCHEMA_VERSION,
) -> int:
    """Start the daemon and return its exit status.

    The daemon keeps uploading until it receives SIGTERM.
    """
    me = sys.argv[0] if sys.argv else ""
    if argv is None:
        argv = sys.argv[1:]

    try:
        config_file = parse_args(argv)
    except getopt.GetoptError as exc:
        print(f"{me}: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        config = read_settings(me, config_file)
    except ConfigError as exc:
        print(f"Configuration Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    log(config, f"SBFspotUploadDaemon Version {config.version}", LogLevel.INFO)

    if open_store is None:
        print("Unable to open database. Check configuration.", file=sys.stderr)
        return EXIT_FAILURE
    try:
        store = open_store(config)
    except Exception:
        print("Unable to open database. Check configuration.", file=sys.stderr)
        return EXIT_FAILURE

    try:
        check_schema(store, minimum_schema)
    except SchemaError as exc:
        print(exc, file=sys.stderr)
        return EXIT_FAILURE
    finally:
        store.close()

    service = UploadService(config, open_store)
    previous = signal.signal(signal.SIGTERM, lambda signum, frame: service.stop())
    try:
        _upload(config, service)
    finally:
        signal.signal(signal.SIGTERM, previous)
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """Run the daemon from the command line."""
    return run(argv)