"""The upload loop: move new archive data from the database to PVOutput."""

from __future__ import annotations

import threading
import time
from typing import Callable, Protocol

from sbfupload.config import Configuration
from sbfupload.pvoutput import HTTP_OK, SBFSPOT_TEAM_ID, PVOutput, PVOutputError
from sbfupload.uploadlog import LogLevel, log

__all__ = [
    "NEXT_STATUS_CHECK",
    "BATCH_DATELIMIT",
    "BATCH_STATUSLIMIT",
    "STATUS_CHECK_INTERVAL",
    "CLIENT_TIMEOUT",
    "UploadStore",
    "UploadService",
    "describe_upload",
]

NEXT_STATUS_CHECK = "NextStatusCheck"
BATCH_DATELIMIT = "Batch_DateLimit"
BATCH_STATUSLIMIT = "Batch_StatusLimit"

STATUS_CHECK_INTERVAL = 2 * 60 * 60  # every 2 hours
CLIENT_TIMEOUT = 30
_WAIT_MARGIN = 30


class UploadStore(Protocol):
    """The database operations the upload loop relies on.

    Every method raises an exception when the database reports an error.
    """

    def get_config(self, key: str) -> str | None:
        """Return the stored value of ``key``, or None when it is not set."""

    def set_config(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""

    def batch_get_archdaydata(
        self, serial: int, datelimit: int, statuslimit: int
    ) -> tuple[str, int]:
        """Return the next batch of status lines for ``serial`` and their count."""

    def batch_set_pvoflag(self, response: str, serial: int) -> None:
        """Mark the data points acknowledged in ``response`` as uploaded."""

    def close(self) -> None:
        """Close the database."""


def describe_upload(data: str, datapoints: int, verbose: bool) -> str:
    """The log line announcing an upload of ``datapoints`` status lines."""
    if datapoints == 1:
        return f"Uploading datapoint: {data}"
    if verbose:
        return f"Uploading {datapoints} datapoints {data}"
    first = data.split(";", 1)[0]
    return f"Uploading {datapoints} datapoints, starting with {first}"


def _config_int(store: UploadStore, key: str, default: int) -> int:
    value = store.get_config(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class UploadService:
    """Periodically uploads new data points of every configured system."""

    def __init__(
        self,
        config: Configuration,
        open_store: Callable[[Configuration], UploadStore],
        make_client: Callable[[int, str, float], PVOutput] = PVOutput,
    ):
        self.config = config
        self._open_store = open_store
        self._make_client = make_client
        self._stop_event = threading.Event()
        self._next_status_check = 0
        self._batch_datelimit = 0
        self._batch_statuslimit = 0

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the loop to finish; safe to call from a signal handler."""
        self._stop_event.set()

    def run(self) -> None:
        """Run upload passes until ``stop`` is called."""
        while not self.stopping:
            self.run_once()
            interval = self.config.sql_query_interval
            countdown = interval + _WAIT_MARGIN - int(time.time()) % interval
            self._stop_event.wait(countdown)

    def run_once(self) -> int:
        """Run one pass over all systems; return the number of accepted uploads."""
        try:
            store = self._open_store(self.config)
        except Exception as exc:
            self._log(str(exc), LogLevel.ERROR)
            return 0

        uploaded = 0
        try:
            for serial, sid in sorted(self.config.pvo_sids.items()):
                if self.stopping:
                    break
                if self._process(store, serial, sid):
                    uploaded += 1
        finally:
            store.close()
        return uploaded

    def _log(self, text: str, level: LogLevel) -> None:
        log(self.config, text, level)

    def _process(self, store: UploadStore, serial: int, sid: int) -> bool:
        client = self._make_client(sid, self.config.pvo_api_key, CLIENT_TIMEOUT)
        try:
            return self._upload(store, client, serial)
        finally:
            client.close()

    def _check_status(self, store: UploadStore, client, now: int) -> None:
        try:
            client.get_system_data()
        except PVOutputError as exc:
            self._log(f"getSystemData() returned {exc}", LogLevel.DEBUG)
            return
        if client.http_status != HTTP_OK:
            return

        self._batch_datelimit = client.batch_datelimit()
        self._batch_statuslimit = client.batch_statuslimit()
        self._next_status_check = now + STATUS_CHECK_INTERVAL
        store.set_config(BATCH_DATELIMIT, str(self._batch_datelimit))
        store.set_config(BATCH_STATUSLIMIT, str(self._batch_statuslimit))
        store.set_config(NEXT_STATUS_CHECK, str(self._next_status_check))

        if not client.is_team_member():
            self._log(
                f"{client.system_name} is not yet member of SBFspot Team. "
                f"Consider joining team {SBFSPOT_TEAM_ID} on PVOutput",
                LogLevel.WARNING,
            )

    def _upload(self, store: UploadStore, client, serial: int) -> bool:
        now = int(time.time())
        self._next_status_check = _config_int(
            store, NEXT_STATUS_CHECK, self._next_status_check
        )
        if self._next_status_check - now < 0:
            self._check_status(store, client, now)

        if self._batch_datelimit == 0:
            self._batch_datelimit = client.batch_datelimit()
        if self._batch_statuslimit == 0:
            self._batch_statuslimit = client.batch_statuslimit()

        self._log("Retrieving new datapoints from DB...", LogLevel.DEBUG)
        try:
            data, datapoints = store.batch_get_archdaydata(
                serial, self._batch_datelimit, self._batch_statuslimit
            )
        except Exception as exc:
            self._log(f"batch_get_archdaydata() returned {exc}", LogLevel.ERROR)
            return False
        if not data:
            return False

        message = describe_upload(
            data, datapoints, self.config.log_level <= LogLevel.DEBUG
        )
        try:
            response = client.add_batch_status(data)
        except PVOutputError as exc:
            self._log(f"addBatchStatus() returned {exc}", LogLevel.ERROR)
            return False

        if client.http_status != HTTP_OK:
            self._log(f"{message} {response}", LogLevel.ERROR)
            return False

        self._log(f"{message} => OK (200)", LogLevel.INFO)
        try:
            store.batch_set_pvoflag(response, serial)
        except Exception as exc:
            self._log(f"batch_set_pvoflag() returned {exc}", LogLevel.ERROR)
        return True