"""Client for the PVOutput system and batch status services."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

import requests

__all__ = [
    "GET_SYSTEM_URL",
    "ADD_BATCH_STATUS_URL",
    "SBFSPOT_TEAM_ID",
    "HTTP_OK",
    "HTTP_FORBIDDEN",
    "HTTP_NOT_FOUND",
    "PVOutputError",
    "SystemData",
    "PVOutput",
    "parse_system_data",
]

_log = logging.getLogger(__name__)

GET_SYSTEM_URL = "https://pvoutput.org/service/r2/getsystem.jsp"
ADD_BATCH_STATUS_URL = "https://pvoutput.org/service/r2/addbatchstatus.jsp"
SBFSPOT_TEAM_ID = 613

HTTP_OK = 200
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404

_GET_SYSTEM_QUERY = "teams=1&donations=1&ext=1"
_MAIN_FIELD_COUNT = 16
_EXT_FIELD_COUNT = 12
_EXT_FIRST_INDEX = 7
_UINT_MAX = 0xFFFFFFFF
_UINT_RE = re.compile(r"\d+")


class PVOutputError(Exception):
    """A request to PVOutput failed or its answer could not be understood."""

    def __init__(self, message: str, http_status: int | None = None):
        super().__init__(message)
        self.http_status = http_status


@dataclass
class SystemData:
    """What PVOutput reports about a system."""

    system_name: str = ""
    system_size: int = 0
    postcode: str = ""
    panels: int = 0
    panel_power: int = 0
    panel_brand: str = ""
    inverters: int = 0
    inverter_power: int = 0
    inverter_brand: str = ""
    orientation: str = ""
    array_tilt: float = 0.0
    shade: str = ""
    install_date: str = ""
    location: tuple[float, float] = (0.0, 0.0)
    status_interval: int = 0
    teams: list[int] = field(default_factory=list)
    donations: int = 0
    ext_data: dict[int, tuple[str, str]] = field(default_factory=dict)


def _uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"not an unsigned integer: {text!r}")
    value = int(text)
    if value > _UINT_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _real(text: str) -> float:
    if not text or text != text.strip():
        raise ValueError(f"not a number: {text!r}")
    return float(text)


def parse_system_data(text: str) -> SystemData:
    """Parse the body of a getsystem answer (with teams, donations and extras).

    Raises PVOutputError when the answer does not have five sections or
    holds a value that is not a number where one is expected.
    """
    items = text.split(";")
    if len(items) != 5:
        _log.debug("Received Data: %s", text)
        raise PVOutputError(f"malformed system data: {text!r}")

    data = SystemData()

    main = items[0].split(",")
    if len(main) == _MAIN_FIELD_COUNT:
        try:
            data.system_name = main[0]
            data.system_size = _uint(main[1])
            data.postcode = main[2]
            data.panels = _uint(main[3])
            data.panel_power = _uint(main[4])
            data.panel_brand = main[5]
            data.inverters = _uint(main[6])
            data.inverter_power = _uint(main[7])
            data.inverter_brand = main[8]
            data.orientation = main[9]
            data.array_tilt = _real(main[10])
            data.shade = main[11]
            data.install_date = main[12]
            data.location = (_real(main[13]), _real(main[14]))
            data.status_interval = _uint(main[15])
        except ValueError as exc:
            _log.debug("items[0]: %s", items[0])
            raise PVOutputError(f"invalid system data: {items[0]!r}") from exc

    try:
        data.teams = [_uint(team) for team in items[2].split(",") if team]
    except ValueError as exc:
        _log.debug("items[2]: %s", items[2])
        raise PVOutputError(f"invalid team list: {items[2]!r}") from exc

    try:
        data.donations = _uint(items[3])
    except ValueError as exc:
        _log.debug("items[3]: %s", items[3])
        raise PVOutputError(f"invalid donations: {items[3]!r}") from exc

    extras = items[4].split(",")
    if len(extras) == _EXT_FIELD_COUNT:
        pairs = zip(extras[0::2], extras[1::2])
        data.ext_data = dict(enumerate(pairs, start=_EXT_FIRST_INDEX))

    return data


class PVOutput:
    """A connection to PVOutput for one system."""

    def __init__(self, sid: int, api_key: str, timeout: float):
        self.sid = sid
        self.api_key = api_key
        self.timeout = timeout
        self.http_status = 0
        self.system = SystemData()
        self._session = requests.Session()
        self._session.headers.update(
            {
                "X-Pvoutput-SystemId": str(sid),
                "X-Pvoutput-Apikey": api_key,
                "Content-Type": "application/x-www-form-urlencoded",
            }
        )

    def __enter__(self) -> "PVOutput":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self._session.close()

    @property
    def system_name(self) -> str:
        return self.system.system_name

    def _post(self, url: str, data: str) -> str:
        self.http_status = HTTP_OK
        try:
            response = self._session.post(
                url, data=data.encode("utf-8"), timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise PVOutputError(str(exc)) from exc
        self.http_status = response.status_code
        return response.text

    def get_system_data(self) -> SystemData:
        """Fetch and keep the system's details, teams and donation status."""
        _log.debug("PVOutput.get_system_data()")
        body = self._post(GET_SYSTEM_URL, _GET_SYSTEM_QUERY)
        try:
            data = parse_system_data(body)
        except PVOutputError as exc:
            raise PVOutputError(str(exc), self.http_status) from exc
        self.system = data
        return data

    def is_team_member(self) -> bool:
        return SBFSPOT_TEAM_ID in self.system.teams

    def is_supporter(self) -> bool:
        return self.system.donations > 0

    def batch_statuslimit(self) -> int:
        return 100 if self.is_supporter() else 30

    def batch_datelimit(self) -> int:
        return 90 if self.is_supporter() else 14

    def batch_ratelimit(self) -> int:
        return 100 if self.is_supporter() else 60

    def add_batch_status(self, data: str) -> str:
        """Upload a batch of status lines and return the server's answer.

        The HTTP status of the answer is left in ``http_status``; a failed
        transfer raises PVOutputError.
        """
        _log.debug("PVOutput.add_batch_status()")
        return self._post(ADD_BATCH_STATUS_URL, f"c1=1&data={data}")