from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from solarlog_monitor.errors import (
    DeviceUnreachableError,
    InvalidResponseError,
    MissingFieldError,
)
from solarlog_monitor.util.logging import get_logger


REQUEST_QUERY = "getjp"

# Group 801/170 holds every current reading of the device.
REQUEST_PAYLOAD: Mapping[str, Any] = {"801": {"170": None}}

FIELD_CODES: Mapping[str, str] = {
    "100": "time",
    "101": "power_ac",
    "102": "power_dc",
    "103": "voltage_ac",
    "104": "voltage_dc",
    "105": "yield_day",
    "106": "yield_yesterday",
    "107": "yield_month",
    "108": "yield_year",
    "109": "yield_total",
    "110": "consumption_ac",
    "111": "consumption_day",
    "112": "consumption_yesterday",
    "113": "consumption_month",
    "114": "consumption_year",
    "115": "consumption_total",
    "116": "power_total",
}

DEFAULT_TIMEOUT = 10.0


def remap_fields(data: Any) -> Dict[str, Any]:
    """Translate the raw ``{"801": {"170": {...}}}`` document into named fields.

    Values are passed through untouched; only the keys change.
    """
    if not isinstance(data, dict):
        raise InvalidResponseError("Device response is not a JSON object")

    group = data.get("801")
    if not isinstance(group, dict):
        raise InvalidResponseError("Device response lacks group 801")

    readings = group.get("170")
    if not isinstance(readings, dict):
        raise InvalidResponseError("Device response lacks group 801/170")

    fields: Dict[str, Any] = {}
    for code, name in FIELD_CODES.items():
        if code not in readings:
            raise MissingFieldError(code, name)
        fields[name] = readings[code]
    return fields


class SolarLogClient:
    """Low-level binding to the Solar-Log JSON interface."""

    def __init__(
        self,
        host: str,
        log=None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if not host:
            raise ValueError("Solar-Log host is required")
        self.host = host.rstrip("/")
        self.log = log or get_logger("solarlog.client")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    @property
    def url(self) -> str:
        return f"{self.host}/{REQUEST_QUERY}"

    # ------------------------------------------------------------------
    def _post(self) -> Any:
        url = self.url
        self.log.debug("POST %s payload=%s", url, REQUEST_PAYLOAD)

        try:
            resp = self.session.post(
                url,
                json=REQUEST_PAYLOAD,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            self.log.warning("Solar-Log request to %s failed: %s", url, exc)
            raise DeviceUnreachableError(f"Solar-Log at {self.host} unreachable: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            self.log.warning("Solar-Log %s returned HTTP %s", url, resp.status_code)
            raise DeviceUnreachableError(
                f"Solar-Log at {self.host} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as exc:
            self.log.warning("Solar-Log %s returned non-JSON payload", url)
            raise InvalidResponseError(f"Solar-Log at {self.host} returned non-JSON payload") from exc

    # ------------------------------------------------------------------
    def fetch(self) -> Dict[str, Any]:
        """Query the device once and return its readings under readable names."""
        data = self._post()
        try:
            fields = remap_fields(data)
        except InvalidResponseError as exc:
            self.log.warning("Solar-Log %s response rejected: %s", self.url, exc)
            raise
        self.log.debug("Solar-Log %s reported %d fields", self.url, len(fields))
        return fields
