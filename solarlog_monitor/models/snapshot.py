# solarlog_monitor/models/snapshot.py
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import datetime, tzinfo
from typing import Any, Dict, Mapping

from solarlog_monitor.errors import InvalidResponseError, MissingFieldError, TimestampParseError
from solarlog_monitor.services.solarlog_client import DEFAULT_TIMEOUT, FIELD_CODES, SolarLogClient
from solarlog_monitor.util.timezones import DEFAULT_TIMEZONE, resolve_timezone


TIME_FORMAT = "%d.%m.%y %H:%M:%S"

NUMERIC_FIELDS = (
    "power_ac",
    "power_dc",
    "voltage_ac",
    "voltage_dc",
    "yield_day",
    "yield_yesterday",
    "yield_month",
    "yield_year",
    "yield_total",
    "consumption_ac",
    "consumption_day",
    "consumption_yesterday",
    "consumption_month",
    "consumption_year",
    "consumption_total",
    "power_total",
)

_CODES_BY_NAME = {name: code for code, name in FIELD_CODES.items()}

_INT_RE = re.compile(r"^-?\d+$", re.ASCII)


def parse_device_time(value: Any, tz: str | tzinfo | None = DEFAULT_TIMEZONE) -> datetime:
    """Parse the device's "DD.MM.YY HH:MM:SS" stamp as a wall time in ``tz``."""
    if not isinstance(value, str):
        raise TimestampParseError(value, TIME_FORMAT)
    try:
        naive = datetime.strptime(value.strip(), TIME_FORMAT)
    except ValueError as exc:
        raise TimestampParseError(value, TIME_FORMAT) from exc
    return naive.replace(tzinfo=resolve_timezone(tz))


def _as_int(name: str, value: Any) -> int:
    # bool is an int subclass; the device never sends one for a reading.
    if isinstance(value, bool):
        raise InvalidResponseError(f"Field {name} is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _INT_RE.match(text):
            return int(text)
    raise InvalidResponseError(f"Field {name} is not an integer: {value!r}")


@dataclass(frozen=True)
class TelemetrySnapshot:
    """One point-in-time set of Solar-Log readings.

    Power in W, energy in Wh, voltage in V, exactly as reported.
    """

    time: datetime
    power_ac: int
    power_dc: int
    voltage_ac: int
    voltage_dc: int
    yield_day: int
    yield_yesterday: int
    yield_month: int
    yield_year: int
    yield_total: int
    consumption_ac: int
    consumption_day: int
    consumption_yesterday: int
    consumption_month: int
    consumption_year: int
    consumption_total: int
    power_total: int

    # ------------------------------------------------------------------
    @classmethod
    def from_fields(
        cls,
        fields: Mapping[str, Any],
        timezone: str | tzinfo | None = DEFAULT_TIMEZONE,
    ) -> "TelemetrySnapshot":
        if "time" not in fields:
            raise MissingFieldError("100", "time")

        values: Dict[str, Any] = {"time": parse_device_time(fields["time"], timezone)}
        for name in NUMERIC_FIELDS:
            if name not in fields:
                raise MissingFieldError(_CODES_BY_NAME[name], name)
            values[name] = _as_int(name, fields[name])
        return cls(**values)

    @classmethod
    def from_device(
        cls,
        host: str,
        timezone: str | tzinfo | None = DEFAULT_TIMEZONE,
        *,
        client=None,
        timeout: float | None = None,
        log=None,
    ) -> "TelemetrySnapshot":
        """Query the device at ``host`` once and build a snapshot from the answer."""
        # Resolve first so a bad timezone fails before any network traffic.
        tz = resolve_timezone(timezone)
        if client is None:
            client = SolarLogClient(
                host,
                log=log,
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            )
        return cls.from_fields(client.fetch(), tz)

    # ------------------------------------------------------------------
    @property
    def efficiency(self) -> float:
        """DC to AC conversion efficiency as a ratio between 0 and 1."""
        if self.power_dc == 0:
            return 0
        return self.power_ac / self.power_dc

    @property
    def alternator_loss(self) -> int:
        """Conversion loss in W."""
        return self.power_dc - self.power_ac

    @property
    def usage(self) -> float:
        """Consumption relative to AC output; above 1 when consuming more than generated."""
        if self.power_ac == 0:
            return 0
        return self.consumption_ac / self.power_ac

    @property
    def power_available(self) -> int:
        """Surplus AC power in W, negative when consuming more than generated."""
        return self.power_ac - self.consumption_ac

    @property
    def capacity(self) -> float:
        """Current DC output relative to the installed peak power."""
        if self.power_total == 0:
            return 0
        return self.power_dc / self.power_total

    # ------------------------------------------------------------------
    def metrics(self) -> Dict[str, float | int]:
        return {
            "efficiency": self.efficiency,
            "alternator_loss": self.alternator_loss,
            "usage": self.usage,
            "power_available": self.power_available,
            "capacity": self.capacity,
        }

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["time"] = self.time.isoformat()
        payload["metrics"] = self.metrics()
        return payload

