# solarlog_monitor/errors.py

from __future__ import annotations


class SolarLogError(Exception):
    """Base class for every failure raised while reading a Solar-Log device."""


class DeviceUnreachableError(SolarLogError):
    """Transport failure or a non-2xx answer from the device."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(SolarLogError):
    """The device answered, but not with the expected JSON document."""


class MissingFieldError(InvalidResponseError):
    def __init__(self, code: str, field: str):
        super().__init__(f"Field code {code} ({field}) missing from device response")
        self.code = code
        self.field = field


class TimestampParseError(SolarLogError):
    def __init__(self, value, expected_format: str):
        super().__init__(f"Cannot parse device timestamp {value!r} (expected {expected_format})")
        self.value = value
        self.expected_format = expected_format


class InvalidTimezoneError(SolarLogError, ValueError):
    """Timezone descriptor is neither a +HHMM offset nor a known zone name."""
