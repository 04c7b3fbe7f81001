# solarlog_monitor/services/output_formatter.py

from __future__ import annotations

import json
from typing import Any, Mapping

from solarlog_monitor.models.snapshot import TelemetrySnapshot


def _pct(ratio: float) -> str:
    return f"{ratio * 100:.0f}%"


def format_human(snapshot: TelemetrySnapshot) -> list[str]:
    s = snapshot
    return [
        f"Data from: {s.time.isoformat()}",
        (
            f"AC power: {s.power_ac}W (DC power: {s.power_dc}W, "
            f"{_pct(s.efficiency)} efficiency, {s.alternator_loss}W loss)"
        ),
        f"Voltage: AC={s.voltage_ac}V DC={s.voltage_dc}V",
        f"Current usage: {s.consumption_ac}W ({_pct(s.usage)})",
        f"Remaining power: {s.power_available}W",
        f"Capacity: {_pct(s.capacity)} of {s.power_total}W peak",
        (
            f"Yield: day={s.yield_day}Wh yesterday={s.yield_yesterday}Wh "
            f"month={s.yield_month}Wh year={s.yield_year}Wh total={s.yield_total}Wh"
        ),
        (
            f"Consumption: day={s.consumption_day}Wh yesterday={s.consumption_yesterday}Wh "
            f"month={s.consumption_month}Wh year={s.consumption_year}Wh total={s.consumption_total}Wh"
        ),
    ]


def emit_human(snapshot: TelemetrySnapshot) -> None:
    for line in format_human(snapshot):
        print(line)


def emit_json(snapshot: TelemetrySnapshot) -> None:
    print(json.dumps(snapshot.as_dict(), indent=2))


def emit_fields(fields: Mapping[str, Any]) -> None:
    print(json.dumps(dict(fields), indent=2))
