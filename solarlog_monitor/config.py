# solarlog_monitor/config.py
from dataclasses import dataclass, field
from pathlib import Path
import configparser

from solarlog_monitor.util.timezones import DEFAULT_TIMEZONE, resolve_timezone


@dataclass
class SolarLogConfig:
    host: str
    timezone: str = DEFAULT_TIMEZONE
    timeout: float = 10.0


@dataclass
class LoggingConfig:
    console_level: str = "INFO"
    console_quiet: bool = False
    debug_modules: list[str] = field(default_factory=list)
    structured_enabled: bool = False
    structured_path: str | None = None


@dataclass
class AppConfig:
    solarlog: SolarLogConfig
    logging: LoggingConfig


class Config:
    def __init__(self, path: str):
        self.path = Path(path)
        self.parser = configparser.ConfigParser(inline_comment_prefixes=("#",))
        read = self.parser.read(self.path)
        if not read:
            raise FileNotFoundError(f"Config file not found: {self.path}")

    @classmethod
    def load(cls, path: str) -> AppConfig:
        cfg = cls(path)
        p = cfg.parser

        def _as_bool(value: str) -> bool:
            return value.strip().lower() == "true"

        # --- Solar-Log ---
        if "solarlog" not in p:
            raise ValueError("[solarlog] section missing from config")

        solarlog_sec = p["solarlog"]
        host = solarlog_sec.get("host", "").strip()
        if not host:
            raise ValueError("[solarlog] host is required")

        solarlog_kwargs = {"host": host}
        if "timezone" in solarlog_sec:
            tz_raw = solarlog_sec["timezone"].strip()
            if tz_raw:
                # Raises InvalidTimezoneError (a ValueError) on unknown zones.
                resolve_timezone(tz_raw)
                solarlog_kwargs["timezone"] = tz_raw
        if "timeout" in solarlog_sec:
            solarlog_kwargs["timeout"] = float(solarlog_sec["timeout"])
        solarlog_cfg = SolarLogConfig(**solarlog_kwargs)

        # --- Logging ---
        logging_kwargs = {}
        if "logging" in p:
            logging_sec = p["logging"]
            if "console_level" in logging_sec:
                logging_kwargs["console_level"] = logging_sec["console_level"]
            if "console_quiet" in logging_sec:
                logging_kwargs["console_quiet"] = _as_bool(logging_sec["console_quiet"])
            if "debug_modules" in logging_sec:
                raw = logging_sec["debug_modules"]
                logging_kwargs["debug_modules"] = [x.strip() for x in raw.split(",") if x.strip()]
            if "structured_enabled" in logging_sec:
                logging_kwargs["structured_enabled"] = _as_bool(logging_sec["structured_enabled"])
            if "structured_path" in logging_sec:
                logging_kwargs["structured_path"] = logging_sec["structured_path"]
        logging_cfg = LoggingConfig(**logging_kwargs)

        return AppConfig(
            solarlog=solarlog_cfg,
            logging=logging_cfg,
        )
