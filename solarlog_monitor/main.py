# solarlog_monitor/main.py

from datetime import datetime, timezone
from pathlib import Path

from .cli import build_parser
from .config import AppConfig, Config, LoggingConfig, SolarLogConfig
from .errors import SolarLogError
from .logging import ConsoleLog, RunLogEntry, StructuredLog
from .models.snapshot import TelemetrySnapshot
from .services.output_formatter import emit_fields, emit_human, emit_json
from .services.solarlog_client import SolarLogClient
from .util.timezones import resolve_timezone

EXIT_OK = 0
EXIT_DEVICE_ERROR = 2


def load_config(args) -> AppConfig:
    """Read the config file, falling back to --host/--timezone when there is none."""
    if Path(args.config).exists():
        app_cfg = Config.load(args.config)
    elif args.host:
        app_cfg = AppConfig(solarlog=SolarLogConfig(host=args.host), logging=LoggingConfig())
    else:
        raise FileNotFoundError(f"Config file not found: {args.config} (or pass --host)")

    if args.host:
        app_cfg.solarlog.host = args.host
    if args.timezone:
        resolve_timezone(args.timezone)
        app_cfg.solarlog.timezone = args.timezone
    return app_cfg


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    app_cfg = load_config(args)
    console_logger = ConsoleLog(
        level="DEBUG" if args.debug else app_cfg.logging.console_level,
        quiet=args.quiet or app_cfg.logging.console_quiet,
        debug_modules=app_cfg.logging.debug_modules,
    )
    log = console_logger.setup()
    structured_logger = StructuredLog(
        app_cfg.logging.structured_path,
        app_cfg.logging.structured_enabled,
    )

    client = SolarLogClient(app_cfg.solarlog.host, log=log, timeout=app_cfg.solarlog.timeout)
    now = datetime.now(timezone.utc)

    if args.command == "fields":
        try:
            fields = client.fetch()
        except SolarLogError as exc:
            log.error("Solar-Log query failed: %s", exc)
            return EXIT_DEVICE_ERROR
        emit_fields(fields)
        return EXIT_OK
    if args.command != "snapshot":
        raise ValueError(f"Unsupported command: {args.command}")

    # Only snapshot runs go to the structured log.
    try:
        snapshot = TelemetrySnapshot.from_device(
            app_cfg.solarlog.host,
            app_cfg.solarlog.timezone,
            client=client,
        )
    except SolarLogError as exc:
        log.error("Solar-Log query failed: %s", exc)
        structured_logger.write(
            RunLogEntry(
                timestamp=now.isoformat(),
                host=app_cfg.solarlog.host,
                snapshot=None,
                error=str(exc),
            )
        )
        return EXIT_DEVICE_ERROR

    log.info(
        "Snapshot %s: AC=%sW DC=%sW consumption=%sW",
        snapshot.time.isoformat(),
        snapshot.power_ac,
        snapshot.power_dc,
        snapshot.consumption_ac,
    )
    structured_logger.write(
        RunLogEntry(
            timestamp=now.isoformat(),
            host=app_cfg.solarlog.host,
            snapshot=snapshot.as_dict(),
            error=None,
        )
    )

    if args.json:
        emit_json(snapshot)
    else:
        emit_human(snapshot)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
