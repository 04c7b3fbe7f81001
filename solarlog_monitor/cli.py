# solarlog_monitor/cli.py
import argparse


def build_parser():
    parser = argparse.ArgumentParser(
        prog="solarlog-monitor",
        description="Solar-Log telemetry reader"
    )

    parser.add_argument(
        "--config",
        default="solarlog_monitor.conf",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--host",
        help="Solar-Log base URI (overrides [solarlog] host)"
    )

    parser.add_argument(
        "--timezone",
        help="Device timezone, +HHMM offset or zone name (overrides [solarlog] timezone)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress log output (cron-friendly)"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit JSON instead of human-readable text"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("snapshot", help="Query the device once and print readings plus derived metrics")
    sub.add_parser("fields", help="Query the device once and print the raw named fields (always JSON)")

    return parser
