import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(debug: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Minimal logging setup for helper scripts and tests.

    urllib3 connection chatter stays at WARNING unless debugging.
    """
    level = logging.DEBUG if debug else logging.INFO
    if quiet:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.DEBUG if debug else logging.WARNING)
    return logging.getLogger("solarlog")


def get_logger(name: str) -> logging.Logger:
    """Child of the global logging setup; ``name`` is usually "solarlog.<area>"."""
    return logging.getLogger(name)
