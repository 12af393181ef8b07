"""
Logging setup shared by the API server and the CLI scripts.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO"):
    """
    Configure root logging to stdout.

    Args:
        level: Level name, e.g. 'INFO' or 'DEBUG'
    """
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        stream=sys.stdout,
        format=LOG_FORMAT,
    )
    # httpx logs every request at INFO
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
