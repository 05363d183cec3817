"""Logging configuration."""
import logging
import sys

# Libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "sqlalchemy.engine")


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Application modules log with bracketed tags such as ``[CART ADD]`` or
    ``[SHEETS]`` so a single order can be followed through the log.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
