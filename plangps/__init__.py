"""PlanGPS: live GPS positions on arbitrary floor-plan and site-plan images.

Three reference points pair a GPS coordinate with a pixel on the plan image.
From them PlanGPS derives the world-to-pixel mapping, the plan's scale in
pixels per meter, and the pixel direction of geographic north.
"""

__version__ = "1.0.0"
__author__ = "PlanGPS Team"

import sys

from loguru import logger

# Configure clean logger for CLI (default level, can be overridden)
logger.remove()  # Remove default handler


def _format_record(record):
    level = record["level"].name
    colors = {
        "INFO": "<blue>",
        "DEBUG": "<yellow>",
        "WARNING": "<light-red>",
        "ERROR": "<red>"
    }
    color = colors.get(level, "<white>")

    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        f"{color}{{level: <8}}</> | "
        "{message}\n{exception}"
    )


logger.add(
    lambda msg: print(msg, end="", file=sys.stderr),
    level="INFO",
    format=_format_record,
    colorize=True,
)


def configure_logging(log_level: str = "info"):
    """Configure logger level based on config."""
    logger.remove()  # Remove all handlers
    logger.add(
        lambda msg: print(msg, end="", file=sys.stderr),
        level=log_level.upper(),
        format=_format_record,
        colorize=True,
    )


__all__ = ["__version__", "__author__", "logger", "configure_logging"]
