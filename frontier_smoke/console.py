"""
Colored console output for the smoke flow.

Everything goes through one stdlib logger so the same messages can be
redirected or silenced like any other log. The formatter decorates each
record with the color and icon of its style.
"""

import os
import sys
import logging

logger = logging.getLogger("frontier_smoke")

# ANSI color codes
RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
PURPLE = "\033[0;35m"
CYAN = "\033[0;36m"
WHITE = "\033[1;37m"
NC = "\033[0m"  # No Color

STYLES = {
    "info": (BLUE, "ℹ️  "),
    "success": (GREEN, "✅ "),
    "error": (RED, "❌ "),
    "warning": (YELLOW, "⚠️  "),
    "step": (PURPLE, "🔄 "),
    "data": (CYAN, "📋 "),
    "banner": (WHITE, ""),
}


class ConsoleFormatter(logging.Formatter):
    """Prefix each message with its style icon and wrap it in the style color."""

    def __init__(self, use_color: bool = True):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        style = getattr(record, "style", None)
        if style not in STYLES:
            return message
        color, icon = STYLES[style]
        if not self.use_color:
            return f"{icon}{message}"
        return f"{color}{icon}{message}{NC}"


def colors_enabled(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def setup_logging(verbose: bool = False, stream=None):
    """Attach the console handler to the flow logger. Safe to call more than once."""
    stream = stream or sys.stdout
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ConsoleFormatter(use_color=colors_enabled(stream)))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger


def log_info(msg: str):
    logger.info(msg, extra={"style": "info"})


def log_success(msg: str):
    logger.info(msg, extra={"style": "success"})


def log_error(msg: str):
    logger.error(msg, extra={"style": "error"})


def log_warning(msg: str):
    logger.warning(msg, extra={"style": "warning"})


def log_step(msg: str):
    logger.info(msg, extra={"style": "step"})


def log_data(msg: str):
    logger.info(msg, extra={"style": "data"})


def log_usage(msg: str):
    logger.info(msg, extra={"style": "banner"})


def _handlers_use_color() -> bool:
    return any(
        isinstance(h.formatter, ConsoleFormatter) and h.formatter.use_color
        for h in logger.handlers
    )


def log_banner(title: str, subject: str):
    # The subject is highlighted inside the white banner line
    highlighted = f"{YELLOW}{subject}{WHITE}" if _handlers_use_color() else subject
    logger.info(f"🚀 {title}: {highlighted}", extra={"style": "banner"})
    logger.info("=" * 50, extra={"style": "banner"})
