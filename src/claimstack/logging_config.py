"""Shared logging configuration for claimstack entry points.

Call ``configure_logging()`` once at any CLI or server entry point.
The function is idempotent: if the root logger already has handlers, it does nothing.
"""

import logging
import sys


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger with a stderr handler.

    stdout is left alone because the MCP stdio transport and the CLI's JSON
    output both use it.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
    root.setLevel(level)
