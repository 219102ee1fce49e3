"""MCP entrypoint.

Usage:
    python -m claimstack.interface.mcp_engine
    # or via the script entrypoint:
    claimstack-mcp
"""

from __future__ import annotations

from .mcp.server import create_server


def main() -> None:
    from ..config.runtime import get_settings
    from ..logging_config import configure_logging

    configure_logging(get_settings().log_level)
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
