"""Outer surfaces: argparse CLI and the MCP server."""
