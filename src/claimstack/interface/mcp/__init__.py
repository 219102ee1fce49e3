"""MCP server exposing claim resolution to LLM-side consumers."""
