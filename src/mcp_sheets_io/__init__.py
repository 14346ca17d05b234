"""Google Sheets export and upsert-paste MCP server."""

__version__ = "0.1.0"
