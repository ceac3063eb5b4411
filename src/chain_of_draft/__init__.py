"""Chain of Draft: iterative drafting tools served over MCP."""

__version__ = "0.1.0"
