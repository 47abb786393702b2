"""Fathom meeting-recording API exposed as FastMCP tools."""

__version__ = "0.1.0"
