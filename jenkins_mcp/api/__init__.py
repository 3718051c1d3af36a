"""
API Module

HTTP transport for the MCP server.
"""

from .app import create_app

__all__ = ["create_app"]
