"""
Jenkins MCP Server - Model Context Protocol server for Jenkins.

This package exposes a Jenkins instance's REST API as MCP tools: jobs,
builds, the queue, console logs, SCM information and test reports.
"""

__version__ = "0.1.0"
__author__ = "Harivatsa G A"

from .server import create_server

__all__ = [
    "create_server",
]
