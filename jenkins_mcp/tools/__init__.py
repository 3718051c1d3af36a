"""
Tools Module

MCP tool registrations, one module per tool group.
"""

from .core import register_core_tools
from .logs import register_log_tools
from .reports import register_report_tools
from .scm import register_scm_tools

__all__ = [
    "register_core_tools",
    "register_log_tools",
    "register_report_tools",
    "register_scm_tools",
]
