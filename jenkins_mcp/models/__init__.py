"""
Models Module

Pydantic models for tool results and the tool response envelope.
"""

from .responses import (
    CamelModel,
    HealthResponse,
    LogWindow,
    SearchMatch,
    SearchResult,
    ProgressiveLog,
    ScmRecord,
    ToolResponse,
    tool_success,
    tool_empty,
    tool_failure,
    tool_not_found,
    tool_error,
)

__all__ = [
    "CamelModel",
    "HealthResponse",
    "LogWindow",
    "SearchMatch",
    "SearchResult",
    "ProgressiveLog",
    "ScmRecord",
    "ToolResponse",
    "tool_success",
    "tool_empty",
    "tool_failure",
    "tool_not_found",
    "tool_error",
]
