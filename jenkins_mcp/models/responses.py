"""
Response Models

Pydantic models for tool results and the tool response envelope.

Fields are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from jenkins_mcp.core.constants import (
    MESSAGE_DATA_RETRIEVED,
    MESSAGE_NO_RESULTS,
    STATUS_COMPLETED,
    STATUS_FAILED,
)


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )

    def to_wire(self) -> Dict[str, Any]:
        """Dump with camelCase aliases, as sent to MCP clients."""
        return self.model_dump(by_alias=True)


class LogWindow(CamelModel):
    """A contiguous window of console log lines."""

    lines: List[str] = Field(
        default_factory=list,
        description="Lines in the window"
    )
    total_lines: int = Field(
        ...,
        ge=0,
        description="Total number of lines in the log"
    )
    start_line: int = Field(
        ...,
        ge=0,
        description="0-based index of the first line in the window"
    )
    end_line: int = Field(
        ...,
        ge=0,
        description="0-based exclusive end of the window"
    )
    has_more_content: bool = Field(
        ...,
        description="Whether lines exist after end_line"
    )


class SearchMatch(CamelModel):
    """A single matching log line with its context."""

    line_number: int = Field(..., ge=1, description="1-based line number")
    line: str
    context_before: List[str] = Field(default_factory=list)
    context_after: List[str] = Field(default_factory=list)


class SearchResult(CamelModel):
    """Outcome of a pattern search over a console log."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "pattern": "ERROR",
                    "useRegex": False,
                    "ignoreCase": True,
                    "matchCount": 1,
                    "hasMoreMatches": False,
                    "totalLines": 3,
                    "matches": [
                        {
                            "lineNumber": 2,
                            "line": "ERROR: boom",
                            "contextBefore": ["Started"],
                            "contextAfter": ["Finished"]
                        }
                    ]
                }
            ]
        }
    )

    pattern: str
    use_regex: bool
    ignore_case: bool
    match_count: int = Field(..., ge=0, description="Total matches, including unreturned ones")
    has_more_matches: bool
    total_lines: int = Field(..., ge=0)
    matches: List[SearchMatch] = Field(default_factory=list)


class ProgressiveLog(CamelModel):
    """A chunk of a build log fetched from a byte offset."""

    text: str
    next_byte_offset: int = Field(
        ...,
        ge=0,
        description="Offset to pass as 'start' on the next call"
    )
    more_data: bool = Field(
        ...,
        description="Whether the build is still producing output"
    )


class ScmRecord(CamelModel):
    """Repository URLs, branches and commit found in a job or build."""

    uris: List[str] = Field(default_factory=list)
    branches: List[str] = Field(default_factory=list)
    commit: Optional[str] = None


class ToolResponse(BaseModel):
    """Uniform envelope returned by every MCP tool."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "status": "COMPLETED",
                    "message": "Data retrieved successfully.",
                    "result": {"name": "my-job"}
                }
            ]
        }
    )

    status: str = Field(
        ...,
        description="COMPLETED or FAILED"
    )
    message: str = Field(
        ...,
        description="Human-readable message"
    )
    result: Optional[Any] = Field(
        default=None,
        description="Tool payload"
    )


def _to_payload(result: Any) -> Any:
    if isinstance(result, CamelModel):
        return result.to_wire()
    if isinstance(result, list):
        return [_to_payload(item) for item in result]
    return result


def tool_success(result: Any, message: str = MESSAGE_DATA_RETRIEVED) -> Dict[str, Any]:
    """Envelope for a successful tool call."""
    return ToolResponse(
        status=STATUS_COMPLETED,
        message=message,
        result=_to_payload(result)
    ).model_dump()


def tool_empty(message: str = MESSAGE_NO_RESULTS) -> Dict[str, Any]:
    """Envelope for a successful call that produced nothing."""
    return ToolResponse(status=STATUS_COMPLETED, message=message).model_dump()


def tool_failure(message: str, result: Any = None) -> Dict[str, Any]:
    """Envelope for a failed tool call."""
    return ToolResponse(status=STATUS_FAILED, message=message, result=result).model_dump()


def tool_not_found(entity: str, identifier: Any) -> Dict[str, Any]:
    """Envelope for a missing Jenkins resource."""
    return tool_failure(f"{entity} '{identifier}' not found.")


def tool_error(error: Exception) -> Dict[str, Any]:
    """Envelope for an application error."""
    return tool_failure(f"Unexpected error: {error}")


class HealthResponse(BaseModel):
    """Health check response of the HTTP transport."""

    success: bool = Field(
        default=True,
        description="Whether the server is healthy"
    )
    version: str = Field(
        ...,
        description="Server version"
    )
    status: str = Field(
        default="ok",
        description="Server status"
    )
    message: Optional[str] = Field(
        default=None,
        description="Human-readable message"
    )
