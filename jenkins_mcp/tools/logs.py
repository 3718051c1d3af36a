"""
Log Tools

MCP tools for paging, searching and tailing build console output.
"""

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from jenkins_mcp.core.constants import (
    DEFAULT_LOG_LIMIT,
    DEFAULT_SEARCH_MATCHES,
    MAX_CONTEXT_LINES,
    MAX_SEARCH_MATCHES,
)
from jenkins_mcp.core.exceptions import (
    InvalidPatternError,
    JenkinsMCPException,
    ResourceNotFoundError,
)
from jenkins_mcp.models.responses import tool_error, tool_failure, tool_not_found, tool_success
from jenkins_mcp.services.log_service import LogService
from jenkins_mcp.utils import describe_build

READ_ONLY = ToolAnnotations(readOnlyHint=True)


def register_log_tools(server: FastMCP, log_service: LogService) -> None:
    """Register console log tools."""

    @server.tool(
        name="getBuildLog",
        description="Retrieves some log lines with pagination for a specific build or the last build",
        annotations=READ_ONLY
    )
    async def get_build_log(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
        skip: Optional[int] = Field(None, description="Number of lines to skip (negative = from end)"),
        limit: int = Field(
            DEFAULT_LOG_LIMIT,
            description="Number of lines to return (positive=from start, negative=from end, default 100)"
        ),
    ) -> Dict[str, Any]:
        try:
            window = await log_service.get_build_log(jobFullName, buildNumber, skip=skip, limit=limit)
            return tool_success(window)
        except ResourceNotFoundError:
            return tool_not_found("Build", describe_build(jobFullName, buildNumber))
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(
        name="searchBuildLog",
        description="Search for log lines matching a pattern in a specific build or the last build",
        annotations=READ_ONLY
    )
    async def search_build_log(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        pattern: str = Field(..., description="Search pattern (string or regex)"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
        useRegex: bool = Field(False, description="Treat pattern as regex"),
        ignoreCase: bool = Field(False, description="Case-insensitive search"),
        maxMatches: int = Field(
            DEFAULT_SEARCH_MATCHES,
            ge=1,
            le=MAX_SEARCH_MATCHES,
            description="Maximum number of matches to return (max 1000)"
        ),
        contextLines: int = Field(
            0,
            ge=0,
            le=MAX_CONTEXT_LINES,
            description="Number of context lines before and after each match (max 10)"
        ),
    ) -> Dict[str, Any]:
        try:
            result = await log_service.search_build_log(
                jobFullName,
                pattern,
                build_number=buildNumber,
                use_regex=useRegex,
                ignore_case=ignoreCase,
                max_matches=maxMatches,
                context_lines=contextLines
            )
            return tool_success(result)
        except InvalidPatternError as e:
            return tool_failure(e.message)
        except ResourceNotFoundError:
            return tool_not_found("Build", describe_build(jobFullName, buildNumber))
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(
        name="getProgressiveBuildLog",
        description=(
            "Retrieves build console output from a byte offset. Pass nextByteOffset from the "
            "previous call as 'start' to continue; moreData is false once the build has finished"
        ),
        annotations=READ_ONLY
    )
    async def get_progressive_build_log(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
        start: int = Field(0, ge=0, description="Byte offset to read from"),
    ) -> Dict[str, Any]:
        try:
            chunk = await log_service.get_progressive_build_log(jobFullName, buildNumber, start=start)
            return tool_success(chunk)
        except ResourceNotFoundError:
            return tool_not_found("Build", describe_build(jobFullName, buildNumber))
        except JenkinsMCPException as e:
            return tool_error(e)
