"""
Test Report Tools

MCP tools for build test results.
"""

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from jenkins_mcp.core.exceptions import JenkinsMCPException, ResourceNotFoundError
from jenkins_mcp.models.responses import tool_empty, tool_error, tool_success
from jenkins_mcp.services.test_report_service import TestReportService
from jenkins_mcp.utils import describe_build

READ_ONLY = ToolAnnotations(readOnlyHint=True)


def register_report_tools(server: FastMCP, report_service: TestReportService) -> None:
    """Register test report tools."""

    @server.tool(
        name="getTestResults",
        description="Retrieves the test results associated to a Jenkins build",
        annotations=READ_ONLY
    )
    async def get_test_results(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
        onlyFailingTests: bool = Field(False, description="If true, only return failing tests"),
    ) -> Dict[str, Any]:
        try:
            results = await report_service.get_test_results(
                jobFullName,
                buildNumber,
                only_failing=onlyFailingTests
            )
        except ResourceNotFoundError:
            # Jenkins answers 404 both for a missing build and for a build without a report
            return tool_empty(
                f"No test results found for build '{describe_build(jobFullName, buildNumber)}'. "
                "The build may not have any test report or may not exist."
            )
        except JenkinsMCPException as e:
            return tool_error(e)

        if results is None:
            return tool_empty("No failing tests found.")
        return tool_success(results)

    @server.tool(
        name="getFlakyFailures",
        description="Retrieves the flaky failures associated to a Jenkins build if any found",
        annotations=READ_ONLY
    )
    async def get_flaky_failures(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
    ) -> Dict[str, Any]:
        try:
            flaky = await report_service.get_flaky_failures(jobFullName, buildNumber)
        except ResourceNotFoundError:
            return tool_empty(f"No test results found for build '{describe_build(jobFullName, buildNumber)}'.")
        except JenkinsMCPException as e:
            return tool_error(e)

        if flaky is None:
            return tool_empty("No flaky failures found.")
        return tool_success(flaky)
