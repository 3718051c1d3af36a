"""
SCM Tools

MCP tools exposing Git information of jobs and builds.
"""

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from jenkins_mcp.core.constants import MAX_JOBS_PAGE_SIZE
from jenkins_mcp.core.exceptions import (
    JenkinsClientError,
    JenkinsMCPException,
    ResourceNotFoundError,
)
from jenkins_mcp.models.responses import tool_empty, tool_error, tool_not_found, tool_success
from jenkins_mcp.services.scm_service import ScmService
from jenkins_mcp.utils import describe_build

READ_ONLY = ToolAnnotations(readOnlyHint=True)


def register_scm_tools(server: FastMCP, scm_service: ScmService) -> None:
    """Register SCM tools."""

    @server.tool(name="getJobScm", description="Retrieves SCM configurations of a Jenkins job", annotations=READ_ONLY)
    async def get_job_scm(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
    ) -> Dict[str, Any]:
        try:
            records = await scm_service.get_job_scm(jobFullName)
        except ResourceNotFoundError:
            return tool_not_found("Job", jobFullName)
        except JenkinsMCPException as e:
            return tool_error(e)

        if not records:
            return tool_empty("No SCM configurations found for this job.")
        return tool_success(records)

    @server.tool(
        name="getBuildScm",
        description="Retrieves SCM configurations of a Jenkins build",
        annotations=READ_ONLY
    )
    async def get_build_scm(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
    ) -> Dict[str, Any]:
        try:
            records = await scm_service.get_build_scm(jobFullName, buildNumber)
        except ResourceNotFoundError:
            return tool_not_found("Build", describe_build(jobFullName, buildNumber))
        except JenkinsMCPException as e:
            return tool_error(e)

        if not records:
            return tool_empty("No SCM configurations found for this build.")
        return tool_success(records)

    @server.tool(
        name="getBuildChangeSets",
        description="Retrieves change log sets of a Jenkins build",
        annotations=READ_ONLY
    )
    async def get_build_change_sets(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
    ) -> Dict[str, Any]:
        try:
            return tool_success(await scm_service.get_build_change_sets(jobFullName, buildNumber))
        except ResourceNotFoundError:
            return tool_not_found("Build", describe_build(jobFullName, buildNumber))
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(
        name="findJobsWithScmUrl",
        description="Get a paginated list of Jenkins jobs that use the specified git SCM URL",
        annotations=READ_ONLY
    )
    async def find_jobs_with_scm_url(
        scmUrl: str = Field(..., description="Git SCM URL to search for"),
        branch: Optional[str] = Field(None, description="Branch name to filter by"),
        skip: int = Field(0, ge=0, description="Number of jobs to skip"),
        limit: int = Field(
            MAX_JOBS_PAGE_SIZE,
            ge=1,
            le=MAX_JOBS_PAGE_SIZE,
            description="Maximum number of jobs to return (max 10)"
        ),
    ) -> Dict[str, Any]:
        try:
            jobs = await scm_service.find_jobs_with_scm_url(scmUrl, branch=branch, skip=skip, limit=limit)
        except JenkinsClientError as e:
            return tool_empty(f"Failed to search jobs: {e.message}")
        except JenkinsMCPException as e:
            return tool_error(e)

        if not jobs:
            return tool_empty("No jobs found matching the specified SCM URL.")
        return tool_success(jobs)
