"""
Core Tools

MCP tools for jobs, builds, the queue and server status.
"""

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from jenkins_mcp.core.constants import (
    MAX_JOBS_PAGE_SIZE,
    MESSAGE_BUILD_TRIGGERED,
    MESSAGE_BUILD_UPDATED,
)
from jenkins_mcp.core.exceptions import (
    JenkinsMCPException,
    ResourceNotFoundError,
    ValidationError,
)
from jenkins_mcp.models.responses import tool_error, tool_failure, tool_not_found, tool_success
from jenkins_mcp.services.job_service import JobService
from jenkins_mcp.utils import describe_build

READ_ONLY = ToolAnnotations(readOnlyHint=True)
MUTATING = ToolAnnotations(readOnlyHint=False)


def register_core_tools(server: FastMCP, job_service: JobService) -> None:
    """Register job, build, queue and status tools."""

    @server.tool(name="getJob", description="Get a Jenkins job by its full path", annotations=READ_ONLY)
    async def get_job(
        jobFullName: str = Field(..., description="Full name of the Jenkins job (e.g., 'folder/myJob')"),
        tree: Optional[str] = Field(None, description="Jenkins tree parameter to filter response fields"),
    ) -> Dict[str, Any]:
        try:
            return tool_success(await job_service.get_job(jobFullName, tree=tree))
        except ResourceNotFoundError:
            return tool_not_found("Job", jobFullName)
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(name="getJobs", description="Get a paginated list of Jenkins jobs, sorted by name", annotations=READ_ONLY)
    async def get_jobs(
        parentFullName: Optional[str] = Field(None, description="Full name of the parent folder (omit for root)"),
        skip: int = Field(0, ge=0, description="Number of jobs to skip"),
        limit: int = Field(
            MAX_JOBS_PAGE_SIZE,
            ge=1,
            le=MAX_JOBS_PAGE_SIZE,
            description="Maximum number of jobs to return (max 10)"
        ),
    ) -> Dict[str, Any]:
        try:
            return tool_success(await job_service.get_jobs(parentFullName, skip=skip, limit=limit))
        except ResourceNotFoundError:
            return tool_not_found("Folder", parentFullName or "root")
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(
        name="getBuild",
        description="Get a specific build or the last build of a Jenkins job",
        annotations=READ_ONLY
    )
    async def get_build(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
        tree: Optional[str] = Field(None, description="Jenkins tree parameter to filter response fields"),
    ) -> Dict[str, Any]:
        try:
            return tool_success(await job_service.get_build(jobFullName, buildNumber, tree=tree))
        except ResourceNotFoundError:
            return tool_not_found("Build", describe_build(jobFullName, buildNumber))
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(name="triggerBuild", description="Trigger a build for a Jenkins job", annotations=MUTATING)
    async def trigger_build(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        parameters: Optional[Dict[str, Any]] = Field(None, description="Build parameters as key-value pairs"),
    ) -> Dict[str, Any]:
        try:
            result = await job_service.trigger_build(jobFullName, parameters)
            return tool_success(result, MESSAGE_BUILD_TRIGGERED)
        except ResourceNotFoundError:
            return tool_not_found("Job", jobFullName)
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(name="updateBuild", description="Update build display name and/or description", annotations=MUTATING)
    async def update_build(
        jobFullName: str = Field(..., description="Full name of the Jenkins job"),
        buildNumber: Optional[int] = Field(None, description="Build number (omit for last build)"),
        displayName: Optional[str] = Field(None, description="New display name for the build"),
        description: Optional[str] = Field(None, description="New description for the build"),
    ) -> Dict[str, Any]:
        try:
            updated = await job_service.update_build(
                jobFullName,
                buildNumber,
                display_name=displayName,
                description=description
            )
            return tool_success(updated, MESSAGE_BUILD_UPDATED)
        except ValidationError as e:
            return tool_failure(e.message)
        except ResourceNotFoundError:
            return tool_not_found("Build", describe_build(jobFullName, buildNumber))
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(
        name="whoAmI",
        description="Get information about the currently authenticated user",
        annotations=READ_ONLY
    )
    async def who_am_i() -> Dict[str, Any]:
        try:
            return tool_success(await job_service.who_am_i())
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(
        name="getStatus",
        description="Checks the health and readiness status of a Jenkins instance",
        annotations=READ_ONLY
    )
    async def get_status() -> Dict[str, Any]:
        try:
            return tool_success(await job_service.get_status())
        except JenkinsMCPException as e:
            return tool_error(e)

    @server.tool(name="getQueueItem", description="Get the queue item details by its ID", annotations=READ_ONLY)
    async def get_queue_item(
        id: int = Field(..., description="Queue item ID"),
        tree: Optional[str] = Field(None, description="Jenkins tree parameter to filter response fields"),
    ) -> Dict[str, Any]:
        try:
            return tool_success(await job_service.get_queue_item(id, tree=tree))
        except ResourceNotFoundError:
            return tool_not_found("Queue item", id)
        except JenkinsMCPException as e:
            return tool_error(e)
