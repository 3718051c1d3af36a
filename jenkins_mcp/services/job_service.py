"""
Job Service Module

Business logic for jobs, builds, the build queue and server status.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from loguru import logger

from jenkins_mcp.clients.jenkins_client import JenkinsClient
from jenkins_mcp.core.constants import (
    MAX_JOBS_PAGE_SIZE,
    TREE_COMPUTER_STATUS,
    TREE_JOB_LIST,
    TREE_QUEUE_STATUS,
    TREE_ROOT_STATUS,
)
from jenkins_mcp.core.exceptions import JenkinsClientError, ValidationError
from jenkins_mcp.utils import build_path, job_full_name_to_path


def queue_item_path(location: str, base_url: str) -> str:
    """
    Convert a queue item Location header into an API path.

    The path is made relative to the configured base URL, so a Jenkins
    served under a context path (e.g. /jenkins) is not prefixed twice.

    Example:
        >>> queue_item_path("https://ci.example.com/jenkins/queue/item/7/", "https://ci.example.com/jenkins")
        '/queue/item/7/api/json'
    """
    if location.startswith(base_url):
        relative = location[len(base_url):]
    else:
        path = urlparse(location).path
        base_path = urlparse(base_url).path.rstrip("/")
        relative = path[len(base_path):] if base_path and path.startswith(base_path + "/") else path

    if not relative.startswith("/"):
        relative = f"/{relative}"
    if not relative.endswith("/"):
        relative = f"{relative}/"
    return f"{relative}api/json"


def compute_status(root: Dict[str, Any], computers: Dict[str, Any], queue: Dict[str, Any]) -> Dict[str, Any]:
    """Summarize root, computer and queue information into a health report."""
    items = queue.get("items") or []
    online_executors = sum(
        c.get("numExecutors") or 0
        for c in computers.get("computer") or []
        if not c.get("offline")
    )

    return {
        "Quiet Mode": bool(root.get("quietingDown", False)),
        "Full Queue Size": len(items),
        "Buildable Queue Size": sum(1 for item in items if item.get("buildable")),
        "Available executors (any label)": online_executors - (computers.get("busyExecutors") or 0),
        "Root URL Status": "configured" if root.get("url") else "not configured",
    }


class JobService:
    """
    Service for job, build and queue operations.

    Example:
        >>> job_service = JobService(client)
        >>> build = await job_service.get_build("folder/myJob", 42)
        >>> queue_item = await job_service.trigger_build("myJob", {"BRANCH": "main"})
    """

    def __init__(self, client: JenkinsClient):
        """Initialize job service."""
        self.client = client

    async def get_job(self, job_full_name: str, tree: Optional[str] = None) -> Dict[str, Any]:
        """
        Get a job by its full name.

        Args:
            job_full_name: Full name such as "folder/myJob"
            tree: Jenkins tree parameter restricting the returned fields

        Raises:
            ResourceNotFoundError: Job does not exist
        """
        logger.debug(f"getJob: {job_full_name}")
        return await self.client.get_json(f"{job_full_name_to_path(job_full_name)}/api/json", {"tree": tree})

    async def get_jobs(
        self,
        parent_full_name: Optional[str] = None,
        skip: int = 0,
        limit: int = MAX_JOBS_PAGE_SIZE
    ) -> List[Dict[str, Any]]:
        """
        List the jobs of the root or of a folder, sorted by name.

        Args:
            parent_full_name: Folder full name (None for the root)
            skip: Jobs to skip
            limit: Maximum jobs to return

        Returns:
            One page of job descriptors

        Raises:
            ResourceNotFoundError: Folder does not exist
        """
        logger.debug(f"getJobs: parent={parent_full_name or 'root'}, skip={skip}, limit={limit}")

        path = f"{job_full_name_to_path(parent_full_name)}/api/json" if parent_full_name else "/api/json"
        data = await self.client.get_json(path, {"tree": TREE_JOB_LIST})

        jobs = sorted(data.get("jobs") or [], key=lambda job: (job.get("name") or "").lower())
        return jobs[skip:skip + limit]

    async def get_build(
        self,
        job_full_name: str,
        build_number: Optional[int] = None,
        tree: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get a build, or the last build when build_number is None."""
        logger.debug(f"getBuild: {job_full_name}#{build_number or 'last'}")
        return await self.client.get_json(f"{build_path(job_full_name, build_number)}/api/json", {"tree": tree})

    async def trigger_build(
        self,
        job_full_name: str,
        parameters: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Schedule a build.

        With parameters, POSTs to buildWithParameters using Jenkins' "json"
        form field. When Jenkins returns a queue Location, the queue item is
        fetched and returned; if that lookup fails the Location itself is
        returned as {"queueLocation": ...}.

        Args:
            job_full_name: Job to build
            parameters: Build parameters as name/value pairs

        Returns:
            Queue item, {"queueLocation": ...}, or the POST response body

        Raises:
            ResourceNotFoundError: Job does not exist
        """
        logger.debug(f"triggerBuild: {job_full_name}")

        job_path = job_full_name_to_path(job_full_name)

        if parameters:
            payload = {"parameter": [{"name": name, "value": value} for name, value in parameters.items()]}
            result = await self.client.post(
                f"{job_path}/buildWithParameters",
                data={"json": json.dumps(payload)}
            )
        else:
            result = await self.client.post(f"{job_path}/build")

        if not result.location:
            return result.data

        try:
            return await self.client.get_json(queue_item_path(result.location, self.client.base_url))
        except JenkinsClientError as e:
            logger.warning(f"Build triggered but queue item lookup failed: {e}")
            return {"queueLocation": result.location}

    async def update_build(
        self,
        job_full_name: str,
        build_number: Optional[int] = None,
        display_name: Optional[str] = None,
        description: Optional[str] = None
    ) -> bool:
        """
        Update a build's display name and/or description.

        Raises:
            ValidationError: Neither display_name nor description given
            ResourceNotFoundError: Build does not exist
        """
        logger.debug(f"updateBuild: {job_full_name}#{build_number or 'last'}")

        if not display_name and not description:
            raise ValidationError("At least one of displayName or description must be provided.")

        base_path = build_path(job_full_name, build_number)

        if description is not None:
            await self.client.post(f"{base_path}/submitDescription", data={"description": description})

        if display_name is not None:
            await self.client.post(f"{base_path}/configSubmit", data={"displayName": display_name})

        return True

    async def who_am_i(self) -> Dict[str, Any]:
        """Full name of the authenticated user."""
        logger.debug("whoAmI")
        user = await self.client.get_json("/me/api/json")
        return {"fullName": user.get("fullName")}

    async def get_status(self) -> Dict[str, Any]:
        """
        Health and readiness report of the Jenkins instance.

        Root, computer and queue information are fetched concurrently.
        When one fetch fails the others are cancelled before the error
        propagates.
        """
        logger.debug("getStatus")

        tasks = [
            asyncio.ensure_future(self.client.get_json("/api/json", {"tree": TREE_ROOT_STATUS})),
            asyncio.ensure_future(self.client.get_json("/computer/api/json", {"tree": TREE_COMPUTER_STATUS})),
            asyncio.ensure_future(self.client.get_json("/queue/api/json", {"tree": TREE_QUEUE_STATUS})),
        ]
        try:
            root, computers, queue = await asyncio.gather(*tasks)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return compute_status(root, computers, queue)

    async def get_queue_item(self, item_id: int, tree: Optional[str] = None) -> Dict[str, Any]:
        """Get a queue item by id."""
        logger.debug(f"getQueueItem: {item_id}")
        return await self.client.get_json(f"/queue/item/{item_id}/api/json", {"tree": tree})
