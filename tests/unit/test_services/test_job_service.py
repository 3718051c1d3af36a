"""
Unit tests for the job service.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from jenkins_mcp.clients.http_manager import HTTPManager
from jenkins_mcp.clients.jenkins_client import JenkinsClient, PostResult
from jenkins_mcp.core.config import ClientConfig
from jenkins_mcp.core.exceptions import AuthenticationError, JenkinsAPIError, ValidationError
from jenkins_mcp.services.job_service import JobService, compute_status, queue_item_path

BASE_URL = "https://jenkins.example.com"


def make_client(base_url=BASE_URL):
    client = AsyncMock()
    client.base_url = base_url
    return client


class TestQueueItemPath:
    """Tests for queue_item_path."""

    def test_absolute_location(self):
        assert queue_item_path(f"{BASE_URL}/queue/item/42/", BASE_URL) == "/queue/item/42/api/json"

    def test_context_path_not_doubled(self):
        base = "https://ci.example.com/jenkins"
        assert queue_item_path(f"{base}/queue/item/7/", base) == "/queue/item/7/api/json"

    def test_location_on_other_host(self):
        base = "https://ci.example.com/jenkins"
        location = "http://internal:8080/jenkins/queue/item/7/"
        assert queue_item_path(location, base) == "/queue/item/7/api/json"

    def test_missing_trailing_slash(self):
        assert queue_item_path(f"{BASE_URL}/queue/item/9", BASE_URL) == "/queue/item/9/api/json"


class TestComputeStatus:
    """Tests for compute_status."""

    def test_status_report(self):
        root = {"quietingDown": False, "url": "https://jenkins.example.com/"}
        computers = {
            "busyExecutors": 1,
            "computer": [
                {"numExecutors": 2, "offline": False},
                {"numExecutors": 4, "offline": True},
                {"numExecutors": 1, "offline": False},
            ],
        }
        queue = {"items": [{"buildable": True}, {"buildable": False}]}

        assert compute_status(root, computers, queue) == {
            "Quiet Mode": False,
            "Full Queue Size": 2,
            "Buildable Queue Size": 1,
            "Available executors (any label)": 2,
            "Root URL Status": "configured",
        }

    def test_root_url_not_configured(self):
        status = compute_status({}, {"computer": []}, {"items": []})

        assert status["Root URL Status"] == "not configured"
        assert status["Available executors (any label)"] == 0


class TestJobService:
    """Tests for JobService."""

    @pytest.mark.asyncio
    async def test_get_job_passes_tree(self):
        client = make_client()
        client.get_json.return_value = {"name": "b"}

        await JobService(client).get_job("a/b", tree="name")

        client.get_json.assert_awaited_once_with("/job/a/job/b/api/json", {"tree": "name"})

    @pytest.mark.asyncio
    async def test_get_jobs_sorted_and_paginated(self):
        client = make_client()
        client.get_json.return_value = {"jobs": [{"name": n} for n in ["delta", "Alpha", "charlie", "bravo"]]}

        jobs = await JobService(client).get_jobs(skip=1, limit=2)

        assert [job["name"] for job in jobs] == ["bravo", "charlie"]
        assert client.get_json.await_args.args[0] == "/api/json"

    @pytest.mark.asyncio
    async def test_get_jobs_in_folder(self):
        client = make_client()
        client.get_json.return_value = {}

        assert await JobService(client).get_jobs("folder") == []
        assert client.get_json.await_args.args[0] == "/job/folder/api/json"

    @pytest.mark.asyncio
    async def test_get_build(self):
        client = make_client()
        client.get_json.return_value = {"number": 3}

        await JobService(client).get_build("a", 3)

        client.get_json.assert_awaited_once_with("/job/a/3/api/json", {"tree": None})

    @pytest.mark.asyncio
    async def test_trigger_build_without_parameters(self):
        client = make_client()
        client.post.return_value = PostResult(data=None, location=f"{BASE_URL}/queue/item/42/")
        client.get_json.return_value = {"id": 42, "why": "Waiting"}

        result = await JobService(client).trigger_build("a")

        client.post.assert_awaited_once_with("/job/a/build")
        client.get_json.assert_awaited_once_with("/queue/item/42/api/json")
        assert result == {"id": 42, "why": "Waiting"}

    @pytest.mark.asyncio
    async def test_trigger_build_with_parameters(self):
        client = make_client()
        client.post.return_value = PostResult(data=None, location=None)

        result = await JobService(client).trigger_build("a", {"BRANCH": "main", "DEBUG": True})

        path = client.post.await_args.args[0]
        form = client.post.await_args.kwargs["data"]
        assert path == "/job/a/buildWithParameters"
        assert json.loads(form["json"]) == {"parameter": [
            {"name": "BRANCH", "value": "main"},
            {"name": "DEBUG", "value": True},
        ]}
        assert result is None

    @pytest.mark.asyncio
    async def test_trigger_build_queue_lookup_failure(self):
        client = make_client()
        location = f"{BASE_URL}/queue/item/42/"
        client.post.return_value = PostResult(data=None, location=location)
        client.get_json.side_effect = JenkinsAPIError("Jenkins API error (500): boom", status_code=500)

        result = await JobService(client).trigger_build("a")

        assert result == {"queueLocation": location}

    @pytest.mark.asyncio
    async def test_update_build_requires_a_field(self):
        client = make_client()

        with pytest.raises(ValidationError):
            await JobService(client).update_build("a", 1)

        client.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_build_posts_both_fields(self):
        client = make_client()

        assert await JobService(client).update_build("a", 1, display_name="Release", description="Notes")

        calls = [(c.args[0], c.kwargs["data"]) for c in client.post.await_args_list]
        assert calls == [
            ("/job/a/1/submitDescription", {"description": "Notes"}),
            ("/job/a/1/configSubmit", {"displayName": "Release"}),
        ]

    @pytest.mark.asyncio
    async def test_who_am_i(self):
        client = make_client()
        client.get_json.return_value = {"fullName": "Jane Doe", "id": "jane"}

        assert await JobService(client).who_am_i() == {"fullName": "Jane Doe"}

    @pytest.mark.asyncio
    async def test_get_status_fetches_all_three(self):
        client = make_client()
        responses = {
            "/api/json": {"quietingDown": True, "url": None},
            "/computer/api/json": {"busyExecutors": 0, "computer": [{"numExecutors": 2}]},
            "/queue/api/json": {"items": []},
        }
        client.get_json.side_effect = lambda path, params=None: responses[path]

        status = await JobService(client).get_status()

        assert client.get_json.await_count == 3
        assert status["Quiet Mode"] is True
        assert status["Available executors (any label)"] == 2

    @pytest.mark.asyncio
    async def test_get_queue_item(self):
        client = make_client()
        client.get_json.return_value = {"id": 5}

        await JobService(client).get_queue_item(5)

        client.get_json.assert_awaited_once_with("/queue/item/5/api/json", {"tree": None})


class TestGetStatusFailure:
    """Tests for getStatus when one of the concurrent fetches fails."""

    @pytest.mark.asyncio
    async def test_failure_cancels_remaining_fetches(self):
        """Test the slower fetches are cancelled once the root fetch fails."""
        finished = []

        async def handler(request):
            if request.url.path == "/api/json":
                return httpx.Response(401)
            await asyncio.sleep(0.2)
            finished.append(request.url.path)
            return httpx.Response(200, json={})

        client = JenkinsClient(
            ClientConfig(BASE_URL, "admin", "token"),
            http_manager=HTTPManager(transport=httpx.MockTransport(handler))
        )

        with pytest.raises(AuthenticationError):
            await JobService(client).get_status()

        await asyncio.sleep(0.3)
        assert finished == []
