"""
Unit tests for MCP tool handlers.

Handlers are captured from a recording server and called directly with
mocked services, so every argument is passed explicitly.
"""

from unittest.mock import AsyncMock

import pytest

from jenkins_mcp.core.exceptions import (
    AuthenticationError,
    InvalidPatternError,
    JenkinsAPIError,
    NetworkError,
    ResourceNotFoundError,
    ValidationError,
)
from jenkins_mcp.models.responses import LogWindow, ScmRecord
from jenkins_mcp.tools import (
    register_core_tools,
    register_log_tools,
    register_report_tools,
    register_scm_tools,
)


class RecordingServer:
    """Stands in for FastMCP, keeping registered handlers by tool name."""

    def __init__(self):
        self.tools = {}
        self.annotations = {}

    def tool(self, name, description=None, annotations=None):
        def decorator(fn):
            self.tools[name] = fn
            self.annotations[name] = annotations
            return fn
        return decorator


def register(register_fn):
    server = RecordingServer()
    service = AsyncMock()
    register_fn(server, service)
    return server, service


class TestCoreTools:
    """Tests for job, build, queue and status tools."""

    @pytest.mark.asyncio
    async def test_get_job_success(self):
        server, service = register(register_core_tools)
        service.get_job.return_value = {"name": "a"}

        response = await server.tools["getJob"](jobFullName="a", tree=None)

        assert response == {"status": "COMPLETED", "message": "Data retrieved successfully.", "result": {"name": "a"}}

    @pytest.mark.asyncio
    async def test_get_job_not_found(self):
        server, service = register(register_core_tools)
        service.get_job.side_effect = ResourceNotFoundError("Resource not found", status_code=404)

        response = await server.tools["getJob"](jobFullName="folder/missing", tree=None)

        assert response == {"status": "FAILED", "message": "Job 'folder/missing' not found.", "result": None}

    @pytest.mark.asyncio
    async def test_get_jobs_root_folder_not_found(self):
        server, service = register(register_core_tools)
        service.get_jobs.side_effect = ResourceNotFoundError("Resource not found", status_code=404)

        response = await server.tools["getJobs"](parentFullName=None, skip=0, limit=10)

        assert response["message"] == "Folder 'root' not found."

    @pytest.mark.asyncio
    async def test_get_build_not_found_names_build(self):
        server, service = register(register_core_tools)
        service.get_build.side_effect = ResourceNotFoundError("Resource not found", status_code=404)

        numbered = await server.tools["getBuild"](jobFullName="a", buildNumber=12, tree=None)
        last = await server.tools["getBuild"](jobFullName="a", buildNumber=None, tree=None)

        assert numbered["message"] == "Build 'a#12' not found."
        assert last["message"] == "Build 'a (last build)' not found."

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        server, service = register(register_core_tools)
        service.get_status.side_effect = NetworkError("Connection refused")

        response = await server.tools["getStatus"]()

        assert response["status"] == "FAILED"
        assert response["message"] == "Unexpected error: Connection refused"

    @pytest.mark.asyncio
    async def test_auth_failure_message_passed_through(self):
        server, service = register(register_core_tools)
        service.who_am_i.side_effect = AuthenticationError("Authentication failed (401). Check credentials.")

        response = await server.tools["whoAmI"]()

        assert "Authentication failed (401)" in response["message"]

    @pytest.mark.asyncio
    async def test_trigger_build(self):
        server, service = register(register_core_tools)
        service.trigger_build.return_value = {"id": 42}

        response = await server.tools["triggerBuild"](jobFullName="a", parameters={"X": "1"})

        service.trigger_build.assert_awaited_once_with("a", {"X": "1"})
        assert response["message"] == "Build triggered successfully."
        assert response["result"] == {"id": 42}

    @pytest.mark.asyncio
    async def test_update_build_validation(self):
        server, service = register(register_core_tools)
        service.update_build.side_effect = ValidationError(
            "At least one of displayName or description must be provided."
        )

        response = await server.tools["updateBuild"](
            jobFullName="a", buildNumber=1, displayName=None, description=None
        )

        assert response == {
            "status": "FAILED",
            "message": "At least one of displayName or description must be provided.",
            "result": None,
        }

    @pytest.mark.asyncio
    async def test_get_queue_item_not_found(self):
        server, service = register(register_core_tools)
        service.get_queue_item.side_effect = ResourceNotFoundError("Resource not found", status_code=404)

        response = await server.tools["getQueueItem"](id=99, tree=None)

        assert response["message"] == "Queue item '99' not found."

    def test_annotations(self):
        server, _ = register(register_core_tools)

        assert server.annotations["getJob"].readOnlyHint is True
        assert server.annotations["triggerBuild"].readOnlyHint is False
        assert server.annotations["updateBuild"].readOnlyHint is False


class TestLogTools:
    """Tests for console log tools."""

    @pytest.mark.asyncio
    async def test_get_build_log_camel_case_result(self):
        server, service = register(register_log_tools)
        service.get_build_log.return_value = LogWindow(
            lines=["a"], total_lines=3, start_line=0, end_line=1, has_more_content=True
        )

        response = await server.tools["getBuildLog"](jobFullName="a", buildNumber=None, skip=None, limit=1)

        assert response["result"] == {
            "lines": ["a"],
            "totalLines": 3,
            "startLine": 0,
            "endLine": 1,
            "hasMoreContent": True,
        }

    @pytest.mark.asyncio
    async def test_search_invalid_pattern(self):
        server, service = register(register_log_tools)
        service.search_build_log.side_effect = InvalidPatternError(
            "Invalid regular expression '(': missing ), unterminated subpattern", pattern="("
        )

        response = await server.tools["searchBuildLog"](
            jobFullName="a", pattern="(", buildNumber=None, useRegex=True,
            ignoreCase=False, maxMatches=100, contextLines=0
        )

        assert response["status"] == "FAILED"
        assert response["message"].startswith("Invalid regular expression '('")

    @pytest.mark.asyncio
    async def test_search_arguments_forwarded(self):
        server, service = register(register_log_tools)

        await server.tools["searchBuildLog"](
            jobFullName="a", pattern="ERR", buildNumber=3, useRegex=False,
            ignoreCase=True, maxMatches=5, contextLines=2
        )

        service.search_build_log.assert_awaited_once_with(
            "a", "ERR", build_number=3, use_regex=False, ignore_case=True, max_matches=5, context_lines=2
        )

    @pytest.mark.asyncio
    async def test_progressive_log_not_found(self):
        server, service = register(register_log_tools)
        service.get_progressive_build_log.side_effect = ResourceNotFoundError("Resource not found", status_code=404)

        response = await server.tools["getProgressiveBuildLog"](jobFullName="a", buildNumber=7, start=0)

        assert response["message"] == "Build 'a#7' not found."


class TestScmTools:
    """Tests for SCM tools."""

    @pytest.mark.asyncio
    async def test_get_job_scm_records(self):
        server, service = register(register_scm_tools)
        service.get_job_scm.return_value = [ScmRecord(uris=["u"], branches=["*/main"])]

        response = await server.tools["getJobScm"](jobFullName="a")

        assert response["result"] == [{"uris": ["u"], "branches": ["*/main"], "commit": None}]

    @pytest.mark.asyncio
    async def test_get_build_scm_empty(self):
        server, service = register(register_scm_tools)
        service.get_build_scm.return_value = []

        response = await server.tools["getBuildScm"](jobFullName="a", buildNumber=None)

        assert response == {
            "status": "COMPLETED",
            "message": "No SCM configurations found for this build.",
            "result": None,
        }

    @pytest.mark.asyncio
    async def test_find_jobs_none_found(self):
        server, service = register(register_scm_tools)
        service.find_jobs_with_scm_url.return_value = []

        response = await server.tools["findJobsWithScmUrl"](scmUrl="u", branch=None, skip=0, limit=10)

        assert response["status"] == "COMPLETED"
        assert response["message"] == "No jobs found matching the specified SCM URL."

    @pytest.mark.asyncio
    async def test_find_jobs_client_error_is_empty(self):
        server, service = register(register_scm_tools)
        service.find_jobs_with_scm_url.side_effect = JenkinsAPIError("Jenkins API error (500): boom", status_code=500)

        response = await server.tools["findJobsWithScmUrl"](scmUrl="u", branch="main", skip=0, limit=10)

        assert response["status"] == "COMPLETED"
        assert response["message"] == "Failed to search jobs: Jenkins API error (500): boom"


class TestReportTools:
    """Tests for test report tools."""

    @pytest.mark.asyncio
    async def test_no_report(self):
        server, service = register(register_report_tools)
        service.get_test_results.side_effect = ResourceNotFoundError("Resource not found", status_code=404)

        response = await server.tools["getTestResults"](jobFullName="a", buildNumber=5, onlyFailingTests=False)

        assert response["status"] == "COMPLETED"
        assert response["message"].startswith("No test results found for build 'a#5'.")

    @pytest.mark.asyncio
    async def test_no_failing_tests(self):
        server, service = register(register_report_tools)
        service.get_test_results.return_value = None

        response = await server.tools["getTestResults"](jobFullName="a", buildNumber=None, onlyFailingTests=True)

        assert response["message"] == "No failing tests found."
        service.get_test_results.assert_awaited_once_with("a", None, only_failing=True)

    @pytest.mark.asyncio
    async def test_flaky_failures(self):
        server, service = register(register_report_tools)
        service.get_flaky_failures.return_value = {"TestResultWithFlakyFailures": [{"name": "t"}]}

        response = await server.tools["getFlakyFailures"](jobFullName="a", buildNumber=2)

        assert response["status"] == "COMPLETED"
        assert response["result"] == {"TestResultWithFlakyFailures": [{"name": "t"}]}

    @pytest.mark.asyncio
    async def test_no_flaky_failures(self):
        server, service = register(register_report_tools)
        service.get_flaky_failures.return_value = None

        response = await server.tools["getFlakyFailures"](jobFullName="a", buildNumber=None)

        assert response["message"] == "No flaky failures found."
