"""
Unit tests for the exception hierarchy.
"""

import pytest

from jenkins_mcp.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ErrorKind,
    InvalidPatternError,
    JenkinsAPIError,
    JenkinsClientError,
    JenkinsMCPException,
    NetworkError,
    RequestTimeoutError,
    ResourceNotFoundError,
    ValidationError,
)


class TestClientErrors:
    """Tests for errors raised by the Jenkins client."""

    @pytest.mark.parametrize("error_class,kind", [
        (ResourceNotFoundError, ErrorKind.NOT_FOUND),
        (AuthenticationError, ErrorKind.AUTH_FAILED),
        (JenkinsAPIError, ErrorKind.SERVER_ERROR),
        (NetworkError, ErrorKind.NETWORK_ERROR),
    ])
    def test_kind_per_class(self, error_class, kind):
        error = error_class("failed", status_code=500)

        assert error.kind == kind
        assert isinstance(error, JenkinsClientError)
        assert isinstance(error, JenkinsMCPException)
        assert error.details["kind"] == kind.value

    def test_status_and_body_in_details(self):
        error = JenkinsAPIError("Jenkins API error (502): bad gateway", status_code=502, response_body="bad gateway")

        assert error.status_code == 502
        assert error.to_dict() == {
            "error": "JenkinsAPIError",
            "message": "Jenkins API error (502): bad gateway",
            "details": {"kind": "ServerError", "status_code": 502, "response_body": "bad gateway"},
        }

    def test_timeout_has_no_status(self):
        error = RequestTimeoutError(timeout_seconds=30.0)

        assert error.status_code is None
        assert error.kind == ErrorKind.TIMEOUT
        assert error.details["timeout_seconds"] == 30.0
        assert str(error) == "Request timed out"


class TestOtherErrors:
    """Tests for validation and configuration errors."""

    def test_invalid_pattern_is_validation_error(self):
        error = InvalidPatternError("Invalid regular expression", pattern="(")

        assert isinstance(error, ValidationError)
        assert error.pattern == "("
        assert error.details == {"pattern": "("}

    def test_configuration_error_key(self):
        error = ConfigurationError("bad", config_key="jenkins.url")
        assert error.details == {"config_key": "jenkins.url"}
