"""
Exceptions

JenkinsMCPException is the root of every error raised by this package.
Failures of a Jenkins exchange are JenkinsClientError subclasses and carry
an ErrorKind, so tool handlers can branch on the category.
"""

from enum import Enum
from typing import Optional, Dict, Any


class JenkinsMCPException(Exception):
    """
    Base exception for the server.

    Attributes:
        message: Human-readable error message, shown to MCP clients
        details: Extra context, serialized by to_dict()
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Error body for HTTP responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ErrorKind(str, Enum):
    """Failure categories produced by the Jenkins client."""

    NOT_FOUND = "NotFound"
    AUTH_FAILED = "AuthFailed"
    SERVER_ERROR = "ServerError"
    NETWORK_ERROR = "NetworkError"
    TIMEOUT = "Timeout"


class JenkinsClientError(JenkinsMCPException):
    """
    Raised when a Jenkins API exchange fails.

    Attributes:
        kind: Failure category
        status_code: HTTP status code (None for network failures and timeouts)
        response_body: Response body from Jenkins (if available)
    """

    kind: ErrorKind = ErrorKind.SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        details: Optional[Dict] = None
    ):
        error_details = dict(details or {}, kind=self.kind.value)
        if status_code:
            error_details['status_code'] = status_code
        if response_body:
            error_details['response_body'] = response_body

        super().__init__(message, error_details)
        self.status_code = status_code
        self.response_body = response_body


class ResourceNotFoundError(JenkinsClientError):
    """
    Raised when Jenkins answers 404.

    Examples:
    - Job or folder does not exist
    - Build number does not exist
    - Build has no test report
    """

    kind = ErrorKind.NOT_FOUND


class AuthenticationError(JenkinsClientError):
    """
    Raised when Jenkins answers 401 or 403.

    Never retried; the message carries a hint to check credentials.
    """

    kind = ErrorKind.AUTH_FAILED


class JenkinsAPIError(JenkinsClientError):
    """Raised for any other non-2xx status once retries are exhausted."""

    kind = ErrorKind.SERVER_ERROR


class NetworkError(JenkinsClientError):
    """
    Raised when the connection to Jenkins fails after all retries.

    Examples:
    - DNS resolution failure
    - Connection refused or reset
    """

    kind = ErrorKind.NETWORK_ERROR


class RequestTimeoutError(JenkinsClientError):
    """
    Raised when a request exceeds its time budget.

    Timeouts are surfaced immediately and never retried.
    """

    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        details: Optional[Dict] = None
    ):
        error_details = details or {}
        if timeout_seconds:
            error_details['timeout_seconds'] = timeout_seconds

        super().__init__(message, details=error_details)
        self.timeout_seconds = timeout_seconds


class ValidationError(JenkinsMCPException):
    """
    Raised when tool arguments are rejected before Jenkins is called,
    e.g. updateBuild without a display name or description.
    """


class InvalidPatternError(ValidationError):
    """Raised when a regex search pattern does not compile."""

    def __init__(self, message: str, pattern: Optional[str] = None, details: Optional[Dict] = None):
        error_details = details or {}
        if pattern is not None:
            error_details['pattern'] = pattern

        super().__init__(message, error_details)
        self.pattern = pattern


class ConfigurationError(JenkinsMCPException):
    """
    Raised at startup for missing credentials, invalid values or an
    unreadable configuration file. config_key names the offending
    setting when there is a single one.
    """

    def __init__(self, message: str, config_key: Optional[str] = None, details: Optional[Dict] = None):
        error_details = details or {}
        if config_key:
            error_details['config_key'] = config_key

        super().__init__(message, error_details)
