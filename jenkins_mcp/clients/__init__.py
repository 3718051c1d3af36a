"""
Clients Module

HTTP transport, retry policy and the Jenkins API client.
"""

from .http_manager import HTTPManager
from .retry_manager import AttemptResult, RetryConfig, RetryManager
from .jenkins_client import HeadResult, JenkinsClient, PostResult, TextWithHeaders

__all__ = [
    "HTTPManager",
    "AttemptResult",
    "RetryConfig",
    "RetryManager",
    "HeadResult",
    "JenkinsClient",
    "PostResult",
    "TextWithHeaders",
]
