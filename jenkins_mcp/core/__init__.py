"""
Core Module

Provides foundational utilities including configuration management,
logging setup, custom exceptions, and application constants.
"""

from .exceptions import (
    JenkinsMCPException,
    ErrorKind,
    JenkinsClientError,
    ResourceNotFoundError,
    AuthenticationError,
    JenkinsAPIError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
    InvalidPatternError,
    ConfigurationError,
)
from .config import ClientConfig, Config
from .logging_config import setup_logging, configure_logging_from_config

__all__ = [
    "JenkinsMCPException",
    "ErrorKind",
    "JenkinsClientError",
    "ResourceNotFoundError",
    "AuthenticationError",
    "JenkinsAPIError",
    "NetworkError",
    "RequestTimeoutError",
    "ValidationError",
    "InvalidPatternError",
    "ConfigurationError",
    "ClientConfig",
    "Config",
    "setup_logging",
    "configure_logging_from_config",
]
