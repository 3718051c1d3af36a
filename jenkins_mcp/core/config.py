"""
Configuration Module

Settings come from four layers, lowest to highest precedence:

1. config.yaml (or the file given with --config)
2. config.<env>.yaml next to it, where env comes from the ENV variable
3. environment variables (JENKINS_URL, JENKINS_USER, ...; see ENV_CONFIG_KEYS)
4. runtime overrides set from command-line flags

Keys are addressed with dots, e.g. 'jenkins.url'.
"""

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional

import yaml
from loguru import logger

from .constants import (
    DEFAULT_HTTP_PORT,
    DEFAULT_INITIAL_BACKOFF,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TRANSPORT,
    ENV_CONFIG_KEYS,
    VALID_LOG_LEVELS,
    VALID_TRANSPORTS,
)
from .exceptions import ConfigurationError


_MISSING = object()
_TRUTHY = ('true', '1', 'yes', 'on')


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable settings for a JenkinsClient.

    Attributes:
        base_url: Jenkins base URL (trailing slashes are stripped)
        user: Jenkins username
        api_token: Jenkins API token
        timeout: Per-request timeout in seconds
        max_retries: Retries for transient failures (total attempts = max_retries + 1)
        retry_delay: Base backoff delay in seconds
        verify_ssl: Whether to verify TLS certificates
    """
    base_url: str
    user: str
    api_token: str
    timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_INITIAL_BACKOFF
    verify_ssl: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'base_url', self.base_url.rstrip('/'))
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be non-negative", config_key='jenkins.max_retries')
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive", config_key='jenkins.timeout')

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks
        return (
            f"ClientConfig(base_url={self.base_url!r}, user={self.user!r}, "
            f"timeout={self.timeout}, max_retries={self.max_retries}, "
            f"retry_delay={self.retry_delay}, verify_ssl={self.verify_ssl})"
        )


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", details={'path': str(path)})


def _deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge source into target in place; nested mappings merge, anything else replaces."""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            target[key] = value
    return target


def _lookup(tree: Mapping[str, Any], key_path: str) -> Any:
    """Value at a dotted path, or _MISSING."""
    node: Any = tree
    for part in key_path.split('.'):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _assign(tree: Dict[str, Any], key_path: str, value: Any) -> None:
    """Store value at a dotted path, replacing non-dict intermediates."""
    *parents, leaf = key_path.split('.')
    node = tree
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


class Config:
    """
    Layered, thread-safe configuration.

    Example:
        >>> config = Config(environ={"JENKINS_URL": "https://jenkins.example.com/"})
        >>> config.set('jenkins.timeout', 60)
        >>> config.get('jenkins.timeout', default=30.0, expected_type=float)
        60.0
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        env: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Args:
            config_path: YAML file to load; when omitted ./config.yaml is
                used if present
            env: Name selecting config.<env>.yaml (default: ENV variable,
                then "production")
            environ: Environment variables to read (default: os.environ)

        Raises:
            ConfigurationError: An explicitly given file is missing, or a
                file is not valid YAML
        """
        self._lock = RLock()
        environ = os.environ if environ is None else environ
        self.env = env or environ.get('ENV', 'production')

        explicit = config_path is not None
        path = Path(config_path) if explicit else Path.cwd() / 'config.yaml'

        self._file_layer = self._load_files(path, explicit)
        self._env_layer = self._load_environment(environ)
        self._overrides: Dict[str, Any] = {}

    def _load_files(self, path: Path, required: bool) -> Dict[str, Any]:
        if not path.exists():
            if required:
                raise ConfigurationError(f"Configuration file not found: {path}", details={'path': str(path)})
            logger.debug(f"No {path.name} in {path.parent}, reading settings from the environment")
            return {}

        layer = _read_yaml(path)
        logger.info(f"Loaded configuration from {path}")

        env_path = path.parent / f'config.{self.env}.yaml'
        if env_path.exists():
            _deep_merge(layer, _read_yaml(env_path))
            logger.info(f"Applied {self.env} overrides from {env_path}")

        return layer

    @staticmethod
    def _load_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
        layer: Dict[str, Any] = {}
        for var_name, key_path in ENV_CONFIG_KEYS.items():
            value = environ.get(var_name)
            if value not in (None, ''):
                _assign(layer, key_path, value)
        return layer

    def get(
        self,
        key_path: str,
        default: Any = _MISSING,
        expected_type: Optional[type] = None
    ) -> Any:
        """
        Read a setting by dotted path from the highest layer that has it.

        Args:
            key_path: Dotted path such as 'jenkins.url'
            default: Returned when no layer has the key
            expected_type: bool, int, float or str convert the value
                (strings like "true"/"1"/"yes"/"on" count as True);
                any other type is only checked

        Raises:
            ConfigurationError: Key missing with no default, or the value
                cannot be converted to expected_type
        """
        with self._lock:
            for layer in (self._overrides, self._env_layer, self._file_layer):
                value = _lookup(layer, key_path)
                if value is not _MISSING:
                    break
            else:
                if default is _MISSING:
                    raise ConfigurationError(
                        f"Configuration key '{key_path}' not found and no default provided",
                        config_key=key_path
                    )
                value = default

        if expected_type is None or value is None:
            return value

        if expected_type is bool and isinstance(value, str):
            return value.lower() in _TRUTHY

        if expected_type in (int, float, str):
            try:
                return expected_type(value)
            except (ValueError, TypeError):
                raise ConfigurationError(
                    f"Cannot convert '{key_path}' value to {expected_type.__name__}: {value}",
                    config_key=key_path
                )

        if not isinstance(value, expected_type):
            raise ConfigurationError(
                f"Configuration key '{key_path}' is a {type(value).__name__}, "
                f"expected {expected_type.__name__}",
                config_key=key_path
            )
        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set a runtime override; it wins over every other layer."""
        with self._lock:
            _assign(self._overrides, key_path, value)
        logger.debug(f"Override set: {key_path}")

    def to_dict(self) -> Dict[str, Any]:
        """All layers merged into one nested dict."""
        with self._lock:
            merged = copy.deepcopy(self._file_layer)
            _deep_merge(merged, copy.deepcopy(self._env_layer))
            return _deep_merge(merged, copy.deepcopy(self._overrides))


    @property
    def log_level(self) -> str:
        return self.get('logging.level', default='info', expected_type=str).lower()

    @property
    def transport(self) -> str:
        return self.get('mcp_server.transport', default=DEFAULT_TRANSPORT, expected_type=str).lower()

    def validate(self) -> None:
        """
        Validate the settings required to start the server.

        Raises:
            ConfigurationError: Listing every missing required setting, or
                describing the first invalid value found
        """
        missing: List[str] = []

        if not self.get('jenkins.url', default=None):
            missing.append("--jenkins-url or JENKINS_URL")
        if not self.get('jenkins.user', default=None):
            missing.append("--jenkins-user or JENKINS_USER")
        if not self.get('jenkins.api_token', default=None):
            missing.append("--jenkins-token or JENKINS_API_TOKEN")

        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                details={'missing': missing}
            )

        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}. Must be one of: {', '.join(VALID_LOG_LEVELS)}",
                config_key='logging.level'
            )

        timeout = self.get('jenkins.timeout', default=DEFAULT_REQUEST_TIMEOUT, expected_type=float)
        if timeout <= 0:
            raise ConfigurationError(
                f"Invalid timeout: {timeout}. Must be a positive number.",
                config_key='jenkins.timeout'
            )

        max_retries = self.get('jenkins.max_retries', default=DEFAULT_MAX_RETRIES, expected_type=int)
        if max_retries < 0:
            raise ConfigurationError(
                f"Invalid max retries: {max_retries}. Must be zero or greater.",
                config_key='jenkins.max_retries'
            )

        if self.transport not in VALID_TRANSPORTS:
            raise ConfigurationError(
                f"Invalid transport: {self.transport}. Must be one of: {', '.join(VALID_TRANSPORTS)}",
                config_key='mcp_server.transport'
            )

        if self.transport == 'http':
            port = self.get('mcp_server.port', default=DEFAULT_HTTP_PORT, expected_type=int)
            if not 0 < port <= 65535:
                raise ConfigurationError(
                    f"Invalid port: {port}. Must be between 1 and 65535.",
                    config_key='mcp_server.port'
                )

    def client_config(self) -> ClientConfig:
        """
        Build the immutable client settings from this configuration.

        Example:
            >>> client = JenkinsClient(config.client_config())
        """
        return ClientConfig(
            base_url=self.get('jenkins.url', expected_type=str),
            user=self.get('jenkins.user', expected_type=str),
            api_token=self.get('jenkins.api_token', expected_type=str),
            timeout=self.get('jenkins.timeout', default=DEFAULT_REQUEST_TIMEOUT, expected_type=float),
            max_retries=self.get('jenkins.max_retries', default=DEFAULT_MAX_RETRIES, expected_type=int),
            retry_delay=self.get('jenkins.retry_delay', default=DEFAULT_INITIAL_BACKOFF, expected_type=float),
            verify_ssl=not self.get('jenkins.insecure', default=False, expected_type=bool),
        )
