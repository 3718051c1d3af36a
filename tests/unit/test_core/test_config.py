"""
Unit tests for configuration management.

Tests layer precedence, type conversion and startup validation.
"""

import pytest

from jenkins_mcp.core.config import ClientConfig, Config
from jenkins_mcp.core.exceptions import ConfigurationError

REQUIRED_ENV = {
    "JENKINS_URL": "https://jenkins.example.com/",
    "JENKINS_USER": "admin",
    "JENKINS_API_TOKEN": "secret-token",
}


@pytest.fixture
def empty_dir(tmp_path, monkeypatch):
    """Run in a directory without config.yaml."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestConfigLayers:
    """Tests for file, environment and override precedence."""

    def test_environment_only(self, empty_dir):
        """Test values read from environment variables."""
        config = Config(environ=REQUIRED_ENV)

        assert config.get("jenkins.url") == "https://jenkins.example.com/"
        assert config.get("jenkins.user") == "admin"

    def test_empty_environment_value_ignored(self, empty_dir):
        config = Config(environ={"JENKINS_URL": ""})
        assert config.get("jenkins.url", default=None) is None

    def test_yaml_file(self, tmp_path):
        """Test values loaded from an explicit YAML file."""
        path = tmp_path / "jenkins.yaml"
        path.write_text("jenkins:\n  url: https://file.example.com\n  timeout: 12\n")

        config = Config(config_path=str(path), environ={})

        assert config.get("jenkins.url") == "https://file.example.com"
        assert config.get("jenkins.timeout", expected_type=float) == 12.0

    def test_environment_file_overrides(self, tmp_path):
        (tmp_path / "config.yaml").write_text("jenkins:\n  url: https://base\n  user: base-user\n")
        (tmp_path / "config.staging.yaml").write_text("jenkins:\n  url: https://staging\n")

        config = Config(config_path=str(tmp_path / "config.yaml"), env="staging", environ={})

        assert config.get("jenkins.url") == "https://staging"
        assert config.get("jenkins.user") == "base-user"

    def test_precedence(self, tmp_path):
        """Test overrides beat environment, which beats the file."""
        path = tmp_path / "config.yaml"
        path.write_text("jenkins:\n  url: https://file\n  user: file-user\n  api_token: file-token\n")

        config = Config(config_path=str(path), environ={"JENKINS_URL": "https://env", "JENKINS_USER": "env-user"})
        config.set("jenkins.url", "https://override")

        assert config.get("jenkins.url") == "https://override"
        assert config.get("jenkins.user") == "env-user"
        assert config.get("jenkins.api_token") == "file-token"
        assert config.to_dict()["jenkins"] == {
            "url": "https://override",
            "user": "env-user",
            "api_token": "file-token",
        }

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            Config(config_path=str(tmp_path / "missing.yaml"), environ={})

        assert "not found" in exc_info.value.message

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("jenkins: [unclosed\n")

        with pytest.raises(ConfigurationError):
            Config(config_path=str(path), environ={})


class TestConfigGet:
    """Tests for typed value retrieval."""

    def test_missing_key_without_default(self, empty_dir):
        config = Config(environ={})

        with pytest.raises(ConfigurationError) as exc_info:
            config.get("jenkins.url")

        assert exc_info.value.details["config_key"] == "jenkins.url"

    def test_default(self, empty_dir):
        assert Config(environ={}).get("jenkins.timeout", default=30.0) == 30.0

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("yes", True), ("ON", True),
        ("false", False), ("0", False), ("no", False),
    ])
    def test_bool_conversion(self, empty_dir, raw, expected):
        config = Config(environ={"JENKINS_INSECURE": raw})
        assert config.get("jenkins.insecure", expected_type=bool) is expected

    def test_int_conversion_failure(self, empty_dir):
        config = Config(environ={"JENKINS_MAX_RETRIES": "many"})

        with pytest.raises(ConfigurationError):
            config.get("jenkins.max_retries", expected_type=int)

    def test_log_level_and_transport_lowercased(self, empty_dir):
        config = Config(environ={"LOG_LEVEL": "DEBUG", "MCP_TRANSPORT": "HTTP"})

        assert config.log_level == "debug"
        assert config.transport == "http"


class TestConfigValidate:
    """Tests for startup validation."""

    def test_valid(self, empty_dir):
        Config(environ=REQUIRED_ENV).validate()

    def test_lists_every_missing_setting(self, empty_dir):
        """Test the error names all missing required settings at once."""
        config = Config(environ={"JENKINS_USER": "admin"})

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert exc_info.value.details["missing"] == [
            "--jenkins-url or JENKINS_URL",
            "--jenkins-token or JENKINS_API_TOKEN",
        ]
        assert exc_info.value.message.startswith("Missing required configuration:")

    @pytest.mark.parametrize("key,value", [
        ("LOG_LEVEL", "verbose"),
        ("JENKINS_TIMEOUT", "0"),
        ("JENKINS_MAX_RETRIES", "-1"),
        ("MCP_TRANSPORT", "sse"),
    ])
    def test_invalid_values(self, empty_dir, key, value):
        config = Config(environ={**REQUIRED_ENV, key: value})

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_http_port_range(self, empty_dir):
        config = Config(environ={**REQUIRED_ENV, "MCP_TRANSPORT": "http", "MCP_PORT": "70000"})

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        assert exc_info.value.details["config_key"] == "mcp_server.port"

    def test_warn_is_accepted(self, empty_dir):
        Config(environ={**REQUIRED_ENV, "LOG_LEVEL": "warn"}).validate()


class TestClientConfig:
    """Tests for ClientConfig."""

    def test_from_config(self, empty_dir):
        config = Config(environ={**REQUIRED_ENV, "JENKINS_INSECURE": "true", "JENKINS_TIMEOUT": "5"})

        client_config = config.client_config()

        assert client_config.base_url == "https://jenkins.example.com"
        assert client_config.verify_ssl is False
        assert client_config.timeout == 5.0
        assert client_config.max_retries == 3
        assert client_config.retry_delay == 1.0

    def test_trailing_slashes_stripped(self):
        assert ClientConfig("https://j.example.com///", "u", "t").base_url == "https://j.example.com"

    def test_repr_hides_token(self):
        assert "secret-token" not in repr(ClientConfig("https://j", "u", "secret-token"))

    def test_negative_retries_rejected(self):
        with pytest.raises(ConfigurationError):
            ClientConfig("https://j", "u", "t", max_retries=-1)

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ConfigurationError):
            ClientConfig("https://j", "u", "t", timeout=0)

    def test_immutable(self):
        client_config = ClientConfig("https://j", "u", "t")

        with pytest.raises(AttributeError):
            client_config.user = "other"
