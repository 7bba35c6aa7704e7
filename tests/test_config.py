"""Tests for ClientSettings and load_config."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from actionkit.config import ClientSettings, load_config
from actionkit.errors import ConfigValidationError
from actionkit.observability.logging import ROOT_LOGGER, StructuredFormatter

ENV_KEYS = [
    "ACTIONKIT_BASE_URL",
    "ACTIONKIT_TIMEOUT",
    "ACTIONKIT_TOKEN",
    "ACTIONKIT_ACCEPT",
    "ACTIONKIT_LOG_LEVEL",
    "ACTIONKIT_JSON_LOGS",
    "ACTIONKIT_HEADERS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate settings from the developer's environment and .env file."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class TestClientSettings:
    def test_defaults(self) -> None:
        settings = ClientSettings()

        assert settings.base_url == "https://api.github.com"
        assert settings.timeout == 30.0
        assert settings.token is None
        assert settings.log_level == "INFO"
        assert not settings.json_logs

    def test_baseline_headers_default(self) -> None:
        assert ClientSettings().baseline_headers() == {"Accept": "application/vnd.github.v3+json"}

    def test_baseline_headers_with_token_and_extras(self) -> None:
        settings = ClientSettings(
            token="abc",
            headers={"accept": "application/json", "X-GitHub-Api-Version": "2022-11-28"},
        )

        assert settings.baseline_headers() == {
            "Authorization": "Bearer abc",
            "accept": "application/json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def test_base_url_trailing_slash_stripped(self) -> None:
        assert ClientSettings(base_url=" https://ghe.example.com/api/v3/ ").base_url == "https://ghe.example.com/api/v3"

    @pytest.mark.parametrize("base_url", ["", "   ", "ftp://example.com", "api.github.com"])
    def test_invalid_base_url(self, base_url: str) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            ClientSettings(base_url=base_url)

        assert exc_info.value.field == "base_url"

    @pytest.mark.parametrize("timeout", [0, -1, "soon"])
    def test_invalid_timeout(self, timeout: object) -> None:
        with pytest.raises(ConfigValidationError):
            ClientSettings(timeout=timeout)

    def test_setup_logging(self) -> None:
        logger = logging.getLogger(ROOT_LOGGER)
        saved = list(logger.handlers), logger.level, logger.propagate
        try:
            configured = ClientSettings(log_level="debug", json_logs=True).setup_logging()

            assert configured.level == logging.DEBUG
            assert isinstance(configured.handlers[0].formatter, StructuredFormatter)
        finally:
            handlers, level, propagate = saved
            logger.handlers[:] = handlers
            logger.setLevel(level)
            logger.propagate = propagate

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ACTIONKIT_TOKEN", "from-env")
        monkeypatch.setenv("ACTIONKIT_TIMEOUT", "2.5")

        settings = ClientSettings()

        assert settings.token == "from-env"
        assert settings.timeout == 2.5


class TestLoadConfig:
    def test_without_file_uses_defaults(self) -> None:
        assert load_config().base_url == "https://api.github.com"

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "absent.yaml").timeout == 30.0

    def test_reads_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "actionkit.yaml"
        path.write_text(
            "base_url: https://ghe.example.com/api/v3\n"
            "timeout: 10\n"
            "token: yaml-token\n"
            "headers:\n"
            "  X-GitHub-Api-Version: '2022-11-28'\n"
        )

        settings = load_config(path)

        assert settings.base_url == "https://ghe.example.com/api/v3"
        assert settings.timeout == 10.0
        assert settings.baseline_headers()["Authorization"] == "Bearer yaml-token"
        assert settings.baseline_headers()["X-GitHub-Api-Version"] == "2022-11-28"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path).base_url == "https://api.github.com"

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "actionkit.yaml"
        path.write_text("timeout: 10\njson_logs: false\n")
        monkeypatch.setenv("ACTIONKIT_TIMEOUT", "3")
        monkeypatch.setenv("ACTIONKIT_JSON_LOGS", "yes")

        settings = load_config(str(path))

        assert settings.timeout == 3.0
        assert settings.json_logs

    def test_non_mapping_yaml_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigValidationError, match="mapping"):
            load_config(path)

    def test_bad_env_value_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ACTIONKIT_TIMEOUT", "ten")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config()

        assert exc_info.value.field == "timeout"
        assert isinstance(exc_info.value.cause, ValueError)
