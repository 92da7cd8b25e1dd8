"""Tests for environment configuration."""

from __future__ import annotations

import pytest

from github_pr_mcp.config import Config


@pytest.fixture(autouse=True)
def no_dotenv(mocker):
    mocker.patch("github_pr_mcp.config.load_dotenv", return_value=False)


def test_token_prefers_personal_access_token(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "pat")
    monkeypatch.setenv("GITHUB_TOKEN", "other")
    assert Config.load_from_env().github_token == "pat"


def test_token_falls_back_to_github_token(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_PERSONAL_ACCESS_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", "other")
    assert Config.load_from_env().github_token == "other"


def test_missing_token_is_not_an_error(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_PERSONAL_ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config = Config.load_from_env()
    assert config.github_token == ""


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.delenv("GITHUB_TIMEOUT_S", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config = Config.load_from_env()
    assert config.api_url == "https://api.github.com"
    assert config.timeout_s is None
    assert config.log_level == "INFO"


def test_custom_api_url_and_timeout(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")
    monkeypatch.setenv("GITHUB_TIMEOUT_S", "12.5")
    config = Config.load_from_env()
    assert config.api_url == "https://ghe.example.com/api/v3"
    assert config.timeout_s == 12.5


def test_rejects_plain_http(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_API_URL", "http://ghe.example.com")
    with pytest.raises(ValueError, match="https"):
        Config.load_from_env()


def test_rejects_bad_timeout(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.setenv("GITHUB_TIMEOUT_S", "soon")
    with pytest.raises(ValueError, match="GITHUB_TIMEOUT_S"):
        Config.load_from_env()


def test_repr_hides_token() -> None:
    assert "secret-value" not in repr(Config(github_token="secret-value"))
