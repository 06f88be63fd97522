from pathlib import Path

import pytest

from issuepoints.config import AppConfig, ConfigurationError, ReportRequest


def test_config_merge_file_json(tmp_path: Path) -> None:
    config_file = tmp_path / "issuepoints.config.json"
    config_file.write_text(
        """
{
  "api_url": "https://github.example.com/api/v3/",
  "page_size": 250,
  "size_labels": {"size-xl": 20, "size/XL": "20"},
  "unsized_points": 900,
  "no_milestone_label": "backlog",
  "github_token": "ignored"
}
""".strip(),
        encoding="utf-8",
    )

    merged = AppConfig(github_token="env-token").merge_file(config_file)
    assert merged.api_url == "https://github.example.com/api/v3"
    assert merged.page_size == 100
    assert merged.size_labels["size-xl"] == 20
    assert merged.size_labels["size/XL"] == 20
    assert merged.size_labels["size/S"] == 1
    assert merged.unsized_points == 900
    assert merged.no_milestone_label == "backlog"
    assert merged.github_token == "env-token"
    assert merged.config_source == str(config_file)


def test_config_merge_file_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "issuepoints.yaml"
    config_file.write_text("page_size: 20\nunassigned_label: nobody\n", encoding="utf-8")

    merged = AppConfig().merge_file(config_file)
    assert merged.page_size == 20
    assert merged.unassigned_label == "nobody"


def test_config_merge_file_invalid_json_falls_back(tmp_path: Path) -> None:
    config_file = tmp_path / "issuepoints.config.json"
    config_file.write_text("{ this-is: bad json", encoding="utf-8")

    defaults = AppConfig()
    merged = defaults.merge_file(config_file)
    assert merged == defaults


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_AUTH_TOKEN", "secret")
    monkeypatch.setenv("ISSUEPOINTS_PAGE_SIZE", "not-a-number")
    monkeypatch.setenv("ISSUEPOINTS_CONFIG_PATH", "non-existent-config-file.json")
    config = AppConfig.from_env()
    assert config.github_token == "secret"
    assert config.page_size == 50
    assert config.require_token() == "secret"


def test_require_token_raises_when_missing(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_AUTH_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("ISSUEPOINTS_CONFIG_PATH", "non-existent-config-file.json")
    with pytest.raises(ConfigurationError):
        AppConfig.from_env().require_token()


def test_report_request_validation_and_repo_names() -> None:
    request = ReportRequest(org="acme", label="planning", repos=("api", "other/web", " ")).validate()
    assert request.repo_names() == ["acme/api", "other/web"]

    with pytest.raises(ConfigurationError):
        ReportRequest(org="", label="planning").validate()
    with pytest.raises(ConfigurationError):
        ReportRequest(org="acme", label=" ").validate()
    with pytest.raises(ConfigurationError):
        ReportRequest(org="acme", label="planning", view="burndown").validate()


def test_config_from_env_clamps_page_size(monkeypatch) -> None:
    monkeypatch.setenv("ISSUEPOINTS_PAGE_SIZE", "250")
    monkeypatch.setenv("ISSUEPOINTS_CONFIG_PATH", "non-existent-config-file.json")
    assert AppConfig.from_env().page_size == 100
