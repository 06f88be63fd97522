from __future__ import annotations

import pytest

from issuepoints import cli
from issuepoints.config import AppConfig, ReportRequest
from issuepoints.github import GitHubApiError
from issuepoints.models import Issue


class FakeLoader:
    def __init__(self, issues: list[Issue] | None = None, error: Exception | None = None):
        self.issues = issues or []
        self.error = error
        self.requests: list[ReportRequest] = []

    async def load(self, request: ReportRequest) -> list[Issue]:
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.issues

    def fetch_summary(self) -> str:
        return f"{len(self.issues)} records from 1 source(s)"


def test_missing_required_args_exit_non_zero(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)

    with pytest.raises(SystemExit) as raised:
        cli.main(["--label", "planning"])

    assert raised.value.code != 0
    assert "--org" in capsys.readouterr().err


def test_all_flag_selects_flat_view() -> None:
    args = cli.build_parser().parse_args(["--org", "acme", "--label", "planning", "--all"])
    request = cli.build_request(args)
    assert request == ReportRequest(org="acme", label="planning", repos=(), view="all")


def test_repo_flag_is_repeatable() -> None:
    args = cli.build_parser().parse_args(
        ["--org", "acme", "--label", "planning", "--repo", "api", "--repo", "acme/web", "--view", "milestone"]
    )
    request = cli.build_request(args)
    assert request.repos == ("api", "acme/web")
    assert request.view == "milestone"


def test_missing_token_is_fatal_before_fetch(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.delenv("GITHUB_AUTH_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("ISSUEPOINTS_CONFIG_PATH", "non-existent-config-file.json")

    def no_loader(_config):  # pragma: no cover
        raise AssertionError("fetch must not start without a token")

    monkeypatch.setattr(cli, "IssueLoader", no_loader)

    with pytest.raises(SystemExit) as raised:
        cli.main(["--org", "acme", "--label", "planning"])

    assert raised.value.code == 1
    assert "❌ Error: Unauthorized" in capsys.readouterr().err


def test_fetch_error_is_fatal(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setenv("GITHUB_AUTH_TOKEN", "test-token")
    monkeypatch.setenv("ISSUEPOINTS_CONFIG_PATH", "non-existent-config-file.json")
    monkeypatch.setattr(
        cli, "IssueLoader", lambda _config: FakeLoader(error=GitHubApiError("Bad credentials", status=401))
    )

    with pytest.raises(SystemExit) as raised:
        cli.main(["--org", "acme", "--label", "planning"])

    captured = capsys.readouterr()
    assert raised.value.code == 1
    assert "❌ Error listing GitHub issues: Bad credentials | status=401" in captured.err
    assert "Total For Team" not in captured.out


@pytest.mark.asyncio
async def test_report_prints_default_views(capsys) -> None:
    loader = FakeLoader(
        issues=[
            Issue("A", "0.31", "alice", 5, "https://github.com/acme/api/issues/1"),
            Issue("B", "0.32", "bob", 10, "https://github.com/acme/api/issues/2"),
        ]
    )
    config = AppConfig(github_token="test-token")

    code = await cli.report(config, ReportRequest(org="acme", label="planning"), loader=loader)
    captured = capsys.readouterr()

    assert code == 0
    assert loader.requests == [ReportRequest(org="acme", label="planning")]
    assert 'Scanning GitHub organization "acme" and all issues labeled "planning"' in captured.err
    assert "✅ Loaded 2 issues" in captured.err
    assert "# Points Per-Assignee" in captured.out
    assert "Issues for alice" in captured.out
    assert "# Points Per-Milestone" in captured.out
    assert "Total For Team" in captured.out
