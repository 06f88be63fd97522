from __future__ import annotations

import sys
from typing import Any, Iterable, List

from issuepoints.config import AppConfig, ReportRequest
from issuepoints.github import GitHubClient
from issuepoints.models import Issue
from issuepoints.services.sizing import SizeClassifier


def label_names(labels: Iterable[Any] | None) -> list[str]:
    names: list[str] = []
    for label in labels or []:
        if isinstance(label, dict):
            name = label.get("name")
            if name:
                names.append(str(name))
        elif label:
            names.append(str(label))
    return names


def is_pull_request(record: dict[str, Any]) -> bool:
    return bool(record.get("pull_request"))


class IssueNormalizer:
    """Turns raw GitHub issue payloads into flat ``Issue`` records."""

    def __init__(self, config: AppConfig | None = None):
        self.config = config or AppConfig()
        self.classifier = SizeClassifier(self.config.size_labels, self.config.unsized_points)

    def normalize(self, record: dict[str, Any]) -> Issue:
        milestone = record.get("milestone") or {}
        assignee = record.get("assignee") or {}
        return Issue(
            title=record.get("title") or "",
            milestone=milestone.get("title") or self.config.no_milestone_label,
            assignee=assignee.get("login") or "",
            points=self.classifier.classify(label_names(record.get("labels"))),
            url=record.get("html_url") or "",
        )


class IssueLoader:
    def __init__(self, config: AppConfig, client: GitHubClient | None = None):
        self.config = config
        self.github = client or GitHubClient(
            token=config.github_token,
            api_url=config.api_url,
            page_size=config.page_size,
            timeout=config.request_timeout,
        )
        self.normalizer = IssueNormalizer(config)
        self.fetch_counts: dict[str, int] = {}
        self.skipped_pull_requests = 0

    async def load(self, request: ReportRequest) -> List[Issue]:
        """Fetches every open issue carrying ``request.label`` and normalizes it."""
        self.fetch_counts = {}
        self.skipped_pull_requests = 0
        raw_issues: list[dict[str, Any]] = []

        repo_names = request.repo_names()
        if repo_names:
            for repo in repo_names:
                _status(f"   - Fetching issues for {repo}...")
                records = await self.github.get_repo_issues(repo, request.label)
                self.fetch_counts[repo] = len(records)
                raw_issues.extend(records)
        else:
            _status(f"   - Fetching issues for organization {request.org}...")
            records = await self.github.get_org_issues(request.org, request.label)
            self.fetch_counts[request.org] = len(records)
            raw_issues.extend(records)

        issues = []
        for record in raw_issues:
            if is_pull_request(record):
                self.skipped_pull_requests += 1
                continue
            issues.append(self.normalizer.normalize(record))
        return issues

    def fetch_summary(self) -> str:
        fetched = sum(self.fetch_counts.values())
        summary = f"{fetched} records from {len(self.fetch_counts)} source(s)"
        if self.skipped_pull_requests:
            summary += f", {self.skipped_pull_requests} pull request(s) skipped"
        return summary


def _status(message: str) -> None:
    print(message, file=sys.stderr)
