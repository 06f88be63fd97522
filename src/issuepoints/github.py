from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from issuepoints.config import GITHUB_API_URL
from issuepoints.models import IssuePage


@dataclass(frozen=True)
class GitHubApiError(Exception):
    message: str
    status: int | None = None
    url: str | None = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.status:
            parts.append(f"status={self.status}")
        if self.url:
            parts.append(f"url={self.url}")
        return " | ".join(parts)


def next_page_from(response: httpx.Response) -> int | None:
    """Read the next page number from the ``Link`` header, if there is one."""
    link = response.links.get("next")
    if not link or not link.get("url"):
        return None
    page = httpx.URL(link["url"]).params.get("page")
    try:
        return int(page) if page else None
    except ValueError:
        return None


class GitHubClient:
    PAGE_SIZE = 50

    def __init__(
        self,
        token: Optional[str],
        api_url: str = GITHUB_API_URL,
        page_size: int | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.page_size = page_size or self.PAGE_SIZE
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}" if self.token else "",
        }

    async def _get(self, path: str, params: dict[str, Any]) -> tuple[Any, int | None]:
        if not self.token:
            raise GitHubApiError("GITHUB_AUTH_TOKEN is not set.")

        async with httpx.AsyncClient(
            base_url=self.api_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                response = await client.get(path, params=params)
            except httpx.TransportError as e:
                raise GitHubApiError(f"request failed: {e}", url=f"{self.api_url}{path}") from e
            if response.is_error:
                raise GitHubApiError(
                    message=self._error_message(response),
                    status=response.status_code,
                    url=str(response.url),
                )
            try:
                body = response.json()
            except ValueError as e:
                raise GitHubApiError(
                    f"unexpected response: body is not JSON ({e})",
                    status=response.status_code,
                    url=str(response.url),
                ) from e
            return body, next_page_from(response)

    def _error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.reason_phrase or "Unknown GitHub API error"

    async def get_issues_page(
        self, path: str, label: str, page: int = 1, scope_all: bool = False
    ) -> IssuePage:
        # https://docs.github.com/en/rest/issues/issues#list-organization-issues-assigned-to-the-authenticated-user
        params: dict[str, Any] = {
            "state": "open",
            "labels": label,
            "per_page": self.page_size,
            "page": page,
        }
        if scope_all:
            params["filter"] = "all"
        records, next_page = await self._get(path, params)
        if not isinstance(records, list):
            raise GitHubApiError("unexpected response: expected a list of issues", url=path)
        return IssuePage(records=records, next_page=next_page)

    async def get_issues(self, path: str, label: str, scope_all: bool = False) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        page: int | None = 1
        while page is not None:
            result = await self.get_issues_page(path, label, page, scope_all=scope_all)
            issues.extend(result.records)
            if result.next_page is None or result.next_page <= page:
                break
            page = result.next_page
        return issues

    async def get_org_issues(self, org: str, label: str) -> list[dict[str, Any]]:
        return await self.get_issues(f"/orgs/{org}/issues", label, scope_all=True)

    async def get_repo_issues(self, repo: str, label: str) -> list[dict[str, Any]]:
        return await self.get_issues(f"/repos/{repo}/issues", label)
