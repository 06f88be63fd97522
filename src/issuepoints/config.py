from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from issuepoints.models import NO_MILESTONE, UNSIZED_POINTS

GITHUB_API_URL = "https://api.github.com"

DEFAULT_SIZE_LABELS: dict[str, int] = {
    "size-s": 1,
    "size/S": 1,
    "size-m": 5,
    "size/M": 5,
    "size-l": 10,
    "size/L": 10,
}

VIEWS = ("default", "all", "assignee", "milestone")


class ConfigurationError(Exception):
    """Raised for setup problems detected before any fetch is attempted."""


def _to_int(value: Any, default: int, minimum: int, maximum: int | None = None) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    parsed = max(minimum, parsed)
    if maximum is not None:
        parsed = min(maximum, parsed)
    return parsed


def _to_float(value: Any, default: float, minimum: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = default
    return max(minimum, parsed)


@dataclass(frozen=True)
class AppConfig:
    github_token: str | None = None
    api_url: str = GITHUB_API_URL
    page_size: int = 50
    request_timeout: float = 30.0
    size_labels: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_SIZE_LABELS))
    unsized_points: int = UNSIZED_POINTS
    no_milestone_label: str = NO_MILESTONE
    unassigned_label: str = "(unassigned)"
    config_source: str = "defaults/env"

    @classmethod
    def from_env(cls) -> "AppConfig":
        config = cls(
            github_token=os.getenv("GITHUB_AUTH_TOKEN") or os.getenv("GITHUB_TOKEN") or None,
            api_url=(os.getenv("ISSUEPOINTS_API_URL") or GITHUB_API_URL).rstrip("/"),
            page_size=_to_int(os.getenv("ISSUEPOINTS_PAGE_SIZE"), 50, 1, 100),
            request_timeout=_to_float(os.getenv("ISSUEPOINTS_TIMEOUT"), 30.0, 1.0),
        )
        config_path = os.getenv("ISSUEPOINTS_CONFIG_PATH", "issuepoints.config.json")
        return config.merge_file(Path(config_path))

    def require_token(self) -> str:
        if not self.github_token:
            raise ConfigurationError("Unauthorized: GITHUB_AUTH_TOKEN is not set.")
        return self.github_token

    def merge_file(self, path: Path) -> "AppConfig":
        if not path.exists():
            return self
        loaded = self._load_config_file(path)
        if not loaded:
            return self
        merged = dict(self.__dict__)
        # The token only ever comes from the environment.
        for key in merged:
            if key in loaded and key not in {"github_token", "config_source"}:
                merged[key] = loaded[key]
        merged["api_url"] = str(merged["api_url"]).strip().rstrip("/") or self.api_url
        merged["page_size"] = _to_int(merged["page_size"], self.page_size, 1, 100)
        merged["request_timeout"] = _to_float(merged["request_timeout"], self.request_timeout, 1.0)
        if not isinstance(merged["size_labels"], dict):
            merged["size_labels"] = dict(self.size_labels)
        else:
            # File entries extend the built-in size labels.
            merged["size_labels"] = {
                **self.size_labels,
                **{
                    str(label): _to_int(points, 0, 0)
                    for label, points in merged["size_labels"].items()
                    if str(label)
                },
            }
        merged["unsized_points"] = _to_int(merged["unsized_points"], self.unsized_points, 0)
        merged["no_milestone_label"] = str(merged["no_milestone_label"]).strip() or self.no_milestone_label
        merged["unassigned_label"] = str(merged["unassigned_label"]).strip() or self.unassigned_label
        merged["config_source"] = str(path)
        return AppConfig(**merged)

    def _load_config_file(self, path: Path) -> dict[str, Any]:
        suffix = path.suffix.lower()
        text = path.read_text(encoding="utf-8")
        if suffix == ".json":
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                return {}
            return parsed if isinstance(parsed, dict) else {}
        if suffix in {".yml", ".yaml"}:
            try:
                parsed = yaml.safe_load(text)
            except yaml.YAMLError:
                return {}
            return parsed if isinstance(parsed, dict) else {}
        return {}


@dataclass(frozen=True)
class ReportRequest:
    org: str
    label: str
    repos: tuple[str, ...] = ()
    view: str = "default"

    def validate(self) -> "ReportRequest":
        if not self.org.strip():
            raise ConfigurationError("Required --org flag not provided.")
        if not self.label.strip():
            raise ConfigurationError("Required --label flag not provided.")
        if self.view not in VIEWS:
            raise ConfigurationError(f"Unknown view {self.view!r}; expected one of {', '.join(VIEWS)}.")
        return self

    def repo_names(self) -> list[str]:
        """Resolve ``--repo`` values to ``owner/name``; bare names belong to ``org``."""
        names: list[str] = []
        for repo in self.repos:
            name = repo.strip().strip("/")
            if not name:
                continue
            names.append(name if "/" in name else f"{self.org}/{name}")
        return names
