from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

NO_MILESTONE = "(none)"
UNSIZED_POINTS = 500


@dataclass(frozen=True)
class Issue:
    title: str
    milestone: str = NO_MILESTONE
    assignee: str = ""
    points: int = UNSIZED_POINTS
    url: str = ""


@dataclass(frozen=True)
class IssuePage:
    records: list[dict[str, Any]] = field(default_factory=list)
    next_page: Optional[int] = None
