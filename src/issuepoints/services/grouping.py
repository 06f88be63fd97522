from __future__ import annotations

from typing import Callable, Iterable

from issuepoints.models import Issue

KeySelector = Callable[[Issue], str]


def by_assignee(issue: Issue) -> str:
    return issue.assignee


def by_milestone(issue: Issue) -> str:
    return issue.milestone


def group_by(issues: Iterable[Issue], key: KeySelector) -> dict[str, list[Issue]]:
    """Partition issues by ``key``.

    Keys are used as-is (no trimming or case folding). Groups keep the order
    in which their issues were encountered, and the mapping keeps the order in
    which keys were first seen.
    """
    groups: dict[str, list[Issue]] = {}
    for issue in issues:
        groups.setdefault(key(issue), []).append(issue)
    return groups


def group_by_assignee(issues: Iterable[Issue]) -> dict[str, list[Issue]]:
    return group_by(issues, by_assignee)


def group_by_milestone(issues: Iterable[Issue]) -> dict[str, list[Issue]]:
    return group_by(issues, by_milestone)


def group_nested(
    issues: Iterable[Issue], outer: KeySelector, inner: KeySelector
) -> dict[str, dict[str, list[Issue]]]:
    return {
        outer_key: group_by(outer_issues, inner)
        for outer_key, outer_issues in group_by(issues, outer).items()
    }


def sum_points(issues: Iterable[Issue]) -> int:
    return sum(issue.points for issue in issues)


def points_by_group(groups: dict[str, list[Issue]]) -> dict[str, int]:
    return {key: sum_points(group) for key, group in groups.items()}
