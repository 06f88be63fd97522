from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from issuepoints.config import AppConfig
from issuepoints.models import Issue
from issuepoints.services.grouping import (
    by_assignee,
    by_milestone,
    group_by_assignee,
    group_by_milestone,
    group_nested,
    points_by_group,
    sum_points,
)


@dataclass(frozen=True)
class MilestoneTotal:
    milestone: str
    points: int


@dataclass(frozen=True)
class IssueTableMetric:
    title: str
    issues: list[Issue]
    total_points: int
    milestone_totals: list[MilestoneTotal]
    average_per_milestone: float | None


@dataclass(frozen=True)
class AssigneeTableMetric:
    assignee: str
    table: IssueTableMetric


@dataclass(frozen=True)
class CrossTabRow:
    assignee: str
    cells: list[int]
    total_points: int


@dataclass(frozen=True)
class CrossTabMetric:
    title: str
    milestones: list[str]
    rows: list[CrossTabRow]
    column_totals: list[int]
    total_points: int


def issue_sort_key(issue: Issue) -> tuple[str, str, int, str]:
    return (issue.assignee, issue.milestone, -issue.points, issue.title)


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Sort by assignee, milestone, points (largest first), then title.

    ``sorted`` is stable, so issues equal on all four keys keep their input
    order.
    """
    return sorted(issues, key=issue_sort_key)


def assignee_order_key(assignee: str) -> tuple[str, str]:
    # "EvanBoyle" sorts among the lower-cased logins, not ahead of them.
    return (assignee.casefold(), assignee)


def sorted_assignees(assignees: Iterable[str]) -> list[str]:
    return sorted(set(assignees), key=assignee_order_key)


class ReportService:
    def __init__(self, config: AppConfig):
        self.config = config

    def display_assignee(self, assignee: str) -> str:
        return assignee or self.config.unassigned_label

    def issue_table(self, issues: Iterable[Issue], title: str) -> IssueTableMetric:
        ordered = sort_issues(issues)
        per_milestone = points_by_group(group_by_milestone(ordered))
        milestone_totals = [
            MilestoneTotal(milestone=milestone, points=per_milestone[milestone])
            for milestone in sorted(per_milestone)
        ]
        total_points = sum_points(ordered)
        average = total_points / len(milestone_totals) if milestone_totals else None
        return IssueTableMetric(
            title=title,
            issues=ordered,
            total_points=total_points,
            milestone_totals=milestone_totals,
            average_per_milestone=average,
        )

    def all_issues(self, issues: Iterable[Issue]) -> IssueTableMetric:
        return self.issue_table(issues, "All Issues")

    def per_assignee(self, issues: Iterable[Issue]) -> list[AssigneeTableMetric]:
        groups = group_by_assignee(issues)
        return [
            AssigneeTableMetric(
                assignee=assignee,
                table=self.issue_table(
                    groups[assignee], f"Issues for {self.display_assignee(assignee)}"
                ),
            )
            for assignee in sorted_assignees(groups)
        ]

    def per_milestone(self, issues: Iterable[Issue]) -> CrossTabMetric:
        issues = list(issues)
        milestones = sorted(group_by_milestone(issues))
        nested = group_nested(issues, by_assignee, by_milestone)

        rows: list[CrossTabRow] = []
        column_totals = [0] * len(milestones)
        for assignee in sorted_assignees(nested):
            pair_points = points_by_group(nested[assignee])
            cells = [pair_points.get(milestone, 0) for milestone in milestones]
            for index, points in enumerate(cells):
                column_totals[index] += points
            rows.append(
                CrossTabRow(
                    assignee=self.display_assignee(assignee),
                    cells=cells,
                    total_points=sum(cells),
                )
            )

        return CrossTabMetric(
            title="Team Points by Milestone",
            milestones=milestones,
            rows=rows,
            column_totals=column_totals,
            total_points=sum(column_totals),
        )
