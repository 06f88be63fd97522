from __future__ import annotations

from typing import Iterable

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from issuepoints.models import Issue
from issuepoints.services.report import (
    AssigneeTableMetric,
    CrossTabMetric,
    IssueTableMetric,
    ReportService,
)

# Wide enough that measuring a table never squeezes its columns.
MEASURE_WIDTH = 10_000


def issue_table(metric: IssueTableMetric, unassigned_label: str = "") -> Table:
    table = Table(title=Text(metric.title), box=box.ASCII2)
    table.add_column("Issue", no_wrap=True, overflow="ignore")
    table.add_column("Milestone", no_wrap=True, overflow="ignore")
    table.add_column("Assignee", no_wrap=True, overflow="ignore")
    table.add_column("Points", justify="right", no_wrap=True, overflow="ignore")
    table.add_column("URL", no_wrap=True, overflow="ignore")

    for issue in metric.issues:
        table.add_row(
            Text(issue.title),
            Text(issue.milestone),
            Text(issue.assignee or unassigned_label),
            str(issue.points),
            Text(issue.url),
        )

    table.add_section()
    table.add_row("", "", "Total", str(metric.total_points), "")
    for milestone_total in metric.milestone_totals:
        table.add_row("", "", Text(f"Points for {milestone_total.milestone}"), str(milestone_total.points), "")
    if metric.average_per_milestone is not None:
        table.add_row("", "", "Average per milestone", f"{metric.average_per_milestone:.1f}", "")
    return table


def cross_tab_table(metric: CrossTabMetric) -> Table:
    table = Table(title=Text(metric.title), box=box.ASCII2)
    table.add_column("Assignee", no_wrap=True, overflow="ignore")
    for milestone in metric.milestones:
        table.add_column(Text(milestone), justify="right", no_wrap=True, overflow="ignore")
    table.add_column("Total", justify="right", no_wrap=True, overflow="ignore")

    for row in metric.rows:
        table.add_row(Text(row.assignee), *(str(cell) for cell in row.cells), str(row.total_points))

    table.add_section()
    table.add_row(
        "Total For Team",
        *(str(total) for total in metric.column_totals),
        str(metric.total_points),
    )
    return table


def print_table(console: Console, table: Table) -> None:
    """Print ``table`` at its natural width so no cell is cut to fit the terminal."""
    measurement = console.measure(table, options=console.options.update_width(MEASURE_WIDTH))
    table.width = measurement.maximum
    console.print(table, crop=False)


class ReportRenderer:
    def __init__(self, service: ReportService, console: Console | None = None):
        self.service = service
        self.console = console or Console(highlight=False)

    def render(self, issues: Iterable[Issue], view: str = "default") -> None:
        issues = list(issues)
        if view == "all":
            self.render_all(issues)
            return
        if view in {"default", "assignee"}:
            self.console.print("\n# Points Per-Assignee\n")
            self.render_per_assignee(issues)
        if view in {"default", "milestone"}:
            self.console.print("\n# Points Per-Milestone\n")
            self.render_per_milestone(issues)

    def render_all(self, issues: list[Issue]) -> IssueTableMetric:
        metric = self.service.all_issues(issues)
        print_table(self.console, issue_table(metric, self.service.config.unassigned_label))
        return metric

    def render_per_assignee(self, issues: list[Issue]) -> list[AssigneeTableMetric]:
        metrics = self.service.per_assignee(issues)
        for metric in metrics:
            print_table(self.console, issue_table(metric.table, self.service.config.unassigned_label))
            # Separate each individual person.
            self.console.print()
        return metrics

    def render_per_milestone(self, issues: list[Issue]) -> CrossTabMetric:
        metric = self.service.per_milestone(issues)
        print_table(self.console, cross_tab_table(metric))
        return metric
