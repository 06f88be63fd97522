import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from issuepoints.config import VIEWS, AppConfig, ConfigurationError, ReportRequest
from issuepoints.data import IssueLoader
from issuepoints.github import GitHubApiError
from issuepoints.services.report import ReportService
from issuepoints.views.tables import ReportRenderer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issuepoints",
        description="Summarize outstanding issue points per assignee and milestone.",
    )
    parser.add_argument("--org", required=True, help="GitHub organization to scan.")
    parser.add_argument("--label", required=True, help="GitHub label marking all issues to be included.")
    parser.add_argument(
        "--repo",
        action="append",
        default=[],
        dest="repos",
        metavar="REPO",
        help="Only scan this repository (NAME within --org, or OWNER/NAME). Repeatable.",
    )
    parser.add_argument("--all", action="store_true", help="Print all issues in one table.")
    parser.add_argument(
        "--view",
        choices=VIEWS,
        default="default",
        help="Which summary to print (default: per-assignee tables and per-milestone totals).",
    )
    parser.add_argument("--config", help="Path to a JSON or YAML config file.")
    return parser


def build_request(args: argparse.Namespace) -> ReportRequest:
    return ReportRequest(
        org=args.org,
        label=args.label,
        repos=tuple(args.repos),
        view="all" if args.all else args.view,
    ).validate()


def load_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig.from_env()
    if args.config:
        path = Path(args.config)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        config = config.merge_file(path)
    return config


async def report(config: AppConfig, request: ReportRequest, loader: IssueLoader | None = None) -> int:
    """Fetch issues for ``request`` and print the selected views."""
    config.require_token()
    print(
        f'🔍 Scanning GitHub organization "{request.org}" and all issues labeled "{request.label}"...',
        file=sys.stderr,
    )
    loader = loader or IssueLoader(config)
    issues = await loader.load(request)
    print(f"✅ Loaded {len(issues)} issues ({loader.fetch_summary()}).", file=sys.stderr)

    ReportRenderer(ReportService(config)).render(issues, view=request.view)
    return 0


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        request = build_request(args)
        config = load_config(args)
        sys.exit(asyncio.run(report(config, request)))
    except ConfigurationError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)
    except GitHubApiError as e:
        print(f"❌ Error listing GitHub issues: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
