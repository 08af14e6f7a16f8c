"""Command-line entry point: ``site-audit <command>``."""

from __future__ import annotations

import argparse
import asyncio
import logging

from site_audit.browser import launch_browser
from site_audit.config import Settings, get_settings
from site_audit.errors import ConfigurationError, CriticalViolationsError, RunTimeoutError
from site_audit.logging_config import setup_logging
from site_audit.session import Session, SessionManager
from site_audit.suite import AuditSuite, clean_results

logger = logging.getLogger(__name__)

class IncompleteRunError(Exception):
    """At least one category of ``all`` did not complete."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-audit",
        description="Screenshot, accessibility and SEO audit of a configured set of pages.",
    )
    parser.add_argument("--base-url", help="Site to audit (overrides SITE_AUDIT_BASE_URL)")
    parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Re-run the command this many times within the same session when a category fails",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run_all = sub.add_parser("all", help="Run every category and write the session report")
    run_all.add_argument(
        "--no-fail-on-critical",
        dest="fail_on_critical",
        action="store_false",
        default=None,
        help="Do not fail on critical accessibility violations",
    )

    shots = sub.add_parser("screenshots", help="Full-page screenshots for every page and viewport")
    shots.add_argument("--viewport", help="Only this configured viewport (desktop, laptop, mobile)")

    a11y = sub.add_parser("accessibility", help="WCAG scan of every page")
    a11y.add_argument(
        "--no-fail-on-critical",
        dest="fail_on_critical",
        action="store_false",
        default=None,
        help="Do not fail on critical accessibility violations",
    )

    sub.add_parser("seo", help="On-page SEO analysis of every page")
    sub.add_parser("clean", help="Delete all previous results")
    return parser


async def _dispatch(suite: AuditSuite, args: argparse.Namespace) -> None:
    if args.command == "screenshots":
        await suite.run_screenshots(viewport=args.viewport)
    elif args.command == "accessibility":
        await suite.run_accessibility(fail_on_critical=args.fail_on_critical)
    elif args.command == "seo":
        await suite.run_seo()
    else:
        report = await suite.run_all(fail_on_critical=args.fail_on_critical)
        incomplete = [
            name
            for name, outcome in (
                ("screenshots", report.screenshots),
                ("accessibility", report.accessibility),
                ("seo", report.seo),
            )
            if not outcome.completed
        ]
        if incomplete:
            raise IncompleteRunError(f"Categories did not complete: {', '.join(incomplete)}")


async def run_command(args: argparse.Namespace, settings: Settings, session: Session) -> AuditSuite:
    """One attempt of ``args.command`` in a fresh browser, bounded by the run ceiling.

    On a ceiling breach the units finished so far are saved before the error propagates.
    """
    async with launch_browser(settings) as browser:
        suite = AuditSuite(browser, session, settings)
        await suite.run_with_ceiling(_dispatch(suite, args), settings.run_timeout_seconds)
    return suite


def _print_outputs(suite: AuditSuite, command: str) -> None:
    run = suite.run
    if command == "all" and run.report is not None:
        print(f"Session: {suite.session.id}")
        print(f"All passed: {run.report.all_passed}")
        print(f"Report: {suite.session.directory}")
        return
    outcome = getattr(run, command)
    if outcome.output_dir:
        print(f"Results: {outcome.output_dir}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    if args.base_url:
        settings = settings.model_copy(update={"base_url": args.base_url})
    setup_logging(settings.log_level)

    if args.command == "clean":
        removed = clean_results(settings.results_root)
        print("Removed previous results" if removed else "Nothing to clean")
        return 0

    if args.retries < 0:
        print("Error: --retries must be >= 0")
        return 2

    session = asyncio.run(SessionManager(settings.results_root).claim())
    for attempt in range(args.retries + 1):
        try:
            suite = asyncio.run(run_command(args, settings, session))
        except ConfigurationError as e:
            logger.error("configuration error: %s", e)
            print(f"Error: {e}")
            return 1
        except CriticalViolationsError as e:
            logger.error("%s", e, extra={"critical": e.count})
            print(f"Failed: {e}")
            return 1
        except RunTimeoutError as e:
            logger.error("%s", e, extra={"session_id": session.id})
            print(f"Error: {e}")
            return 1
        except Exception as e:
            remaining = args.retries - attempt
            logger.warning(
                "attempt %d of %s failed: %s", attempt + 1, args.command, e,
                extra={"session_id": session.id, "retries_left": remaining},
            )
            if remaining == 0:
                print(f"Error: {e}")
                return 1
            continue

        _print_outputs(suite, args.command)
        return 0
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
