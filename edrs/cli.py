"""
Command-line entry points for the connection checks.
"""

from __future__ import annotations

import argparse
import json
import logging

from edrs.client import ApiClient, health_url
from edrs.config import get_settings
from edrs.connection_check import (
    CheckStatus,
    ConnectionReport,
    run_connection_checks,
    run_deployment_checks,
)
from edrs.session import InMemorySessionStore

_ICONS = {
    CheckStatus.PASS: "✅",
    CheckStatus.FAIL: "❌",
    CheckStatus.PARTIAL: "⚠️ ",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )


def _build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Backend root URL (overrides EDRS_API_URL / EDRS_DEV_API_URL)",
    )
    parser.add_argument(
        "--mode",
        choices=["development", "production"],
        default=None,
        help="Override EDRS_MODE",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of a summary",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every request",
    )
    return parser


def _settings_from_args(args):
    settings = get_settings()
    updates = {}
    if args.mode:
        updates["mode"] = args.mode
    if args.api_url:
        updates["api_url"] = args.api_url
        updates["dev_api_url"] = args.api_url
    return settings.model_copy(update=updates) if updates else settings


def print_report(report: ConnectionReport, title: str) -> None:
    print("=" * 50)
    print(f"📊 {title}")
    print("=" * 50)
    for test in report.tests:
        print(f"{_ICONS[test.status]} {test.name}: {test.details}")

    print(
        f"\n📈 Results: {report.passed} passed, {report.failed} failed, "
        f"{report.partial} partial"
    )
    if report.failed == 0:
        print("\n🎉 All checks passed! Ready for deployment.")
    elif report.failed <= 1:
        print("\n⚠️  Minor issues detected. Deployment should work with warnings.")
    else:
        print("\n❌ Multiple issues detected. Fix the backend connection before deploying.")
        print("\n💡 Troubleshooting tips:")
        print("   1. Verify the backend is deployed and running")
        print("   2. Check the EDRS_API_URL environment variable")
        print("   3. Ensure the backend service is not sleeping")
        print("   4. Check the backend deployment logs")


def check_connection_main(argv=None) -> int:
    parser = _build_parser("Check the connection between the frontend and the EDRS backend")
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    settings = _settings_from_args(args)
    client = ApiClient.from_settings(settings, session=InMemorySessionStore())
    if not args.json:
        print(f"🔗 Testing connection to: {client.config.base_url}")
        print(f"🏥 Health endpoint: {health_url(settings)}\n")

    report = run_connection_checks(client, settings)
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report, "Backend Connection Results")
    return report.exit_code()


def check_deployment_main(argv=None) -> int:
    parser = _build_parser("Run end-to-end checks against a deployed EDRS stack")
    parser.add_argument(
        "--frontend-url",
        type=str,
        default=None,
        help="Frontend URL (overrides EDRS_FRONTEND_URL)",
    )
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    settings = _settings_from_args(args)
    if args.frontend_url:
        settings = settings.model_copy(update={"frontend_url": args.frontend_url})

    report = run_deployment_checks(settings)
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report, "EDRS Integration Results")
        print(f"🌐 Frontend: {settings.frontend_url}")
        print(f"🚀 Backend: {report.api_url}")
    return report.exit_code()
