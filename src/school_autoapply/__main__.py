#!/usr/bin/env python3
"""
School Auto-Apply - Command Line Entry Point.

Lists the bundled institution scripts and runs one of them against a
template JSON file.
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Optional

from .application.services import AutoApplyService, BrowserManager, BrowserManagerOptions, LoggingService
from .application.services.auto_apply_service import default_browser_manager_factory
from .config import config
from .domain.models import AutoApplyPayload, AutoApplyResult, AutoApplyTemplate, UserLogin


def list_scripts() -> int:
    """Print the registered automation scripts."""
    service = AutoApplyService()
    scripts = service.available_scripts()

    print("🏫 Registered school automations")
    print("=" * 60)
    for script in scripts:
        print(f"• {script['id']:<28} {script['name']}")
        if script.get("description"):
            print(f"  {script['description']}")
    print("=" * 60)
    print(f"📊 {len(scripts)} scripts available")
    return 0


def load_template(path: str) -> AutoApplyTemplate:
    """Load a template from a JSON file."""
    with open(Path(path), encoding="utf-8") as f:
        return AutoApplyTemplate.from_dict(json.load(f))


def build_user_login(email: Optional[str], username: Optional[str], password: Optional[str]) -> Optional[UserLogin]:
    """Credentials from CLI flags, or None if none were given."""
    if not (email or username or password):
        return None
    return UserLogin(username=username, email=email, password=password)


def headed_browser_manager_factory(payload: AutoApplyPayload, logger) -> BrowserManager:
    """Like the default factory, but with a visible browser window."""
    options = BrowserManagerOptions(headless=False)
    if payload.locale:
        options.locale = payload.locale
    return BrowserManager(options, logging_service=logger)


def print_result(result: AutoApplyResult) -> None:
    """Print a run summary."""
    print("\n" + "=" * 60)
    print("📊 AUTO APPLY RESULT")
    print("=" * 60)

    if result.success:
        print(f"✅ SUCCESS: {result.message}")
    else:
        print(f"❌ FAILED: {result.message}")
        for error in result.errors:
            print(f"   {error.strip().splitlines()[-1] if error.strip() else error}")

    artifacts = result.artifacts
    if artifacts is not None:
        if artifacts.screenshot_path:
            print(f"📸 Screenshot: {artifacts.screenshot_path}")
        if artifacts.raw_html_path:
            print(f"📄 HTML dump: {artifacts.raw_html_path}")

    print("=" * 60)


def run_school(args: argparse.Namespace) -> int:
    """Run one institution's automation with the given template."""
    try:
        template = load_template(args.template)
    except (OSError, ValueError) as e:
        print(f"❌ Could not load template {args.template}: {e}")
        return 1

    payload = AutoApplyPayload(
        school_id=args.school_id,
        template=template,
        user_login=build_user_login(args.email, args.username, args.password),
        run_id=args.run_id,
        screenshot_dir=args.screenshot_dir,
    )

    browser_manager_factory = headed_browser_manager_factory if args.headed else default_browser_manager_factory

    print("🚀 School Auto-Apply")
    print("=" * 60)
    print(f"🏫 School: {payload.school_id}")
    print(f"📝 Template: {template.template_id} ({len(template.fields)} fields)")
    print("=" * 60)

    service = AutoApplyService(
        logging_service=LoggingService(config.LOG_LEVEL), browser_manager_factory=browser_manager_factory
    )

    try:
        result = asyncio.run(service.run(payload))
    except KeyboardInterrupt:
        print("\n⚠️ Run interrupted by user")
        return 1

    print_result(result)
    return 0 if result.success else 1


def main() -> int:
    """Main entry point with command line interface."""
    parser = argparse.ArgumentParser(
        prog="school-autoapply",
        description="School Auto-Apply - Browser automation for school applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m school_autoapply list
  python -m school_autoapply run example-school --template template.json
  python -m school_autoapply run dsc-hkis-2025 --template template.json --headed
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("list", help="List registered school automations")

    run_parser = subparsers.add_parser("run", help="Run one school's automation")
    run_parser.add_argument("school_id", help="Registered school ID")
    run_parser.add_argument("--template", required=True, help="Path to the template JSON file")
    run_parser.add_argument("--run-id", help="Run ID (generated if omitted)")
    run_parser.add_argument("--screenshot-dir", help=f"Artifact directory (default: {config.AUTO_APPLY_SCREENSHOTS})")
    run_parser.add_argument("--email", help="Login email")
    run_parser.add_argument("--username", help="Login username")
    run_parser.add_argument("--password", help="Login password")
    run_parser.add_argument("--headed", action="store_true", help="Show the browser window")

    args = parser.parse_args()

    if args.command == "list":
        return list_scripts()
    elif args.command == "run":
        return run_school(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
