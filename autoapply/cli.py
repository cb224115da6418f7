"""
AutoApply command line interface.

Usage:
    autoapply [command] [options]

Commands:
    fill          Open a page in Chromium and run a general fill pass
    instant       Open a page and run an instant fill from the cached profile
    extract       Open a job posting and print its job record
    extract-html  Extract a job record from a saved HTML file
    fill-html     Fill a saved HTML form offline and write the result

Examples:
    autoapply fill https://example.com/apply --profile config/profile.yaml
    autoapply instant https://example.com/apply --headed --linger 5000
    autoapply extract https://www.linkedin.com/jobs/view/123456 --save
    autoapply extract-html saved_posting.html --url https://boards.example.com/jobs/42
    autoapply fill-html form.html --profile config/profile.yaml -o filled.html
"""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from functools import partial
from pathlib import Path

from autoapply.api_client import ApiClient
from autoapply.config import load_cached_profile, load_settings
from autoapply.controller import Command, ContentController
from autoapply.dom.static import StaticDocument
from autoapply.errors import AutoApplyError
from autoapply.jobs.extractor import extract_job_details
from autoapply.log import get_logger, set_debug

log = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autoapply",
        description="AutoApply - form autofill and job posting extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG to stderr (same as AUTOAPPLY_DEBUG=true)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def browser_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("url", help="Page to open")
        p.add_argument("--headed", action="store_true", help="Show the browser window")
        p.add_argument("--linger", type=int, default=0, metavar="MS", help="Keep the page open this long at the end")

    fill = subparsers.add_parser("fill", help="General fill pass on a live page")
    browser_options(fill)
    fill.add_argument("--profile", "-p", help="Profile file (YAML/JSON); default: fetch from the backend")

    instant = subparsers.add_parser("instant", help="Instant fill from the cached profile")
    browser_options(instant)
    instant.add_argument("--profile", "-p", help="Cached profile file (default: AUTOAPPLY_PROFILE_PATH)")

    extract = subparsers.add_parser("extract", help="Extract a job record from a live page")
    browser_options(extract)
    extract.add_argument("--save", action="store_true", help="Add the job to the backend job tracker")

    extract_html = subparsers.add_parser("extract-html", help="Extract a job record from saved HTML")
    extract_html.add_argument("file", help="Saved HTML file")
    extract_html.add_argument("--url", default="", help="URL the page was saved from")

    fill_html = subparsers.add_parser("fill-html", help="Fill a saved HTML form offline")
    fill_html.add_argument("file", help="Saved HTML file")
    fill_html.add_argument("--profile", "-p", help="Profile file (default: AUTOAPPLY_PROFILE_PATH)")
    fill_html.add_argument("--instant", action="store_true", help="Use the instant field table")
    fill_html.add_argument("--url", default="", help="URL the page was saved from")
    fill_html.add_argument("--output", "-o", help="Where to write the filled HTML")

    return parser


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def cmd_fill(args, settings) -> int:
    if args.profile:
        provider = partial(load_cached_profile, Path(args.profile))
    else:
        provider = ApiClient(settings).fetch_active_profile
    from autoapply.browser import run_in_browser

    controller = ContentController(profile_provider=provider)
    results = run_in_browser(
        args.url, [(Command.AUTOFILL, {})], controller, settings=settings, linger_ms=args.linger
    )
    _print_json(results[0])
    return 0 if results[0].get("success") else 1


def cmd_instant(args, settings) -> int:
    loader = partial(load_cached_profile, Path(args.profile) if args.profile else settings.profile_path)
    from autoapply.browser import run_in_browser

    controller = ContentController(cached_profile_loader=loader)
    results = run_in_browser(
        args.url, [(Command.INSTANT_AUTOFILL, {})], controller, settings=settings, linger_ms=args.linger
    )
    _print_json(results[0])
    return 0 if results[0].get("success") else 1


def cmd_extract(args, settings) -> int:
    from autoapply.browser import run_in_browser

    controller = ContentController(job_sink=ApiClient(settings).save_job if args.save else None)
    results = run_in_browser(
        args.url,
        [(Command.EXTRACT_JOB, {"save": args.save})],
        controller,
        settings=settings,
        linger_ms=args.linger,
    )
    _print_json(results[0])
    return 0 if results[0].get("success") else 1


def cmd_extract_html(args, settings) -> int:
    document = StaticDocument.from_file(args.file, url=args.url)
    _print_json(extract_job_details(document).to_dict())
    return 0


def cmd_fill_html(args, settings) -> int:
    document = StaticDocument.from_file(args.file, url=args.url)
    loader = partial(load_cached_profile, Path(args.profile) if args.profile else settings.profile_path)
    controller = ContentController(profile_provider=loader, cached_profile_loader=loader)
    controller.load(document)
    command = Command.INSTANT_AUTOFILL if args.instant else Command.AUTOFILL
    response = controller.dispatch(command)
    controller.unload()

    output = Path(args.output) if args.output else Path(args.file).with_suffix(".filled.html")
    output.write_text(document.html(), encoding="utf-8")
    log.info("Filled HTML → %s", output)
    _print_json(response)
    return 0 if response.get("success") else 1


COMMANDS = {
    "fill": cmd_fill,
    "instant": cmd_instant,
    "extract": cmd_extract,
    "extract-html": cmd_extract_html,
    "fill-html": cmd_fill_html,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    settings = load_settings()
    if getattr(args, "headed", False):
        settings = replace(settings, headless=False)
    if args.debug or settings.debug:
        set_debug()

    try:
        return COMMANDS[args.command](args, settings)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        return 1
    except (AutoApplyError, OSError) as exc:
        log.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
