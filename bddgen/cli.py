from __future__ import annotations

import argparse
import asyncio
import json
import sys

from bddgen.config.settings import settings
from bddgen.core.generator import generate_tests
from bddgen.core.logger import get_logger
from bddgen.core.logging import configure_logging
from bddgen.runner.playwright_config import (
    render_playwright_config,
    resolve_runner_settings,
    write_playwright_config,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_MISSING_CREDENTIAL = 1
EXIT_NO_OUTPUT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bddgen",
        description="Generate Playwright tests from Gherkin feature files with Gemini.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate the Playwright spec file")
    generate.add_argument("--feature", default=None, help=f"Feature file (default: {settings.FEATURE_FILE})")
    generate.add_argument("--config", default=None, help=f"Selector config JSON (default: {settings.SELECTOR_CONFIG_FILE})")
    generate.add_argument("--output", default=None, help="Output spec file (default: <OUTPUT_DIR>/<OUTPUT_FILE_NAME>)")

    runner = sub.add_parser("runner-config", help="Write playwright.config.ts")
    runner.add_argument("--output", default=None, help=f"Target path (default: {settings.PLAYWRIGHT_CONFIG_FILE})")
    runner.add_argument("--print", dest="print_only", action="store_true", help="Print instead of writing")
    runner.add_argument(
        "--resolved",
        action="store_true",
        help="Print the effective settings for the current CI flag as JSON",
    )
    return parser


def _run_generate(args: argparse.Namespace) -> int:
    if not settings.gemini_api_key_present:
        logger.error(
            "generate.missing_api_key",
            message="GEMINI_API_KEY not found. Make sure it's set in your .env file or environment variables.",
        )
        return EXIT_MISSING_CREDENTIAL

    result = asyncio.run(
        generate_tests(
            feature_path=args.feature,
            selector_config_path=args.config,
            output_path=args.output,
        )
    )
    if not result.ok:
        # Blocked or empty generations fail the run so CI notices.
        return EXIT_NO_OUTPUT
    print(f"Playwright test script generated successfully at: {result.output_path}")
    return EXIT_OK


def _run_runner_config(args: argparse.Namespace) -> int:
    if args.resolved:
        print(json.dumps(resolve_runner_settings(), indent=2))
        return EXIT_OK
    if args.print_only:
        print(render_playwright_config(), end="")
        return EXIT_OK
    target = write_playwright_config(args.output)
    print(f"Playwright runner config written to: {target}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(settings.LOG_LEVEL, stream=sys.stderr)
    if args.command == "generate":
        return _run_generate(args)
    return _run_runner_config(args)


if __name__ == "__main__":
    raise SystemExit(main())
