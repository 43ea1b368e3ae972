"""Pull boss fights and their first deaths from one WCL report into JSON.

Usage:
    wipelog-scrape --report-code vkpJ2qRdrGAWFQaV
    wipelog-scrape --output-dir out/
"""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from wipelog.config import ConfigurationError, Settings, get_settings
from wipelog.pipeline.scrape import scrape_report
from wipelog.wcl.client import WCLClient

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape WCL boss fight deaths")
    parser.add_argument(
        "--report-code", help="WCL report code (overrides REPORT__CODE)",
    )
    parser.add_argument(
        "--output-dir", help="Directory for the JSON file (overrides REPORT__OUTPUT_DIR)",
    )
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    updates = {}
    if args.report_code:
        updates["code"] = args.report_code
    if args.output_dir:
        updates["output_dir"] = args.output_dir
    if updates:
        settings = settings.model_copy(
            update={"report": settings.report.model_copy(update=updates)},
        )
    settings.require()
    return settings


async def run(settings: Settings) -> None:
    try:
        async with WCLClient(
            settings.wcl.access_token.get_secret_value(),
            api_url=settings.wcl.api_url,
            timeout=settings.wcl.timeout,
        ) as wcl:
            result = await scrape_report(wcl, settings)
    except Exception:
        logger.exception("Error fetching fight data for %s", settings.report.code)
        return

    if result.path is not None:
        logger.info(
            "Wrote %d fights (%d deaths) to %s",
            result.fights, result.deaths, result.path,
        )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        settings = load_settings(args)
    except (ConfigurationError, ValidationError) as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("%s", exc)
        sys.exit(1)

    logging.basicConfig(level=settings.log_level.upper())
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
