import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from wipelog.config import Settings
from wipelog.pipeline.death_events import enrich_fights
from wipelog.pipeline.document import FightsDocument, build_document
from wipelog.pipeline.fights import fetch_report, select_boss_fights
from wipelog.pipeline.roster import build_roster
from wipelog.storage import save_json

logger = logging.getLogger(__name__)


@dataclass
class ScrapeResult:
    report_code: str
    fights: int
    deaths: int
    document: FightsDocument | None = None
    path: Path | None = None


async def scrape_report(
    wcl, settings: Settings, *, report_code: str | None = None,
    today: date | None = None,
) -> ScrapeResult:
    """Fetch a report, attach deaths to its boss fights, and write the JSON.

    Report-level failures (TransportError, ReportNotFoundError) propagate.
    Nothing is written when the report has no boss fights.
    """
    code = report_code or settings.report.code
    report = await fetch_report(wcl, code)
    roster = build_roster(report.actors)
    if not roster:
        logger.warning("Report %s has no player actors; names will be unknown", code)

    fights = select_boss_fights(report.fights)
    if not fights:
        logger.warning("No valid boss fights found in report %s", code)
        return ScrapeResult(report_code=code, fights=0, deaths=0)

    records = await enrich_fights(
        wcl, code, fights, roster,
        concurrency=settings.report.concurrency,
        max_deaths=settings.report.max_deaths,
        event_limit=settings.report.event_limit,
        base_url=settings.wcl.report_url,
        window_ms=settings.report.death_window_ms,
    )

    document = build_document(report, records, today)
    path = save_json(
        Path(settings.report.output_dir) / document.file_name,
        document.to_json_data(),
    )

    deaths = sum(len(r.deaths) for r in records)
    logger.info(
        "Scraped report %s: %d boss fights, %d deaths", code, len(records), deaths,
    )
    return ScrapeResult(
        report_code=code, fights=len(records), deaths=deaths,
        document=document, path=path,
    )
