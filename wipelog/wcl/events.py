"""Single-page WCL death events fetcher."""

import logging

from wipelog.wcl.models import EventPage
from wipelog.wcl.queries import (
    FAR_FUTURE_MS,
    FIGHT_DEATHS,
    fight_deaths_variables,
    with_rate_limit,
)

logger = logging.getLogger(__name__)

DEFAULT_EVENT_LIMIT = 500


async def fetch_death_page(
    wcl,
    report_code: str,
    fight_id: int,
    *,
    start_time: float = 0,
    end_time: float = FAR_FUTURE_MS,
    limit: int = DEFAULT_EVENT_LIMIT,
) -> EventPage:
    """Fetch the first page of death events for one fight.

    Only one page is ever requested. Only the first few deaths of a fight are
    reported, so ``nextPageTimestamp`` is logged and not followed.

    Args:
        wcl: WCLClient instance.
        report_code: WCL report code.
        fight_id: WCL fight id within the report.
        start_time: Window start (ms, report-relative).
        end_time: Window end (ms, report-relative).
        limit: Page size cap passed to the events API.

    Returns:
        The EventPage; empty when the response has no events object.
    """
    raw = await wcl.query(
        with_rate_limit(FIGHT_DEATHS),
        variables=fight_deaths_variables(
            report_code, fight_id,
            start_time=start_time, end_time=end_time, limit=limit,
        ),
    )
    report = (raw.get("reportData") or {}).get("report") or {}
    events_data = report.get("events")
    if not events_data:
        logger.warning(
            "No events object for fight %d in %s", fight_id, report_code,
        )
        return EventPage()

    page = EventPage.model_validate(events_data)
    if page.next_page_timestamp is not None:
        logger.debug(
            "Fight %d in %s has more death events after %d; not following",
            fight_id, report_code, page.next_page_timestamp,
        )
    logger.debug(
        "Fetched %d death events for fight %d in %s",
        len(page.data), fight_id, report_code,
    )
    return page
