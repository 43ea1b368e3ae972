"""Pipeline for attaching player deaths to boss fights."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from wipelog.pipeline.document import (
    DEFAULT_REPORT_URL,
    DeathSummary,
    FightRecord,
    build_fight_record,
)
from wipelog.wcl.client import TransportError
from wipelog.wcl.events import DEFAULT_EVENT_LIMIT, fetch_death_page
from wipelog.wcl.models import DeathEvent, Fight

logger = logging.getLogger(__name__)

MAX_DEATHS = 3
DEATH_WINDOW_MS = 5000


def elapsed_seconds(event_ts: int, start_ts: int | None) -> int | None:
    """Whole seconds from fight start to the event, or None if unknowable."""
    if start_ts is None:
        return None
    delta = event_ts - start_ts
    if delta < 0:
        return None
    return delta // 1000


def build_death_url(
    report_code: str,
    fight_id: int,
    timestamp: int,
    ordinal: int,
    *,
    base_url: str = DEFAULT_REPORT_URL,
    window_ms: int = DEATH_WINDOW_MS,
) -> str:
    """Deep link to the deaths view, centered on the death timestamp."""
    return (
        f"{base_url.rstrip('/')}/{report_code}#fight={fight_id}&type=deaths"
        f"&start={timestamp - window_ms}&end={timestamp + window_ms}"
        f"&death={ordinal}"
    )


def parse_death_events(
    events: Sequence[dict[str, Any]],
    fight: Fight,
    roster: dict[int, str],
    report_code: str,
    *,
    max_deaths: int = MAX_DEATHS,
    base_url: str = DEFAULT_REPORT_URL,
    window_ms: int = DEATH_WINDOW_MS,
) -> list[DeathSummary]:
    """Summarise the first ``max_deaths`` events in the order received.

    Args:
        events: Raw death event dicts from the events API.
        fight: The fight the events belong to.
        roster: Player id -> name.
        report_code: WCL report code.
        max_deaths: How many deaths to keep.
        base_url: WCL reports URL used for deep links.
        window_ms: Half-width of the deep link time window.

    Returns:
        DeathSummary list; player and elapsed time are None when unresolved.
    """
    if fight.start_time is None and events:
        logger.warning(
            "Fight %d (%s) in %s has no start time; death times unknown",
            fight.id, fight.name, report_code,
        )

    results: list[DeathSummary] = []
    for ordinal, raw in enumerate(events[:max_deaths], start=1):
        event = DeathEvent.model_validate(raw)

        player = roster.get(event.target_id) if event.target_id is not None else None
        if player is None:
            logger.warning(
                "Death target %s in fight %d of %s is not a known player",
                event.target_id, fight.id, report_code,
            )

        elapsed = elapsed_seconds(event.timestamp, fight.start_time)
        if elapsed is None and fight.start_time is not None:
            logger.warning(
                "Death at %d precedes start %d of fight %d in %s",
                event.timestamp, fight.start_time, fight.id, report_code,
            )

        results.append(DeathSummary(
            player=player,
            elapsed_seconds=elapsed,
            death_url=build_death_url(
                report_code, fight.id, event.timestamp, ordinal,
                base_url=base_url, window_ms=window_ms,
            ),
        ))

    return results


async def enrich_fight(
    wcl,
    report_code: str,
    fight: Fight,
    roster: dict[int, str],
    *,
    max_deaths: int = MAX_DEATHS,
    event_limit: int = DEFAULT_EVENT_LIMIT,
    base_url: str = DEFAULT_REPORT_URL,
    window_ms: int = DEATH_WINDOW_MS,
) -> FightRecord:
    """Fetch deaths for one fight and build its record.

    A failure here never propagates: the record is still returned, with an
    empty death list.
    """
    deaths: list[DeathSummary] = []
    try:
        page = await fetch_death_page(
            wcl, report_code, fight.id, limit=event_limit,
        )
        if not page.data:
            logger.info(
                "No deaths in fight %d (%s) of %s", fight.id, fight.name, report_code,
            )
        deaths = parse_death_events(
            page.data, fight, roster, report_code,
            max_deaths=max_deaths, base_url=base_url, window_ms=window_ms,
        )
    except TransportError as exc:
        logger.warning(
            "Could not fetch deaths for fight %d (%s) in %s: %s",
            fight.id, fight.name, report_code, exc,
        )
    except Exception:
        logger.exception(
            "Failed to enrich deaths for fight %d in %s", fight.id, report_code,
        )

    return build_fight_record(fight, report_code, deaths, base_url=base_url)


async def enrich_fights(
    wcl,
    report_code: str,
    fights: Sequence[Fight],
    roster: dict[int, str],
    *,
    concurrency: int = 1,
    **kwargs: Any,
) -> list[FightRecord]:
    """Enrich every fight, returning records in fight order.

    With ``concurrency=1`` each fetch completes before the next starts.
    Larger values bound the number of requests in flight.
    """
    if concurrency <= 1:
        records = []
        for fight in fights:
            records.append(await enrich_fight(wcl, report_code, fight, roster, **kwargs))
        return records

    semaphore = asyncio.Semaphore(concurrency)

    async def _bounded(fight: Fight) -> FightRecord:
        async with semaphore:
            return await enrich_fight(wcl, report_code, fight, roster, **kwargs)

    return list(await asyncio.gather(*(_bounded(f) for f in fights)))
