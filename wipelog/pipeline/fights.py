import logging
from collections.abc import Iterable

from wipelog.wcl.client import WCLAPIError
from wipelog.wcl.models import Fight, Report
from wipelog.wcl.queries import REPORT_FIGHTS, report_fights_variables, with_rate_limit

logger = logging.getLogger(__name__)


class ReportNotFoundError(Exception):
    """Raised when the API response has no report for the requested code."""


def is_boss_fight(fight: Fight) -> bool:
    return fight.encounter_id is not None and fight.encounter_id > 0


def select_boss_fights(fights: Iterable[Fight]) -> list[Fight]:
    """Keep fights tied to a real encounter, in report order."""
    return [f for f in fights if is_boss_fight(f)]


def _report_payload(raw: dict | None) -> dict | None:
    return ((raw or {}).get("reportData") or {}).get("report")


async def fetch_report(wcl, report_code: str) -> Report:
    """Fetch report title, fights, and actors for one report code."""
    try:
        raw = await wcl.query(
            with_rate_limit(REPORT_FIGHTS),
            variables=report_fights_variables(report_code),
        )
    except WCLAPIError as exc:
        # Unknown codes come back as errors plus a null report.
        if "reportData" not in exc.data or _report_payload(exc.data):
            raise
        raise ReportNotFoundError(
            f"No report data found for {report_code}: {exc}"
        ) from exc

    report_data = _report_payload(raw)
    if not report_data:
        raise ReportNotFoundError(
            f"No report data found for {report_code}; check the report code"
        )

    report = Report.model_validate(report_data)
    logger.info(
        "Fetched report %s: %r (%d fights)",
        report_code, report.title, len(report.fights),
    )
    return report
