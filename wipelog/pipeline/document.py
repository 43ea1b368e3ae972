"""Output records and the JSON document written per report.

Missing values are carried as ``None`` and only replaced by their display
sentinels in ``to_json_data``.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from wipelog.wcl.models import Fight, Report

KILL_LABEL = "Kill"
UNKNOWN_OUTCOME = "N/A"
UNKNOWN_PLAYER = "Unknown Player"
UNKNOWN_TIME = "Unknown"

DEFAULT_REPORT_URL = "https://www.warcraftlogs.com/reports"


def format_clock(seconds: int) -> str:
    """Format whole seconds as M:SS."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


@dataclass(frozen=True)
class DeathSummary:
    player: str | None
    elapsed_seconds: int | None
    death_url: str

    def to_json_data(self) -> dict[str, Any]:
        return {
            "player": self.player if self.player is not None else UNKNOWN_PLAYER,
            "death_time": (
                format_clock(self.elapsed_seconds)
                if self.elapsed_seconds is not None
                else UNKNOWN_TIME
            ),
            "death_url": self.death_url,
        }


@dataclass
class FightRecord:
    fight_id: int
    summary_url: str
    boss_name: str
    outcome: str | float | None
    deaths: list[DeathSummary] = field(default_factory=list)

    def to_json_data(self) -> dict[str, Any]:
        return {
            "summary_url": self.summary_url,
            "boss_name": self.boss_name,
            "wipe_percentage": (
                self.outcome if self.outcome is not None else UNKNOWN_OUTCOME
            ),
            "deaths": [d.to_json_data() for d in self.deaths],
        }


@dataclass
class FightsDocument:
    title: str
    report_date: str
    file_name: str
    records: list[FightRecord]

    def to_json_data(self) -> list[dict[str, Any]]:
        return [r.to_json_data() for r in self.records]


def outcome_label(fight: Fight) -> str | float | None:
    """Return "Kill" for kills, otherwise the wipe percentage if reported."""
    if fight.kill is True:
        return KILL_LABEL
    return fight.fight_percentage


def fight_summary_url(
    report_code: str, fight_id: int, base_url: str = DEFAULT_REPORT_URL,
) -> str:
    return f"{base_url.rstrip('/')}/{report_code}#fight={fight_id}"


def build_fight_record(
    fight: Fight,
    report_code: str,
    deaths: list[DeathSummary],
    *,
    base_url: str = DEFAULT_REPORT_URL,
) -> FightRecord:
    return FightRecord(
        fight_id=fight.id,
        summary_url=fight_summary_url(report_code, fight.id, base_url),
        boss_name=fight.name,
        outcome=outcome_label(fight),
        deaths=deaths,
    )


def format_report_date(today: date) -> str:
    return f"{today.year:04d}-{today.month:02d}-{today.day:02d}"


def output_filename(title: str, today: date) -> str:
    """<YYYY-MM-DD>_<title, whitespace as underscores>_Fights.json"""
    slug = re.sub(r"\s", "_", title)
    return f"{format_report_date(today)}_{slug}_Fights.json"


def build_document(
    report: Report, records: list[FightRecord], today: date | None = None,
) -> FightsDocument:
    today = today or date.today()
    return FightsDocument(
        title=report.title,
        report_date=format_report_date(today),
        file_name=output_filename(report.title, today),
        records=records,
    )
