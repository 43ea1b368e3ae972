import json
from datetime import date
from unittest.mock import AsyncMock

import pytest

from wipelog.config import ReportConfig, Settings, WCLConfig
from wipelog.pipeline.fights import ReportNotFoundError
from wipelog.pipeline.scrape import scrape_report
from wipelog.wcl.client import TransportError

REPORT = {
    "reportData": {
        "report": {
            "title": "Kara Tuesday",
            "fights": [
                {"id": 1, "name": "Trash", "encounterID": 0, "startTime": 0},
                {"id": 7, "name": "Guardian", "encounterID": 650, "kill": False,
                 "fightPercentage": 12.5, "startTime": 1000},
                {"id": 8, "name": "Guardian", "encounterID": 650, "kill": True,
                 "fightPercentage": 0, "startTime": 100000},
            ],
            "masterData": {
                "actors": [
                    {"id": 42, "name": "Pala", "type": "Player"},
                    {"id": 99, "name": "Guardian", "type": "NPC"},
                ],
            },
        }
    }
}


def _events_response(data):
    return {
        "reportData": {
            "report": {"events": {"data": data, "nextPageTimestamp": None}}
        }
    }


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        wcl=WCLConfig(access_token="tok"),
        report=ReportConfig(code="ABC123", output_dir=str(tmp_path / "logs")),
    )


async def test_writes_document(settings, tmp_path):
    wcl = AsyncMock()
    wcl.query.side_effect = [
        REPORT,
        _events_response([{"timestamp": 9000, "fight": 7, "targetID": 42}]),
        _events_response([]),
    ]

    result = await scrape_report(wcl, settings, today=date(2025, 3, 7))

    expected = tmp_path / "logs" / "2025-03-07_Kara_Tuesday_Fights.json"
    assert result.path == expected
    assert result.fights == 2
    assert result.deaths == 1

    written = json.loads(expected.read_text())
    assert [r["wipe_percentage"] for r in written] == [12.5, "Kill"]
    assert written[0]["deaths"][0]["player"] == "Pala"
    assert written[0]["deaths"][0]["death_time"] == "0:08"
    assert "start=4000&end=14000&death=1" in written[0]["deaths"][0]["death_url"]
    assert written[1]["deaths"] == []
    assert expected.read_text().startswith("[\n  {")


async def test_trash_fights_never_fetched(settings):
    wcl = AsyncMock()
    wcl.query.side_effect = [REPORT, _events_response([]), _events_response([])]

    await scrape_report(wcl, settings, today=date(2025, 3, 7))

    fetched = [
        c[1]["variables"]["fightIDs"] for c in wcl.query.call_args_list[1:]
    ]
    assert fetched == [[7], [8]]


async def test_report_code_override(settings):
    wcl = AsyncMock()
    wcl.query.side_effect = [REPORT, _events_response([]), _events_response([])]

    result = await scrape_report(
        wcl, settings, report_code="OTHER", today=date(2025, 3, 7),
    )

    assert result.report_code == "OTHER"
    assert wcl.query.call_args_list[0][1]["variables"] == {"code": "OTHER"}


async def test_no_boss_fights_writes_nothing(settings, tmp_path):
    wcl = AsyncMock()
    wcl.query.return_value = {
        "reportData": {
            "report": {
                "title": "Trash Only",
                "fights": [{"id": 1, "name": "Trash", "encounterID": 0}],
            }
        }
    }

    result = await scrape_report(wcl, settings, today=date(2025, 3, 7))

    assert result.fights == 0
    assert result.path is None
    assert wcl.query.call_count == 1
    assert not (tmp_path / "logs").exists()


async def test_segment_failure_does_not_abort(settings):
    wcl = AsyncMock()
    wcl.query.side_effect = [
        REPORT,
        TransportError("API request failed: 502 Bad Gateway"),
        _events_response([]),
    ]

    result = await scrape_report(wcl, settings, today=date(2025, 3, 7))

    assert result.fights == 2
    assert result.path.exists()


async def test_report_not_found_propagates(settings, tmp_path):
    wcl = AsyncMock()
    wcl.query.return_value = {"reportData": {"report": None}}

    with pytest.raises(ReportNotFoundError):
        await scrape_report(wcl, settings, today=date(2025, 3, 7))

    assert not (tmp_path / "logs").exists()


async def test_report_transport_error_propagates(settings):
    wcl = AsyncMock()
    wcl.query.side_effect = TransportError("API request failed: 401 Unauthorized")

    with pytest.raises(TransportError):
        await scrape_report(wcl, settings, today=date(2025, 3, 7))
