"""GraphQL query strings for WCL API v2."""

from typing import Any

# Upper bound for the events endpoint when no fight end time is known.
FAR_FUTURE_MS = 9_999_999_999

RATE_LIMIT_FRAGMENT = """
    rateLimitData {
        pointsSpentThisHour
        limitPerHour
        pointsResetIn
    }
"""

REPORT_FIGHTS = """
query ReportFights($code: String!) {
    reportData {
        report(code: $code) {
            title
            fights {
                id
                name
                startTime
                kill
                encounterID
                fightPercentage
            }
            masterData {
                actors {
                    id
                    name
                    type
                }
            }
        }
    }
    RATE_LIMIT
}
"""

FIGHT_DEATHS = """
query FightDeaths($code: String!, $fightIDs: [Int]!, $startTime: Float!,
                  $endTime: Float!, $limit: Int!) {
    reportData {
        report(code: $code) {
            events(fightIDs: $fightIDs, startTime: $startTime,
                   endTime: $endTime, dataType: Deaths, limit: $limit) {
                data
                nextPageTimestamp
            }
        }
    }
    RATE_LIMIT
}
"""


def with_rate_limit(query: str) -> str:
    return query.replace("RATE_LIMIT", RATE_LIMIT_FRAGMENT)


def report_fights_variables(report_code: str) -> dict[str, Any]:
    return {"code": report_code}


def fight_deaths_variables(
    report_code: str,
    fight_id: int,
    *,
    start_time: float = 0,
    end_time: float = FAR_FUTURE_MS,
    limit: int = 500,
) -> dict[str, Any]:
    """Variables for FIGHT_DEATHS scoped to one fight over a time window."""
    return {
        "code": report_code,
        "fightIDs": [fight_id],
        "startTime": start_time,
        "endTime": end_time,
        "limit": limit,
    }
