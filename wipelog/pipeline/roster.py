from collections.abc import Iterable
from typing import Any

from wipelog.wcl.models import Actor

PLAYER_TYPE = "Player"


def build_roster(actors: Iterable[Actor | dict[str, Any]] | None) -> dict[int, str]:
    """Map actor id -> name for player actors only."""
    roster: dict[int, str] = {}
    for raw in actors or ():
        actor = raw if isinstance(raw, Actor) else Actor.model_validate(raw)
        if actor.type != PLAYER_TYPE or actor.id is None or not actor.name:
            continue
        roster[actor.id] = actor.name
    return roster
