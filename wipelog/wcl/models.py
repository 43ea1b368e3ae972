from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WCLBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Fight(WCLBaseModel):
    id: int
    name: str
    start_time: int | None = None
    kill: bool | None = None
    encounter_id: int | None = Field(None, alias="encounterID")
    fight_percentage: float | None = None


class Actor(WCLBaseModel):
    id: int | None = None
    name: str | None = None
    type: str | None = None


class MasterData(WCLBaseModel):
    actors: list[Actor] | None = None


class Report(WCLBaseModel):
    title: str
    fights: list[Fight] = []
    master_data: MasterData | None = None

    @field_validator("fights", mode="before")
    @classmethod
    def _null_fights(cls, value):
        return [] if value is None else value

    @property
    def actors(self) -> list[Actor]:
        if self.master_data is None:
            return []
        return self.master_data.actors or []


class EventPage(WCLBaseModel):
    data: list[dict] = []
    next_page_timestamp: int | None = None


class DeathEvent(WCLBaseModel):
    """Death event from the events API (dataType="Deaths")."""

    timestamp: int
    fight: int | None = None
    target_id: int | None = Field(None, alias="targetID")


class RateLimitData(WCLBaseModel):
    points_spent_this_hour: int
    limit_per_hour: int
    points_reset_in: int
