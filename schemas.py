"""
Database Schemas for the Geoguessr tracker

Each Pydantic model corresponds to a MongoDB collection (maps, players, rounds).
createdAt/updatedAt are stamped by the database helpers, not sent by clients.
"""
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

STREET_VIEW_PATTERN = r"^https?://[^\s/$.?#].[^\s]*$"


class Map(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Unique map name")
    category: str = Field(..., min_length=1, description="Map category")


class Player(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Player display name")

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)
class Round(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    mapId: str = Field(..., description="ID of the map this round was played on")
    answer: str = Field(..., min_length=1, description="Correct location")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    streetView: str = Field(..., pattern=STREET_VIEW_PATTERN, description="Street View URL")
    attempt: int
    round: int
    players: List[str] = Field(..., min_length=1, description="IDs of the players in this round")
    startTime: datetime
    endTime: datetime
    score: float

    @field_validator("startTime", "endTime")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # naive timestamps are treated as UTC so durations can be subtracted
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
