"""Pydantic schemas for team and player reference data."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Team(BaseModel):
    """A club as listed in the teams reference file."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(validation_alias=AliasChoices("id", "TEAM_ID"))
    code: str = Field(validation_alias=AliasChoices("code", "TEAM_CODE"))
    name: str = Field(validation_alias=AliasChoices("name", "TEAM_NAME"))
    city: str = Field(default="", validation_alias=AliasChoices("city", "TEAM_CITY"))
    nickname: str = Field(default="", validation_alias=AliasChoices("nickname", "TEAM_NICKNAME"))


class Player(BaseModel):
    """A rostered player; ``team_code`` joins onto :class:`Team.code`."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(validation_alias=AliasChoices("id", "PLAYER_ID"))
    first_name: str = Field(validation_alias=AliasChoices("first_name", "FIRST_NAME"))
    last_name: str = Field(validation_alias=AliasChoices("last_name", "LAST_NAME"))
    team_code: str = Field(validation_alias=AliasChoices("team_code", "TEAM_CODE"))
    position: str | None = Field(default=None, validation_alias=AliasChoices("position", "POSITION"))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
