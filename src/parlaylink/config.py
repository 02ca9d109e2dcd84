"""Environment-driven configuration helpers for ParlayLink."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tunable constants of the conditioning engine.

    Loaded from ``PARLAYLINK_*`` environment variables or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PARLAYLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    weak_link_threshold: float = Field(default=0.8, gt=0.0, le=1.0)
    blend_saturation_games: int = Field(default=20, ge=1)
    alternative_min_improvement: float = Field(default=0.05, ge=0.0, le=1.0)
    max_alternatives: int = Field(default=3, ge=0)

    totals_strength: float = Field(default=0.2, ge=-1.0, le=1.0)
    linked_strength: float = Field(default=0.1, ge=-1.0, le=1.0)
    strikeout_strength: float = Field(default=-0.1, ge=-1.0, le=1.0)
    adjustment_scale: float = Field(default=0.1, ge=0.0, le=1.0)

    probability_floor: float = Field(default=0.01, ge=0.0, le=1.0)
    probability_ceiling: float = Field(default=0.99, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_bounds(self) -> Settings:
        if self.probability_floor >= self.probability_ceiling:
            raise ValueError("probability_floor must be below probability_ceiling")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]
