"""Domain models for user profiles and progress logs."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from carb_cycling_coach.domain.plans import (
    WEEKDAY_LABELS,
    CarbCategory,
    CategoryCounts,
    CategoryTemplates,
    FullPlan,
)

AUTO_PREFERENCE = "auto"

DayPreference = CarbCategory | Literal["auto"]


class Gender(str, Enum):
    """Biological sex used for metabolic estimates."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    """Self-reported weekly activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    HIGH = "high"
    ATHLETE = "athlete"


class UserStats(BaseModel):
    """Body measurements and goals used to generate a plan."""

    age: int = Field(gt=0)
    gender: Gender
    height_cm: float = Field(gt=0)
    weight_kg: float = Field(gt=0)
    body_fat_pct: float = Field(ge=0, le=100)
    activity_level: ActivityLevel
    training_days_per_week: int = Field(ge=0, le=7)
    target_body_fat_pct: float = Field(ge=0, le=100)
    target_weeks: int = Field(gt=0)
    weekly_preferences: dict[str, DayPreference] | None = None

    @field_validator("weekly_preferences")
    @classmethod
    def _known_days(
        cls, value: dict[str, DayPreference] | None
    ) -> dict[str, DayPreference] | None:
        if value is None:
            return value
        unknown = [day for day in value if day not in WEEKDAY_LABELS]
        if unknown:
            raise ValueError(f"unknown weekday labels: {', '.join(unknown)}")
        return value


class DailyLog(BaseModel):
    """A single progress check-in."""

    date: str
    weight: float = Field(ge=0)
    body_fat: float | None = Field(default=None, ge=0, le=100)
    waist: float | None = Field(default=None, ge=0)
    hips: float | None = Field(default=None, ge=0)
    energy_level: int = Field(ge=1, le=10)
    completed_plan: bool


class Profile(BaseModel):
    """A named plan with its inputs, edit templates and progress logs."""

    id: str
    name: str
    user_stats: UserStats
    plan: FullPlan
    templates: CategoryTemplates | None = None
    recommended_counts: CategoryCounts | None = None
    logs: list[DailyLog] = Field(default_factory=list)
    created_at: datetime
