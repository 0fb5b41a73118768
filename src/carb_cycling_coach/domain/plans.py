"""Domain models for generated carb cycling plans."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEEKDAY_LABELS: tuple[str, ...] = (
    "星期一",
    "星期二",
    "星期三",
    "星期四",
    "星期五",
    "星期六",
    "星期日",
)


class CarbCategory(str, Enum):
    """Carb intake category assigned to a day."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Macros(BaseModel):
    """Daily macronutrient targets in grams and kcal."""

    model_config = ConfigDict(frozen=True)

    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    calories: float = Field(ge=0)


class DailyPlan(BaseModel):
    """Nutrition and training content for a single weekday."""

    model_config = ConfigDict(frozen=True)

    day_label: str
    category: CarbCategory
    training_focus: str
    macros: Macros
    meals: list[str]
    tips: str

    @field_validator("day_label")
    @classmethod
    def _known_day(cls, value: str) -> str:
        if value not in WEEKDAY_LABELS:
            raise ValueError(f"unknown weekday label: {value}")
        return value


class FullPlan(BaseModel):
    """A generated weekly plan with its strategy notes."""

    model_config = ConfigDict(frozen=True)

    weekly_schedule: list[DailyPlan]
    summary: str
    advice: str

    @field_validator("weekly_schedule")
    @classmethod
    def _complete_week(cls, value: list[DailyPlan]) -> list[DailyPlan]:
        labels = tuple(day.day_label for day in value)
        if labels != WEEKDAY_LABELS:
            raise ValueError(
                "weekly schedule must hold one entry per weekday, Monday to Sunday"
            )
        return value


class CategoryTemplates(BaseModel):
    """Canonical day content per category; a slot is empty if never generated."""

    model_config = ConfigDict(frozen=True)

    high: DailyPlan | None = None
    medium: DailyPlan | None = None
    low: DailyPlan | None = None

    def get(self, category: CarbCategory) -> DailyPlan | None:
        """Return the template for a category, if one was captured."""
        return getattr(self, category.value)

    def available(self) -> list[CarbCategory]:
        """Return categories that have a template, in HIGH, MEDIUM, LOW order."""
        return [
            category for category in CarbCategory if self.get(category) is not None
        ]

    def is_empty(self) -> bool:
        """Return True when no category has a template."""
        return not self.available()


class CategoryCounts(BaseModel):
    """Number of days per category."""

    model_config = ConfigDict(frozen=True)

    high: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    low: int = Field(default=0, ge=0)

    def get(self, category: CarbCategory) -> int:
        """Return the count for a category."""
        return getattr(self, category.value)

    def total(self) -> int:
        """Return the sum over all categories."""
        return self.high + self.medium + self.low
