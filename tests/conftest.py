"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from carb_cycling_coach.config import Settings
from carb_cycling_coach.containers import AppContainer
from carb_cycling_coach.domain.chat import ChatMessage
from carb_cycling_coach.domain.plans import (
    WEEKDAY_LABELS,
    CarbCategory,
    DailyPlan,
    FullPlan,
    Macros,
)
from carb_cycling_coach.domain.profiles import ActivityLevel, Gender, UserStats
from carb_cycling_coach.services.coach import CoachClient, CoachService
from carb_cycling_coach.services.plans import PlanClient, PlanService
from carb_cycling_coach.services.profiles import ProfileStore
from carb_cycling_coach.services.storage import KeyValueStore

HIGH = CarbCategory.HIGH
MEDIUM = CarbCategory.MEDIUM
LOW = CarbCategory.LOW

# high=2, medium=3, low=2
DEFAULT_WEEK = [HIGH, LOW, MEDIUM, HIGH, MEDIUM, LOW, MEDIUM]

_MACROS = {
    HIGH: Macros(protein=160, carbs=300, fat=50, calories=2290),
    MEDIUM: Macros(protein=160, carbs=200, fat=60, calories=1980),
    LOW: Macros(protein=170, carbs=80, fat=80, calories=1720),
}


def make_day(
    day_label: str, category: CarbCategory, training_focus: str | None = None
) -> DailyPlan:
    return DailyPlan(
        day_label=day_label,
        category=category,
        training_focus=training_focus or f"{category.value} training",
        macros=_MACROS[category],
        meals=[f"{category.value} breakfast", f"{category.value} dinner"],
        tips=f"{category.value} tips",
    )


def make_schedule(
    categories: list[CarbCategory], focuses: list[str] | None = None
) -> list[DailyPlan]:
    return [
        make_day(label, category, focuses[index] if focuses else None)
        for index, (label, category) in enumerate(
            zip(WEEKDAY_LABELS, categories, strict=True)
        )
    ]


def make_plan(
    categories: list[CarbCategory] | None = None, focuses: list[str] | None = None
) -> FullPlan:
    return FullPlan(
        weekly_schedule=make_schedule(categories or DEFAULT_WEEK, focuses),
        summary="高低碳交替，配合力量训练。",
        advice="保证睡眠和饮水。",
    )


def make_stats(**overrides: object) -> UserStats:
    values: dict[str, object] = {
        "age": 30,
        "gender": Gender.MALE,
        "height_cm": 175,
        "weight_kg": 75,
        "body_fat_pct": 20,
        "activity_level": ActivityLevel.MODERATE,
        "training_days_per_week": 4,
        "target_body_fat_pct": 15,
        "target_weeks": 8,
    }
    values.update(overrides)
    return UserStats.model_validate(values)


@dataclass
class RecordingKeyValueStore(KeyValueStore):
    """In-memory store that records every write."""

    values: dict[str, str] = field(default_factory=dict)
    writes: list[tuple[str, str | None]] = field(default_factory=list)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes.append((key, value))

    def remove(self, key: str) -> None:
        self.values.pop(key, None)
        self.writes.append((key, None))


@dataclass
class FakePlanGenerator:
    """Plan generator returning queued plans or raising a configured error."""

    plans: list[FullPlan] = field(default_factory=list)
    error: Exception | None = None
    calls: list[UserStats] = field(default_factory=list)

    async def generate(self, stats: UserStats) -> FullPlan:
        self.calls.append(stats)
        if self.error is not None:
            raise self.error
        if self.plans:
            return self.plans.pop(0)
        return make_plan()


@dataclass
class FakePlanClient(PlanClient):
    """Fake plan client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: make_plan().model_dump(mode="json")
    )
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)
    schemas: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        self.schemas.append(schema)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeCoachClient(CoachClient):
    """Fake coach client recording each request."""

    reply_text: str = "训练后适当补充碳水。"
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def reply(
        self,
        *,
        model: str,
        instructions: str,
        history: list[ChatMessage],
        message: str,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "instructions": instructions,
                "history": history,
                "message": message,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply_text


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="test-key",
        storage_backend="memory",
    )


@pytest.fixture
def storage() -> RecordingKeyValueStore:
    return RecordingKeyValueStore()


@pytest.fixture
def planner() -> FakePlanGenerator:
    return FakePlanGenerator()


@pytest.fixture
def store(storage: RecordingKeyValueStore, planner: FakePlanGenerator) -> ProfileStore:
    return ProfileStore(storage=storage, planner=planner)


@pytest.fixture
def container(settings: Settings, storage: RecordingKeyValueStore) -> AppContainer:
    plan_service = PlanService(
        client=FakePlanClient(),
        model="gpt-5.2",
        reasoning_effort="medium",
        store=False,
    )
    coach_service = CoachService(client=FakeCoachClient(), model="gpt-5.2")
    profile_store = ProfileStore(storage=storage, planner=plan_service)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        plan_service=plan_service,
        coach_service=coach_service,
        profile_store=profile_store,
        close_resources=close_resources,
    )
