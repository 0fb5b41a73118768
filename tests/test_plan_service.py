"""Tests for plan generation."""

import asyncio

import pytest

from carb_cycling_coach.services.plans import (
    DEFAULT_PREFERENCES_TEXT,
    PLAN_SCHEMA,
    GenerationError,
    PlanService,
    build_plan_prompt,
    build_preferences_text,
)
from tests.conftest import HIGH, FakePlanClient, make_plan, make_stats


def _service(client: FakePlanClient) -> PlanService:
    return PlanService(
        client=client, model="gpt-5.2", reasoning_effort="medium", store=False
    )


def test_generate_returns_validated_plan() -> None:
    client = FakePlanClient()

    plan = asyncio.run(_service(client).generate(make_stats()))

    assert plan == make_plan()
    assert client.schemas == [PLAN_SCHEMA]
    assert "体重: 75" in client.prompts[0]


def test_generate_wraps_client_errors() -> None:
    client = FakePlanClient(error=RuntimeError("network down"))

    with pytest.raises(GenerationError) as exc_info:
        asyncio.run(_service(client).generate(make_stats()))

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_generate_rejects_incomplete_week() -> None:
    payload = make_plan().model_dump(mode="json")
    payload["weekly_schedule"] = payload["weekly_schedule"][:5]
    client = FakePlanClient(payload=payload)

    with pytest.raises(GenerationError):
        asyncio.run(_service(client).generate(make_stats()))


def test_generate_rejects_unknown_category() -> None:
    payload = make_plan().model_dump(mode="json")
    payload["weekly_schedule"][0]["category"] = "extreme"
    client = FakePlanClient(payload=payload)

    with pytest.raises(GenerationError):
        asyncio.run(_service(client).generate(make_stats()))


def test_preferences_text_defaults_without_preferences() -> None:
    assert build_preferences_text(make_stats()) == DEFAULT_PREFERENCES_TEXT


def test_preferences_text_defaults_when_all_days_auto() -> None:
    stats = make_stats(weekly_preferences={"星期一": "auto", "星期二": "auto"})

    assert build_preferences_text(stats) == DEFAULT_PREFERENCES_TEXT


def test_preferences_text_lists_forced_days_only() -> None:
    stats = make_stats(
        weekly_preferences={"星期一": HIGH, "星期二": "auto", "星期日": "low"}
    )

    text = build_preferences_text(stats)

    assert "- 星期一: 强制设为 高碳日 (high)" in text
    assert "- 星期日: 强制设为 低碳日 (low)" in text
    assert "星期二" not in text


def test_plan_prompt_uses_display_labels() -> None:
    prompt = build_plan_prompt(make_stats(activity_level="athlete", gender="female"))

    assert "性别: 女" in prompt
    assert "活跃度: 专业/高强度 (每日双练)" in prompt
    assert '"high", "medium", "low"' in prompt


def test_plan_schema_requires_every_day_field() -> None:
    day_schema = PLAN_SCHEMA["properties"]["weekly_schedule"]["items"]

    assert set(day_schema["required"]) == set(day_schema["properties"])
    assert day_schema["properties"]["category"]["enum"] == ["high", "medium", "low"]
