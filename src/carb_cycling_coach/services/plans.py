"""Plan generation service using LLMs."""

import logging
from dataclasses import dataclass
from typing import Protocol

from carb_cycling_coach.domain.plans import WEEKDAY_LABELS, CarbCategory, FullPlan
from carb_cycling_coach.domain.profiles import AUTO_PREFERENCE, UserStats
from carb_cycling_coach.labels import (
    ACTIVITY_LABELS,
    GENDER_LABELS,
    category_label,
)

_logger = logging.getLogger(__name__)

_MACROS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "protein": {"type": "number", "description": "蛋白质 (克)"},
        "carbs": {"type": "number", "description": "碳水化合物 (克)"},
        "fat": {"type": "number", "description": "脂肪 (克)"},
        "calories": {"type": "number", "description": "总热量 (千卡)"},
    },
    "required": ["protein", "carbs", "fat", "calories"],
    "additionalProperties": False,
}

PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "weekly_schedule": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "day_label": {"type": "string", "enum": list(WEEKDAY_LABELS)},
                    "category": {
                        "type": "string",
                        "enum": [category.value for category in CarbCategory],
                    },
                    "training_focus": {"type": "string"},
                    "macros": _MACROS_SCHEMA,
                    "meals": {"type": "array", "items": {"type": "string"}},
                    "tips": {"type": "string"},
                },
                "required": [
                    "day_label",
                    "category",
                    "training_focus",
                    "macros",
                    "meals",
                    "tips",
                ],
                "additionalProperties": False,
            },
        },
        "summary": {"type": "string"},
        "advice": {"type": "string"},
    },
    "required": ["weekly_schedule", "summary", "advice"],
    "additionalProperties": False,
}

DEFAULT_PREFERENCES_TEXT = "用户未指定特定日程，请根据训练科学自动安排。"


class GenerationError(Exception):
    """Raised when a plan could not be generated."""


class PlanClient(Protocol):
    """Interface for structured plan generation."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return the raw structured plan."""


@dataclass
class PlanService:
    """Service that builds plan prompts and validates generated plans."""

    client: PlanClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate(self, stats: UserStats) -> FullPlan:
        """Generate a weekly plan for the given stats."""
        prompt = build_plan_prompt(stats)
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                schema=PLAN_SCHEMA,
                prompt=prompt,
            )
            return FullPlan.model_validate(raw)
        except Exception as exc:
            _logger.exception("Plan generation failed")
            raise GenerationError("Plan generation failed") from exc


def build_preferences_text(stats: UserStats) -> str:
    """Describe forced weekday categories for the prompt."""
    if not stats.weekly_preferences:
        return DEFAULT_PREFERENCES_TEXT
    forced = [
        f"- {day}: 强制设为 {category_label(CarbCategory(preference))}"
        f" ({CarbCategory(preference).value})"
        for day, preference in stats.weekly_preferences.items()
        if preference != AUTO_PREFERENCE
    ]
    if not forced:
        return DEFAULT_PREFERENCES_TEXT
    return (
        "用户强制制定了以下日程安排，**你必须严格遵守，不可更改**：\n"
        + "\n".join(forced)
        + "\n其余标记为“自动”的日子请根据你的专业判断安排。"
    )


def build_plan_prompt(stats: UserStats) -> str:
    """Build the plan generation prompt."""
    high = CarbCategory.HIGH
    medium = CarbCategory.MEDIUM
    low = CarbCategory.LOW
    days = "、".join(f'"{label}"' for label in WEEKDAY_LABELS)
    return f"""作为一名世界级的运动营养专家，请根据以下用户数据设计一个科学的碳循环（Carb Cycling）计划：

用户数据：
- 年龄: {stats.age}
- 性别: {GENDER_LABELS[stats.gender]}
- 身高: {stats.height_cm}cm
- 体重: {stats.weight_kg}kg
- 体脂率: {stats.body_fat_pct}%
- 目标体脂率: {stats.target_body_fat_pct}%
- 达成周期: {stats.target_weeks}周
- 活跃度: {ACTIVITY_LABELS[stats.activity_level]}
- 每周训练天数: {stats.training_days_per_week}天

**日程偏好设置：**
{build_preferences_text(stats)}

核心逻辑要求：
1. {category_label(high)}（{high.value}）必须安排在最高强度的训练日（如腿部、背部大肌群力量训练）。
2. {category_label(low)}（{low.value}）安排在休息日或低强度有氧日。
3. {category_label(medium)}（{medium.value}）安排在中等强度训练日。
4. 确保蛋白质摄入充足（建议每公斤体重1.6g-2.2g）。
5. 制造合理的热量缺口以达到减脂目标。

**重要格式与语言要求：**
1. **所有文本内容必须完全使用简体中文**（除了数字和计量单位）。
2. JSON 的键名保持英文。
3. "day_label" 必须按顺序使用: {days}。
4. "category" 必须严格使用以下值: "{high.value}", "{medium.value}", "{low.value}"。
5. 食谱和建议必须符合中国人的饮食习惯，每天提供3-4个简单的食谱建议。

请严格按照JSON格式返回。"""
