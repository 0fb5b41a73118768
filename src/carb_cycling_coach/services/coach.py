"""AI coach conversations."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from carb_cycling_coach.domain.chat import ChatMessage
from carb_cycling_coach.domain.plans import FullPlan

_logger = logging.getLogger(__name__)

COACH_PERSONA = (
    'You are "Coach Carbon", an encouraging, professional, and scientific '
    "fitness coach.\n"
    "Answer questions specifically about carb cycling, nutrition, and training "
    "adjustments.\n"
    "Keep answers concise (under 150 words) unless complex explanation is "
    "needed.\n"
    "Be motivating!\n"
    "**Always reply in Chinese (Simplified).**"
)

PLAN_CONTEXT_HEADER = (
    "HERE IS THE USER'S CURRENT PLAN CONTEXT. USE THIS TO GIVE SPECIFIC ADVICE:"
)

EMPTY_REPLY = "抱歉，我现在有点走神，请再问一次。"
FAILURE_REPLY = "连接教练失败，请检查网络设置。"

WELCOME_WITH_PLAN = (
    "你好！我是你的专属碳循环助教。关于你的饮食计划或训练安排，有什么可以帮你的吗？"
)
WELCOME_WITHOUT_PLAN = (
    "你好！我是智能碳循环助教。我可以帮你解答关于碳循环饮食和训练的疑问，"
    "或者协助你制定计划。"
)


class CoachClient(Protocol):
    """Interface for conversational LLM calls."""

    async def reply(
        self,
        *,
        model: str,
        instructions: str,
        history: list[ChatMessage],
        message: str,
    ) -> str:
        """Return the model's reply to a message."""


@dataclass
class CoachService:
    """Chat with the coach; failures become fallback replies."""

    client: CoachClient
    model: str
    history_limit: int = 10

    async def send(
        self,
        message: str,
        history: list[ChatMessage],
        plan_context: str | None = None,
    ) -> str:
        """Send a message with recent history and return the coach's reply."""
        instructions = COACH_PERSONA
        if plan_context:
            instructions += f"\n\n{PLAN_CONTEXT_HEADER}\n{plan_context}"
        recent = history[-self.history_limit :] if self.history_limit > 0 else []
        try:
            text = await self.client.reply(
                model=self.model,
                instructions=instructions,
                history=recent,
                message=message,
            )
        except Exception:
            _logger.exception("Coach chat failed")
            return FAILURE_REPLY
        return text or EMPTY_REPLY


def welcome_message(has_plan: bool) -> ChatMessage:
    """Return the coach's opening message."""
    return ChatMessage(
        role="model",
        text=WELCOME_WITH_PLAN if has_plan else WELCOME_WITHOUT_PLAN,
        timestamp=datetime.now(tz=UTC),
    )


def plan_context_text(plan: FullPlan) -> str:
    """Serialize a plan for use as chat context."""
    return plan.model_dump_json()
