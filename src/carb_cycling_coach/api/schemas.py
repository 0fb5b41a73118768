"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field

from carb_cycling_coach.domain.chat import ChatMessage
from carb_cycling_coach.domain.plans import CarbCategory
from carb_cycling_coach.domain.profiles import UserStats


class CreateProfileRequest(BaseModel):
    """Stats and display name for a new plan."""

    name: str = Field(default="我的碳循环计划", min_length=1)
    user_stats: UserStats


class DayCategoryRequest(BaseModel):
    """Target category for a schedule day."""

    category: CarbCategory


class ChatRequest(BaseModel):
    """A chat message with the conversation so far."""

    message: str = Field(min_length=1)
    history: list[ChatMessage] = Field(default_factory=list)
