"""Domain models for coach conversations."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """One turn of a coach conversation."""

    role: Literal["user", "model"]
    text: str
    timestamp: datetime
