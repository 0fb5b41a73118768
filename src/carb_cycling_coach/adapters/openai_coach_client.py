"""OpenAI Responses API client for coach chat."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from carb_cycling_coach.domain.chat import ChatMessage
from carb_cycling_coach.services.coach import CoachClient

_ROLE_MAP = {"user": "user", "model": "assistant"}


@dataclass
class OpenAICoachClient(CoachClient):
    """Coach client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False
    reasoning_effort: str | None = None

    async def reply(
        self,
        *,
        model: str,
        instructions: str,
        history: list[ChatMessage],
        message: str,
    ) -> str:
        """Send the conversation and return the reply text."""
        conversation = [
            {"role": _ROLE_MAP[entry.role], "content": entry.text} for entry in history
        ]
        conversation.append({"role": "user", "content": message})
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": instructions,
            "input": conversation,
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        return response.output_text
