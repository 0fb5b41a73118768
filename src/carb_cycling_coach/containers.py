"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from openai import AsyncOpenAI
from supabase import create_client

from carb_cycling_coach.adapters.json_file_store import JsonFileKeyValueStore
from carb_cycling_coach.adapters.openai_coach_client import OpenAICoachClient
from carb_cycling_coach.adapters.openai_plan_client import OpenAIPlanClient
from carb_cycling_coach.adapters.supabase_kv_store import SupabaseKeyValueStore
from carb_cycling_coach.config import STORAGE_BACKENDS, Settings
from carb_cycling_coach.services.coach import CoachService
from carb_cycling_coach.services.plans import PlanService
from carb_cycling_coach.services.profiles import ProfileStore
from carb_cycling_coach.services.storage import InMemoryKeyValueStore, KeyValueStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    plan_service: PlanService
    coach_service: CoachService
    profile_store: ProfileStore
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> KeyValueStore:
    """Create the key-value backend selected in settings."""
    backend = settings.storage_backend
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend: {backend}")
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires supabase_url and key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client=client, table=settings.supabase_table)
    return JsonFileKeyValueStore(path=Path(settings.storage_path))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container with profiles loaded."""
    resolved_settings = settings or Settings()
    openai_client = AsyncOpenAI(api_key=resolved_settings.openai_api_key)
    plan_service = PlanService(
        client=OpenAIPlanClient(openai_client),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    coach_service = CoachService(
        client=OpenAICoachClient(
            openai_client,
            store=resolved_settings.openai_store,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
        ),
        model=resolved_settings.openai_model,
        history_limit=resolved_settings.chat_history_limit,
    )
    profile_store = ProfileStore(
        storage=build_storage(resolved_settings),
        planner=plan_service,
    )
    profile_store.load()

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        plan_service=plan_service,
        coach_service=coach_service,
        profile_store=profile_store,
        close_resources=close_resources,
    )
