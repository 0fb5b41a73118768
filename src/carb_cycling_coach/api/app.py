"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status

from carb_cycling_coach.api.schemas import (
    ChatRequest,
    CreateProfileRequest,
    DayCategoryRequest,
)
from carb_cycling_coach.app_logging import configure_logging
from carb_cycling_coach.containers import AppContainer
from carb_cycling_coach.domain.profiles import DailyLog, Profile
from carb_cycling_coach.labels import category_label
from carb_cycling_coach.services.coach import plan_context_text, welcome_message
from carb_cycling_coach.services.plans import GenerationError
from carb_cycling_coach.services.profiles import (
    GenerationInProgressError,
    ProfileNotFoundError,
    ProfileStore,
)
from carb_cycling_coach.services.progress import summarize_logs
from carb_cycling_coach.services.templates import (
    available_categories,
    resolve_templates,
)

GENERATION_FAILED_MESSAGE = "生成计划失败，请检查API Key配置或网络连接。"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profiles")
    async def list_profiles(request: Request) -> dict[str, object]:
        """Return profile summaries and the active profile id."""
        store = _store(request)
        return {
            "profiles": [_profile_summary(profile) for profile in store.profiles],
            "active_profile_id": store.active_profile_id,
        }

    @app.post("/profiles", status_code=status.HTTP_201_CREATED)
    async def create_profile(
        payload: CreateProfileRequest, request: Request
    ) -> dict[str, object]:
        """Generate a plan and store it as the new active profile."""
        store = _store(request)
        try:
            profile = await store.create(payload.user_stats, payload.name)
        except GenerationInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except GenerationError as exc:
            logger.warning("Profile creation failed: name=%s", payload.name)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=GENERATION_FAILED_MESSAGE,
            ) from exc
        return profile.model_dump(mode="json")

    @app.get("/profiles/active")
    async def active_profile(request: Request) -> dict[str, object]:
        """Return the active profile."""
        profile = _store(request).active_profile
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return profile.model_dump(mode="json")

    @app.get("/profiles/{profile_id}")
    async def get_profile(profile_id: str, request: Request) -> dict[str, object]:
        """Return a profile by id."""
        return _require_profile(_store(request), profile_id).model_dump(mode="json")

    @app.post("/profiles/{profile_id}/activate")
    async def activate_profile(profile_id: str, request: Request) -> dict[str, str]:
        """Switch the active profile."""
        try:
            _store(request).switch_active(profile_id)
        except ProfileNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return {"active_profile_id": profile_id}

    @app.delete("/profiles/{profile_id}")
    async def delete_profile(
        profile_id: str, request: Request
    ) -> dict[str, str | None]:
        """Delete a profile."""
        store = _store(request)
        store.delete(profile_id)
        return {"active_profile_id": store.active_profile_id}

    @app.get("/profiles/{profile_id}/validation")
    async def profile_validation(
        profile_id: str, request: Request
    ) -> dict[str, object]:
        """Return category counts, warnings and editable categories."""
        store = _store(request)
        profile = _require_profile(store, profile_id)
        validation = store.validation_for(profile_id)
        recommended = profile.recommended_counts
        return {
            "counts": validation.counts.model_dump(),
            "recommended_counts": recommended.model_dump() if recommended else None,
            "warnings": validation.warnings,
            "available_categories": [
                {"category": category.value, "label": category_label(category)}
                for category in available_categories(resolve_templates(profile))
            ],
        }

    @app.put("/profiles/{profile_id}/schedule/{day_index}")
    async def change_day_category(
        profile_id: str, day_index: int, payload: DayCategoryRequest, request: Request
    ) -> dict[str, object]:
        """Switch one day of the active schedule to another category."""
        store = _store(request)
        profile = _require_active_profile(store, profile_id)
        if payload.category not in available_categories(resolve_templates(profile)):
            raise HTTPException(
                status_code=422,
                detail=f"No template for category: {payload.category.value}",
            )
        try:
            schedule = store.change_day_category(
                profile_id, day_index, payload.category
            )
        except IndexError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {
            "weekly_schedule": [day.model_dump(mode="json") for day in schedule or []]
        }

    @app.post("/profiles/{profile_id}/logs", status_code=status.HTTP_201_CREATED)
    async def add_log(
        profile_id: str, log: DailyLog, request: Request
    ) -> dict[str, object]:
        """Append a progress log to the active profile."""
        store = _store(request)
        profile = _require_active_profile(store, profile_id)
        store.append_log(profile_id, log)
        return {"entries": len(profile.logs)}

    @app.get("/profiles/{profile_id}/progress")
    async def profile_progress(profile_id: str, request: Request) -> dict[str, object]:
        """Return aggregated progress for a profile."""
        profile = _require_profile(_store(request), profile_id)
        return asdict(summarize_logs(profile.logs))

    @app.get("/chat/welcome")
    async def chat_welcome(request: Request) -> dict[str, object]:
        """Return the coach's opening message."""
        has_plan = _store(request).active_profile is not None
        return welcome_message(has_plan).model_dump(mode="json")

    @app.post("/chat")
    async def chat(payload: ChatRequest, request: Request) -> dict[str, str]:
        """Send a message to the coach with the active plan as context."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_store.active_profile
        context = plan_context_text(profile.plan) if profile else None
        reply = await state_container.coach_service.send(
            payload.message, payload.history, context
        )
        return {"reply": reply}

    return app


def _store(request: Request) -> ProfileStore:
    container: AppContainer = request.app.state.container
    return container.profile_store


def _require_profile(store: ProfileStore, profile_id: str) -> Profile:
    profile = store.get(profile_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return profile


def _require_active_profile(store: ProfileStore, profile_id: str) -> Profile:
    profile = _require_profile(store, profile_id)
    if profile.id != store.active_profile_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only the active profile can be changed",
        )
    return profile


def _profile_summary(profile: Profile) -> dict[str, object]:
    stats = profile.user_stats
    return {
        "id": profile.id,
        "name": profile.name,
        "created_at": profile.created_at.isoformat(),
        "target_weeks": stats.target_weeks,
        "body_fat_pct": stats.body_fat_pct,
        "target_body_fat_pct": stats.target_body_fat_pct,
    }
