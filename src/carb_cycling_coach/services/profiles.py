"""Profile collection state and persistence."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from pydantic import TypeAdapter

from carb_cycling_coach.domain.plans import CarbCategory, DailyPlan, FullPlan
from carb_cycling_coach.domain.profiles import DailyLog, Profile, UserStats
from carb_cycling_coach.services.schedule import reassign_day
from carb_cycling_coach.services.storage import KeyValueStore
from carb_cycling_coach.services.templates import extract_templates, resolve_templates
from carb_cycling_coach.services.validation import ScheduleValidation, validate_schedule

PROFILES_KEY = "scc_profiles"
ACTIVE_PROFILE_KEY = "scc_active_profile_id"

_PROFILES_ADAPTER = TypeAdapter(list[Profile])

_logger = logging.getLogger(__name__)


class PlanGenerator(Protocol):
    """Interface for producing a plan from user stats."""

    async def generate(self, stats: UserStats) -> FullPlan:
        """Return a generated weekly plan."""


class ProfileNotFoundError(LookupError):
    """Raised when a profile id is not in the collection."""


class GenerationInProgressError(RuntimeError):
    """Raised when a plan is requested while another is being generated."""


class ProfileLoadError(ValueError):
    """Raised when the persisted collection cannot be decoded."""


@dataclass
class ProfileStore:
    """Owns all profiles and the active profile id.

    Every mutation is written through to storage before it returns. If the
    write fails, the in-memory state is restored and the error propagates.
    """

    storage: KeyValueStore
    planner: PlanGenerator
    profiles: list[Profile] = field(default_factory=list)
    active_profile_id: str | None = None
    generating: bool = False

    @property
    def active_profile(self) -> Profile | None:
        """Return the active profile, if any."""
        if self.active_profile_id is None:
            return None
        return self.get(self.active_profile_id)

    def get(self, profile_id: str) -> Profile | None:
        """Return a profile by id."""
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None

    async def create(self, user_stats: UserStats, name: str) -> Profile:
        """Generate a plan, store it as a new profile and make it active."""
        if self.generating:
            raise GenerationInProgressError("A plan is already being generated")
        self.generating = True
        try:
            plan = await self.planner.generate(user_stats)
        finally:
            self.generating = False

        templates, counts = extract_templates(plan)
        profile = Profile(
            id=str(uuid4()),
            name=name,
            user_stats=user_stats,
            plan=plan,
            templates=templates,
            recommended_counts=counts,
            logs=[],
            created_at=datetime.now(tz=UTC),
        )
        with self._saving():
            self.profiles.append(profile)
            self.active_profile_id = profile.id
        _logger.info("Profile created: id=%s name=%s", profile.id, name)
        return profile

    def switch_active(self, profile_id: str) -> None:
        """Make an existing profile the active one."""
        if self.get(profile_id) is None:
            raise ProfileNotFoundError(profile_id)
        with self._saving():
            self.active_profile_id = profile_id

    def delete(self, profile_id: str) -> None:
        """Remove a profile; the first remaining one becomes active if needed."""
        remaining = [profile for profile in self.profiles if profile.id != profile_id]
        if len(remaining) == len(self.profiles):
            return
        with self._saving():
            self.profiles = remaining
            if self.active_profile_id == profile_id:
                self.active_profile_id = remaining[0].id if remaining else None
        _logger.info("Profile deleted: id=%s", profile_id)

    def update_schedule(self, profile_id: str, schedule: list[DailyPlan]) -> None:
        """Replace the active profile's weekly schedule."""
        profile = self.active_profile
        if profile is None or profile.id != profile_id:
            return
        plan = FullPlan(
            weekly_schedule=schedule,
            summary=profile.plan.summary,
            advice=profile.plan.advice,
        )
        with self._saving():
            profile.plan = plan

    def change_day_category(
        self, profile_id: str, day_index: int, category: CarbCategory
    ) -> list[DailyPlan] | None:
        """Switch one day to a category's template and commit the schedule."""
        profile = self.get(profile_id)
        if profile is None:
            return None
        schedule = reassign_day(
            profile.plan.weekly_schedule,
            day_index,
            category,
            resolve_templates(profile),
        )
        self.update_schedule(profile_id, schedule)
        return profile.plan.weekly_schedule

    def append_log(self, profile_id: str, log: DailyLog) -> None:
        """Append a progress log in insertion order."""
        profile = self.get(profile_id)
        if profile is None:
            return
        with self._saving():
            profile.logs.append(log)

    def validation_for(self, profile_id: str) -> ScheduleValidation | None:
        """Validate a profile's current schedule against its recommended counts."""
        profile = self.get(profile_id)
        if profile is None:
            return None
        return validate_schedule(
            profile.plan.weekly_schedule, profile.recommended_counts
        )

    def load(self) -> None:
        """Restore the collection and active id from storage."""
        try:
            profiles = self._read_profiles()
            stored_active_id = self.storage.get(ACTIVE_PROFILE_KEY)
        except ProfileLoadError:
            _logger.exception("Failed to load profiles, starting with none")
            profiles, stored_active_id = [], None

        self.profiles = profiles
        self.active_profile_id = _resolve_active_id(profiles, stored_active_id)
        _logger.info(
            "Profiles loaded: count=%s active=%s",
            len(profiles),
            self.active_profile_id,
        )

    def save(self) -> None:
        """Persist the collection and active id."""
        self.storage.set(
            PROFILES_KEY, _PROFILES_ADAPTER.dump_json(self.profiles).decode("utf-8")
        )
        if self.active_profile_id:
            self.storage.set(ACTIVE_PROFILE_KEY, self.active_profile_id)
        else:
            self.storage.remove(ACTIVE_PROFILE_KEY)

    @contextmanager
    def _saving(self) -> Iterator[None]:
        profiles = list(self.profiles)
        active_profile_id = self.active_profile_id
        contents = [(profile, profile.plan, list(profile.logs)) for profile in profiles]
        yield
        try:
            self.save()
        except Exception:
            self.profiles = profiles
            self.active_profile_id = active_profile_id
            for profile, plan, logs in contents:
                profile.plan = plan
                profile.logs = logs
            raise

    def _read_profiles(self) -> list[Profile]:
        try:
            raw = self.storage.get(PROFILES_KEY)
            if raw is None:
                return []
            return _PROFILES_ADAPTER.validate_json(raw)
        except ValueError as exc:
            raise ProfileLoadError("Stored profiles could not be decoded") from exc


def _resolve_active_id(profiles: list[Profile], stored_id: str | None) -> str | None:
    """Keep the stored id if it still exists, else fall back to the newest."""
    if not profiles:
        return None
    if stored_id and any(profile.id == stored_id for profile in profiles):
        return stored_id
    return profiles[-1].id
