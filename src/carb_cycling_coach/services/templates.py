"""Template extraction from generated plans."""

from carb_cycling_coach.domain.plans import (
    CarbCategory,
    CategoryCounts,
    CategoryTemplates,
    DailyPlan,
    FullPlan,
)
from carb_cycling_coach.domain.profiles import Profile
from carb_cycling_coach.services.validation import tally_categories


def extract_templates(plan: FullPlan) -> tuple[CategoryTemplates, CategoryCounts]:
    """Return the first day of each category and the per-category day counts.

    The counts record the generated distribution and serve as the baseline
    for validating later edits.
    """
    schedule = plan.weekly_schedule
    return _first_occurrences(schedule), tally_categories(schedule)


def resolve_templates(profile: Profile) -> CategoryTemplates:
    """Return stored templates, or derive them from the current schedule."""
    if profile.templates is not None and not profile.templates.is_empty():
        return profile.templates
    return _first_occurrences(profile.plan.weekly_schedule)


def available_categories(templates: CategoryTemplates) -> list[CarbCategory]:
    """Return the categories a day can be switched to."""
    return templates.available()


def _first_occurrences(schedule: list[DailyPlan]) -> CategoryTemplates:
    found: dict[str, DailyPlan] = {}
    for day in schedule:
        found.setdefault(day.category.value, day)
    return CategoryTemplates(**found)
