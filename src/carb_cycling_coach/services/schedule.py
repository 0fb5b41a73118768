"""Weekly schedule editing."""

from carb_cycling_coach.domain.plans import CarbCategory, CategoryTemplates, DailyPlan


def reassign_day(
    schedule: list[DailyPlan],
    day_index: int,
    category: CarbCategory,
    templates: CategoryTemplates,
) -> list[DailyPlan]:
    """Return a copy of the schedule with one day switched to another category.

    The day takes the category template's content but keeps its own label.
    Without a template for the category the schedule is returned unchanged.
    """
    if not 0 <= day_index < len(schedule):
        raise IndexError(f"day index out of range: {day_index}")
    updated = list(schedule)
    template = templates.get(category)
    if template is None:
        return updated
    updated[day_index] = template.model_copy(
        update={"day_label": schedule[day_index].day_label, "category": category}
    )
    return updated
