"""Schedule validation against the generated category distribution."""

from collections.abc import Callable
from dataclasses import dataclass

from carb_cycling_coach.domain.plans import CarbCategory, CategoryCounts, DailyPlan
from carb_cycling_coach.labels import category_label


@dataclass(frozen=True)
class ScheduleValidation:
    """Category tally of a schedule and any deficiency warnings."""

    counts: CategoryCounts
    warnings: list[str]

    @property
    def is_balanced(self) -> bool:
        """Return True when no warning was produced."""
        return not self.warnings


def tally_categories(schedule: list[DailyPlan]) -> CategoryCounts:
    """Count the days assigned to each category."""
    counts: dict[str, int] = {category.value: 0 for category in CarbCategory}
    for day in schedule:
        counts[day.category.value] += 1
    return CategoryCounts(**counts)


def validate_schedule(
    schedule: list[DailyPlan],
    recommended: CategoryCounts | None = None,
    label: Callable[[CarbCategory], str] = category_label,
) -> ScheduleValidation:
    """Compare a schedule with the recommended counts.

    Only deficits are reported; a category above its recommended count is
    not flagged. Profiles without recommended counts get a coarser check
    that only reports categories missing entirely.
    """
    counts = tally_categories(schedule)
    warnings: list[str] = []

    if recommended is not None:
        for category in CarbCategory:
            current = counts.get(category)
            target = recommended.get(category)
            if current < target:
                warnings.append(
                    f"您的{label(category)}比科学推荐方案少了 {target - current} 天。"
                )
    else:
        missing = [
            label(category) for category in CarbCategory if not counts.get(category)
        ]
        if missing:
            warnings.append(f"检测到您的日程中完全缺失 {'、'.join(missing)}。")

    return ScheduleValidation(counts=counts, warnings=warnings)
