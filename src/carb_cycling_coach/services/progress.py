"""Progress statistics from daily logs."""

from dataclasses import dataclass

from carb_cycling_coach.domain.profiles import DailyLog


@dataclass(frozen=True)
class ProgressPoint:
    """One chart point per log."""

    date: str
    weight: float
    energy_level: int


@dataclass(frozen=True)
class ProgressSummary:
    """Aggregated progress figures for a profile."""

    entries: int
    latest_weight: float | None
    weight_change: float | None
    avg_energy_level: float | None
    completion_rate: float | None
    series: list[ProgressPoint]


def summarize_logs(logs: list[DailyLog]) -> ProgressSummary:
    """Summarize logs in the order they were recorded."""
    if not logs:
        return ProgressSummary(
            entries=0,
            latest_weight=None,
            weight_change=None,
            avg_energy_level=None,
            completion_rate=None,
            series=[],
        )

    total = len(logs)
    completed = sum(1 for log in logs if log.completed_plan)
    return ProgressSummary(
        entries=total,
        latest_weight=logs[-1].weight,
        weight_change=round(logs[-1].weight - logs[0].weight, 2),
        avg_energy_level=sum(log.energy_level for log in logs) / total,
        completion_rate=completed / total,
        series=[
            ProgressPoint(
                date=log.date, weight=log.weight, energy_level=log.energy_level
            )
            for log in logs
        ],
    )
