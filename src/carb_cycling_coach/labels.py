"""Display strings for domain tags."""

from carb_cycling_coach.domain.plans import CarbCategory
from carb_cycling_coach.domain.profiles import AUTO_PREFERENCE, ActivityLevel, Gender

CATEGORY_LABELS: dict[CarbCategory, str] = {
    CarbCategory.HIGH: "高碳日",
    CarbCategory.MEDIUM: "中碳日",
    CarbCategory.LOW: "低碳日",
}

AUTO_LABEL = "自动"

GENDER_LABELS: dict[Gender, str] = {
    Gender.MALE: "男",
    Gender.FEMALE: "女",
}

ACTIVITY_LABELS: dict[ActivityLevel, str] = {
    ActivityLevel.SEDENTARY: "久坐 (无运动)",
    ActivityLevel.LIGHT: "轻度活跃 (每周1-3次)",
    ActivityLevel.MODERATE: "中度活跃 (每周3-5次)",
    ActivityLevel.HIGH: "高度活跃 (每周6-7次)",
    ActivityLevel.ATHLETE: "专业/高强度 (每日双练)",
}


def category_label(category: CarbCategory) -> str:
    """Return the display label for a carb category."""
    return CATEGORY_LABELS[category]


def preference_label(preference: CarbCategory | str) -> str:
    """Return the display label for a weekday preference."""
    if preference == AUTO_PREFERENCE:
        return AUTO_LABEL
    return category_label(CarbCategory(preference))
