"""Expense categories. Presentation lookup only; carries no accounting weight."""

CATEGORIES: dict[str, dict[str, str]] = {
    "food": {"label": "Food & Dining", "icon": "🍕", "color": "#FB923C"},
    "transport": {"label": "Transportation", "icon": "🚗", "color": "#60A5FA"},
    "shopping": {"label": "Shopping", "icon": "🛒", "color": "#4ADE80"},
    "entertainment": {"label": "Entertainment", "icon": "🎬", "color": "#A78BFA"},
    "utilities": {"label": "Utilities", "icon": "💡", "color": "#FACC15"},
    "other": {"label": "Other", "icon": "📝", "color": "#9CA3AF"},
}

DEFAULT_CATEGORY = "other"


def describe_category(value: str) -> dict[str, str]:
    """Return display info for a category, falling back to 'other'."""
    info = CATEGORIES.get(value, CATEGORIES[DEFAULT_CATEGORY])
    return {"value": value, **info}
