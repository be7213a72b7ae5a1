"""Catalog of knowledge categories shown by the dashboard."""

from __future__ import annotations

DEFAULT_CATEGORY = "general"

CATEGORIES: dict[str, str] = {
    "general": "General Health",
    "cardiovascular": "Cardiovascular Health",
    "diabetes": "Diabetes",
    "nutrition": "Nutrition",
    "fitness": "Fitness & Exercise",
    "mental": "Mental Health",
    "prevention": "Preventive Care",
    "chronic": "Chronic Conditions",
}


def category_label(value: str) -> str:
    """Human label for a category; unknown values are returned unchanged."""
    return CATEGORIES.get(value, value)


def list_categories() -> list[dict[str, str]]:
    return [{"value": value, "label": label} for value, label in CATEGORIES.items()]
