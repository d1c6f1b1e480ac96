"""
Navigation state and the static section catalogue.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

DEFAULT_SECTION: Final[str] = "home"
SECTION_IDS: Final[tuple[str, ...]] = ("home", "tos", "privacy")

BASE_TITLE: Final[str] = "Military Essentials - Discord Bot Hosting"

SECTION_TITLES: Final[dict[str, str]] = {
    "home": BASE_TITLE,
    "tos": "Terms of Service - Military Essentials",
    "privacy": "Privacy Policy - Military Essentials",
}

SECTION_NAMES: Final[dict[str, str]] = {
    "home": "Home",
    "tos": "Terms of Service",
    "privacy": "Privacy Policy",
}


@dataclass
class NavigationState:
    """UI state for one page session. Only the router and sidebar mutate it."""

    current_section: str = DEFAULT_SECTION
    is_sidebar_open: bool = False


def section_title(section_id: str) -> str:
    return SECTION_TITLES.get(section_id, BASE_TITLE)


def section_name(section_id: str) -> str:
    return SECTION_NAMES.get(section_id, section_id)


def normalize_section_id(target: object) -> str | None:
    """`"#tos"`, `" tos "` and `"tos"` all become `"tos"`; anything unusable is None."""
    if not isinstance(target, str):
        return None
    value = target.strip()
    if value.startswith("#"):
        value = value[1:]
    value = value.strip()
    return value or None
