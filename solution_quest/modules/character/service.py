from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from solution_quest.modules.character.options import BONUS_OPTION_TYPES, CHARACTER_OPTIONS
from solution_quest.modules.narrative.route_engine import Route
from solution_quest.modules.narrative.stat_engine import PlayerStats, add_effect, clamp_stats, parse_effect

logger = logging.getLogger(__name__)


class CharacterAttributes(BaseModel):
    """The nine answers collected by the character-creation questionnaire."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    level: int = 18
    title: str = ""
    species: str = ""
    work_experience: int = Field(default=0, ge=0)
    work_related: bool = False
    guild: str = ""
    status: str = ""
    english_level: str = ""
    course_type: str | None = None

    @field_validator("title", "species", "guild", "status", "english_level", mode="before")
    @classmethod
    def _normalize_option_id(cls, value):
        return str(value or "").strip().lower()

    @field_validator("course_type", mode="before")
    @classmethod
    def _normalize_course_type(cls, value):
        text = str(value or "").strip().lower()
        return text or None

    @model_validator(mode="before")
    @classmethod
    def _skip_work_questions(cls, data):
        # Work-related and guild questions are only asked after some work experience.
        if isinstance(data, dict) and not data.get("work_experience"):
            data = {**data, "work_related": False, "guild": ""}
        return data


def find_option(option_type: str, option_id: str) -> dict | None:
    for option in CHARACTER_OPTIONS.get(option_type, []):
        if option["id"] == option_id:
            return option
    return None


def selected_modifiers(attributes: CharacterAttributes) -> list[str]:
    modifiers: list[str] = []
    for option_type in BONUS_OPTION_TYPES:
        option = find_option(option_type, getattr(attributes, option_type))
        if option is None:
            continue
        modifiers.extend(str(item) for item in option.get("modifiers") or ())
    return modifiers


def compute_initial_stats(attributes: CharacterAttributes) -> PlayerStats:
    """Sum every declared modifier onto 1/1/1, clamping once at the end."""
    stats = PlayerStats()
    for modifier in selected_modifiers(attributes):
        effect = parse_effect(modifier)
        if effect is None:
            logger.debug("ignoring malformed character modifier %r", modifier)
            continue
        stats = add_effect(stats, effect)
    return clamp_stats(stats)


def route_for_status(status: str | None) -> Route:
    option = find_option("status", str(status or "").strip().lower())
    if option is None:
        return Route.OFFSHORE
    return option["route"]
