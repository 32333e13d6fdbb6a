from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from solution_quest.modules.character.service import CharacterAttributes
from solution_quest.modules.content.schemas import EndingRecord, EventRecord
from solution_quest.modules.narrative.route_engine import CourseType, Route, TransitionOption
from solution_quest.modules.narrative.stat_engine import PlayerStats


class SessionStage(str, Enum):
    CHARACTER_CREATION = "character_creation"
    AWAITING_COURSE_TYPE = "awaiting_course_type"
    AWAITING_EVENT = "awaiting_event"
    EVENT = "event"
    ROUTE_TRANSITION = "route_transition"
    ENDED = "ended"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    event: EventRecord
    choice_index: int
    route: Route
    effect: str
    stats_after: PlayerStats


@dataclass(slots=True)
class Session:
    character: CharacterAttributes | None = None
    stats: PlayerStats = field(default_factory=PlayerStats)
    current_route: Route | None = None
    route_path: list[str] = field(default_factory=list)
    event_count: int = 0
    locally_used_event_ids: set[str] = field(default_factory=set)
    globally_used_event_ids: set[str] = field(default_factory=set)
    student_course_type: CourseType | None = None
    current_event: EventRecord | None = None
    event_history: list[HistoryEntry] = field(default_factory=list)
    stage: SessionStage = SessionStage.CHARACTER_CREATION
    ending: EndingRecord | None = None
    # Bumped on reset and on every route transition; async work started under
    # an older generation must not touch the session.
    generation: int = 0


@dataclass(slots=True)
class SessionUpdate:
    stage: SessionStage
    stats: PlayerStats
    event: EventRecord | None = None
    ending: EndingRecord | None = None
    transition_options: list[TransitionOption] = field(default_factory=list)
    applied_effect: str | None = None
    stale: bool = False
