from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from enum import Enum

from solution_quest.modules.content.schemas import Bucket, EventRecord
from solution_quest.modules.narrative.route_engine import CourseType, Route, bucket_for_route

EVENTS_PER_ROUTE = 7
COMMON_EVENT_SLOTS = 2
GLOBAL_TRACKING_LIMIT = 3
LOCAL_EVENT_SLOT = EVENTS_PER_ROUTE - 1


class SelectionStage(str, Enum):
    COMMON = "common"
    FUN = "fun"
    ROUTE = "route"
    LOCAL = "local"


def stage_for_count(event_count: int) -> SelectionStage:
    if event_count < COMMON_EVENT_SLOTS:
        return SelectionStage.COMMON
    if event_count < GLOBAL_TRACKING_LIMIT:
        return SelectionStage.FUN
    if event_count < LOCAL_EVENT_SLOT:
        return SelectionStage.ROUTE
    return SelectionStage.LOCAL


def bucket_for_stage(route: Route, event_count: int) -> Bucket:
    stage = stage_for_count(event_count)
    if stage is SelectionStage.COMMON:
        return Bucket.COMMON
    if stage is SelectionStage.FUN:
        return Bucket.FUN
    return bucket_for_route(route)


def is_globally_tracked(event_count: int) -> bool:
    return event_count < GLOBAL_TRACKING_LIMIT


def candidate_events(
    records: Iterable[EventRecord],
    *,
    event_count: int,
    locally_used: set[str] | frozenset[str],
    globally_used: set[str] | frozenset[str],
    course_type: CourseType | None = None,
) -> list[EventRecord]:
    stage = stage_for_count(event_count)
    course = course_type.value if course_type is not None else None
    if stage in (SelectionStage.COMMON, SelectionStage.FUN):
        return [event for event in records if event.id not in globally_used]
    if stage is SelectionStage.ROUTE:
        return [
            event
            for event in records
            if event.id not in locally_used and event.matches_course_type(course)
        ]
    # The closing slot always offers the route's local ending, even if it was seen earlier in the pass.
    return [event for event in records if event.is_local and event.matches_course_type(course)]


def next_event(
    records: Sequence[EventRecord],
    *,
    event_count: int,
    locally_used: set[str] | frozenset[str],
    globally_used: set[str] | frozenset[str],
    course_type: CourseType | None = None,
    rng: random.Random | None = None,
) -> EventRecord | None:
    """Pick uniformly among eligible events of the bucket for this stage.

    ``records`` must already be the bucket returned by ``bucket_for_stage``.
    Returns ``None`` when nothing is eligible; the caller must not advance.
    """
    candidates = candidate_events(
        records,
        event_count=event_count,
        locally_used=locally_used,
        globally_used=globally_used,
        course_type=course_type,
    )
    if not candidates:
        return None
    return (rng or random).choice(candidates)


def record_usage(
    event_id: str,
    *,
    event_count: int,
    locally_used: set[str],
    globally_used: set[str],
) -> None:
    if is_globally_tracked(event_count):
        globally_used.add(event_id)
    else:
        locally_used.add(event_id)


def route_budget_exhausted(event_count: int) -> bool:
    return event_count >= EVENTS_PER_ROUTE
