from __future__ import annotations

import random

from solution_quest.modules.content.parser import parse_event_rows
from solution_quest.modules.content.schemas import Bucket
from solution_quest.modules.narrative.event_engine import (
    SelectionStage,
    bucket_for_stage,
    candidate_events,
    next_event,
    record_usage,
    stage_for_count,
)
from solution_quest.modules.narrative.route_engine import CourseType, Route
from tests.support.content_pack import event_row, events_csv


def _route_records():
    return parse_event_rows(
        events_csv(
            [
                event_row("R1"),
                event_row("R2", course_type="vet"),
                event_row("R3", course_type="he"),
                event_row("END", category="Local"),
            ]
        )
    )


def test_stage_layout_over_a_route_pass() -> None:
    stages = [stage_for_count(count) for count in range(7)]
    assert stages == [
        SelectionStage.COMMON,
        SelectionStage.COMMON,
        SelectionStage.FUN,
        SelectionStage.ROUTE,
        SelectionStage.ROUTE,
        SelectionStage.ROUTE,
        SelectionStage.LOCAL,
    ]
    assert bucket_for_stage(Route.WORKING_HOLIDAY, 0) is Bucket.COMMON
    assert bucket_for_stage(Route.WORKING_HOLIDAY, 2) is Bucket.FUN
    assert bucket_for_stage(Route.WORKING_HOLIDAY, 4) is Bucket.WORKING_HOLIDAY
    assert bucket_for_stage(Route.GRADUATE, 6) is Bucket.GRADUATE
    assert bucket_for_stage(Route.OFFSHORE, 3) is Bucket.OFFSHORE
    assert bucket_for_stage(Route.STUDENT, 5) is Bucket.STUDENT


def test_common_and_fun_stages_filter_on_global_usage_only() -> None:
    records = parse_event_rows(events_csv([event_row("A"), event_row("B")]))
    picked = candidate_events(records, event_count=1, locally_used={"B"}, globally_used={"A"})
    assert [event.id for event in picked] == ["B"]


def test_route_stage_filters_on_local_usage_and_keeps_local_events() -> None:
    records = _route_records()
    picked = candidate_events(records, event_count=4, locally_used={"R1"}, globally_used={"R2"})
    assert [event.id for event in picked] == ["R2", "R3", "END"]


def test_local_stage_ignores_usage() -> None:
    records = _route_records()
    picked = candidate_events(records, event_count=6, locally_used={"END"}, globally_used={"END"})
    assert [event.id for event in picked] == ["END"]


def test_course_type_narrows_route_candidates() -> None:
    records = _route_records()
    picked = candidate_events(
        records,
        event_count=3,
        locally_used=set(),
        globally_used=set(),
        course_type=CourseType.VET,
    )
    assert [event.id for event in picked] == ["R1", "R2", "END"]


def test_next_event_returns_none_when_exhausted() -> None:
    records = parse_event_rows(events_csv([event_row("A")]))
    assert next_event(records, event_count=0, locally_used=set(), globally_used={"A"}) is None


def test_next_event_is_uniform_choice_from_candidates() -> None:
    records = parse_event_rows(events_csv([event_row(f"E{index}") for index in range(5)]))
    rng = random.Random(7)
    seen = {
        next_event(records, event_count=3, locally_used={"E0"}, globally_used=set(), rng=rng).id
        for _ in range(200)
    }
    assert seen == {"E1", "E2", "E3", "E4"}


def test_record_usage_splits_global_and_local_tracking() -> None:
    locally_used: set[str] = set()
    globally_used: set[str] = set()
    for count, event_id in enumerate(["c1", "c2", "f1", "r1", "r2", "r3", "end"]):
        record_usage(event_id, event_count=count, locally_used=locally_used, globally_used=globally_used)
    assert globally_used == {"c1", "c2", "f1"}
    assert locally_used == {"r1", "r2", "r3", "end"}
