from __future__ import annotations

import asyncio

from solution_quest.modules.content.store import ContentStore
from solution_quest.modules.session.service import GameEngine
from solution_quest.modules.telemetry.service import (
    get_game_telemetry_summary,
    record_ending,
    record_fault,
    reset_game_telemetry,
)
from tests.support.content_pack import FirstChoiceRandom, MemoryContentSource, default_pack


def test_summary_reports_ending_fallback_rate() -> None:
    record_ending(ending_id="E1", source="matched")
    record_ending(ending_id="E2", source="route_fallback")
    record_ending(ending_id=None, source="global_fallback")
    record_ending(ending_id="E1", source="matched")

    summary = get_game_telemetry_summary()
    assert summary["ending_distribution"] == {"E1": 2, "E2": 1, "__none__": 1}
    assert summary["ending_fallback_rate"] == 0.5


def test_reset_clears_counters() -> None:
    record_fault(error_kind="CONTENT_LOAD_FAILED")
    reset_game_telemetry()
    summary = get_game_telemetry_summary()
    assert summary["faults"] == {}
    assert summary["ending_fallback_rate"] == 0.0


def test_engine_records_draws_choices_and_transitions() -> None:
    engine = GameEngine(ContentStore(MemoryContentSource(default_pack())), rng=FirstChoiceRandom())
    session = engine.initialize_session({"status": "outside"})
    asyncio.run(engine.start(session))
    for _ in range(7):
        asyncio.run(engine.choose_option(session, 0))
    asyncio.run(engine.choose_transition(session, "working_holiday"))

    summary = get_game_telemetry_summary()
    assert summary["sessions_started"] == 1
    assert summary["choices_made"] == 7
    assert summary["route_transitions"] == 1
    assert summary["events_drawn"] == {"common": 3, "fun": 1, "offshore": 4}
