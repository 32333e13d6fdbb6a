from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from solution_quest.modules.content.schemas import EndingRecord
from solution_quest.modules.narrative.stat_engine import PlayerStats

SOURCE_MATCHED = "matched"
SOURCE_ROUTE_FALLBACK = "route_fallback"
SOURCE_GLOBAL_FALLBACK = "global_fallback"


def _balanced(stats: PlayerStats) -> bool:
    values = (stats.knowledge, stats.courage, stats.luck)
    return max(values) - min(values) <= 1


# Evaluated top to bottom; the first rule whose phrases all appear in the
# condition decides the result, whether or not its predicate holds.
CONDITION_RULES: list[tuple[tuple[str, ...], Callable[[PlayerStats], bool]]] = [
    (
        ("Knowledge >= Courage", "Knowledge >= Luck"),
        lambda s: s.knowledge >= s.courage and s.knowledge >= s.luck,
    ),
    (
        ("Courage >= Knowledge", "Courage >= Luck"),
        lambda s: s.courage >= s.knowledge and s.courage >= s.luck,
    ),
    (
        ("Luck >= Knowledge", "Luck >= Courage"),
        lambda s: s.luck >= s.knowledge and s.luck >= s.courage,
    ),
    (("Balanced",), _balanced),
    (
        ("Knowledge > Courage + 1", "Knowledge > Luck + 1"),
        lambda s: s.knowledge > s.courage + 1 and s.knowledge > s.luck + 1,
    ),
    (
        ("Courage > Knowledge + 1", "Courage > Luck + 1"),
        lambda s: s.courage > s.knowledge + 1 and s.courage > s.luck + 1,
    ),
    (
        ("Luck > Knowledge + 1", "Luck > Courage + 1"),
        lambda s: s.luck > s.knowledge + 1 and s.luck > s.courage + 1,
    ),
    (("Knowledge >= 4",), lambda s: s.knowledge >= 4),
    (("Courage >= 4",), lambda s: s.courage >= 4),
    (("Luck >= 4",), lambda s: s.luck >= 4),
]


def matches_stat_condition(condition: str | None, stats: PlayerStats) -> bool:
    text = str(condition or "")
    for phrases, predicate in CONDITION_RULES:
        if all(phrase in text for phrase in phrases):
            return bool(predicate(stats))
    return False


@dataclass(frozen=True, slots=True)
class EndingResolution:
    ending: EndingRecord | None
    source: str
    route: str
    candidates_considered: int


def explain_ending(stats: PlayerStats, route: str, endings: Sequence[EndingRecord]) -> EndingResolution:
    route_code = getattr(route, "value", route)
    # sorted() is stable, equal priorities keep their file order.
    route_endings = sorted(
        (ending for ending in endings if ending.applies_to(route_code)),
        key=lambda ending: ending.priority,
    )
    for ending in route_endings:
        if matches_stat_condition(ending.stat_condition, stats):
            return EndingResolution(
                ending=ending,
                source=SOURCE_MATCHED,
                route=route_code,
                candidates_considered=len(route_endings),
            )
    if route_endings:
        return EndingResolution(
            ending=route_endings[0],
            source=SOURCE_ROUTE_FALLBACK,
            route=route_code,
            candidates_considered=len(route_endings),
        )
    return EndingResolution(
        ending=endings[0] if endings else None,
        source=SOURCE_GLOBAL_FALLBACK,
        route=route_code,
        candidates_considered=0,
    )


def resolve_ending(stats: PlayerStats, route: str, endings: Sequence[EndingRecord]) -> EndingRecord | None:
    return explain_ending(stats, route, endings).ending
