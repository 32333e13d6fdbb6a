from __future__ import annotations

import re
from dataclasses import dataclass

STAT_MIN = 1
STAT_MAX = 6
STAT_KEYS = ("knowledge", "courage", "luck")
AXIS_TO_STAT = {"K": "knowledge", "C": "courage", "L": "luck"}

_EFFECT_RE = re.compile(r"^([KCL])([+-])([0-9]+)$")


@dataclass(frozen=True, slots=True)
class PlayerStats:
    knowledge: int = STAT_MIN
    courage: int = STAT_MIN
    luck: int = STAT_MIN

    def as_dict(self) -> dict[str, int]:
        return {"knowledge": self.knowledge, "courage": self.courage, "luck": self.luck}


@dataclass(frozen=True, slots=True)
class Effect:
    stat: str
    delta: int


def clamp_stat(value: int) -> int:
    return max(STAT_MIN, min(STAT_MAX, int(value)))


def clamp_stats(stats: PlayerStats) -> PlayerStats:
    return PlayerStats(
        knowledge=clamp_stat(stats.knowledge),
        courage=clamp_stat(stats.courage),
        luck=clamp_stat(stats.luck),
    )


def parse_effect(effect: str | None) -> Effect | None:
    """Parse ``K+1`` style effect strings; anything else yields ``None``."""
    match = _EFFECT_RE.fullmatch(str(effect or ""))
    if match is None:
        return None
    axis, sign, magnitude = match.groups()
    delta = int(magnitude) * (1 if sign == "+" else -1)
    return Effect(stat=AXIS_TO_STAT[axis], delta=delta)


def add_effect(stats: PlayerStats, effect: Effect) -> PlayerStats:
    values = stats.as_dict()
    values[effect.stat] = values[effect.stat] + effect.delta
    return PlayerStats(**values)


def apply_effect(stats: PlayerStats, effect: str | None) -> PlayerStats:
    parsed = parse_effect(effect)
    if parsed is None:
        return stats
    return clamp_stats(add_effect(stats, parsed))
