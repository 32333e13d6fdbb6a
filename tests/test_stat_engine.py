from __future__ import annotations

import pytest

from solution_quest.modules.narrative.stat_engine import PlayerStats, apply_effect, parse_effect


def test_apply_effect_adds_and_subtracts_on_addressed_axis() -> None:
    stats = PlayerStats(knowledge=3, courage=3, luck=3)

    assert apply_effect(stats, "K+2") == PlayerStats(knowledge=5, courage=3, luck=3)
    assert apply_effect(stats, "C-1") == PlayerStats(knowledge=3, courage=2, luck=3)
    assert apply_effect(stats, "L+1") == PlayerStats(knowledge=3, courage=3, luck=4)


def test_apply_effect_clamps_to_bounds() -> None:
    top = PlayerStats(knowledge=6, courage=1, luck=5)

    assert apply_effect(top, "K+1").knowledge == 6
    assert apply_effect(top, "C-3").courage == 1
    assert apply_effect(top, "L+10").luck == 6


@pytest.mark.parametrize("effect", ["X+1", "K1", "K+", "", None, "k+1", "K+1 extra", "KK+1", "K*2"])
def test_malformed_effect_is_a_no_op(effect) -> None:
    stats = PlayerStats(knowledge=2, courage=4, luck=3)
    assert apply_effect(stats, effect) is stats


def test_every_valid_effect_keeps_stats_in_range() -> None:
    for knowledge in range(1, 7):
        stats = PlayerStats(knowledge=knowledge, courage=knowledge, luck=knowledge)
        for axis in "KCL":
            for sign in "+-":
                for magnitude in range(0, 9):
                    out = apply_effect(stats, f"{axis}{sign}{magnitude}")
                    assert all(1 <= value <= 6 for value in out.as_dict().values())


def test_padded_effect_is_rejected() -> None:
    stats = PlayerStats(knowledge=2, courage=4, luck=3)
    for effect in (" K+1", "K+1 ", "  L-2 ", "K+1\n"):
        assert parse_effect(effect) is None
        assert apply_effect(stats, effect) is stats

    parsed = parse_effect("L-2")
    assert parsed is not None
    assert parsed.stat == "luck"
    assert parsed.delta == -2
