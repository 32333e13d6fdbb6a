from __future__ import annotations

from collections.abc import Iterator

import pytest

from solution_quest.modules.telemetry.service import reset_game_telemetry


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    reset_game_telemetry()
    yield
    reset_game_telemetry()
