from __future__ import annotations

from collections import Counter


class _GameTelemetryStore:
    def __init__(self) -> None:
        self.sessions_started: int = 0
        self.choices_made: int = 0
        self.route_transitions: int = 0
        self.events_drawn: Counter[str] = Counter()
        self.faults: Counter[str] = Counter()
        self.ending_distribution: Counter[str] = Counter()
        self.ending_sources: Counter[str] = Counter()

    def reset(self) -> None:
        self.sessions_started = 0
        self.choices_made = 0
        self.route_transitions = 0
        self.events_drawn = Counter()
        self.faults = Counter()
        self.ending_distribution = Counter()
        self.ending_sources = Counter()

    def record_session_started(self) -> None:
        self.sessions_started += 1

    def record_event_drawn(self, *, bucket: str) -> None:
        self.events_drawn[str(bucket)] += 1

    def record_choice(self) -> None:
        self.choices_made += 1

    def record_transition(self) -> None:
        self.route_transitions += 1

    def record_fault(self, *, error_kind: str) -> None:
        self.faults[str(error_kind)] += 1

    def record_ending(self, *, ending_id: str | None, source: str) -> None:
        self.ending_distribution[str(ending_id or "__none__")] += 1
        self.ending_sources[str(source)] += 1

    def summary(self) -> dict:
        total_endings = sum(self.ending_sources.values())
        fallback_endings = total_endings - int(self.ending_sources.get("matched", 0))
        fallback_rate = 0.0 if total_endings <= 0 else float(fallback_endings) / float(total_endings)
        return {
            "sessions_started": int(self.sessions_started),
            "choices_made": int(self.choices_made),
            "route_transitions": int(self.route_transitions),
            "events_drawn": dict(self.events_drawn),
            "faults": dict(self.faults),
            "ending_distribution": dict(self.ending_distribution),
            "ending_fallback_rate": round(fallback_rate, 4),
        }


_game_telemetry = _GameTelemetryStore()


def reset_game_telemetry() -> None:
    _game_telemetry.reset()


def record_session_started() -> None:
    _game_telemetry.record_session_started()


def record_event_drawn(*, bucket: str) -> None:
    _game_telemetry.record_event_drawn(bucket=bucket)


def record_choice() -> None:
    _game_telemetry.record_choice()


def record_transition() -> None:
    _game_telemetry.record_transition()


def record_fault(*, error_kind: str) -> None:
    _game_telemetry.record_fault(error_kind=error_kind)


def record_ending(*, ending_id: str | None, source: str) -> None:
    _game_telemetry.record_ending(ending_id=ending_id, source=source)


def get_game_telemetry_summary() -> dict:
    return _game_telemetry.summary()
