from __future__ import annotations

import csv
import logging

from solution_quest.modules.content.schemas import (
    COURSE_TYPE_ALL,
    ENDING_MIN_FIELDS,
    EVENT_MIN_FIELDS,
    EndingRecord,
    EventCategory,
    EventOption,
    EventRecord,
)

logger = logging.getLogger(__name__)


def _split_rows(csv_text: str) -> list[tuple[int, list[str]]]:
    # Each line is its own record; an unbalanced quote must not swallow the lines after it.
    rows: list[tuple[int, list[str]]] = []
    lines = (csv_text or "").splitlines()
    header_index = next((index for index, line in enumerate(lines) if line.strip()), len(lines))
    for line_no, line in enumerate(lines[header_index + 1 :], start=header_index + 2):
        if not line.strip():
            continue
        try:
            values = next(csv.reader([line], skipinitialspace=True), [])
        except csv.Error:
            values = []
        rows.append((line_no, [field.strip() for field in values]))
    return rows


def _field(values: list[str], index: int) -> str:
    if index >= len(values):
        return ""
    return values[index]


def _priority(raw: str) -> int:
    try:
        value = int(str(raw or "").strip())
    except ValueError:
        return 1
    return value or 1


def _category(raw: str) -> EventCategory:
    if str(raw or "").strip().lower() == EventCategory.LOCAL.value.lower():
        return EventCategory.LOCAL
    return EventCategory.ROUTE


def _tags(raw: str) -> frozenset[str]:
    return frozenset(tag.strip() for tag in str(raw or "").split(",") if tag.strip())


def parse_event_rows(csv_text: str, *, source: str = "<memory>") -> list[EventRecord]:
    events: list[EventRecord] = []
    for line_no, values in _split_rows(csv_text):
        if len(values) < EVENT_MIN_FIELDS:
            logger.debug("dropping event row %s:%d with %d fields", source, line_no, len(values))
            continue
        events.append(
            EventRecord(
                id=values[0],
                title=values[1],
                description=values[2],
                options=(
                    EventOption(text=values[3], effect=values[4]),
                    EventOption(text=values[5], effect=values[6]),
                    EventOption(text=values[7], effect=values[8]),
                ),
                course_type=_field(values, 9) or COURSE_TYPE_ALL,
                tags=_tags(_field(values, 10)),
                category=_category(_field(values, 11)),
                priority=_priority(_field(values, 12)),
            )
        )
    return events


def parse_ending_rows(csv_text: str, *, source: str = "<memory>") -> list[EndingRecord]:
    endings: list[EndingRecord] = []
    for line_no, values in _split_rows(csv_text):
        if len(values) < ENDING_MIN_FIELDS:
            logger.debug("dropping ending row %s:%d with %d fields", source, line_no, len(values))
            continue
        endings.append(
            EndingRecord(
                id=values[0],
                title=values[1],
                description=values[2],
                stat_condition=values[3],
                stat_type=values[4],
                route=values[5],
                priority=_priority(values[6]),
                cta=values[7],
            )
        )
    return endings
