from __future__ import annotations

import logging
import random
from dataclasses import fields
from typing import Any

from solution_quest.config import settings
from solution_quest.errors import (
    SESSION_INVALID_COURSE_TYPE,
    SESSION_INVALID_OPTION,
    SESSION_INVALID_TRANSITION,
    SESSION_NOT_STARTED,
    SESSION_WRONG_STAGE,
    ContentExhaustedError,
    ContentLoadError,
    SessionStateError,
)
from solution_quest.modules.character.service import CharacterAttributes, compute_initial_stats, route_for_status
from solution_quest.modules.content.schemas import Bucket, EndingRecord, EventRecord
from solution_quest.modules.content.store import ContentStore, build_content_store
from solution_quest.modules.narrative.ending_engine import explain_ending
from solution_quest.modules.narrative.event_engine import (
    bucket_for_stage,
    next_event,
    record_usage,
    route_budget_exhausted,
)
from solution_quest.modules.narrative.route_engine import (
    CourseType,
    Route,
    TransitionOption,
    coerce_course_type,
    find_transition,
    is_terminal,
    transition_options,
)
from solution_quest.modules.narrative.stat_engine import PlayerStats, apply_effect
from solution_quest.modules.session.models import HistoryEntry, Session, SessionStage, SessionUpdate
from solution_quest.modules.telemetry import service as telemetry

logger = logging.getLogger(__name__)

_MISSING_STEP = {
    SessionStage.CHARACTER_CREATION: "initialize_session()",
    SessionStage.AWAITING_COURSE_TYPE: "choose_course_type()",
    SessionStage.AWAITING_EVENT: "start()",
}


def _require_stage(session: Session, *stages: SessionStage) -> None:
    if session.stage in stages:
        return
    expected = ", ".join(stage.value for stage in stages)
    raise SessionStateError(
        f"session is in stage '{session.stage.value}', expected one of: {expected}",
        error_kind=SESSION_WRONG_STAGE,
        stage=session.stage.value,
    )


def _update(session: Session, **kwargs: Any) -> SessionUpdate:
    return SessionUpdate(stage=session.stage, stats=session.stats, **kwargs)


def _stale(session: Session, generation: int, *, action: str) -> SessionUpdate:
    logger.info(
        "discarding %s result from generation %d (session is at generation %d)",
        action,
        generation,
        session.generation,
    )
    return SessionUpdate(stage=session.stage, stats=session.stats, stale=True)


class GameEngine:
    """Drives one player's session through character creation, route passes and the ending.

    Every operation either completes fully or leaves the session exactly as it
    was: content is fetched and the next event is selected before anything is
    written back, so a failed load or an exhausted bucket can simply be retried.
    """

    def __init__(self, store: ContentStore | None = None, *, rng: random.Random | None = None):
        self.store = store or build_content_store()
        self.rng = rng or random.Random(settings.rng_seed)

    def new_session(self) -> Session:
        return Session()

    def initialize_session(
        self,
        attributes: CharacterAttributes | dict,
        session: Session | None = None,
    ) -> Session:
        character = (
            attributes
            if isinstance(attributes, CharacterAttributes)
            else CharacterAttributes.model_validate(attributes)
        )
        sess = session if session is not None else self.new_session()
        _require_stage(sess, SessionStage.CHARACTER_CREATION)

        route = route_for_status(character.status)
        course_type = None
        if route is Route.STUDENT:
            course_type = self._coerce_course_type(character.course_type)

        sess.character = character
        sess.stats = compute_initial_stats(character)
        sess.current_route = route
        sess.route_path = [route.value]
        sess.event_count = 0
        sess.locally_used_event_ids = set()
        sess.student_course_type = course_type
        if route is Route.STUDENT and course_type is None:
            sess.stage = SessionStage.AWAITING_COURSE_TYPE
        else:
            sess.stage = SessionStage.AWAITING_EVENT
        telemetry.record_session_started()
        logger.info(
            "session initialized on route %s with stats %s",
            route.value,
            sess.stats.as_dict(),
        )
        return sess

    def reset_session(self, session: Session | None = None) -> Session:
        if session is None:
            return self.new_session()
        fresh = Session(generation=session.generation + 1)
        for item in fields(Session):
            setattr(session, item.name, getattr(fresh, item.name))
        logger.info("session reset (generation %d)", session.generation)
        return session

    def current_event(self, session: Session) -> EventRecord | None:
        missing = _MISSING_STEP.get(session.stage)
        if missing is not None:
            raise SessionStateError(
                f"no event available yet: call {missing} first",
                error_kind=SESSION_NOT_STARTED,
                stage=session.stage.value,
            )
        if session.stage is SessionStage.EVENT:
            return session.current_event
        return None

    def current_ending(self, session: Session) -> EndingRecord | None:
        _require_stage(session, SessionStage.ENDED)
        return session.ending

    def transition_options(self, session: Session) -> list[TransitionOption]:
        _require_stage(session, SessionStage.ROUTE_TRANSITION)
        return transition_options(session.current_route, session.student_course_type)

    async def start(self, session: Session) -> SessionUpdate:
        """Draw the opening event of the current route pass."""
        _require_stage(session, SessionStage.AWAITING_EVENT)
        generation = session.generation
        event, bucket = await self._prepare_draw(
            route=session.current_route,
            event_count=session.event_count,
            locally_used=session.locally_used_event_ids,
            course_type=session.student_course_type,
            session=session,
        )
        if session.generation != generation:
            return _stale(session, generation, action="start")
        self._commit_draw(session, event, bucket)
        return _update(session, event=event)

    async def choose_course_type(self, session: Session, course_type: CourseType | str) -> SessionUpdate:
        _require_stage(session, SessionStage.AWAITING_COURSE_TYPE)
        course = self._coerce_course_type(course_type)
        if course is None:
            raise SessionStateError(
                "a course type is required",
                error_kind=SESSION_INVALID_COURSE_TYPE,
                stage=session.stage.value,
            )
        generation = session.generation
        event, bucket = await self._prepare_draw(
            route=session.current_route,
            event_count=session.event_count,
            locally_used=session.locally_used_event_ids,
            course_type=course,
            session=session,
        )
        if session.generation != generation:
            return _stale(session, generation, action="choose_course_type")
        session.student_course_type = course
        self._commit_draw(session, event, bucket)
        return _update(session, event=event)

    async def choose_option(self, session: Session, option_index: int) -> SessionUpdate:
        _require_stage(session, SessionStage.EVENT)
        event = session.current_event
        if event is None or not 0 <= int(option_index) < len(event.options):
            raise SessionStateError(
                f"option index {option_index!r} is not valid for the current event",
                error_kind=SESSION_INVALID_OPTION,
                stage=session.stage.value,
            )
        option = event.options[int(option_index)]
        stats_after = apply_effect(session.stats, option.effect)
        next_count = session.event_count + 1
        route = session.current_route
        generation = session.generation
        pass_over = event.is_local or route_budget_exhausted(next_count)

        # A Local draw always opens the transition menu, even on the terminal route.
        if pass_over and not event.is_local and is_terminal(route):
            endings = await self._load_endings()
            if session.generation != generation:
                return _stale(session, generation, action="choose_option")
            self._commit_choice(session, event, int(option_index), stats_after, next_count)
            self._finish(session, endings)
            return _update(session, ending=session.ending, applied_effect=option.effect)

        if pass_over:
            self._commit_choice(session, event, int(option_index), stats_after, next_count)
            session.stage = SessionStage.ROUTE_TRANSITION
            logger.info("route %s pass complete after %d events", route.value, next_count)
            return _update(
                session,
                transition_options=transition_options(route, session.student_course_type),
                applied_effect=option.effect,
            )

        drawn, bucket = await self._prepare_draw(
            route=route,
            event_count=next_count,
            locally_used=session.locally_used_event_ids,
            course_type=session.student_course_type,
            session=session,
        )
        if session.generation != generation:
            return _stale(session, generation, action="choose_option")
        self._commit_choice(session, event, int(option_index), stats_after, next_count)
        self._commit_draw(session, drawn, bucket)
        return _update(session, event=drawn, applied_effect=option.effect)

    async def choose_transition(self, session: Session, option: TransitionOption | str) -> SessionUpdate:
        _require_stage(session, SessionStage.ROUTE_TRANSITION)
        key = option.key if isinstance(option, TransitionOption) else str(option or "").strip()
        selected = find_transition(session.current_route, session.student_course_type, key)
        if selected is None:
            raise SessionStateError(
                f"transition '{key}' is not offered from route {session.current_route.value}",
                error_kind=SESSION_INVALID_TRANSITION,
                stage=session.stage.value,
            )
        if selected.ends_journey:
            return await self.end_journey(session)

        target = selected.route
        if target is Route.STUDENT:
            course = selected.course_type
        else:
            course = session.student_course_type

        if target is Route.STUDENT and course is None:
            self._commit_transition(session, selected, course)
            session.stage = SessionStage.AWAITING_COURSE_TYPE
            return _update(session)

        generation = session.generation
        event, bucket = await self._prepare_draw(
            route=target,
            event_count=0,
            locally_used=frozenset(),
            course_type=course,
            session=session,
        )
        if session.generation != generation:
            return _stale(session, generation, action="choose_transition")
        self._commit_transition(session, selected, course)
        self._commit_draw(session, event, bucket)
        return _update(session, event=event)

    async def end_journey(self, session: Session) -> SessionUpdate:
        _require_stage(session, SessionStage.ROUTE_TRANSITION)
        generation = session.generation
        endings = await self._load_endings()
        if session.generation != generation:
            return _stale(session, generation, action="end_journey")
        self._finish(session, endings)
        return _update(session, ending=session.ending)

    def _coerce_course_type(self, value: CourseType | str | None) -> CourseType | None:
        try:
            return coerce_course_type(value)
        except ValueError as exc:
            raise SessionStateError(
                f"unknown course type {value!r}",
                error_kind=SESSION_INVALID_COURSE_TYPE,
            ) from exc

    async def _load_bucket(self, bucket: Bucket) -> list[EventRecord]:
        try:
            return await self.store.load_bucket(bucket)
        except ContentLoadError as exc:
            telemetry.record_fault(error_kind=exc.error_kind)
            logger.warning("content bucket %s failed to load: %s", bucket.value, exc)
            raise

    async def _load_endings(self) -> list[EndingRecord]:
        try:
            return await self.store.load_endings()
        except ContentLoadError as exc:
            telemetry.record_fault(error_kind=exc.error_kind)
            logger.warning("endings failed to load: %s", exc)
            raise

    async def _prepare_draw(
        self,
        *,
        route: Route,
        event_count: int,
        locally_used: set[str] | frozenset[str],
        course_type: CourseType | None,
        session: Session,
    ) -> tuple[EventRecord, Bucket]:
        bucket = bucket_for_stage(route, event_count)
        records = await self._load_bucket(bucket)
        event = next_event(
            records,
            event_count=event_count,
            locally_used=locally_used,
            globally_used=session.globally_used_event_ids,
            course_type=course_type if route is Route.STUDENT else None,
            rng=self.rng,
        )
        if event is None:
            exc = ContentExhaustedError(
                f"no content available for route {route.value} at event {event_count + 1} (bucket {bucket.value})",
                bucket=bucket.value,
                route=route.value,
                event_count=event_count,
            )
            telemetry.record_fault(error_kind=exc.error_kind)
            logger.warning("%s", exc)
            raise exc
        return event, bucket

    def _commit_draw(self, session: Session, event: EventRecord, bucket: Bucket) -> None:
        record_usage(
            event.id,
            event_count=session.event_count,
            locally_used=session.locally_used_event_ids,
            globally_used=session.globally_used_event_ids,
        )
        session.current_event = event
        session.stage = SessionStage.EVENT
        telemetry.record_event_drawn(bucket=bucket.value)
        logger.debug("drew event %s from %s at count %d", event.id, bucket.value, session.event_count)

    def _commit_choice(
        self,
        session: Session,
        event: EventRecord,
        option_index: int,
        stats_after: PlayerStats,
        next_count: int,
    ) -> None:
        session.stats = stats_after
        session.event_history.append(
            HistoryEntry(
                event=event,
                choice_index=option_index,
                route=session.current_route,
                effect=event.options[option_index].effect,
                stats_after=stats_after,
            )
        )
        session.event_count = next_count
        telemetry.record_choice()

    def _commit_transition(self, session: Session, option: TransitionOption, course: CourseType | None) -> None:
        session.generation += 1
        session.current_route = option.route
        session.student_course_type = course
        session.route_path.append(option.path_entry or option.route.value)
        session.event_count = 0
        session.locally_used_event_ids = set()
        session.current_event = None
        telemetry.record_transition()
        logger.info("route transition -> %s (path %s)", option.route.value, "/".join(session.route_path))

    def _finish(self, session: Session, endings: list[EndingRecord]) -> None:
        resolution = explain_ending(session.stats, session.current_route.value, endings)
        session.ending = resolution.ending
        session.stage = SessionStage.ENDED
        telemetry.record_ending(
            ending_id=resolution.ending.id if resolution.ending else None,
            source=resolution.source,
        )
        logger.info(
            "journey ended on route %s with ending %s (%s)",
            resolution.route,
            resolution.ending.id if resolution.ending else None,
            resolution.source,
        )
