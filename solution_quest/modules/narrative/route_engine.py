from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from solution_quest.modules.content.schemas import Bucket


class Route(str, Enum):
    OFFSHORE = "OVS"
    STUDENT = "STU"
    WORKING_HOLIDAY = "WHV"
    GRADUATE = "GRA"


class CourseType(str, Enum):
    ELICOS = "elicos"
    VET = "vet"
    HE = "he"


ROUTE_BUCKETS: dict[Route, Bucket] = {
    Route.OFFSHORE: Bucket.OFFSHORE,
    Route.STUDENT: Bucket.STUDENT,
    Route.WORKING_HOLIDAY: Bucket.WORKING_HOLIDAY,
    Route.GRADUATE: Bucket.GRADUATE,
}

TERMINAL_ROUTES = frozenset({Route.GRADUATE})

END_JOURNEY = "end"


@dataclass(frozen=True, slots=True)
class TransitionOption:
    key: str
    label: str
    route: Route | None = None
    course_type: CourseType | None = None
    path_entry: str | None = None

    @property
    def ends_journey(self) -> bool:
        return self.route is None


END_OPTION = TransitionOption(key=END_JOURNEY, label="End Journey Here")

_TO_STUDENT = TransitionOption(
    key="student",
    label="Continue as Student",
    route=Route.STUDENT,
    path_entry=Route.STUDENT.value,
)
_TO_WORKING_HOLIDAY = TransitionOption(
    key="working_holiday",
    label="Continue as Working Holiday",
    route=Route.WORKING_HOLIDAY,
    path_entry=Route.WORKING_HOLIDAY.value,
)
_TO_GRADUATE = TransitionOption(
    key="graduate",
    label="Continue as Graduate",
    route=Route.GRADUATE,
    path_entry=Route.GRADUATE.value,
)
_TO_STUDENT_VET = TransitionOption(
    key="student_vet",
    label="Continue as VET Student",
    route=Route.STUDENT,
    course_type=CourseType.VET,
    path_entry="STU-VET",
)
_TO_STUDENT_HE = TransitionOption(
    key="student_he",
    label="Continue as Higher Education Student",
    route=Route.STUDENT,
    course_type=CourseType.HE,
    path_entry="STU-HE",
)


def coerce_course_type(value: CourseType | str | None) -> CourseType | None:
    if value is None or isinstance(value, CourseType):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    return CourseType(text)


def bucket_for_route(route: Route) -> Bucket:
    return ROUTE_BUCKETS[route]


def is_terminal(route: Route) -> bool:
    return route in TERMINAL_ROUTES


def transition_options(route: Route, course_type: CourseType | None = None) -> list[TransitionOption]:
    """Choices offered once a route pass is over; "End Journey Here" is always last."""
    if route is Route.OFFSHORE:
        return [_TO_STUDENT, _TO_WORKING_HOLIDAY, END_OPTION]
    if route is Route.STUDENT:
        if course_type is CourseType.ELICOS:
            return [_TO_STUDENT_VET, _TO_STUDENT_HE, END_OPTION]
        return [_TO_GRADUATE, END_OPTION]
    if route is Route.WORKING_HOLIDAY:
        return [_TO_STUDENT, END_OPTION]
    return [END_OPTION]


def find_transition(route: Route, course_type: CourseType | None, key: str) -> TransitionOption | None:
    for option in transition_options(route, course_type):
        if option.key == key:
            return option
    return None
