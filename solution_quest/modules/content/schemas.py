from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Bucket(str, Enum):
    COMMON = "common"
    STUDENT = "student"
    WORKING_HOLIDAY = "workingHoliday"
    GRADUATE = "graduate"
    OFFSHORE = "offshore"
    FUN = "fun"


ENDINGS_BUCKET = "endings"

BUCKET_FILES: dict[str, str] = {
    Bucket.COMMON.value: "02_Events_Common.csv",
    Bucket.STUDENT.value: "03_Events_STD.csv",
    Bucket.WORKING_HOLIDAY.value: "04_Events_WHV.csv",
    Bucket.GRADUATE.value: "05_Events_PSW.csv",
    Bucket.OFFSHORE.value: "06_Events_OVS.csv",
    ENDINGS_BUCKET: "07_Endings.csv",
    Bucket.FUN.value: "09_Events_Fun.csv",
}

EVENT_MIN_FIELDS = 9
ENDING_MIN_FIELDS = 8
COURSE_TYPE_ALL = "All"
ROUTE_ALL = "All"


class EventCategory(str, Enum):
    ROUTE = "Route"
    LOCAL = "Local"


class EventOption(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    effect: str = ""


class EventRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    title: str
    description: str = ""
    options: tuple[EventOption, EventOption, EventOption]
    course_type: str = COURSE_TYPE_ALL
    tags: frozenset[str] = Field(default_factory=frozenset)
    category: EventCategory = EventCategory.ROUTE
    priority: int = 1

    @property
    def is_local(self) -> bool:
        return self.category is EventCategory.LOCAL

    def matches_course_type(self, course_type: str | None) -> bool:
        if not course_type:
            return True
        tag = self.course_type.strip()
        if not tag or tag.lower() == COURSE_TYPE_ALL.lower():
            return True
        return tag.lower() == course_type.strip().lower()


class EndingRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    title: str
    description: str = ""
    stat_condition: str = ""
    stat_type: str = ""
    route: str = ROUTE_ALL
    priority: int = 1
    cta: str = ""

    def applies_to(self, route: str) -> bool:
        return self.route == ROUTE_ALL or self.route == route
