from .schemas import Bucket, EndingRecord, EventCategory, EventOption, EventRecord
from .sources import ContentSource, DirectoryContentSource, HttpContentSource
from .store import ContentStore, build_content_store

__all__ = [
    "Bucket",
    "ContentSource",
    "ContentStore",
    "DirectoryContentSource",
    "EndingRecord",
    "EventCategory",
    "EventOption",
    "EventRecord",
    "HttpContentSource",
    "build_content_store",
]
