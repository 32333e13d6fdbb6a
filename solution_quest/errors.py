from __future__ import annotations


class ContentLoadError(RuntimeError):
    """Raised when a content bucket cannot be fetched or decoded."""

    def __init__(self, message: str, *, bucket: str, error_kind: str = "CONTENT_LOAD_FAILED"):
        super().__init__(message)
        self.bucket = bucket
        self.error_kind = error_kind


class ContentNotLoadedError(RuntimeError):
    def __init__(self, bucket: str):
        super().__init__(f"content bucket '{bucket}' accessed before load_bucket()/load_endings() completed")
        self.bucket = bucket
        self.error_kind = CONTENT_NOT_LOADED


class ContentExhaustedError(RuntimeError):
    """No eligible event exists for the current selection stage."""

    def __init__(self, message: str, *, bucket: str, route: str, event_count: int):
        super().__init__(message)
        self.bucket = bucket
        self.route = route
        self.event_count = event_count
        self.error_kind = CONTENT_EXHAUSTED


class SessionStateError(RuntimeError):
    def __init__(self, message: str, *, error_kind: str, stage: str | None = None):
        super().__init__(message)
        self.error_kind = error_kind
        self.stage = stage


CONTENT_LOAD_FAILED = "CONTENT_LOAD_FAILED"
CONTENT_LOAD_HTTP_STATUS = "CONTENT_LOAD_HTTP_STATUS"
CONTENT_NOT_LOADED = "CONTENT_NOT_LOADED"
CONTENT_EXHAUSTED = "CONTENT_EXHAUSTED"
SESSION_NOT_STARTED = "SESSION_NOT_STARTED"
SESSION_WRONG_STAGE = "SESSION_WRONG_STAGE"
SESSION_INVALID_OPTION = "SESSION_INVALID_OPTION"
SESSION_INVALID_TRANSITION = "SESSION_INVALID_TRANSITION"
SESSION_INVALID_COURSE_TYPE = "SESSION_INVALID_COURSE_TYPE"
