from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from solution_quest.config import BUNDLED_CONTENT_DIR, Settings, settings as default_settings
from solution_quest.errors import ContentNotLoadedError
from solution_quest.modules.content.parser import parse_ending_rows, parse_event_rows
from solution_quest.modules.content.schemas import BUCKET_FILES, ENDINGS_BUCKET, Bucket, EndingRecord, EventRecord
from solution_quest.modules.content.sources import ContentSource, DirectoryContentSource, HttpContentSource

logger = logging.getLogger(__name__)


def _bucket_key(bucket: Bucket | str) -> str:
    key = bucket.value if isinstance(bucket, Bucket) else str(bucket)
    if key not in BUCKET_FILES or key == ENDINGS_BUCKET:
        raise ValueError(f"unknown event bucket: {key!r}")
    return key


class ContentStore:
    """Loads each content file once and serves it from cache afterwards.

    Failed loads are not cached, so the same call can be retried. Concurrent
    requests for a bucket that is still loading share the in-flight fetch.
    """

    def __init__(self, source: ContentSource):
        self.source = source
        self._events: dict[str, list[EventRecord]] = {}
        self._endings: list[EndingRecord] | None = None
        self._inflight: dict[str, asyncio.Future] = {}

    def is_loaded(self, bucket: Bucket | str) -> bool:
        if bucket == ENDINGS_BUCKET:
            return self._endings is not None
        return _bucket_key(bucket) in self._events

    async def _shared(self, key: str, loader: Callable[[], Awaitable[None]]) -> None:
        pending = self._inflight.get(key)
        if pending is not None:
            await pending
            return
        task = asyncio.ensure_future(loader())
        self._inflight[key] = task
        try:
            await task
        finally:
            self._inflight.pop(key, None)

    async def _fetch(self, key: str) -> str:
        filename = BUCKET_FILES[key]
        return await self.source.fetch_text(filename, bucket=key)

    async def load_bucket(self, bucket: Bucket | str) -> list[EventRecord]:
        key = _bucket_key(bucket)
        if key in self._events:
            return self._events[key]

        async def _load() -> None:
            text = await self._fetch(key)
            records = parse_event_rows(text, source=BUCKET_FILES[key])
            self._events[key] = records
            logger.info("loaded %d events into bucket %s", len(records), key)

        await self._shared(key, _load)
        return self._events[key]

    async def load_endings(self) -> list[EndingRecord]:
        if self._endings is not None:
            return self._endings

        async def _load() -> None:
            text = await self._fetch(ENDINGS_BUCKET)
            self._endings = parse_ending_rows(text, source=BUCKET_FILES[ENDINGS_BUCKET])
            logger.info("loaded %d endings", len(self._endings))

        await self._shared(ENDINGS_BUCKET, _load)
        return self._endings or []

    def cached_bucket(self, bucket: Bucket | str) -> list[EventRecord]:
        key = _bucket_key(bucket)
        if key not in self._events:
            raise ContentNotLoadedError(key)
        return self._events[key]

    def cached_endings(self) -> list[EndingRecord]:
        if self._endings is None:
            raise ContentNotLoadedError(ENDINGS_BUCKET)
        return self._endings


def build_content_store(config: Settings | None = None) -> ContentStore:
    cfg = config or default_settings
    source_name = (cfg.content_source or "bundled").strip().lower()
    if source_name == "http":
        source: ContentSource = HttpContentSource(cfg.content_base_url, timeout_s=cfg.content_timeout_s)
    elif source_name == "directory":
        source = DirectoryContentSource(cfg.content_dir)
    else:
        source = DirectoryContentSource(BUNDLED_CONTENT_DIR)
    return ContentStore(source)
