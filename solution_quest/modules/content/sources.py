from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

import httpx

from solution_quest.errors import CONTENT_LOAD_FAILED, CONTENT_LOAD_HTTP_STATUS, ContentLoadError

logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    async def fetch_text(self, filename: str, *, bucket: str) -> str: ...


class DirectoryContentSource:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    async def fetch_text(self, filename: str, *, bucket: str) -> str:
        path = self.root / filename
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise ContentLoadError(
                f"failed to read {path}: {exc}",
                bucket=bucket,
                error_kind=CONTENT_LOAD_FAILED,
            ) from exc


def _endpoint_url(*, base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class HttpContentSource:
    def __init__(self, base_url: str, *, timeout_s: float = 8.0):
        self.base_url = base_url
        self.timeout_s = timeout_s

    async def fetch_text(self, filename: str, *, bucket: str) -> str:
        url = _endpoint_url(base_url=self.base_url, path=filename)
        timeout = httpx.Timeout(self.timeout_s)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            raise ContentLoadError(
                f"GET {url} failed: {exc}",
                bucket=bucket,
                error_kind=CONTENT_LOAD_FAILED,
            ) from exc
        if response.status_code != 200:
            raise ContentLoadError(
                f"GET {url} non-200: {response.status_code}",
                bucket=bucket,
                error_kind=CONTENT_LOAD_HTTP_STATUS,
            )
        logger.debug("fetched %s (%d chars)", url, len(response.text))
        return response.text
