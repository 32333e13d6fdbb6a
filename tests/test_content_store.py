from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import pytest

from solution_quest.config import BUNDLED_CONTENT_DIR, Settings
from solution_quest.errors import (
    CONTENT_LOAD_FAILED,
    CONTENT_LOAD_HTTP_STATUS,
    ContentLoadError,
    ContentNotLoadedError,
)
from solution_quest.modules.content import sources
from solution_quest.modules.content.parser import parse_ending_rows, parse_event_rows
from solution_quest.modules.content.schemas import Bucket, EventCategory
from solution_quest.modules.content.sources import DirectoryContentSource, HttpContentSource
from solution_quest.modules.content.store import ContentStore, build_content_store
from tests.support.content_pack import MemoryContentSource, default_pack


def test_event_rows_with_too_few_fields_are_dropped() -> None:
    text = (
        "EventID,Title,Description,C1,E1,C2,E2,C3,E3\n"
        "A,Title A,Desc,One,K+1,Two,C+1,Three,L+1\n"
        "B,Title B,Desc,One,K+1,Two,C+1,Three\n"
        "\n"
        "C,Title C,Desc,One,K+1,Two,C+1,Three,L+1\n"
    )
    events = parse_event_rows(text)
    assert [event.id for event in events] == ["A", "C"]
    assert events[0].course_type == "All"
    assert events[0].category is EventCategory.ROUTE
    assert events[0].priority == 1
    assert events[0].tags == frozenset()


def test_event_row_optional_fields_and_quoted_tags() -> None:
    text = (
        "EventID,Title,Description,C1,E1,C2,E2,C3,E3,CourseType,Tags,Category,Priority\n"
        'A,"Title, with comma",Desc,One,K+1,Two,,Three,L-1,vet,"visa, money",local,3\n'
        "B,Title,Desc,One,K+1,Two,C+1,Three,L+1,,,,zero\n"
        "Z,Title,Desc,One,K+1,Two,C+1,Three,L+1,,,,0\n"
    )
    first, second, third = parse_event_rows(text)
    assert first.title == "Title, with comma"
    assert first.options[1].effect == ""
    assert first.course_type == "vet"
    assert first.tags == frozenset({"visa", "money"})
    assert first.is_local
    assert first.priority == 3
    assert second.course_type == "All"
    assert second.priority == 1
    assert third.priority == 1


def test_ending_rows_need_eight_fields() -> None:
    text = (
        "EndingID,Title,Description,StatCondition,StatType,Route,Priority,CTA\n"
        "E1,T,D,Balanced,Balanced,All,2,Go\n"
        "E2,T,D,Balanced,Balanced,All,2\n"
    )
    endings = parse_ending_rows(text)
    assert [ending.id for ending in endings] == ["E1"]
    assert endings[0].priority == 2
    assert endings[0].cta == "Go"


def test_unbalanced_quote_only_drops_its_own_row() -> None:
    text = (
        "EventID,Title,Description,C1,E1,C2,E2,C3,E3\n"
        'A,"Broken title,Desc,One,K+1,Two,C+1,Three,L+1\n'
        "B,Title B,Desc,One,K+1,Two,C+1,Three,L+1\n"
        "C,Title C,Desc,One,K+1,Two,C+1,Three,L+1\n"
    )
    assert [event.id for event in parse_event_rows(text)] == ["B", "C"]

    endings = (
        "EndingID,Title,Description,StatCondition,StatType,Route,Priority,CTA\n"
        'E1,"T,D,Balanced,Balanced,All,2,Go\n'
        "E2,T,D,Balanced,Balanced,All,2,Go\n"
    )
    assert [ending.id for ending in parse_ending_rows(endings)] == ["E2"]


def test_header_only_file_yields_no_records() -> None:
    assert parse_event_rows("EventID,Title\n") == []
    assert parse_ending_rows("") == []


def test_bucket_is_fetched_once_and_cached() -> None:
    source = MemoryContentSource(default_pack())
    store = ContentStore(source)

    first = asyncio.run(store.load_bucket(Bucket.COMMON))
    second = asyncio.run(store.load_bucket("common"))

    assert first is second
    assert source.requests == ["02_Events_Common.csv"]
    assert store.cached_bucket(Bucket.COMMON) is first


def test_concurrent_loads_share_one_fetch() -> None:
    source = MemoryContentSource(default_pack())
    store = ContentStore(source)

    async def _run():
        source.gate = asyncio.Event()
        pending = [asyncio.create_task(store.load_bucket(Bucket.FUN)) for _ in range(3)]
        await asyncio.sleep(0)
        source.gate.set()
        return await asyncio.gather(*pending)

    results = asyncio.run(_run())
    assert source.requests == ["09_Events_Fun.csv"]
    assert results[0] is results[1] is results[2]


def test_failed_load_is_not_cached_and_can_be_retried() -> None:
    source = MemoryContentSource(default_pack(), failures={"endings": 1})
    store = ContentStore(source)

    with pytest.raises(ContentLoadError):
        asyncio.run(store.load_endings())
    assert not store.is_loaded("endings")

    endings = asyncio.run(store.load_endings())
    assert [ending.id for ending in endings] == ["E_BAL", "E_KNOW", "E_ANY"]
    assert len(source.requests) == 2


def test_cached_access_before_load_fails_fast() -> None:
    store = ContentStore(MemoryContentSource(default_pack()))
    with pytest.raises(ContentNotLoadedError) as excinfo:
        store.cached_bucket(Bucket.GRADUATE)
    assert "graduate" in str(excinfo.value)
    with pytest.raises(ContentNotLoadedError):
        store.cached_endings()


def test_unknown_bucket_is_rejected() -> None:
    store = ContentStore(MemoryContentSource(default_pack()))
    with pytest.raises(ValueError):
        asyncio.run(store.load_bucket("endings"))


def test_bundled_content_pack_loads() -> None:
    store = ContentStore(DirectoryContentSource(BUNDLED_CONTENT_DIR))

    async def _load_all():
        buckets = {bucket: await store.load_bucket(bucket) for bucket in Bucket}
        return buckets, await store.load_endings()

    buckets, endings = asyncio.run(_load_all())
    assert len(buckets[Bucket.COMMON]) >= 8
    assert len(buckets[Bucket.FUN]) >= 4
    for bucket in (Bucket.STUDENT, Bucket.WORKING_HOLIDAY, Bucket.GRADUATE, Bucket.OFFSHORE):
        assert any(event.is_local for event in buckets[bucket])
        assert all(len(event.options) == 3 for event in buckets[bucket])
    assert endings


def test_directory_source_missing_file_raises_load_error(tmp_path: Path) -> None:
    store = ContentStore(DirectoryContentSource(tmp_path))
    with pytest.raises(ContentLoadError) as excinfo:
        asyncio.run(store.load_bucket(Bucket.OFFSHORE))
    assert excinfo.value.bucket == "offshore"


class _FakeResponse:
    def __init__(self, *, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text


class _FakeAsyncClient:
    scenarios: list[object] = []
    requests: list[str] = []

    def __init__(self, *, timeout):
        self.timeout = timeout

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url: str):
        _FakeAsyncClient.requests.append(url)
        if not _FakeAsyncClient.scenarios:
            raise RuntimeError("no fake scenario configured")
        outcome = _FakeAsyncClient.scenarios.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _install_fake_client(monkeypatch: pytest.MonkeyPatch, *scenarios: object) -> None:
    _FakeAsyncClient.scenarios = list(scenarios)
    _FakeAsyncClient.requests = []
    monkeypatch.setattr(sources.httpx, "AsyncClient", _FakeAsyncClient)


def test_http_source_fetches_from_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_fake_client(monkeypatch, _FakeResponse(status_code=200, text=default_pack()["workingHoliday"]))

    source = HttpContentSource("https://cdn.example.org/data/", timeout_s=3.0)
    events = asyncio.run(ContentStore(source).load_bucket(Bucket.WORKING_HOLIDAY))

    assert _FakeAsyncClient.requests == ["https://cdn.example.org/data/04_Events_WHV.csv"]
    assert [event.id for event in events][:2] == ["W01", "W02"]


def test_http_source_non_200_is_a_load_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_fake_client(monkeypatch, _FakeResponse(status_code=503))

    source = HttpContentSource("https://cdn.example.org/data")
    with pytest.raises(ContentLoadError) as excinfo:
        asyncio.run(source.fetch_text("07_Endings.csv", bucket="endings"))
    assert excinfo.value.error_kind == CONTENT_LOAD_HTTP_STATUS
    assert excinfo.value.bucket == "endings"


def test_http_source_transport_error_is_a_load_error(monkeypatch: pytest.MonkeyPatch) -> None:
    request = httpx.Request("GET", "https://cdn.example.org/data/07_Endings.csv")
    _install_fake_client(monkeypatch, httpx.ConnectError("unreachable", request=request))

    source = HttpContentSource("https://cdn.example.org/data")
    with pytest.raises(ContentLoadError) as excinfo:
        asyncio.run(source.fetch_text("07_Endings.csv", bucket="endings"))
    assert excinfo.value.error_kind == CONTENT_LOAD_FAILED


def test_build_content_store_picks_configured_source(tmp_path: Path) -> None:
    http_store = build_content_store(Settings(content_source="http", content_base_url="https://cdn.example.org"))
    assert isinstance(http_store.source, HttpContentSource)

    dir_store = build_content_store(Settings(content_source="directory", content_dir=str(tmp_path)))
    assert isinstance(dir_store.source, DirectoryContentSource)
    assert dir_store.source.root == tmp_path

    bundled = build_content_store(Settings(content_source="bundled"))
    assert bundled.source.root == BUNDLED_CONTENT_DIR
