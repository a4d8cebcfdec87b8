"""
Tests for the time-bucketed content cache.
"""

from __future__ import annotations

import asyncio
import json
import random
import re
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from pydantic import TypeAdapter

from thinkaroo.cache import MAX_OBJECTS_PER_HOUR, TimedContentCache, format_timed_prefix
from thinkaroo.exceptions import SerializationError, StorageError
from thinkaroo.storage import MemoryObjectStore, ObjectStore
from thinkaroo.types import ContentCategory, ReadingContents

READING = ContentCategory.READING

KEY_PATTERN = re.compile(r"^reading/2025-10-11-14/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\.json$")


class Opaque:
    """Plain class with no JSON schema."""


def reading(n: int) -> ReadingContents:
    return ReadingContents(title=f"Title {n}", story=f"Story {n}", questions=[f"Q{n}"])


async def fill(cache: TimedContentCache, count: int) -> list[str]:
    return [await cache.store(reading(i), READING) for i in range(count)]


class TestBucketPrefix:
    """Bucket prefix formatting."""

    def test_format(self) -> None:
        dt = datetime(2025, 10, 11, 14, 59, 59, tzinfo=timezone.utc)
        assert format_timed_prefix(dt, READING) == "reading/2025-10-11-14/"

    def test_zero_padded(self) -> None:
        dt = datetime(2025, 1, 2, 3, tzinfo=timezone.utc)
        assert format_timed_prefix(dt, READING) == "reading/2025-01-02-03/"

    def test_aware_datetime_converted_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        dt = datetime(2025, 10, 11, 16, 5, tzinfo=plus_two)
        assert format_timed_prefix(dt, READING) == "reading/2025-10-11-14/"

    def test_category_prefix_and_prompt(self) -> None:
        assert READING.prefix == "reading"
        assert READING.prompt_name == "reading_comprehension"


class TestLookup:
    """Generate-or-reuse decisions."""

    @pytest.mark.asyncio
    async def test_empty_bucket_returns_none(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, clock=clock)

        assert await cache.lookup(READING, ReadingContents) is None

    @pytest.mark.asyncio
    async def test_capacity_boundary(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=16, clock=clock)

        await fill(cache, 15)
        assert await cache.lookup(READING, ReadingContents) is None

        await cache.store(reading(15), READING)
        assert await cache.lookup(READING, ReadingContents) is not None

    def test_default_capacity_is_sixteen(self, memory_store) -> None:
        assert TimedContentCache(memory_store).capacity == MAX_OBJECTS_PER_HOUR == 16

    @pytest.mark.asyncio
    async def test_full_bucket_always_hits(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=3, clock=clock)
        stored = [reading(i) for i in range(4)]
        for item in stored:
            await cache.store(item, READING)

        for _ in range(20):
            result = await cache.lookup(READING, ReadingContents)
            assert result in stored

    @pytest.mark.asyncio
    async def test_end_to_end_single_capacity(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        assert await cache.lookup(READING, ReadingContents) is None

        artifact = ReadingContents(title="T", story="S", questions=["Q1"])
        await cache.store(artifact, READING)

        assert await cache.lookup(READING, ReadingContents) == artifact

    @pytest.mark.asyncio
    async def test_random_selection_covers_entries(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=2, clock=clock, rng=random.Random(7))
        await fill(cache, 2)

        seen = {(await cache.lookup(READING, ReadingContents)).title for _ in range(60)}

        assert seen == {"Title 0", "Title 1"}

    @pytest.mark.asyncio
    async def test_lookup_into_plain_dict(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        await cache.store({"title": "T", "story": "S", "questions": ["Q1"]}, READING)

        assert await cache.lookup(READING, dict) == {"title": "T", "story": "S", "questions": ["Q1"]}


class TestBucketIsolation:
    """Entries never leak across hours or categories."""

    @pytest.mark.asyncio
    async def test_other_hour_not_served(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        await cache.store(reading(1), READING)

        clock.advance(hours=1)

        assert await cache.lookup(READING, ReadingContents) is None

    @pytest.mark.asyncio
    async def test_previous_hour_still_persisted(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        await cache.store(reading(1), READING)
        clock.advance(hours=1)

        assert len(await memory_store.list_objects("reading/2025-10-11-14/")) == 1

    @pytest.mark.asyncio
    async def test_other_category_prefix_not_served(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        await memory_store.put_object(
            "writing/2025-10-11-14/x.json", b'{"title": "W", "story": "W", "questions": []}'
        )
        await memory_store.put_object(
            "readings/2025-10-11-14/y.json", b'{"title": "W", "story": "W", "questions": []}'
        )

        assert await cache.lookup(READING, ReadingContents) is None

    @pytest.mark.asyncio
    async def test_store_recomputes_bucket_after_hour_boundary(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        assert await cache.lookup(READING, ReadingContents) is None

        clock.advance(minutes=45)
        key = await cache.store(reading(1), READING)

        assert key.startswith("reading/2025-10-11-15/")


class TestStore:
    """Persisted layout and round trip."""

    @pytest.mark.asyncio
    async def test_key_layout(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, clock=clock)

        key = await cache.store(reading(1), READING)

        assert KEY_PATTERN.match(key)

    @pytest.mark.asyncio
    async def test_keys_unique_per_write(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, clock=clock)

        keys = await fill(cache, 10)

        assert len(set(keys)) == 10

    @pytest.mark.asyncio
    async def test_body_is_utf8_json(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, clock=clock)
        artifact = ReadingContents(title="Café", story="S", questions=["Q1"])

        key = await cache.store(artifact, READING)
        body = await memory_store.get_object(key)

        assert json.loads(body.decode("utf-8")) == {
            "title": "Café",
            "story": "S",
            "questions": ["Q1"],
        }

    @pytest.mark.asyncio
    async def test_round_trip_through_store(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, clock=clock)
        artifact = reading(3)

        key = await cache.store(artifact, READING)
        data = await memory_store.get_object(key)

        assert TypeAdapter(ReadingContents).validate_json(data) == artifact

    @pytest.mark.asyncio
    async def test_store_writes_past_capacity(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=2, clock=clock)

        await fill(cache, 5)

        assert len(await memory_store.list_objects(cache.current_prefix(READING))) == 5

    @pytest.mark.asyncio
    async def test_works_on_disk_backend(self, disk_store, clock) -> None:
        cache = TimedContentCache(disk_store, capacity=2, clock=clock)
        await fill(cache, 2)

        result = await cache.lookup(READING, ReadingContents)

        assert result in (reading(0), reading(1))

    def test_capacity_must_be_positive(self, memory_store) -> None:
        with pytest.raises(ValueError):
            TimedContentCache(memory_store, capacity=0)


class TestFailures:
    """Errors surface as typed failures, never as misses."""

    @pytest.mark.asyncio
    async def test_corrupt_entry_raises_serialization_error(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        await memory_store.put_object("reading/2025-10-11-14/bad.json", b"not json{")

        with pytest.raises(SerializationError) as exc_info:
            await cache.lookup(READING, ReadingContents)

        assert exc_info.value.context["key"] == "reading/2025-10-11-14/bad.json"

    @pytest.mark.asyncio
    async def test_schema_mismatch_raises_serialization_error(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        await memory_store.put_object("reading/2025-10-11-14/bad.json", b'{"title": "only"}')

        with pytest.raises(SerializationError):
            await cache.lookup(READING, ReadingContents)

    @pytest.mark.asyncio
    async def test_storage_error_propagates_without_retry(self, clock) -> None:
        store = AsyncMock(spec=ObjectStore)
        store.list_objects.side_effect = StorageError("backend down")
        cache = TimedContentCache(store, clock=clock)

        with pytest.raises(StorageError):
            await cache.lookup(READING, ReadingContents)

        assert store.list_objects.await_count == 1

    @pytest.mark.asyncio
    async def test_put_failure_propagates(self, clock) -> None:
        store = AsyncMock(spec=ObjectStore)
        store.put_object.side_effect = StorageError("disk full")
        cache = TimedContentCache(store, clock=clock)

        with pytest.raises(StorageError):
            await cache.store(reading(1), READING)

    @pytest.mark.asyncio
    async def test_unsupported_artifact_type_on_store(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)

        with pytest.raises(SerializationError) as exc_info:
            await cache.store(Opaque(), READING)

        assert exc_info.value.context["artifact_type"] == "Opaque"
        assert await memory_store.list_objects("reading/") == []

    @pytest.mark.asyncio
    async def test_unsupported_artifact_type_on_lookup(self, memory_store, clock) -> None:
        cache = TimedContentCache(memory_store, capacity=1, clock=clock)
        await memory_store.put_object("reading/2025-10-11-14/a.json", b"{}")

        with pytest.raises(SerializationError) as exc_info:
            await cache.lookup(READING, Opaque)

        assert exc_info.value.context["key"] == "reading/2025-10-11-14/a.json"


class TestConcurrency:
    """The count-then-act race is tolerated and bounded."""

    @pytest.mark.asyncio
    async def test_racing_lookups_overshoot_is_bounded(self, clock) -> None:
        store = MemoryObjectStore()
        capacity = 4
        racers = 3
        cache = TimedContentCache(store, capacity=capacity, clock=clock)
        await fill(cache, capacity - 1)

        async def request(n: int) -> None:
            if await cache.lookup(READING, ReadingContents) is None:
                await asyncio.sleep(0)
                await cache.store(reading(100 + n), READING)

        await asyncio.gather(*(request(n) for n in range(racers)))

        count = len(await store.list_objects(cache.current_prefix(READING)))
        assert capacity <= count <= capacity - 1 + racers
        assert await cache.lookup(READING, ReadingContents) is not None
