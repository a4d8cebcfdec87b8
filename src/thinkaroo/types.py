"""
Core types for the thinkaroo content service.

This module defines the value types shared across the storage layers and the
content cache:
- StoredObject: descriptor of a blob in an object store
- Column: a named byte value attached to a key/value record
- ContentCategory: closed set of content streams and their storage prefixes
- ReadingContents: the reading-comprehension artifact
- Helper functions for ID generation and timestamps
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def generate_id() -> str:
    """Generate a fresh random identifier (UUID4, hyphenated)."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Get current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StoredObject:
    """Descriptor of an object held by an object store.

    Only the key is tracked. Size, timestamps and content type are not.
    """

    key: str


@dataclass(frozen=True)
class Column:
    """A named binary value stored against a record key."""

    name: str
    value: bytes


class ContentCategory(str, Enum):
    """Content streams served by the cache.

    Each category owns a storage prefix and the name of the prompt used to
    generate fresh content for it.
    """

    READING = "reading"

    @property
    def prefix(self) -> str:
        """Storage prefix partitioning this category's objects."""
        return _CATEGORY_PREFIXES[self]

    @property
    def prompt_name(self) -> str:
        """Name of the prompt configuration that generates this category."""
        return _CATEGORY_PROMPTS[self]


_CATEGORY_PREFIXES: dict[ContentCategory, str] = {
    ContentCategory.READING: "reading",
}

_CATEGORY_PROMPTS: dict[ContentCategory, str] = {
    ContentCategory.READING: "reading_comprehension",
}


@dataclass
class ReadingContents:
    """A short story with comprehension questions."""

    title: str
    story: str
    questions: list[str] = field(default_factory=list)
