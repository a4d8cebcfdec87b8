"""
In-memory key/value store for testing and development.
"""

from __future__ import annotations

import asyncio

from thinkaroo.keyvalue.base import KeyValueStore
from thinkaroo.types import Column


class MemoryKeyValueStore(KeyValueStore):
    """Dict-of-dicts key/value store; mutations serialize on an asyncio lock."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._records: dict[str, dict[str, bytes]] = {}
        self._write_lock = asyncio.Lock()

    async def put(self, key: str, columns: list[Column]) -> None:
        self.check_columns(columns)
        async with self._write_lock:
            record = dict(self._records.get(key, {}))
            for column in columns:
                record[column.name] = bytes(column.value)
            self._records[key] = record

    async def get(self, key: str, column_names: list[str]) -> list[Column]:
        record = self._records.get(key)
        if record is None:
            return []
        return [
            Column(name=name, value=record[name])
            for name in column_names
            if name in record
        ]
