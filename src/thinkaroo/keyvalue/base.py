"""
Base class for column-oriented key/value storage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from thinkaroo.types import Column

# Attribute holding the record key; never usable as a column name
RESERVED_COLUMN = "pk"


class KeyValueStore(ABC):
    """Abstract interface for key/value backends.

    Each key maps to a set of named binary columns. Writes merge into the
    existing record rather than replacing it.
    """

    backend_name: str = "abstract"

    @staticmethod
    def check_columns(columns: list[Column]) -> None:
        """Reject a column named after the record key attribute.

        Raises:
            ValueError: If any column is named ``RESERVED_COLUMN``.
        """
        if any(column.name == RESERVED_COLUMN for column in columns):
            raise ValueError(f"Column name {RESERVED_COLUMN!r} is reserved for the record key")

    @abstractmethod
    async def put(self, key: str, columns: list[Column]) -> None:
        """Merge columns into the record at key, creating it if absent.

        Columns not named in this call keep their previous values. Every
        backend rejects a column named ``"pk"`` before writing anything.

        Raises:
            ValueError: If a column uses the reserved name.
            StorageError: If the backend write fails.
        """
        ...

    @abstractmethod
    async def get(self, key: str, column_names: list[str]) -> list[Column]:
        """Fetch the requested columns for key.

        Columns that do not exist are omitted, so the result may be empty.
        Order is not guaranteed.

        Raises:
            StorageError: If the backend read fails.
        """
        ...
