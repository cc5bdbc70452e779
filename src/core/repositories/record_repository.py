"""Abstract contract for record persistence."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from core.models.record import StoredRecord

RecordT = TypeVar("RecordT", bound=StoredRecord)


class RecordRepository(ABC, Generic[RecordT]):
    """Contract for storing and retrieving records of one collection.

    Implementations could be DynamoDB, MongoDB, PostgreSQL, etc.
    Schema enforcement (required fields, trimming, numeric bounds) happens
    here at write time; callers do not re-validate.
    """

    @abstractmethod
    def insert(self, *, fields: dict[str, Any]) -> RecordT:
        """Validate and persist a new record.

        Args:
            fields: Record attributes (camelCase or snake_case keys)

        Returns:
            The persisted record with store-assigned id and timestamps

        Raises:
            ValidationError: If the fields violate the record schema
            StoreError: If persistence fails
        """

    @abstractmethod
    def find_all(self) -> list[RecordT]:
        """Return every record of the collection, oldest first.

        Raises:
            StoreError: If the listing fails
        """

    @abstractmethod
    def find_by_id(self, *, record_id: str) -> RecordT | None:
        """Fetch one record.

        Returns:
            The record, or None if not found

        Raises:
            StoreError: If the fetch fails
        """

    @abstractmethod
    def update_by_id(self, *, record_id: str, changes: dict[str, Any]) -> RecordT:
        """Merge `changes` onto a stored record and persist it.

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If the merged record violates the schema
            StoreError: If persistence fails
        """

    @abstractmethod
    def delete_by_id(self, *, record_id: str) -> bool:
        """Delete one record.

        Returns:
            True if a record was deleted, False if none existed

        Raises:
            StoreError: If deletion fails
        """
