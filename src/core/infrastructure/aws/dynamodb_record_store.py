"""DynamoDB-backed implementation of RecordRepository."""

import uuid
from decimal import Decimal
from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.types import Binary
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import NotFoundError, StoreError
from core.repositories.record_repository import RecordRepository, RecordT
from core.utils.constants import (
    ERROR_CODE_RECORD_CREATE_FAILED,
    ERROR_CODE_RECORD_DELETE_FAILED,
    ERROR_CODE_RECORD_FETCH_FAILED,
    ERROR_CODE_RECORD_LIST_FAILED,
    ERROR_CODE_RECORD_UPDATE_FAILED,
)
from core.utils.time import utc_now_iso
from core.utils.validators import validate_model

Item = dict[str, Any]

logger = Logger(UTC=True)


def _to_dynamodb(value: Any) -> Any:
    """Convert Python values into types the boto3 serializer accepts."""
    if isinstance(value, float):
        return Decimal(str(value))

    if isinstance(value, dict):
        return {k: _to_dynamodb(v) for k, v in value.items() if v is not None}

    if isinstance(value, list):
        return [_to_dynamodb(v) for v in value]

    return value


def _from_dynamodb(value: Any) -> Any:
    """Unwrap boto3 Binary and Decimal values."""
    if isinstance(value, Binary):
        return value.value

    if isinstance(value, Decimal):
        return float(value)

    if isinstance(value, dict):
        return {k: _from_dynamodb(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_from_dynamodb(v) for v in value]

    return value


class DynamoDBRecordStore(RecordRepository[RecordT]):
    """DynamoDB-backed record storage with schema enforcement.

    Records are validated against `model` on every write. All boto3 errors
    are caught and translated into domain-specific errors with stable
    semantics.
    """

    def __init__(
        self,
        model: type[RecordT],
        *,
        table_name: str | None = None,
        adapter: DynamoDBAdapterProtocol | None = None,
    ) -> None:
        """Initialize with a record model and a table name or adapter."""
        if adapter is None:
            if not table_name:
                raise RuntimeError("Either table_name or adapter must be provided")
            adapter = DynamoDBAdapter(table_name)

        self._model = model
        self._db: DynamoDBAdapterProtocol = adapter

    @property
    def table_name(self) -> str:
        return self._db.table_name

    def _to_record(self, item: Item) -> RecordT:
        try:
            return self._model.model_validate(_from_dynamodb(item))
        except PydanticValidationError as exc:
            logger.error(
                "Stored item does not match record schema",
                extra={"table": self.table_name, "record_id": item.get("id")},
            )
            raise StoreError(
                message="Invalid stored record format",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"record_id": item.get("id")},
            ) from exc

    def insert(self, *, fields: dict[str, Any]) -> RecordT:
        """Validate and persist a new record.

        Raises:
            ValidationError: If the fields violate the record schema
            StoreError: If creation fails
        """
        timestamp = utc_now_iso()
        record = validate_model(
            self._model,
            {
                **self._model.writable_fields(fields),
                "id": uuid.uuid4().hex,
                "created_at": timestamp,
                "updated_at": timestamp,
            },
            message="Invalid record",
        )

        logger.debug(
            "Creating record",
            extra={"table": self.table_name, "record_id": record.id},
        )

        try:
            self._db.put_item(
                item=_to_dynamodb(record.model_dump()),
                condition_expression="attribute_not_exists(id)",
            )

        except ClientError as exc:
            logger.error(
                "DynamoDB put_item failed",
                extra={"table": self.table_name, "record_id": record.id},
            )
            raise StoreError(
                message="Unable to save record at this time",
                error_code=ERROR_CODE_RECORD_CREATE_FAILED,
                details={"record_id": record.id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating record")
            raise StoreError(
                message="Unable to save record at this time",
                error_code=ERROR_CODE_RECORD_CREATE_FAILED,
                details={"record_id": record.id},
            ) from exc

        logger.info(
            "Record created",
            extra={"table": self.table_name, "record_id": record.id},
        )
        return record

    def find_all(self) -> list[RecordT]:
        """Return every record of the table ordered by creation time.

        NOTE:
        - Scans are paginated internally until LastEvaluatedKey is exhausted.
        - created_at must be stored in ISO-8601 UTC format for ordering.
        """
        logger.debug("Listing records", extra={"table": self.table_name})

        items: list[Item] = []
        scan_kwargs: dict[str, Any] = {"ConsistentRead": True}

        try:
            while True:
                response = self._db.scan(**scan_kwargs)
                items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break

                scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

        except ClientError as exc:
            logger.error("DynamoDB scan failed", extra={"table": self.table_name})
            raise StoreError(
                message="Unable to list records",
                error_code=ERROR_CODE_RECORD_LIST_FAILED,
                details={"table": self.table_name},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing records")
            raise StoreError(
                message="Unable to list records",
                error_code=ERROR_CODE_RECORD_LIST_FAILED,
                details={"table": self.table_name},
            ) from exc

        records = sorted(
            (self._to_record(item) for item in items),
            key=lambda record: record.created_at,
        )

        logger.info(
            "Records listed",
            extra={"table": self.table_name, "count": len(records)},
        )
        return records

    def find_by_id(self, *, record_id: str) -> RecordT | None:
        """Fetch one record.

        Raises:
            StoreError: If fetch fails
        """
        logger.debug(
            "Fetching record",
            extra={"table": self.table_name, "record_id": record_id},
        )

        try:
            response = self._db.get_item(key={"id": record_id})

        except ClientError as exc:
            logger.error(
                "DynamoDB get_item failed",
                extra={"table": self.table_name, "record_id": record_id},
            )
            raise StoreError(
                message="Unable to retrieve record",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"record_id": record_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching record")
            raise StoreError(
                message="Unable to retrieve record",
                error_code=ERROR_CODE_RECORD_FETCH_FAILED,
                details={"record_id": record_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        return self._to_record(item)

    def update_by_id(self, *, record_id: str, changes: dict[str, Any]) -> RecordT:
        """Merge `changes` onto the stored record and write it back.

        The write is conditional on the record still existing, so a delete
        racing with this update surfaces as NotFoundError.

        Raises:
            NotFoundError: If the record does not exist
            ValidationError: If the merged record violates the schema
            StoreError: If the update fails
        """
        existing = self.find_by_id(record_id=record_id)
        if existing is None:
            raise NotFoundError(
                message="Item not found",
                details={"record_id": record_id},
            )

        record = validate_model(
            self._model,
            {
                **existing.model_dump(),
                **self._model.writable_fields(changes),
                "updated_at": utc_now_iso(),
            },
            message="Invalid record",
        )

        logger.debug(
            "Updating record",
            extra={"table": self.table_name, "record_id": record_id},
        )

        try:
            self._db.put_item(
                item=_to_dynamodb(record.model_dump()),
                condition_expression="attribute_exists(id)",
            )

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.warning(
                    "Record deleted during update",
                    extra={"table": self.table_name, "record_id": record_id},
                )
                raise NotFoundError(
                    message="Item not found",
                    details={"record_id": record_id},
                ) from exc

            logger.error(
                "DynamoDB put_item failed",
                extra={"table": self.table_name, "record_id": record_id},
            )
            raise StoreError(
                message="Unable to update record at this time",
                error_code=ERROR_CODE_RECORD_UPDATE_FAILED,
                details={"record_id": record_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error updating record")
            raise StoreError(
                message="Unable to update record at this time",
                error_code=ERROR_CODE_RECORD_UPDATE_FAILED,
                details={"record_id": record_id},
            ) from exc

        logger.info(
            "Record updated",
            extra={"table": self.table_name, "record_id": record_id},
        )
        return record

    def delete_by_id(self, *, record_id: str) -> bool:
        """Delete one record.

        Raises:
            StoreError: If deletion fails
        """
        logger.debug(
            "Removing record",
            extra={"table": self.table_name, "record_id": record_id},
        )

        try:
            response = self._db.delete_item(key={"id": record_id}, return_old=True)

        except ClientError as exc:
            logger.error(
                "DynamoDB delete_item failed",
                extra={"table": self.table_name, "record_id": record_id},
            )
            raise StoreError(
                message="Unable to delete record",
                error_code=ERROR_CODE_RECORD_DELETE_FAILED,
                details={"record_id": record_id},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing record")
            raise StoreError(
                message="Unable to delete record",
                error_code=ERROR_CODE_RECORD_DELETE_FAILED,
                details={"record_id": record_id},
            ) from exc

        deleted = bool(response.get("Attributes"))
        logger.info(
            "Record removal finished",
            extra={"table": self.table_name, "record_id": record_id, "deleted": deleted},
        )
        return deleted
