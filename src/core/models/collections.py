"""Closed set of project collections and tab resolution."""

import os
from enum import Enum

from aws_lambda_powertools import Logger

from core.models.errors import InvalidSelectorError
from core.utils.constants import ENV_PROJECT_TABLE_PREFIX

logger = Logger(UTC=True)


class ProjectCollection(str, Enum):
    """Project collections sharing the `ProjectItem` shape.

    Collections are partitions chosen per request, never queried across.
    """

    CESP = "cesp"
    CP = "cp"
    LED = "led"
    IN = "in"

    @property
    def table_name(self) -> str:
        """DynamoDB table backing this collection."""
        prefix = os.getenv(ENV_PROJECT_TABLE_PREFIX, "")
        return f"{prefix}{self.value.upper()}"


def resolve_collection(tab: str | None) -> ProjectCollection:
    """Resolve a tab identifier to its collection.

    Raises:
        InvalidSelectorError: If the tab is not one of the known collections
    """
    try:
        return ProjectCollection(tab)
    except ValueError as exc:
        logger.warning("Invalid collection tab", extra={"tab": tab})
        raise InvalidSelectorError(
            message="Invalid collection/tab",
            details={
                "tab": tab,
                "allowed": [collection.value for collection in ProjectCollection],
            },
        ) from exc
