"""
Lambda handlers for the project collections (`/api/{tab}`).

The tab is resolved to a collection before the body is read, so an unknown
tab never touches the request payload or any table.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.collections import ProjectCollection, resolve_collection
from core.pipeline.factory import build_project_pipeline
from core.utils.constants import PROJECT_IMAGE_FIELDS
from core.utils.decorators import api_gateway_handler, request_context
from core.utils.multipart import parse_form
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_model

from .models import (
    ProjectDeleteResponse,
    ProjectItemRequest,
    ProjectListResponse,
    ProjectPathRequest,
)

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


def _path_params(event: dict[str, Any]) -> dict[str, Any]:
    return event.get("pathParameters") or {}


def _collection(event: dict[str, Any]) -> ProjectCollection:
    request = validate_model(
        ProjectPathRequest,
        {"tab": _path_params(event).get("tab")},
        message="Invalid request params",
    )
    return resolve_collection(request.tab)


def _item_request(event: dict[str, Any]) -> ProjectItemRequest:
    path_params = _path_params(event)
    return validate_model(
        ProjectItemRequest,
        {"tab": path_params.get("tab"), "id": path_params.get("id")},
        message="Invalid request params",
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def list_items(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle `GET /api/{tab}`."""
    logger.info("Received project list request", extra=request_context(event, context))

    collection = _collection(event)
    items = build_project_pipeline(collection).list_all()

    response = ProjectListResponse(
        tab=collection.value,
        items=[item.to_response() for item in items],
        count=len(items),
    )
    return ResponseBuilder.ok(response.model_dump())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def get_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle `GET /api/{tab}/{id}`."""
    logger.info("Received project get request", extra=request_context(event, context))

    collection = _collection(event)
    request = _item_request(event)
    item = build_project_pipeline(collection).get_by_id(request.id)

    return ResponseBuilder.ok(item.to_response())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def create_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `POST /api/{tab}`.

    Expected multipart/form-data body:
        nationalId, name, project, gsDivision, address, description, lat, lng
        beforePhoto, afterPhoto  optional images, at most 5MB each

    Args:
        event: API Gateway Lambda proxy event (body base64 encoded)
        context: AWS Lambda execution context

    Returns:
        201 with the created item, photos rendered as data URIs
    """
    logger.info("Received project create request", extra=request_context(event, context))

    collection = _collection(event)
    form = parse_form(event, file_fields=PROJECT_IMAGE_FIELDS)
    item = build_project_pipeline(collection).create(form.fields, form.files)

    logger.info(
        "Project item created",
        extra={"collection": collection.value, "record_id": item.id},
    )
    return ResponseBuilder.created(item.to_response())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def update_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `PUT /api/{tab}/{id}`.

    Blank or omitted fields keep their stored value. Each photo slot is
    replaced only when a new file is uploaded for it.
    """
    logger.info("Received project update request", extra=request_context(event, context))

    collection = _collection(event)
    request = _item_request(event)
    form = parse_form(event, file_fields=PROJECT_IMAGE_FIELDS)
    item = build_project_pipeline(collection).update(request.id, form.fields, form.files)

    return ResponseBuilder.ok(item.to_response())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def delete_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle `DELETE /api/{tab}/{id}`."""
    logger.info("Received project delete request", extra=request_context(event, context))

    collection = _collection(event)
    request = _item_request(event)
    result = build_project_pipeline(collection).delete_by_id(request.id)

    response = ProjectDeleteResponse(
        id=result["id"],
        deleted_at=result["deleted_at"],
        message="Item deleted successfully!",
    )
    return ResponseBuilder.ok(response.model_dump())
