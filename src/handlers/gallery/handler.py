"""
Lambda handlers for the gallery resource (`/gallery`).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.pipeline.factory import build_gallery_pipeline
from core.utils.constants import ALLOWED_UPLOAD_TYPES, GALLERY_IMAGE_FIELDS
from core.utils.decorators import api_gateway_handler, request_context
from core.utils.multipart import parse_form
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_model

from .models import GalleryDeleteResponse, GalleryItemRequest, GalleryListResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


def _item_request(event: dict[str, Any]) -> GalleryItemRequest:
    path_params = event.get("pathParameters") or {}
    return validate_model(
        GalleryItemRequest,
        {"id": path_params.get("id")},
        message="Invalid request params",
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def list_items(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `GET /gallery`.

    Returns every gallery item with its image rendered as a data URI.
    """
    logger.info("Received gallery list request", extra=request_context(event, context))

    items = build_gallery_pipeline().list_all()

    response = GalleryListResponse(
        items=[item.to_response() for item in items],
        count=len(items),
    )
    return ResponseBuilder.ok(response.model_dump())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def get_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle `GET /gallery/{id}`."""
    logger.info("Received gallery get request", extra=request_context(event, context))

    request = _item_request(event)
    item = build_gallery_pipeline().get_by_id(request.id)

    return ResponseBuilder.ok(item.to_response())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def create_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `POST /gallery`.

    Expected multipart/form-data body:
        image        required, JPEG/JPG/PNG/GIF, at most 5MB
        title        required
        description  optional

    Args:
        event: API Gateway Lambda proxy event (body base64 encoded)
        context: AWS Lambda execution context

    Returns:
        201 with the created item, image rendered as a data URI
    """
    logger.info("Received gallery create request", extra=request_context(event, context))

    form = parse_form(
        event,
        file_fields=GALLERY_IMAGE_FIELDS,
        allowed_types=ALLOWED_UPLOAD_TYPES,
    )
    item = build_gallery_pipeline().create(form.fields, form.files)

    return ResponseBuilder.created(item.to_response())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def update_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `PUT /gallery/{id}`.

    Blank or omitted fields keep their stored value; the image is replaced
    only when a new one is uploaded.
    """
    logger.info("Received gallery update request", extra=request_context(event, context))

    request = _item_request(event)
    form = parse_form(
        event,
        file_fields=GALLERY_IMAGE_FIELDS,
        allowed_types=ALLOWED_UPLOAD_TYPES,
    )
    item = build_gallery_pipeline().update(request.id, form.fields, form.files)

    return ResponseBuilder.ok(item.to_response())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def delete_item(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Handle `DELETE /gallery/{id}`."""
    logger.info("Received gallery delete request", extra=request_context(event, context))

    request = _item_request(event)
    result = build_gallery_pipeline().delete_by_id(request.id)

    response = GalleryDeleteResponse(
        id=result["id"],
        deleted_at=result["deleted_at"],
        message="Item removed",
    )
    return ResponseBuilder.ok(response.model_dump())
