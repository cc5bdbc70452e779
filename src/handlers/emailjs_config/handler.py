"""
Lambda handler exposing the EmailJS client configuration to the front end.
"""

import os
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.constants import (
    ENV_EMAILJS_PUBLIC_KEY,
    ENV_EMAILJS_SERVICE_ID,
    ENV_EMAILJS_TEMPLATE_ID,
)
from core.utils.decorators import api_gateway_handler, request_context
from core.utils.response import ResponseBuilder

from .models import EmailJSConfigResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def lambda_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle `GET /emailjs-config`.

    Unset variables are returned as null so the client can detect a
    misconfigured deployment.
    """
    logger.info("Received EmailJS config request", extra=request_context(event, context))

    response = EmailJSConfigResponse(
        service_id=os.getenv(ENV_EMAILJS_SERVICE_ID),
        template_id=os.getenv(ENV_EMAILJS_TEMPLATE_ID),
        public_key=os.getenv(ENV_EMAILJS_PUBLIC_KEY),
    )

    missing = [name for name, value in response.model_dump().items() if value is None]
    if missing:
        logger.warning("EmailJS configuration incomplete", extra={"missing": missing})

    return ResponseBuilder.ok(response.model_dump(by_alias=True))
