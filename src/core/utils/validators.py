"""Request and record validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input (may hold image bytes)
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "at least 1 character" in msg_lower:
            msg = "This field must not be empty"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_model(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    message: str = "Invalid request payload",
) -> ModelT:
    """Validate data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate
        message: Error message used when validation fails

    Returns:
        The validated model instance

    Raises:
        ValidationError: With sanitized per-field errors in `details`
    """
    try:
        return model.model_validate(data)

    except PydanticValidationError as exc:
        errors = sanitize_validation_errors(exc.errors())
        first = errors[0]

        raise ValidationError(
            message=f"{message} ({first['field']}: {first['message']})",
            details={"errors": errors},
        ) from exc
