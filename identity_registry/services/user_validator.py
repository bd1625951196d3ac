from typing import Any, Dict, List
from pydantic import ValidationError as PydanticValidationError
from identity_registry.core.exceptions import ImmutableFieldError, ValidationError
from identity_registry.models.user import IMMUTABLE_FIELDS
from identity_registry.schemas.user_schema import UserCreateRequest, UserUpdateRequest

UPDATABLE_FIELDS = frozenset(UserUpdateRequest.model_fields)


def _field_errors(error: PydanticValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        ctx_error = (err.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else err["msg"]
        errors.append({"field": field, "message": message})
    return errors


def _require_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError([{"field": "body", "message": "Request body must be a JSON object"}])
    return payload


def validate_create(payload: Any) -> UserCreateRequest:
    payload = _require_object(payload)
    try:
        return UserCreateRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(_field_errors(e)) from e


def validate_update(payload: Any) -> Dict[str, Any]:
    """Validate a partial update and return only the fields that were sent.

    Identity documents are rejected by key alone, whatever their value, and
    so is any field outside the updatable set.
    """
    payload = _require_object(payload)

    locked = [f for f in IMMUTABLE_FIELDS if f in payload]
    if locked:
        raise ImmutableFieldError(
            "Aadhaar and PAN cannot be updated after creation", field=locked[0]
        )

    unknown = sorted(k for k in payload if k not in UPDATABLE_FIELDS)
    if unknown:
        raise ImmutableFieldError(
            f"Unknown or protected fields: {', '.join(unknown)}", field=unknown[0]
        )

    try:
        request = UserUpdateRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(_field_errors(e)) from e
    return request.model_dump(exclude_unset=True)
