from typing import Any, Dict, List, Optional


class RegistryError(Exception):
    """Base error for the identity registry core.

    Carries a kind, a human message and, where one applies, the offending
    field, so the HTTP layer can pick a status without inspecting messages.
    """

    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str, field: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.field:
            body["field"] = self.field
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(RegistryError):
    status_code = 400
    kind = "validation_error"

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(message, errors=errors)

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]


class ImmutableFieldError(RegistryError):
    status_code = 400
    kind = "immutable_field"


class ConflictError(RegistryError):
    status_code = 409
    kind = "conflict"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} already registered", field=field)


class NotFoundError(RegistryError):
    status_code = 404
    kind = "not_found"

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class BadRequestError(RegistryError):
    status_code = 400
    kind = "bad_request"
