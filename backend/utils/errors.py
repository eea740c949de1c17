# backend/utils/errors.py
from typing import Any, Dict, List, Optional


class DirectoryError(Exception):
    """Base class for errors raised by the directory core."""

    status_code = 500
    message = "Directory error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(DirectoryError):
    """Malformed or out-of-range input. Carries field-level detail."""

    status_code = 400
    message = "Validation error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        # Keep only JSON-safe keys, pydantic puts exception objects into "ctx"
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
            for e in exc.errors()
        ]
        return cls(errors=errors)


class NotFoundError(DirectoryError):
    status_code = 404
    message = "Not found"


class ForbiddenError(DirectoryError):
    status_code = 403
    message = "Forbidden"


class InvalidOperationError(DirectoryError):
    status_code = 400
    message = "Invalid operation"


class UnauthenticatedError(DirectoryError):
    status_code = 401
    message = "Could not validate credentials"
