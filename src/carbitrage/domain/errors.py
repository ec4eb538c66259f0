"""Domain error classes.

Raised by the search domain and use cases, translated to JSON by the HTTP
entrypoint. Validation failures name the offending query field so a client
can highlight it next to the filter control.
"""

from __future__ import annotations

from typing import Any, TypedDict


class FieldError(TypedDict):
    """One rejected input: field name, readable message, stable code."""

    field: str
    message: str
    code: str


class DomainError(Exception):
    """Base class for all domain errors.

    Carries a stable error code, a message and free-form context.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.error_code, **self.context}


class ValidationError(DomainError):
    """Input that passed type checks but breaks a search rule.

    Examples:
        - year_min > year_max
        - page < 1
        - malformed vehicle id
        - unknown condition

    REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[FieldError] | None = None,
        **context: Any,
    ) -> None:
        self.errors: list[FieldError] | None = errors or None
        if message is None:
            message = "Validation failed" if self.errors else "Validation error"
        super().__init__(message, **context)

    @classmethod
    def for_field(
        cls, field: str, message: str, code: str = "INVALID_VALUE", **context: Any
    ) -> ValidationError:
        """Single-field failure; the field message doubles as the overall message."""
        return cls(message, errors=[FieldError(field=field, message=message, code=code)], **context)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.errors:
            result["errors"] = self.errors
        return result


class NotFoundError(DomainError):
    """Listing missing or no longer active.

    REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class InternalError(DomainError):
    """Stored data the domain cannot represent (e.g. an unknown condition).

    REST: 500 Internal Server Error
    """

    error_code: str = "INTERNAL_ERROR"
