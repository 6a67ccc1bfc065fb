"""
Domain-specific exception hierarchy.

All application exceptions inherit from AceError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context for logging and for the HTTP error handler in main.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ace.validation.validator import FieldViolation


class AceError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ─── Registry / stores ─────────────────────────────────

class UnknownTemplateError(AceError):
    """No template is registered under the requested id."""

    status_code = 404

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Unknown template: {template_id}", details={"template_id": template_id})


class DuplicateTemplateIdError(AceError):
    """A template with this id is already registered."""

    status_code = 409

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(
            f'Template with ID "{template_id}" already exists',
            details={"template_id": template_id},
        )


class ModelNotFoundError(AceError):
    status_code = 404

    def __init__(self, model_id: str) -> None:
        self.model_id = model_id
        super().__init__("Model not found", details={"model_id": model_id})


class RecordNotFoundError(AceError):
    status_code = 404

    def __init__(self, model_id: str, item_id: str) -> None:
        super().__init__("Item not found", details={"model_id": model_id, "item_id": item_id})


# ─── Validation ────────────────────────────────────────

class RecordValidationError(AceError):
    """A submitted record failed template validation."""

    status_code = 400

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = violations
        super().__init__(
            "Record validation failed",
            details={"errors": [v.message for v in violations]},
        )

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]


# ─── Security ──────────────────────────────────────────

class AuthError(AceError):
    """Base for OAuth failures; `code` is the OAuth error string."""

    status_code = 401
    code = "invalid_request"

    def __init__(self) -> None:
        super().__init__(self.code)


class InvalidClientError(AuthError):
    code = "invalid_client"


class InvalidScopeError(AuthError):
    status_code = 400
    code = "invalid_scope"


class InvalidTokenError(AuthError):
    code = "invalid_token"


class TokenExpiredError(AuthError):
    code = "token_expired"


# ─── Schema inference ──────────────────────────────────

class SpreadsheetError(AceError):
    """The uploaded spreadsheet could not be read."""

    status_code = 400


class SchemaInferenceError(AceError):
    """The LLM answer could not be turned into a template schema."""

    status_code = 502


# ─── External services ─────────────────────────────────

class IntegrationError(AceError):
    """Transport-level failure talking to CKAN or Orion-LD."""

    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        service: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        self.service = service
        self.upstream_status = status_code
        self.response_body = response_body
        super().__init__(message, details={"service": service, "status_code": status_code})
