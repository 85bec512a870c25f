from __future__ import annotations

from typing import Any, Dict, List, Optional


class AdminException(Exception):
    """
    Base exception for the admin panel.

    Handlers and integrators rely on:
    - attributes: message/code/status_code/details/user_message
    - method: to_dict()
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "ADMIN_ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details: Dict[str, Any] = details or {}
        self.user_message = user_message or message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class ConfigurationError(AdminException):
    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs: Any):
        details: Dict[str, Any] = {"config_key": config_key} if config_key else {}
        details.update(kwargs)
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            status_code=500,
            details=details,
            user_message="Admin configuration error",
        )


class InvalidDirective(ConfigurationError):
    def __init__(self, key: str, value: str, field: Optional[str] = None):
        message = f"invalid value for '{key}' directive: {value}"
        if field:
            message += f" (field '{field}')"
        self.key = key
        self.value = value
        super().__init__(message, config_key=key, value=value, field=field)


class TypeConversionError(ConfigurationError):
    def __init__(self, value: Any, kind: Any, reason: Optional[str] = None):
        kind_name = getattr(kind, "value", kind)
        message = f"error converting value '{value}' to type '{kind_name}'"
        if reason:
            message += f": {reason}"
        self.value = value
        self.kind = kind
        super().__init__(message, value=str(value), kind=str(kind_name))


class RegistrationConflict(AdminException):
    def __init__(self, message: str, name: Optional[str] = None, **kwargs: Any):
        details: Dict[str, Any] = {"name": name} if name else {}
        details.update(kwargs)
        super().__init__(
            message=message,
            code="REGISTRATION_CONFLICT",
            status_code=409,
            details=details,
        )


class DuplicateEntity(RegistrationConflict):
    def __init__(self, name: str, owner: str, kind: str = "model"):
        super().__init__(
            f"admin {kind} '{name}' already exists in '{owner}'. "
            f"{kind.capitalize()}s cannot be registered more than once",
            name=name,
            owner=owner,
        )


class NotURLSafe(RegistrationConflict):
    def __init__(self, name: str, kind: str = "model"):
        super().__init__(f"admin {kind} '{name}' name is not URL safe", name=name)


class InvalidEntityShape(RegistrationConflict):
    def __init__(self, entity: Any):
        name = getattr(entity, "__name__", type(entity).__name__)
        super().__init__(
            f"admin model '{name}' must be a dataclass, a SQLAlchemy mapped class "
            "or declare __admin_fields__",
            name=name,
        )


class PermissionDenied(AdminException):
    def __init__(self, action: str = "forbidden", resource: Optional[str] = None, **kwargs: Any):
        message = "forbidden" if action == "forbidden" else f"Permission denied for action: {action}"
        if resource:
            message += f" on resource: {resource}"
        details: Dict[str, Any] = {"action": action, "resource": resource}
        details.update(kwargs)
        super().__init__(
            message=message,
            code="PERMISSION_DENIED",
            status_code=403,
            details=details,
            user_message="You don't have permission to perform this action",
        )


class ValidationError(AdminException):
    def __init__(self, message: str, field: Optional[str] = None, **kwargs: Any):
        details: Dict[str, Any] = {"field": field} if field else {}
        details.update(kwargs)
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details=details,
            user_message=f"Validation failed: {message}",
        )


class FormValidationError(ValidationError):
    """Raised by ModelForm.save when submitted values do not validate."""

    def __init__(self, form_errors: List[str], field_errors: Dict[str, List[str]]):
        self.form_errors = list(form_errors)
        self.field_errors = {k: list(v) for k, v in field_errors.items() if v}
        super().__init__(
            "submitted values are not valid",
            form_errors=self.form_errors,
            field_errors=self.field_errors,
        )


class IntegratorError(AdminException):
    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message=message,
            code="INTEGRATOR_ERROR",
            status_code=500,
            details=dict(kwargs),
        )


class LoggingError(AdminException):
    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message=f"failed to record log entry: {message}",
            code="LOGGING_ERROR",
            status_code=500,
            details=dict(kwargs),
            user_message="Audit logging failed",
        )


class MissingParameter(AdminException):
    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"parameter '{name}' is required",
            code="MISSING_PARAMETER",
            status_code=400,
            details={"parameter": name},
        )


class NotFound(AdminException):
    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} '{identifier}' not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "id": identifier},
        )
