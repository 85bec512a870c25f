from autoadmin.exceptions.handlers import (
    AdminException,
    ConfigurationError,
    DuplicateEntity,
    FormValidationError,
    IntegratorError,
    InvalidDirective,
    InvalidEntityShape,
    LoggingError,
    MissingParameter,
    NotFound,
    NotURLSafe,
    PermissionDenied,
    RegistrationConflict,
    TypeConversionError,
    ValidationError,
)

__all__ = [
    "AdminException",
    "ConfigurationError",
    "InvalidDirective",
    "TypeConversionError",
    "RegistrationConflict",
    "DuplicateEntity",
    "NotURLSafe",
    "InvalidEntityShape",
    "PermissionDenied",
    "ValidationError",
    "FormValidationError",
    "IntegratorError",
    "LoggingError",
    "MissingParameter",
    "NotFound",
]
