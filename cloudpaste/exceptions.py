from enum import StrEnum


class CloudPasteError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:cloudpaste_error'


class ConfigurationError(CloudPasteError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class ValidationErrorCode(StrEnum):
    """Reasons a paste creation request can be rejected."""

    INVALID_JSON = 'INVALID_JSON'
    INVALID_BODY = 'INVALID_BODY'
    INVALID_CONTENT = 'INVALID_CONTENT'
    INVALID_TTL = 'INVALID_TTL'
    INVALID_MAX_VIEWS = 'INVALID_MAX_VIEWS'


class ValidationError(CloudPasteError):
    """Raised when paste creation parameters are malformed.

    Attributes:
        code (ValidationErrorCode):
            Enumerated cause of the failure, safe to surface to clients.
    """

    error_code = 'app:validation_error'

    def __init__(self, code: ValidationErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
