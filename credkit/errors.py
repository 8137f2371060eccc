"""
Custom Exceptions

Defines the exceptions raised by credkit and the non-fatal outcomes
recorded during discovery.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional


class CredkitError(Exception):
    """Base exception for credkit errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self):
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ConfigurationError(CredkitError):
    """Exception raised when configuration or a credential declaration is invalid."""

    def __init__(self, message: str, config_file: Optional[str] = None,
                 config_path: Optional[str] = None, **kwargs):
        context = kwargs.copy()
        if config_file:
            context['config_file'] = config_file
        if config_path:
            context['config_path'] = config_path

        super().__init__(message, context)


class ValidationError(CredkitError):
    """Exception raised when credential values do not satisfy their schema.

    The offending value is never part of the context, only the field name.
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 credential_type: Optional[str] = None, **kwargs):
        context = kwargs.copy()
        if field:
            context['field'] = field
        if credential_type:
            context['credential_type'] = credential_type

        super().__init__(message, context)


class ParseError(CredkitError):
    """Exception raised when a structured config file cannot be parsed."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        context = kwargs.copy()
        if path:
            context['path'] = path

        super().__init__(message, context)


class MalformedSourceError(CredkitError):
    """A discovery source exists but could not be read as credentials.

    Recorded on an ImportAttempt, never raised out of discovery.
    """

    def __init__(self, message: str, source: Optional[str] = None,
                 importer: Optional[str] = None, **kwargs):
        context = kwargs.copy()
        if source:
            context['source'] = source
        if importer:
            context['importer'] = importer

        super().__init__(message, context)
        self.source = source
        self.importer = importer


class ProvisionError(CredkitError):
    """Exception raised when a credential cannot be provisioned for a launch."""

    def __init__(self, message: str, provisioner: Optional[str] = None,
                 path: Optional[str] = None, **kwargs):
        context = kwargs.copy()
        if provisioner:
            context['provisioner'] = provisioner
        if path:
            context['path'] = path

        super().__init__(message, context)


class LaunchError(CredkitError):
    """Exception raised when the child process cannot be run."""

    def __init__(self, message: str, command: Optional[str] = None,
                 timeout_seconds: Optional[float] = None, **kwargs):
        context = kwargs.copy()
        if command:
            context['command'] = command
        if timeout_seconds:
            context['timeout_seconds'] = timeout_seconds

        super().__init__(message, context)


@dataclass(frozen=True)
class CompositionMismatch:
    """A value that failed its field's composition rule.

    This is a validation outcome, not an exception: the field is simply
    not trusted.
    """

    field: str
    reason: str

    def __str__(self):
        return f"{self.field}: {self.reason}"


def format_error_context(error: Exception) -> Dict[str, Any]:
    """
    Format error context for logging or reporting.

    Args:
        error: Exception instance

    Returns:
        Dictionary with error context information
    """
    if isinstance(error, CredkitError):
        return {
            'error_type': error.__class__.__name__,
            'message': error.message,
            'context': error.context
        }
    else:
        return {
            'error_type': error.__class__.__name__,
            'message': str(error),
            'context': {}
        }
