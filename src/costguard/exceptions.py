"""Custom exceptions for Cost Guard.

Defines the exception hierarchy raised by inspection, configuration,
template estimation and the project connector.
"""

from __future__ import annotations

from typing import Any


class CostGuardError(Exception):
    """Base exception for all Cost Guard errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ProjectDetectionError(CostGuardError):
    """Raised when the target directory is not a recognizable project."""

    def __init__(self, message: str, path: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        if path:
            self.details["path"] = path


class ConfigurationError(CostGuardError, ValueError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class TemplateError(CostGuardError):
    """Raised when a CloudFormation template cannot be loaded."""

    def __init__(self, message: str, template_path: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.template_path = template_path
        if template_path:
            self.details["template_path"] = template_path


class ConnectorError(CostGuardError):
    """Raised when writing files into the target project fails."""

    def __init__(self, message: str, target: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        if target:
            self.details["target"] = target
