"""
Exceptions raised by depinstall.
"""

from enum import Enum
from typing import Optional


class ErrorReason(Enum):
    """Classification of dependency failures."""

    DEPENDENCY_NOT_FOUND = "DependencyNotFound"
    DEPENDENCY_INSTALLATION_FAILED = "DependencyInstallationFailed"
    INVALID_CONFIGURATION = "InvalidConfiguration"


class DepInstallException(Exception):
    """
    Base exception for depinstall.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DependencyException(DepInstallException):
    """Raised when a dependency cannot be resolved or installed."""

    def __init__(self, message: str, reason: ErrorReason):
        super().__init__(message)
        self.reason = reason

    @property
    def is_permanent(self) -> bool:
        return self.reason == ErrorReason.DEPENDENCY_NOT_FOUND


class ProcessException(DepInstallException):
    """Raised when an external process fails to launch or exits with an error."""

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        command: Optional[str] = None,
    ):
        super().__init__(message)
        self.exit_code = exit_code
        self.command = command


class ConfigurationException(DepInstallException):
    """Raised when parameters or settings are invalid."""

    pass
