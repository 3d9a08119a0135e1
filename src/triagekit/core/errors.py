"""Structured error handling for Triagekit."""

import sys
from typing import Any, NoReturn

from triagekit.models.error import ErrorCode, StructuredError


class TriageError(Exception):
    """Base exception for Triagekit errors.

    Wraps a StructuredError for consistent error handling.
    """

    def __init__(
        self,
        code: str,
        message: str,
        remediation: str,
        retryable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        self.error = StructuredError(
            code=code,
            message=message,
            remediation=remediation,
            retryable=retryable,
            context=context,
        )
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error.code

    def to_structured(self) -> StructuredError:
        """Convert to StructuredError."""
        return self.error


class IOCLoadError(TriageError):
    """IOC list could not be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code=ErrorCode.IOC_LOAD_ERROR,
            message=f"Failed to load IOC list {path}: {reason}",
            remediation="Check that the IOC file exists, is readable and is UTF-8 text",
            retryable=False,
            context={"path": path},
        )


class ParseError(TriageError):
    """Collector output could not be parsed."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None):
        context: dict[str, Any] = {}
        if path:
            context["path"] = path
        if line is not None:
            context["line"] = line
        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=message,
            remediation="Check the collector output for truncation or malformed JSON",
            retryable=False,
            context=context or None,
        )


class ConfigError(TriageError):
    """Configuration file missing or invalid."""

    def __init__(self, code: str, message: str, path: str | None = None):
        super().__init__(
            code=code,
            message=message,
            remediation="Fix the configuration file or run without --config",
            retryable=False,
            context={"path": path} if path else None,
        )


class ValidationError(TriageError):
    """Validation error."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            remediation="Check the input parameters and try again",
            retryable=False,
            context={"field": field} if field else None,
        )


class ExportError(TriageError):
    """Writing results to a sink failed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            code=ErrorCode.IO_ERROR,
            message=message,
            remediation="Check file permissions and free space at the output path",
            retryable=True,
            context={"path": path} if path else None,
        )


def handle_error(error: TriageError | Exception, exit_code: int = 1) -> NoReturn:
    """Handle an error by outputting it and exiting.

    Args:
        error: The error to handle
        exit_code: Exit code to use
    """
    from triagekit.cli.output import output_error

    if isinstance(error, TriageError):
        output_error(error.to_structured())
    else:
        structured = StructuredError(
            code=ErrorCode.INTERNAL_ERROR,
            message=str(error),
            remediation="This is an unexpected error. Please report it.",
            retryable=False,
            context={"type": type(error).__name__},
        )
        output_error(structured)

    sys.exit(exit_code)
