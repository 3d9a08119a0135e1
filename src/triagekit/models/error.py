"""Error payload printed when a triagekit command fails."""

from typing import Any

from pydantic import BaseModel, Field


class StructuredError(BaseModel):
    """Machine-readable failure report.

    Printed on stdout in the active output format, so scripts driving
    triagekit can branch on ``code`` and show ``remediation``.
    """

    code: str = Field(
        ...,
        pattern=r"^[A-Z][A-Z0-9_]*$",
        description="One of the ErrorCode values",
    )
    message: str = Field(..., description="What went wrong")
    remediation: str = Field(..., description="What the analyst can do about it")
    retryable: bool = Field(..., description="True if rerunning unchanged may succeed")
    context: dict[str, Any] | None = Field(
        default=None,
        description="Offending path, line number or field",
    )

    model_config = {"extra": "forbid"}


class ErrorCode:
    """Codes emitted by triagekit commands."""

    # IOC list unreadable (ioc check; analyze only warns)
    IOC_LOAD_ERROR = "IOC_LOAD_ERROR"
    # Collector output or exported timeline malformed
    PARSE_ERROR = "PARSE_ERROR"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    # Bad config values or analyzer names
    VALIDATION_ERROR = "VALIDATION_ERROR"
    # Sink could not be created or written
    IO_ERROR = "IO_ERROR"
    # Unexpected exception escaping a command
    INTERNAL_ERROR = "INTERNAL_ERROR"
