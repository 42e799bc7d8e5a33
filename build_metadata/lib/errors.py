"""Structured exception hierarchy for metadata generation.

Provides specific exception types for each failure mode of a run,
with enough context (field, command, cause) to act on the failure.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

__all__ = [
    "MetadataError",
    "MissingRequiredInput",
    "MissingRunIdentifier",
    "MalformedRepositoryReference",
    "VersionCommandFailed",
    "SerializationFailure",
    "WriteFailure",
    "PostWriteCheckFailure",
    "ConfigurationError",
]


def _cause_details(details: Dict[str, Any], cause: Optional[BaseException]) -> Dict[str, Any]:
    if cause is not None:
        details["cause"] = str(cause)
        details["cause_type"] = type(cause).__name__
    return details


class MetadataError(Exception):
    """Base exception for all metadata generation errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.field = field
        self.details = details or {}
        self.suggestion = suggestion

        # Build full message
        parts = [f"[{field}] {message}" if field else message]

        if self.details:
            parts.append("\nDetails:")
            parts.extend(f"  {k}: {v}" for k, v in self.details.items())

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "field": self.field,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class MissingRequiredInput(MetadataError):
    """A required input (product or version) resolved to an empty value."""

    def __init__(self, field: str, message: Optional[str] = None, **kwargs: Any) -> None:
        suggestion = kwargs.pop("suggestion", None) or (
            f"Set the '{field}' input of the step or pass --{field}."
        )
        super().__init__(
            message or f"Missing input '{field}' value",
            field=field,
            suggestion=suggestion,
            **kwargs,
        )


class MissingRunIdentifier(MetadataError):
    """The CI run identifier is not available in the environment."""

    def __init__(self, variable: str = "GITHUB_RUN_ID", **kwargs: Any) -> None:
        self.variable = variable
        super().__init__(
            f"{variable} is empty",
            field="build_workflow_id",
            suggestion=kwargs.pop(
                "suggestion",
                "Run inside a GitHub Actions workflow or export the run id variable.",
            ),
            **kwargs,
        )


class MalformedRepositoryReference(MetadataError):
    """The repository variable is not in ``org/repo`` form."""

    def __init__(self, value: str, variable: str = "GITHUB_REPOSITORY", **kwargs: Any) -> None:
        self.value = value
        self.variable = variable
        details = kwargs.pop("details", {})
        details[variable] = value
        super().__init__(
            f"{variable} is not in 'org/repo' form",
            field="repo",
            details=details,
            suggestion=kwargs.pop("suggestion", "Set the 'repo' input explicitly."),
            **kwargs,
        )


class VersionCommandFailed(MetadataError):
    """The version command could not be run, exited non-zero, or printed nothing."""

    def __init__(
        self,
        message: str,
        *,
        command: str,
        args: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
        stderr: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.command = command
        self.command_args = list(args or [])
        self.cause = cause
        self.stderr = stderr

        details = kwargs.pop("details", {})
        details["command"] = command
        details["args"] = " ".join(self.command_args)
        if stderr:
            details["stderr"] = stderr
        _cause_details(details, cause)

        super().__init__(message, field="version", details=details, **kwargs)


class SerializationFailure(MetadataError):
    """The metadata record could not be converted to JSON."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None, **kwargs: Any) -> None:
        self.cause = cause
        details = _cause_details(kwargs.pop("details", {}), cause)
        super().__init__(message, details=details, **kwargs)


class WriteFailure(MetadataError):
    """The metadata file could not be written."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        self.path = path
        self.cause = cause

        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        _cause_details(details, cause)

        suggestion = kwargs.pop("suggestion", None) or (
            "Check that the output directory exists and is writable."
        )
        super().__init__(message, details=details, suggestion=suggestion, **kwargs)


class PostWriteCheckFailure(MetadataError):
    """The written file could not be confirmed on disk."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        self.path = path
        self.cause = cause

        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        _cause_details(details, cause)

        super().__init__(message, details=details, **kwargs)


class ConfigurationError(MetadataError):
    """Error in an inputs configuration file."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        key: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.path = path
        self.key = key

        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if key:
            details["key"] = key

        super().__init__(message, details=details, **kwargs)
