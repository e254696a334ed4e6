"""Exceptions raised by the work-resource scaffolder."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error the scaffolder raises on purpose."""


class InvalidNameError(ScaffoldError):
    """Raised when the resource name cannot be used for a work type."""

    def __init__(self, name: str, reason: str | None = None) -> None:
        self.name = name
        super().__init__(
            reason
            or (
                f"Error: A work resource with the name '{name}' would cause "
                "name-space clashes. Please use a different name."
            )
        )


class AttributeParseError(ScaffoldError):
    """Raised for an attribute token that is not ``name`` or ``name:type``."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid attribute '{token}': expected name:type")


class FileConflictError(ScaffoldError):
    """Raised when a destination exists with different content and the
    conflict policy is ``abort``."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Conflict: {path} already exists with different content")
