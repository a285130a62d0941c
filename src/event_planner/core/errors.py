from __future__ import annotations

from typing import Mapping, Optional


class InvalidArgument(ValueError):
    """Raised on wiring bugs, e.g. adding a package item without an offer."""


class ValidationError(Exception):
    """A wizard step failed its validator. Carries the per-field messages."""

    def __init__(self, errors: Mapping[str, str], step: Optional[int] = None):
        self.errors = dict(errors)
        self.step = step
        fields = ", ".join(sorted(self.errors)) or "-"
        super().__init__(f"Validation failed on step {step}: {fields}")


class CollaboratorError(Exception):
    """Failure of an external collaborator (recommendations, submission, drafts)."""

    def __init__(
        self,
        source: str,
        message: str = "",
        error_type: str = "unknown",
        status_code: Optional[int] = None,
    ):
        self.source = source
        self.message = message
        self.error_type = error_type  # "network", "server", "validation", "storage"
        self.status_code = status_code
        super().__init__(f"{source} failed [{error_type}]: {status_code or '-'} - {message}")
