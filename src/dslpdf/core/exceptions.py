"""Exception hierarchy for dslpdf."""

from __future__ import annotations


class DSLError(Exception):
    """Base class for all dslpdf errors."""


class DSLValidationError(DSLError, ValueError):
    """Raised when a DSL document fails structural validation.

    ``errors`` holds every problem found, not just the first one.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        summary = "; ".join(self.errors[:5])
        if len(self.errors) > 5:
            summary += f" (+{len(self.errors) - 5} more)"
        super().__init__(f"Invalid DSL document: {summary}")


class ImageSourceError(DSLError):
    """An image element's content could not be turned into image bytes."""
