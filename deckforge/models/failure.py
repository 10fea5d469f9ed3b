"""
Failure classification for deck conversion.

Recoverable problems (unparseable lines, unknown cards, substituted
printings) never raise; they are reported as diagnostics. The exceptions
defined here are the TERMINAL outcomes a caller must handle.

INVARIANT: Only EmptyDeckError ends a conversion pass. CatalogUnavailableError
is raised before a pass can start.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # No card line resolved
    EMPTY_RESULT = "empty_result"

    # Catalog file missing or unreadable
    CATALOG_UNAVAILABLE = "catalog_unavailable"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail for reporting."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class EmptyDeckError(KnownError):
    """
    Raised when a conversion pass produced no playable entries.

    Every card line was unrecognized or unresolved (or there were none).
    This is the single terminal failure of the pipeline.
    """

    def __init__(self, unresolved_count: int = 0, unrecognized_count: int = 0):
        self.unresolved_count = unresolved_count
        self.unrecognized_count = unrecognized_count
        detail = None
        if unresolved_count or unrecognized_count:
            detail = (
                f"{unresolved_count} unresolved card(s), "
                f"{unrecognized_count} unrecognized line(s)"
            )
        super().__init__(
            kind=FailureKind.EMPTY_RESULT,
            message="The deck list did not contain any recognizable cards.",
            detail=detail,
            suggestion="Check that lines look like '4 Card Name' and that card names are spelled correctly.",
        )


class CatalogUnavailableError(KnownError):
    """Raised by entry points when the card catalog can't be loaded."""

    def __init__(self, reason: str):
        super().__init__(
            kind=FailureKind.CATALOG_UNAVAILABLE,
            message="The card catalog could not be loaded.",
            detail=reason,
            suggestion="Run `deckforge-download-cards` or pass --catalog with a Scryfall bulk file.",
        )
