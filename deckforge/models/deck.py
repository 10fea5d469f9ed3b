"""
Deck Models.

A Deck is the finalized, read-only output of a conversion pass.
DeckEntry values reference catalog cards, never raw strings.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from deckforge.models.catalog import CatalogCard
from deckforge.models.token import CANONICAL_SECTIONS, Section


class DiagnosticKind(str, Enum):
    """Classification of recoverable problems found during a pass."""

    UNRECOGNIZED_LINE = "unrecognized_line"
    UNKNOWN_SECTION = "unknown_section"
    UNRESOLVED_CARD = "unresolved_card"
    AMBIGUOUS_NAME = "ambiguous_name"
    PRINTING_SUBSTITUTED = "printing_substituted"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A warning tied to a source line. Never fatal."""

    line_number: int
    kind: DiagnosticKind
    message: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.message}"


@dataclass(frozen=True, slots=True)
class DeckEntry:
    """
    A resolved card in a deck section.

    Attributes:
        card: Catalog identity
        quantity: Number of copies (>= 1)
        set_code: Set code of the resolved printing
        foil: Foil flag
    """

    card: CatalogCard
    quantity: int
    set_code: str
    foil: bool = False

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def merge_key(self) -> tuple[str, str, bool]:
        """Entries with equal keys in one section are the same entry."""
        return (self.card.oracle_id, self.set_code, self.foil)

    @property
    def is_default_printing(self) -> bool:
        return self.set_code == self.card.default_printing.set_code


@dataclass(frozen=True, slots=True)
class UnresolvedEntry:
    """A card line the catalog could not resolve. Kept for reporting only."""

    raw_name: str
    quantity: int
    section: Section
    line_number: int


@dataclass(frozen=True)
class Deck:
    """
    A finalized deck.

    Attributes:
        name: Deck name (may be empty)
        format: Format tag from the input, if any
        sections: Every canonical section, in canonical order, each an
            ordered tuple of entries (possibly empty)
        unresolved: Card lines that failed resolution
        printing_cutoff: Release-date cutoff the default printings were
            picked under, if any
    """

    name: str
    format: str | None = None
    sections: dict[Section, tuple[DeckEntry, ...]] = field(
        default_factory=lambda: {section: () for section in CANONICAL_SECTIONS}
    )
    unresolved: tuple[UnresolvedEntry, ...] = ()
    printing_cutoff: date | None = None

    def entries(self, section: Section) -> tuple[DeckEntry, ...]:
        """Entries in a section (empty tuple if none)."""
        return self.sections.get(section, ())

    def card_count(self, section: Section | None = None) -> int:
        """Total copies in one section, or across all sections."""
        if section is not None:
            return sum(entry.quantity for entry in self.entries(section))
        return sum(entry.quantity for entries in self.sections.values() for entry in entries)

    @property
    def is_empty(self) -> bool:
        """True if no section holds any entry."""
        return not any(self.sections.values())
