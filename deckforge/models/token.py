"""
Token Models.

A token is the classified form of exactly one input line. Tokens are
produced by the line classifier, routed by the recognizer, and consumed
by the catalog resolver.

INVARIANTS:
- Every input line maps to exactly one token
- Tokens are frozen (immutable after construction)
- Every token carries its 1-based source line number
- CardToken.quantity is always >= 1
"""

from dataclasses import dataclass
from enum import Enum


class Section(str, Enum):
    """Named partition of a deck."""

    MAIN = "main"
    SIDEBOARD = "sideboard"
    COMMANDER = "commander"
    PLANES = "planes"
    SCHEME = "scheme"
    UNKNOWN = "unknown"


# Order in which sections are stored and serialized. UNKNOWN is never a
# destination for cards.
CANONICAL_SECTIONS: tuple[Section, ...] = (
    Section.MAIN,
    Section.SIDEBOARD,
    Section.COMMANDER,
    Section.PLANES,
    Section.SCHEME,
)


@dataclass(frozen=True, slots=True)
class CardToken:
    """
    A "<quantity> <card name>" line.

    Attributes:
        line_number: Source line (1-based)
        quantity: Requested copies (>= 1)
        card_name: Card name as written, not yet resolved
        set_code: Uppercased set code if the line named one
        collector_number: Collector number if the line named one
        foil: True if a foil or etched marker was present
        section_override: Set for per-line routing such as MTGO "SB: 2 Negate"
        explicit_quantity: False for a bare name read as one copy
        literal_name: Full text before a "(XYZ)" suffix was split off as a
            set code, for names such as "Hazmat Suit (Used)"
    """

    line_number: int
    quantity: int
    card_name: str
    set_code: str | None = None
    collector_number: str | None = None
    foil: bool = False
    section_override: Section | None = None
    explicit_quantity: bool = True
    literal_name: str | None = None


@dataclass(frozen=True, slots=True)
class SectionHeaderToken:
    """A section header line. Unknown headers carry Section.UNKNOWN."""

    line_number: int
    section: Section
    text: str


@dataclass(frozen=True, slots=True)
class MetadataToken:
    """A "Name=..." or "Format: ..." line. Key is lowercase."""

    line_number: int
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class CommentToken:
    line_number: int
    text: str


@dataclass(frozen=True, slots=True)
class BlankToken:
    line_number: int


@dataclass(frozen=True, slots=True)
class UnrecognizedToken:
    """A line that matched no rule. Text is kept verbatim."""

    line_number: int
    text: str


Token = (
    CardToken
    | SectionHeaderToken
    | MetadataToken
    | CommentToken
    | BlankToken
    | UnrecognizedToken
)
