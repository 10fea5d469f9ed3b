
from deckforge.models.catalog import CatalogCard, Printing
from deckforge.models.deck import (
    Deck,
    DeckEntry,
    Diagnostic,
    DiagnosticKind,
    UnresolvedEntry,
)
from deckforge.models.failure import (
    CatalogUnavailableError,
    EmptyDeckError,
    FailureDetail,
    FailureKind,
    KnownError,
)
from deckforge.models.options import ConversionOptions
from deckforge.models.token import (
    CANONICAL_SECTIONS,
    BlankToken,
    CardToken,
    CommentToken,
    MetadataToken,
    Section,
    SectionHeaderToken,
    Token,
    UnrecognizedToken,
)

__all__ = [
    "CANONICAL_SECTIONS",
    "BlankToken",
    "CardToken",
    "CatalogCard",
    "CatalogUnavailableError",
    "CommentToken",
    "ConversionOptions",
    "Deck",
    "DeckEntry",
    "Diagnostic",
    "DiagnosticKind",
    "EmptyDeckError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "MetadataToken",
    "Printing",
    "Section",
    "SectionHeaderToken",
    "Token",
    "UnrecognizedToken",
    "UnresolvedEntry",
]
