"""
Deck Assembler.

Finalizes a resolution result into an immutable Deck.

An explicit name from the deck text always beats a caller-supplied
default (typically derived from the file name). A deck with no entries
in any section is a terminal failure.
"""

import logging

from deckforge.models.deck import Deck
from deckforge.models.failure import EmptyDeckError
from deckforge.models.token import CANONICAL_SECTIONS
from deckforge.services.catalog_resolver import ResolutionResult

logger = logging.getLogger(__name__)


class DeckAssembler:
    """Builds the final Deck value from resolved entries."""

    def assemble(
        self,
        resolution: ResolutionResult,
        default_name: str | None = None,
        unrecognized_count: int = 0,
    ) -> Deck:
        """
        Finalize a deck.

        Args:
            resolution: Output of CatalogResolver.resolve()
            default_name: Name to use only if the text named no deck
            unrecognized_count: Unrecognized lines, reported on failure

        Returns:
            Immutable Deck with every canonical section present

        Raises:
            EmptyDeckError: If no section holds any entry
        """
        if resolution.entry_count == 0:
            raise EmptyDeckError(
                unresolved_count=len(resolution.unresolved),
                unrecognized_count=unrecognized_count,
            )

        name = resolution.name or (default_name or "").strip()
        sections = {
            section: tuple(resolution.sections.get(section, ())) for section in CANONICAL_SECTIONS
        }

        deck = Deck(
            name=name,
            format=resolution.format,
            sections=sections,
            unresolved=tuple(resolution.unresolved),
            printing_cutoff=resolution.printing_cutoff,
        )
        logger.debug(
            "Assembled deck %r: %s",
            deck.name,
            ", ".join(f"{s.value}={deck.card_count(s)}" for s in CANONICAL_SECTIONS),
        )
        return deck


def assemble_deck(
    resolution: ResolutionResult,
    default_name: str | None = None,
    unrecognized_count: int = 0,
) -> Deck:
    """Convenience wrapper around DeckAssembler.assemble()."""
    return DeckAssembler().assemble(resolution, default_name, unrecognized_count)
