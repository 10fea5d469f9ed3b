"""
Catalog Card Models.

These are the TRUSTED, catalog-backed identities that resolved deck
entries point at. Construction of a CatalogCard implies it came from the
catalog; raw names from deck text never become CatalogCards directly.

INVARIANTS:
- A CatalogCard has at least one printing
- default_printing is one of printings
- All models are frozen (immutable after construction)
"""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True, slots=True)
class Printing:
    """
    A specific published edition of a card.

    Attributes:
        set_code: Uppercase set code (e.g., "M10", "STA")
        collector_number: Collector number within the set
        released_at: Release date of the set, if known
    """

    set_code: str
    collector_number: str = ""
    released_at: date | None = None


@dataclass(frozen=True, slots=True)
class CatalogCard:
    """
    Oracle-level card identity with its printings.

    Attributes:
        oracle_id: Stable identity across printings
        name: Canonical card name (e.g., "Fire // Ice")
        printings: All known printings, catalog order
        default_printing: The printing used when none is requested
        face_names: Individual face names for multi-face cards
    """

    oracle_id: str
    name: str
    printings: tuple[Printing, ...]
    default_printing: Printing
    face_names: tuple[str, ...] = field(default=())

    def find_printing(
        self, set_code: str, collector_number: str | None = None
    ) -> Printing | None:
        """
        Find the printing for a set code.

        The collector number narrows the match when several printings
        share a set; if it matches none of them the first printing in
        the set is returned.
        """
        wanted = set_code.upper()
        in_set = [p for p in self.printings if p.set_code == wanted]
        if not in_set:
            return None
        if collector_number:
            for printing in in_set:
                if printing.collector_number == collector_number:
                    return printing
        return in_set[0]
