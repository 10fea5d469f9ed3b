"""
Canonical Deck Serializer.

THIS MODULE HANDLES OUTPUT RENDERING ONLY.

Writes a finalized Deck in the Forge .dck layout:

    [metadata]
    Name=Burn
    Format=Modern
    [Main]
    4 Lightning Bolt
    4 Lava Spike|CHK
    [Sideboard]
    2 Smash to Smithereens *F*

Sections are written in canonical order and empty sections are left
out. The set code is written only when the entry's printing is not the
catalog default, or on every entry when the deck was resolved under a
printing cutoff (the cutoff moves the default). Reading this text back
through the pipeline yields the same section contents.
"""

from pathlib import Path

from deckforge.models.deck import Deck, DeckEntry
from deckforge.models.token import CANONICAL_SECTIONS, Section

SECTION_HEADERS: dict[Section, str] = {
    Section.MAIN: "Main",
    Section.SIDEBOARD: "Sideboard",
    Section.COMMANDER: "Commander",
    Section.PLANES: "Planes",
    Section.SCHEME: "Schemes",
}

FOIL_MARKER = "*F*"


def serialize_deck(deck: Deck) -> str:
    """
    Render a deck as canonical text.

    Args:
        deck: A finalized Deck

    Returns:
        Canonical text, newline-terminated
    """
    pin_printing = deck.printing_cutoff is not None

    lines: list[str] = ["[metadata]", f"Name={deck.name}"]
    if deck.format:
        lines.append(f"Format={deck.format}")

    for section in CANONICAL_SECTIONS:
        entries = deck.entries(section)
        if not entries:
            continue
        lines.append(f"[{SECTION_HEADERS[section]}]")
        lines.extend(format_entry_line(entry, pin_printing) for entry in entries)

    return "\n".join(lines) + "\n"


def format_entry_line(entry: DeckEntry, pin_printing: bool = False) -> str:
    """Format a single entry: quantity, name, set code if non-default or pinned, foil."""
    line = f"{entry.quantity} {entry.name}"
    if pin_printing or not entry.is_default_printing:
        line += f"|{entry.set_code}"
    if entry.foil:
        line += f" {FOIL_MARKER}"
    return line


def write_deck(deck: Deck, path: Path) -> Path:
    """Write the canonical text of a deck to `path`."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_deck(deck), encoding="utf-8")
    return path
