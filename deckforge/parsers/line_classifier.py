"""
Line Classifier.

THIS MODULE HANDLES SYNTAX ONLY.

Every input line becomes exactly one token. Classification never raises:
a line that fits no rule becomes an UnrecognizedToken carrying the raw
text, so the input is always covered in full.

Rules, first match wins:
    1. Blank line                    -> BlankToken
    2. Comment ("#", "//", "--")     -> CommentToken
    3. "Name=...", "Format: ..."     -> MetadataToken
       Arena "Name ..."
    4. Section header                -> SectionHeaderToken
    5. "<qty> <name> [(SET) [num]]"  -> CardToken
    6. Anything else                 -> UnrecognizedToken

Dialects understood:
    Arena/Moxfield:  About / Name Burn / 4 Lightning Bolt (LEB) 163 *F*
    MTGO:            SB: 2 Negate
    Forge .dck:      4 Lightning Bolt|LEB|1
    Plain text:      4x Lightning Bolt / Lightning Bolt
"""

from __future__ import annotations

import re

from deckforge.models.token import (
    BlankToken,
    CardToken,
    CommentToken,
    MetadataToken,
    Section,
    SectionHeaderToken,
    Token,
    UnrecognizedToken,
)

COMMENT_PREFIXES: tuple[str, ...] = ("#", "//", "--")

# Header keywords (lowercase) -> section
SECTION_KEYWORDS: dict[str, Section] = {
    "deck": Section.MAIN,
    "main": Section.MAIN,
    "maindeck": Section.MAIN,
    "mainboard": Section.MAIN,
    "main deck": Section.MAIN,
    "sideboard": Section.SIDEBOARD,
    "side": Section.SIDEBOARD,
    "sb": Section.SIDEBOARD,
    "companion": Section.SIDEBOARD,
    "commander": Section.COMMANDER,
    "commanders": Section.COMMANDER,
    "planes": Section.PLANES,
    "planar": Section.PLANES,
    "planar deck": Section.PLANES,
    "scheme": Section.SCHEME,
    "schemes": Section.SCHEME,
    "scheme deck": Section.SCHEME,
}

# Card-type group headers written by deck sites ("Creatures (20)").
# They are recognized as headers but do not name a deck section.
TYPE_GROUP_HEADERS: frozenset[str] = frozenset(
    {
        "creature",
        "creatures",
        "instant",
        "instants",
        "sorcery",
        "sorceries",
        "artifact",
        "artifacts",
        "enchantment",
        "enchantments",
        "planeswalker",
        "planeswalkers",
        "battle",
        "battles",
        "land",
        "lands",
        "spells",
        "other",
        "tokens",
        "maybeboard",
    }
)

# Block markers that precede Name/Format lines: Forge ".dck" "[metadata]"
# and the "About" line MTG Arena writes at the top of its exports
METADATA_BLOCKS: frozenset[str] = frozenset({"metadata", "about"})

_METADATA_PATTERN = re.compile(
    r"^(?P<key>deck\s*name|name|format)\s*[:=]\s*(?P<value>.*?)\s*$",
    re.IGNORECASE,
)

# Arena "About" block: "Name Mono Red Burn"
_ARENA_NAME_PATTERN = re.compile(r"^Name\s+(?P<value>\S.*?)\s*$")

# "[Sideboard]", "Sideboard:", "Sideboard (15)", "Creatures (20)"
_HEADER_PATTERN = re.compile(
    r"^(?P<open>\[)?\s*(?P<label>[^\W\d_][^\W\d_ ]*(?: [^\W\d_]+)*)\s*(?(open)\])"
    r"\s*:?\s*(?:\(\s*\d+\s*\)|\d+)?\s*:?$"
)

_SIDEBOARD_PREFIX = re.compile(r"^SB:\s*(?P<rest>.+)$", re.IGNORECASE)

# Foil and Moxfield etched finishes: "*F*", "(F)", "*Foil*", "*E*"
_FOIL_SUFFIX = re.compile(r"\s*(?:\*F\*|\(F\)|\*foil\*|\*E\*|\*etched\*)\s*$", re.IGNORECASE)

# "4 Name", "4x Name", "4 x Name"
_LEADING_QUANTITY = re.compile(r"^(?P<qty>\d+)\s*(?:[xX]\s+|\s+)(?P<rest>.+)$")

# "Name x4"
_TRAILING_QUANTITY = re.compile(r"^(?P<rest>.+?)\s+[xX](?P<qty>\d+)$")

# "Lightning Bolt|LEB" or "Lightning Bolt|LEB|1" (Forge art index)
_PIPE_SET = re.compile(r"^(?P<name>[^|]+?)\s*\|\s*(?P<set>[A-Za-z0-9]+)(?:\s*\|\s*\d+)?$")

# "Lightning Bolt (LEB) 163" or "Lightning Bolt [LEB]"
_BRACKET_SET = re.compile(
    r"^(?P<name>.+?)\s+[(\[](?P<set>[A-Za-z0-9]{2,6})[)\]](?:\s+(?P<collector>\S+))?$"
)

# Contains at least one letter
_HAS_LETTER = re.compile(r"[^\W\d_]")

# Stricter shape for lines with no quantity: starts with a letter, only
# characters that occur in printed card names
_BARE_NAME = re.compile(r"^[^\W\d_][\w ,'’\-/:!?.&\"]*$")

MAX_CARD_NAME_LENGTH = 150


class LineClassifier:
    """
    Classifier for single deck list lines.

    This extracts STRUCTURE ONLY. Card names are not looked up here.

    Usage:
        classifier = LineClassifier()
        tokens = classifier.classify_text(raw_text)
    """

    def classify_text(self, raw_input: str) -> list[Token]:
        """
        Classify every line of already-normalized text.

        Line numbers are 1-based. A trailing newline does not produce an
        extra blank token.
        """
        lines = raw_input.split("\n")
        if lines and lines[-1] == "" and len(lines) > 1:
            lines.pop()
        return [self.classify(line, line_num) for line_num, line in enumerate(lines, 1)]

    def classify(self, line: str, line_number: int) -> Token:
        """Classify one line. Never raises."""
        stripped = line.strip()

        if not stripped:
            return BlankToken(line_number=line_number)

        if stripped.startswith(COMMENT_PREFIXES):
            return CommentToken(line_number=line_number, text=stripped)

        metadata = _METADATA_PATTERN.match(stripped)
        if metadata:
            key = metadata.group("key").lower().replace(" ", "")
            return MetadataToken(
                line_number=line_number,
                key="format" if key == "format" else "name",
                value=metadata.group("value"),
            )

        arena_name = _ARENA_NAME_PATTERN.match(stripped)
        if arena_name:
            return MetadataToken(
                line_number=line_number, key="name", value=arena_name.group("value")
            )

        header = self._parse_header(stripped, line_number)
        if header is not None:
            return header

        card = self._parse_card_line(stripped, line_number)
        if card is not None:
            return card

        return UnrecognizedToken(line_number=line_number, text=line)

    def _parse_header(self, line: str, line_number: int) -> Token | None:
        match = _HEADER_PATTERN.match(line)
        if not match:
            return None

        label = " ".join(match.group("label").lower().split())
        bracketed = match.group("open") is not None

        if label in METADATA_BLOCKS:
            # Structural marker only; the Name=/Format= lines carry the data
            return CommentToken(line_number=line_number, text=line)

        section = SECTION_KEYWORDS.get(label)
        if section is not None:
            return SectionHeaderToken(line_number=line_number, section=section, text=line)

        if bracketed or label in TYPE_GROUP_HEADERS:
            return SectionHeaderToken(line_number=line_number, section=Section.UNKNOWN, text=line)

        return None

    def _parse_card_line(self, line: str, line_number: int) -> CardToken | None:
        """
        Parse a card line.

        Returns None if the line doesn't look like a card entry. A
        quantity of zero is not a card entry.
        """
        section_override: Section | None = None
        sb_match = _SIDEBOARD_PREFIX.match(line)
        if sb_match:
            section_override = Section.SIDEBOARD
            line = sb_match.group("rest").strip()

        foil = False
        foil_match = _FOIL_SUFFIX.search(line)
        if foil_match:
            foil = True
            line = line[: foil_match.start()].rstrip()

        quantity: int | None = None
        rest = line
        match = _LEADING_QUANTITY.match(line) or _TRAILING_QUANTITY.match(line)
        if match:
            quantity = int(match.group("qty"))
            rest = match.group("rest").strip()

        if quantity == 0:
            return None

        name, set_code, collector_number = self._split_printing(rest)

        if not name or len(name) > MAX_CARD_NAME_LENGTH or not _HAS_LETTER.search(name):
            return None
        if quantity is None and not _BARE_NAME.match(name):
            return None

        # "(Used)" in "Hazmat Suit (Used)" reads as a set code; keep the full
        # text so the resolver can try it as a name first
        literal_name = rest if set_code and "|" not in rest else None

        return CardToken(
            line_number=line_number,
            quantity=quantity if quantity is not None else 1,
            card_name=name,
            set_code=set_code.upper() if set_code else None,
            collector_number=collector_number,
            foil=foil,
            section_override=section_override,
            explicit_quantity=quantity is not None,
            literal_name=literal_name,
        )

    def _split_printing(self, text: str) -> tuple[str, str | None, str | None]:
        """Split "<name> (SET) 123" / "<name>|SET" into name, set, collector."""
        match = _PIPE_SET.match(text)
        if match:
            return match.group("name").strip(), match.group("set"), None

        match = _BRACKET_SET.match(text)
        if match:
            return match.group("name").strip(), match.group("set"), match.group("collector")

        return text.strip(), None, None


# =============================================================================
# PUBLIC API
# =============================================================================


def classify_line(line: str, line_number: int = 1) -> Token:
    """Classify a single line."""
    return LineClassifier().classify(line, line_number)


def classify_text(raw_input: str) -> list[Token]:
    """Classify every line of deck text."""
    return LineClassifier().classify_text(raw_input)
