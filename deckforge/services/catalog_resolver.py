"""
Catalog Resolution Service.

Turns routed card tokens into catalog-backed deck entries.

Name resolution, first match wins:
    1. Exact, case-sensitive (card name or face name)
    2. Exact, ignoring case
    3. Unique prefix, ignoring case (exactly one catalog card); only for
       lines that gave a quantity

INVARIANTS:
1. A failed lookup produces an UnresolvedEntry, never an exception
2. Entries with the same (card, printing, foil) in one section are merged
3. Section and entry order follow first appearance in the input
4. The catalog is only read, never modified
"""

import dataclasses
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from deckforge.config import MAX_AMBIGUOUS_CANDIDATES, MIN_PREFIX_LENGTH
from deckforge.models.catalog import CatalogCard, Printing
from deckforge.models.deck import DeckEntry, Diagnostic, DiagnosticKind, UnresolvedEntry
from deckforge.models.options import ConversionOptions
from deckforge.models.token import CANONICAL_SECTIONS, CardToken, MetadataToken, Section
from deckforge.parsers.deck_recognizer import RecognizedStream, RoutedToken
from deckforge.services.card_catalog import CardCatalog, pick_default_printing

logger = logging.getLogger(__name__)

# "Fire/Ice", "Fire / Ice", "Fire//Ice" -> "Fire // Ice"
_SPLIT_SEPARATOR = re.compile(r"\s*/{1,2}\s*")


@dataclass
class NameMatch:
    """Outcome of a name lookup."""

    card: CatalogCard | None
    rule: str | None = None
    """Which rule matched: "exact", "case_insensitive" or "prefix"."""

    ambiguous: list[CatalogCard] = field(default_factory=list)
    """Candidates when a prefix matched more than one card."""


@dataclass
class ResolutionResult:
    """Result of resolving one token stream."""

    sections: dict[Section, list[DeckEntry]]
    """Merged entries per canonical section, in first-seen order."""

    unresolved: list[UnresolvedEntry]
    """Card lines that failed resolution."""

    diagnostics: list[Diagnostic]
    """Resolution warnings (unresolved, ambiguous, substituted printings)."""

    name: str | None = None
    """First explicit deck name found in the input."""

    format: str | None = None
    """First explicit format found in the input."""

    printing_cutoff: date | None = None
    """Cutoff the default printings were chosen under, if any."""

    @property
    def entry_count(self) -> int:
        return sum(len(entries) for entries in self.sections.values())


class CatalogResolver:
    """
    Resolves routed tokens against a read-only catalog.

    One resolver may be reused across passes; all per-pass state lives
    in the ResolutionResult being built.
    """

    def __init__(self, catalog: CardCatalog, options: ConversionOptions | None = None) -> None:
        self._catalog = catalog
        self._options = options or ConversionOptions()

    def resolve(self, routed: RecognizedStream | Iterable[RoutedToken]) -> ResolutionResult:
        """
        Resolve every routed token.

        Args:
            routed: Output of the recognizer (or its routed tokens)

        Returns:
            ResolutionResult with merged entries and diagnostics
        """
        items = routed.routed if isinstance(routed, RecognizedStream) else routed

        merged: dict[Section, dict[tuple[str, str, bool], DeckEntry]] = {
            section: {} for section in CANONICAL_SECTIONS
        }
        result = ResolutionResult(
            sections={},
            unresolved=[],
            diagnostics=[],
            printing_cutoff=self._options.printing_cutoff,
        )

        for item in items:
            token = item.token
            if isinstance(token, MetadataToken):
                self._capture_metadata(token, result)
                continue

            entry = self._resolve_card(token, item.section, result)
            if entry is None:
                continue

            bucket = merged.setdefault(item.section, {})
            existing = bucket.get(entry.merge_key)
            if existing is None:
                bucket[entry.merge_key] = entry
            else:
                bucket[entry.merge_key] = dataclasses.replace(
                    existing, quantity=existing.quantity + entry.quantity
                )

        result.sections = {section: list(bucket.values()) for section, bucket in merged.items()}

        logger.info(
            "Resolved %d entries (%d unresolved, %d diagnostics)",
            result.entry_count,
            len(result.unresolved),
            len(result.diagnostics),
        )
        return result

    def match_name(self, name: str, allow_prefix: bool = True) -> NameMatch:
        """
        Look up a card name using the exact -> case-insensitive -> prefix order.

        The prefix rule also needs ConversionOptions.allow_prefix_match.
        """
        for variant in _name_variants(name):
            candidates = self._catalog.find_cards(variant)
            exact = [c for c in candidates if c.name == variant or variant in c.face_names]
            if exact:
                return NameMatch(card=exact[0], rule="exact")
            if candidates:
                folded = variant.casefold()
                by_name = [c for c in candidates if c.name.casefold() == folded]
                return NameMatch(card=(by_name or candidates)[0], rule="case_insensitive")

        if not (allow_prefix and self._options.allow_prefix_match):
            return NameMatch(card=None)
        if len(name.strip()) < MIN_PREFIX_LENGTH:
            return NameMatch(card=None)

        found = self._catalog.find_by_prefix(name)
        if len(found) == 1:
            return NameMatch(card=found[0], rule="prefix")
        return NameMatch(card=None, ambiguous=found)

    def choose_printing(
        self, card: CatalogCard, token: CardToken
    ) -> tuple[Printing, Diagnostic | None]:
        """
        Pick the printing for a resolved card.

        A requested set code wins when the catalog has it; otherwise the
        default printing is used, with a diagnostic if a set was requested.
        """
        default = self._default_printing(card)
        if not token.set_code:
            return default, None

        printing = card.find_printing(token.set_code, token.collector_number)
        if printing is not None:
            return printing, None

        logger.debug(
            "Line %d: %s has no printing in %s, using %s",
            token.line_number,
            card.name,
            token.set_code,
            default.set_code,
        )
        return default, Diagnostic(
            line_number=token.line_number,
            kind=DiagnosticKind.PRINTING_SUBSTITUTED,
            message=(
                f"{card.name} has no printing in set {token.set_code}; "
                f"using {default.set_code} instead"
            ),
        )

    def _default_printing(self, card: CatalogCard) -> Printing:
        cutoff = self._options.printing_cutoff
        if cutoff is None:
            return card.default_printing
        eligible = [p for p in card.printings if p.released_at and p.released_at <= cutoff]
        if not eligible:
            return card.default_printing
        return pick_default_printing(eligible)

    def _resolve_card(
        self, token: CardToken, section: Section, result: ResolutionResult
    ) -> DeckEntry | None:
        literal = self._match_literal_name(token)
        if literal is not None:
            return DeckEntry(
                card=literal,
                quantity=token.quantity,
                set_code=self._default_printing(literal).set_code,
                foil=token.foil,
            )

        # A bare name is only taken as a card when it names one in full
        match = self.match_name(token.card_name, allow_prefix=token.explicit_quantity)

        if match.card is None:
            result.unresolved.append(
                UnresolvedEntry(
                    raw_name=token.card_name,
                    quantity=token.quantity,
                    section=section,
                    line_number=token.line_number,
                )
            )
            result.diagnostics.append(self._unresolved_diagnostic(token, match))
            logger.debug("Line %d: could not resolve %r", token.line_number, token.card_name)
            return None

        printing, notice = self.choose_printing(match.card, token)
        if notice is not None:
            result.diagnostics.append(notice)

        return DeckEntry(
            card=match.card,
            quantity=token.quantity,
            set_code=printing.set_code,
            foil=token.foil,
        )

    def _match_literal_name(self, token: CardToken) -> CatalogCard | None:
        """The unsplit "Hazmat Suit (Used)" text, if it is a full card name."""
        if not token.literal_name:
            return None
        return self.match_name(token.literal_name, allow_prefix=False).card

    @staticmethod
    def _unresolved_diagnostic(token: CardToken, match: NameMatch) -> Diagnostic:
        if match.ambiguous:
            shown = [card.name for card in match.ambiguous[:MAX_AMBIGUOUS_CANDIDATES]]
            more = len(match.ambiguous) - len(shown)
            listing = ", ".join(shown) + (f" (and {more} more)" if more > 0 else "")
            return Diagnostic(
                line_number=token.line_number,
                kind=DiagnosticKind.AMBIGUOUS_NAME,
                message=f"{token.card_name!r} matches several cards: {listing}",
            )
        return Diagnostic(
            line_number=token.line_number,
            kind=DiagnosticKind.UNRESOLVED_CARD,
            message=f"Card not found: {token.card_name!r}",
        )

    @staticmethod
    def _capture_metadata(token: MetadataToken, result: ResolutionResult) -> None:
        """First non-empty value for each key wins."""
        value = token.value.strip()
        if not value:
            return
        if token.key == "name" and result.name is None:
            result.name = value
        elif token.key == "format" and result.format is None:
            result.format = value


def _name_variants(name: str) -> list[str]:
    """The name as written, then common export spellings normalized."""
    variants = [name.strip()]
    normalized = name.strip().replace("’", "'")
    if "/" in normalized:
        normalized = _SPLIT_SEPARATOR.sub(" // ", normalized)
    if normalized not in variants:
        variants.append(normalized)
    return variants
