"""
Card catalog service.

The catalog is the read-only lookup the resolver queries. It is built
once, then shared by any number of conversions; nothing here mutates
after construction.

Scryfall bulk data is the backing store: load_catalog() groups printings
by oracle ID and picks the most recent printing as each card's default.
"""

import bisect
import json
import logging
from collections.abc import Iterable
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

import httpx

from deckforge.config import settings
from deckforge.models.catalog import CatalogCard, Printing

logger = logging.getLogger(__name__)

# Scryfall layouts that are not deck cards
EXCLUDED_LAYOUTS: frozenset[str] = frozenset(
    {
        "art_series",
        "token",
        "double_faced_token",
        "emblem",
    }
)


class CardCatalog(Protocol):
    """Read-only card lookup used by the resolver."""

    def find_cards(self, name: str) -> list[CatalogCard]:
        """Cards whose name or face name equals `name`, ignoring case."""
        ...

    def find_by_prefix(self, prefix: str) -> list[CatalogCard]:
        """Cards whose name or face name starts with `prefix`, ignoring case."""
        ...


class IndexedCatalog:
    """
    In-memory CardCatalog over a fixed set of CatalogCards.

    Name lookups are case-insensitive dictionary hits; prefix lookups
    bisect a sorted key list.
    """

    def __init__(self, cards: Iterable[CatalogCard]) -> None:
        by_key: dict[str, list[CatalogCard]] = {}
        oracle_ids: set[str] = set()

        for card in cards:
            oracle_ids.add(card.oracle_id)
            for key in self._lookup_keys(card):
                bucket = by_key.setdefault(key, [])
                if card not in bucket:
                    bucket.append(card)

        self._oracle_ids = frozenset(oracle_ids)
        self._by_key = {key: tuple(bucket) for key, bucket in by_key.items()}
        self._sorted_keys = tuple(sorted(self._by_key))

    @staticmethod
    def _lookup_keys(card: CatalogCard) -> list[str]:
        keys = [card.name.casefold()]
        for face in card.face_names:
            folded = face.casefold()
            if folded not in keys:
                keys.append(folded)
        return keys

    def __len__(self) -> int:
        return len(self._oracle_ids)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._by_key

    def find_cards(self, name: str) -> list[CatalogCard]:
        return list(self._by_key.get(name.strip().casefold(), ()))

    def find_by_prefix(self, prefix: str) -> list[CatalogCard]:
        folded = prefix.strip().casefold()
        if not folded:
            return []

        found: list[CatalogCard] = []
        start = bisect.bisect_left(self._sorted_keys, folded)
        for key in self._sorted_keys[start:]:
            if not key.startswith(folded):
                break
            for card in self._by_key[key]:
                if card not in found:
                    found.append(card)
        return found


# =============================================================================
# SCRYFALL LOADING
# =============================================================================


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def _oracle_id(record: dict[str, Any]) -> str | None:
    """Reversible cards keep oracle_id on their faces, not the top level."""
    oracle_id = record.get("oracle_id")
    if oracle_id:
        return str(oracle_id)
    for face in record.get("card_faces") or []:
        if face.get("oracle_id"):
            return str(face["oracle_id"])
    return None


def pick_default_printing(printings: Iterable[Printing]) -> Printing:
    """
    Most recently released printing; first one wins on ties.

    Printings without a release date rank below every dated printing.
    """
    best: Printing | None = None
    for printing in printings:
        if best is None:
            best = printing
            continue
        current = printing.released_at or date.min
        leader = best.released_at or date.min
        if current > leader:
            best = printing
    if best is None:
        raise ValueError("A card needs at least one printing")
    return best


def build_catalog(records: Iterable[dict[str, Any]]) -> IndexedCatalog:
    """
    Build a catalog from Scryfall card objects.

    Records are grouped by oracle ID. The first record's name is the
    canonical name; every record contributes one printing.
    """
    names: dict[str, str] = {}
    faces: dict[str, tuple[str, ...]] = {}
    printings: dict[str, list[Printing]] = {}
    skipped = 0

    for record in records:
        name = record.get("name")
        oracle_id = _oracle_id(record)
        if not name or not oracle_id or record.get("layout") in EXCLUDED_LAYOUTS:
            skipped += 1
            continue

        if oracle_id not in names:
            names[oracle_id] = str(name)
            faces[oracle_id] = tuple(
                str(face["name"]) for face in record.get("card_faces") or [] if face.get("name")
            )
            printings[oracle_id] = []

        printing = Printing(
            set_code=str(record.get("set", "")).upper(),
            collector_number=str(record.get("collector_number", "")),
            released_at=_parse_date(record.get("released_at")),
        )
        if printing.set_code and printing not in printings[oracle_id]:
            printings[oracle_id].append(printing)

    cards: list[CatalogCard] = []
    for oracle_id, name in names.items():
        card_printings = printings[oracle_id]
        if not card_printings:
            skipped += 1
            continue
        cards.append(
            CatalogCard(
                oracle_id=oracle_id,
                name=name,
                printings=tuple(card_printings),
                default_printing=pick_default_printing(card_printings),
                face_names=faces[oracle_id] if len(faces[oracle_id]) > 1 else (),
            )
        )

    if skipped:
        logger.debug("Skipped %d catalog records without deck-card data", skipped)
    return IndexedCatalog(cards)


def load_catalog(path: Path | None = None) -> IndexedCatalog:
    """
    Load the catalog from a Scryfall bulk JSON file.

    Args:
        path: Path to JSON file. Defaults to settings.catalog_path

    Returns:
        IndexedCatalog over every card in the file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid JSON
    """
    if path is None:
        path = settings.catalog_path

    if not path.exists():
        raise FileNotFoundError(
            f"Card catalog not found at {path}. "
            "Run `python -m deckforge.jobs.download_cards` first."
        )

    try:
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Card catalog at {path} is corrupted: {e}") from e

    if not isinstance(records, list):
        raise ValueError(f"Card catalog at {path} is corrupted: expected a list of cards")

    catalog = build_catalog(records)
    logger.info("Loaded %d cards from %s", len(catalog), path)
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> IndexedCatalog:
    """
    Get the process-wide catalog.

    Loaded from settings.catalog_path on first call, then cached. Only
    entry points use this; the pipeline always takes a catalog argument.
    """
    return load_catalog()


def find_bulk_download_uri(bulk_index: dict[str, Any], bulk_type: str = "default_cards") -> str:
    """
    Pick the download URI of one bulk file from Scryfall's bulk-data index.

    Raises:
        ValueError: If the index has no usable entry of that type
    """
    for item in bulk_index.get("data") or []:
        if item.get("type") == bulk_type and item.get("download_uri"):
            return str(item["download_uri"])
    raise ValueError(f"Could not find {bulk_type} bulk data URL")


async def download_card_database(output_path: Path | None = None) -> Path:
    """
    Download Scryfall default-cards bulk data and install it as the catalog.

    The file is streamed to a ".part" file next to the target and only
    replaces the catalog once it loads as a non-empty catalog, so an
    interrupted or malformed download leaves the previous catalog intact.

    Args:
        output_path: Where to save the file. Defaults to settings.catalog_path

    Returns:
        Path to the installed catalog file.

    Raises:
        ValueError: If the bulk data URL is missing or the download holds no cards
        httpx.HTTPError: If download fails
    """
    if output_path is None:
        output_path = settings.catalog_path

    output_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = output_path.with_name(output_path.name + ".part")

    headers = {"User-Agent": f"{settings.app_name}/1.0"}
    try:
        async with httpx.AsyncClient(timeout=30.0, headers=headers) as client:
            response = await client.get(settings.scryfall_bulk_url)
            response.raise_for_status()
            download_url = find_bulk_download_uri(response.json())

            logger.info("Streaming card data from %s", download_url)
            async with client.stream("GET", download_url, timeout=300.0) as response:
                response.raise_for_status()
                with open(partial_path, "wb") as f:
                    async for chunk in response.aiter_bytes(8192):
                        f.write(chunk)

        catalog = load_catalog(partial_path)
        if len(catalog) == 0:
            raise ValueError(f"Downloaded card data at {partial_path} holds no deck cards")
    except BaseException:
        partial_path.unlink(missing_ok=True)
        raise

    partial_path.replace(output_path)
    get_catalog.cache_clear()
    logger.info("Installed catalog of %d cards at %s", len(catalog), output_path)
    return output_path
