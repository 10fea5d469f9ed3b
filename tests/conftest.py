from datetime import date

import pytest

from deckforge.models.catalog import CatalogCard, Printing
from deckforge.services.card_catalog import IndexedCatalog, pick_default_printing


def make_card(
    oracle_id: str,
    name: str,
    printings: list[tuple[str, str, date | None]],
    face_names: tuple[str, ...] = (),
) -> CatalogCard:
    """Build a CatalogCard from (set, collector number, release date) tuples."""
    built = tuple(Printing(set_code=s, collector_number=n, released_at=d) for s, n, d in printings)
    return CatalogCard(
        oracle_id=oracle_id,
        name=name,
        printings=built,
        default_printing=pick_default_printing(built),
        face_names=face_names,
    )


@pytest.fixture
def catalog_cards() -> list[CatalogCard]:
    """Small catalog covering multi-printing, split and prefix cases."""
    return [
        make_card(
            "oracle-bolt",
            "Lightning Bolt",
            [
                ("LEB", "162", date(1993, 10, 1)),
                ("M10", "146", date(2009, 7, 17)),
                ("STA", "42", date(2021, 4, 23)),
            ],
        ),
        make_card("oracle-helix", "Lightning Helix", [("RAV", "213", date(2005, 10, 7))]),
        make_card(
            "oracle-negate",
            "Negate",
            [("RIX", "44", date(2018, 1, 19)), ("M20", "69", date(2019, 7, 12))],
        ),
        make_card("oracle-counterspell", "Counterspell", [("MH2", "267", date(2021, 6, 18))]),
        make_card(
            "oracle-fire-ice",
            "Fire // Ice",
            [("MH2", "290", date(2021, 6, 18))],
            face_names=("Fire", "Ice"),
        ),
        make_card(
            "oracle-mountain",
            "Mountain",
            [("NEO", "290", date(2022, 2, 18)), ("DMU", "269", date(2022, 9, 9))],
        ),
        make_card("oracle-goyf", "Tarmogoyf", [("FUT", "153", date(2007, 5, 4))]),
        make_card(
            "oracle-jace",
            "Jace, the Mind Sculptor",
            [("WWK", "31", date(2010, 2, 5))],
        ),
        make_card("oracle-about-face", "About Face", [("ULG", "76", date(1999, 2, 15))]),
        make_card(
            "oracle-hazmat", "Hazmat Suit (Used)", [("UNF", "497", date(2022, 12, 9))]
        ),
    ]


@pytest.fixture
def catalog(catalog_cards: list[CatalogCard]) -> IndexedCatalog:
    return IndexedCatalog(catalog_cards)


@pytest.fixture
def sample_arena_export() -> str:
    """Sample Arena deck export for testing."""
    return """Deck
4 Lightning Bolt (STA) 42
4 Tarmogoyf (FUT) 153
20 Mountain (DMU) 269

Sideboard
2 Negate (M20) 69"""
