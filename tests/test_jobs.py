"""Tests for the conversion and download jobs."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from deckforge.config import settings
from deckforge.jobs.convert_deck import main, parse_args, run_conversion
from deckforge.jobs.download_cards import run_download
from deckforge.services.card_catalog import (
    IndexedCatalog,
    download_card_database,
    find_bulk_download_uri,
    load_catalog,
)


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    records = [
        {
            "name": "Lightning Bolt",
            "oracle_id": "oracle-bolt",
            "set": "sta",
            "collector_number": "42",
            "released_at": "2021-04-23",
            "layout": "normal",
        },
        {
            "name": "Negate",
            "oracle_id": "oracle-negate",
            "set": "m20",
            "collector_number": "69",
            "released_at": "2019-07-12",
            "layout": "normal",
        },
    ]
    path = tmp_path / "cards.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


class TestRunConversion:
    def test_writes_dck_named_after_input(self, catalog: IndexedCatalog, tmp_path: Path) -> None:
        source = tmp_path / "mono red.txt"
        source.write_text("4 Lightning Bolt\nSideboard\n2 Negate\n", encoding="utf-8")
        target = tmp_path / "mono red.dck"

        assert run_conversion(source, target, catalog) is True
        assert target.read_text(encoding="utf-8") == (
            "[metadata]\nName=mono red\n[Main]\n4 Lightning Bolt\n[Sideboard]\n2 Negate\n"
        )

    def test_explicit_name_argument(self, catalog: IndexedCatalog, tmp_path: Path) -> None:
        source = tmp_path / "deck.txt"
        source.write_text("4 Lightning Bolt", encoding="utf-8")
        target = tmp_path / "deck.dck"

        assert run_conversion(source, target, catalog, name="Burn") is True
        assert "Name=Burn" in target.read_text(encoding="utf-8")

    def test_missing_input(self, catalog: IndexedCatalog, tmp_path: Path) -> None:
        assert run_conversion(tmp_path / "nope.txt", tmp_path / "out.dck", catalog) is False

    def test_empty_input(self, catalog: IndexedCatalog, tmp_path: Path) -> None:
        source = tmp_path / "empty.txt"
        source.write_text("  \n", encoding="utf-8")
        assert run_conversion(source, tmp_path / "out.dck", catalog) is False

    def test_empty_deck_writes_nothing(self, catalog: IndexedCatalog, tmp_path: Path) -> None:
        source = tmp_path / "bad.txt"
        source.write_text("3 Unobtainium Card", encoding="utf-8")
        target = tmp_path / "bad.dck"

        assert run_conversion(source, target, catalog) is False
        assert not target.exists()

    def test_diagnostics_are_logged(
        self, catalog: IndexedCatalog, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        source = tmp_path / "deck.txt"
        source.write_text("4 Lightning Bolt\n=====", encoding="utf-8")

        with caplog.at_level("WARNING"):
            assert run_conversion(source, tmp_path / "deck.dck", catalog) is True
        assert "line 2" in caplog.text


class TestMain:
    def test_parse_args(self) -> None:
        args = parse_args(["in.txt", "out.dck", "--cutoff", "2020-01-31", "--no-prefix"])

        assert args.input_file == Path("in.txt")
        assert args.output_file == Path("out.dck")
        assert args.cutoff.isoformat() == "2020-01-31"
        assert args.no_prefix is True
        assert args.catalog is None

    def test_success_exit_code(self, catalog_file: Path, tmp_path: Path) -> None:
        source = tmp_path / "deck.txt"
        source.write_text("4 Lightning Bolt", encoding="utf-8")
        target = tmp_path / "deck.dck"

        assert main([str(source), str(target), "--catalog", str(catalog_file)]) == 0
        assert target.exists()

    def test_failure_exit_code(self, catalog_file: Path, tmp_path: Path) -> None:
        source = tmp_path / "deck.txt"
        source.write_text("# nothing", encoding="utf-8")

        assert main([str(source), str(tmp_path / "o.dck"), "--catalog", str(catalog_file)]) == 1

    def test_missing_catalog_exit_code(self, tmp_path: Path) -> None:
        source = tmp_path / "deck.txt"
        source.write_text("4 Lightning Bolt", encoding="utf-8")
        missing = tmp_path / "missing.json"

        assert main([str(source), str(tmp_path / "o.dck"), "--catalog", str(missing)]) == 1

    def test_missing_catalog_logs_failure_kind(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        source = tmp_path / "deck.txt"
        source.write_text("4 Lightning Bolt", encoding="utf-8")

        with caplog.at_level("ERROR"):
            main([str(source), str(tmp_path / "o.dck"), "--catalog", str(tmp_path / "x.json")])
        assert "catalog_unavailable" in caplog.text


BULK_INDEX = {
    "data": [
        {"type": "oracle_cards", "download_uri": "https://data.test/oracle.json"},
        {"type": "default_cards", "download_uri": "https://data.test/cards.json"},
    ]
}

CARD_RECORDS = [
    {
        "name": "Negate",
        "oracle_id": "oracle-negate",
        "set": "m20",
        "collector_number": "69",
        "released_at": "2019-07-12",
        "layout": "normal",
    }
]


class TestFindBulkDownloadUri:
    def test_picks_default_cards(self) -> None:
        assert find_bulk_download_uri(BULK_INDEX) == "https://data.test/cards.json"

    def test_entry_without_uri_is_skipped(self) -> None:
        index = {"data": [{"type": "default_cards"}]}
        with pytest.raises(ValueError, match="default_cards"):
            find_bulk_download_uri(index)


class TestDownloadCards:
    @pytest.mark.asyncio
    @respx.mock
    async def test_installs_default_cards(self, tmp_path: Path) -> None:
        """The default_cards bulk file is streamed, checked and installed."""
        respx.get(settings.scryfall_bulk_url).mock(
            return_value=httpx.Response(200, json=BULK_INDEX)
        )
        respx.get("https://data.test/cards.json").mock(
            return_value=httpx.Response(200, json=CARD_RECORDS)
        )
        target = tmp_path / "data" / "cards.json"

        path = await download_card_database(target)

        assert path == target
        assert "Negate" in load_catalog(path)
        assert not (tmp_path / "data" / "cards.json.part").exists()

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_bulk_entry_raises(self, tmp_path: Path) -> None:
        respx.get(settings.scryfall_bulk_url).mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        with pytest.raises(ValueError, match="default_cards"):
            await download_card_database(tmp_path / "cards.json")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [b"[{\"name\": \"Neg", b"[]", b"{}"])
    async def test_bad_download_keeps_existing_catalog(
        self, catalog_file: Path, payload: bytes
    ) -> None:
        before = catalog_file.read_bytes()

        with respx.mock:
            respx.get(settings.scryfall_bulk_url).mock(
                return_value=httpx.Response(200, json=BULK_INDEX)
            )
            respx.get("https://data.test/cards.json").mock(
                return_value=httpx.Response(200, content=payload)
            )

            with pytest.raises(ValueError):
                await download_card_database(catalog_file)

        assert catalog_file.read_bytes() == before
        assert not catalog_file.with_name(catalog_file.name + ".part").exists()

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_keeps_existing_catalog(self, catalog_file: Path) -> None:
        before = catalog_file.read_bytes()
        respx.get(settings.scryfall_bulk_url).mock(
            return_value=httpx.Response(200, json=BULK_INDEX)
        )
        respx.get("https://data.test/cards.json").mock(return_value=httpx.Response(503))

        with pytest.raises(httpx.HTTPStatusError):
            await download_card_database(catalog_file)

        assert catalog_file.read_bytes() == before

    @pytest.mark.asyncio
    async def test_run_download_reraises(self) -> None:
        with (
            patch(
                "deckforge.jobs.download_cards.download_card_database",
                new_callable=AsyncMock,
                side_effect=httpx.HTTPError("Network error"),
            ),
            pytest.raises(httpx.HTTPError),
        ):
            await run_download()

    @pytest.mark.asyncio
    async def test_run_download_passes_output_path(self, tmp_path: Path) -> None:
        target = tmp_path / "cards.json"
        with patch(
            "deckforge.jobs.download_cards.download_card_database",
            new_callable=AsyncMock,
            return_value=target,
        ) as download:
            assert await run_download(target) == target

        download.assert_awaited_once_with(target)
