from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKFORGE_")

    app_name: str = "deckforge"

    log_level: str = "INFO"

    # Scryfall default-cards bulk file used as the card catalog
    catalog_path: Path = DATA_DIR / "default-cards.json"

    scryfall_bulk_url: str = "https://api.scryfall.com/bulk-data"

    # Resolve names by unique prefix when exact lookups fail
    allow_prefix_match: bool = True


settings = Settings()


# =============================================================================
# CONVERSION LIMITS
# =============================================================================

# Candidates listed in an ambiguous-name diagnostic
MAX_AMBIGUOUS_CANDIDATES = 5

# Shortest input accepted for prefix matching (avoid "4 A" matching)
MIN_PREFIX_LENGTH = 3
