"""Per-conversion options."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """
    Flags that tune a single conversion pass.

    Attributes:
        allow_prefix_match: Resolve names by unique prefix as a last resort
        printing_cutoff: Only printings released on or before this date are
            eligible as the default printing
    """

    allow_prefix_match: bool = True
    printing_cutoff: date | None = None
