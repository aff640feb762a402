"""Fixed exclusion lists and thresholds.

The three large-amount constants share a value today but drive different
decisions (ingest-time auto exclusion, registry classification, raw-row
filtering). Keep them separate.
"""

from __future__ import annotations

from typing import Final

# Item keys (``"<Type>_<Details>"``) that are always excluded from totals and
# can never be toggled back in.
DEFAULT_EXCLUDED_ITEMS: Final[tuple[str, ...]] = (
    "Salary_New Zealand Post",
    "Payment_Tiger Fintech Nz Ltd",
    "Payment_Milford Cash Fund",
    "Direct Debit_Milford Cash Fund",
    "Direct Debit_Smart Gold (Gld)",
    "Payment_Seedfintechlimited",
    "Payment_Interactive Broker",
    "Term Deposit Break_",
    "Automatic Payment_Serious Saver",
)

# Default for the user-configurable aggregation threshold.
DEFAULT_LARGE_AMOUNT_THRESHOLD: Final[float] = 1000.0

# Newly ingested records with abs(amount) >= this value get their item key
# added to the custom exclusion set.
LARGE_AMOUNT_AUTO_EXCLUDE_THRESHOLD: Final[float] = 1000.0

# Records with abs(amount) >= this value classify their item key as
# "large-amount" in the excluded-items listing.
LARGE_AMOUNT_DISPLAY_THRESHOLD: Final[float] = 1000.0

# Raw-row view "large only" filter (strictly greater than).
LARGE_ROW_FILTER_THRESHOLD: Final[float] = 100.0

GROUP_BY_MODES: Final[tuple[str, ...]] = ("week", "month")

# Columns kept on each record but hidden from the display header list.
HIDDEN_DISPLAY_COLUMNS: Final[frozenset[str]] = frozenset(
    {"ForeignCurrencyAmount", "ConversionCharge"}
)

__all__ = [
    "DEFAULT_EXCLUDED_ITEMS",
    "DEFAULT_LARGE_AMOUNT_THRESHOLD",
    "LARGE_AMOUNT_AUTO_EXCLUDE_THRESHOLD",
    "LARGE_AMOUNT_DISPLAY_THRESHOLD",
    "LARGE_ROW_FILTER_THRESHOLD",
    "GROUP_BY_MODES",
    "HIDDEN_DISPLAY_COLUMNS",
]
