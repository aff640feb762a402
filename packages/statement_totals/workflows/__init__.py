"""High-level workflows composing ingest, exclusions, and aggregation."""

from .totals_flow import session_from_csv

__all__ = ["session_from_csv"]
