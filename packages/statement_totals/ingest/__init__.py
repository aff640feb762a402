"""CSV producer and record ingestion for bank statements."""

from .csv_reader import display_headers, read_statement_file, read_statement_text
from .records import IngestResult, RecordIngestor, item_key_for, parse_amount, parse_statement_date
from .utils import load_statements

__all__ = [
    "IngestResult",
    "RecordIngestor",
    "display_headers",
    "item_key_for",
    "load_statements",
    "parse_amount",
    "parse_statement_date",
    "read_statement_file",
    "read_statement_text",
]
