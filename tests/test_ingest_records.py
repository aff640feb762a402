import math
from datetime import date

import pytest
from statement_totals.ingest import (
    RecordIngestor,
    display_headers,
    item_key_for,
    parse_amount,
    parse_statement_date,
    read_statement_file,
    read_statement_text,
)
from statement_totals.ingest.csv_reader import missing_columns


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("12.50", 12.5),
        ("-4.5", -4.5),
        ("  +3", 3.0),
        ("12.5abc", 12.5),
        ("1e3x", 1000.0),
        (".5", 0.5),
        ("7.", 7.0),
        ("1,234.50", 1.0),
    ],
)
def test_parse_amount_takes_longest_numeric_prefix(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "-", ".", "e5", None])
def test_parse_amount_without_numeric_prefix_is_nan(raw):
    assert math.isnan(parse_amount(raw))


def test_parse_amount_infinity():
    assert parse_amount("Infinity") == math.inf
    assert parse_amount("-Infinityxyz") == -math.inf


def test_parse_statement_date():
    assert parse_statement_date("10/01/2024") == date(2024, 1, 10)
    assert parse_statement_date(" 29/02/2024 ") == date(2024, 2, 29)
    assert parse_statement_date("31/02/2024") is None
    assert parse_statement_date("2024-01-10") is None
    assert parse_statement_date("") is None
    assert parse_statement_date(None) is None


def test_item_key_for_missing_segments_become_empty():
    assert item_key_for({"Type": "POS", "Details": "Coffee"}) == "POS_Coffee"
    assert item_key_for({"Type": "Term Deposit Break", "Details": ""}) == "Term Deposit Break_"
    assert item_key_for({}) == "_"


def test_read_statement_text_skips_blank_rows_and_bom():
    csv_text = (
        "\ufeffDate,Amount,Type,Details,ConversionCharge\n"
        "10/01/2024,-12.50,POS,Coffee,\n"
        ",,,,\n"
        "\n"
        "11/01/2024,-3.00,POS,Bakery,0.10\n"
    )
    st = read_statement_text(csv_text, source_id="jan.csv")

    assert st.source_id == "jan.csv"
    assert st.fieldnames == ("Date", "Amount", "Type", "Details", "ConversionCharge")
    assert [r["Details"] for r in st.rows] == ["Coffee", "Bakery"]
    assert display_headers(st.fieldnames) == ["Date", "Amount", "Type", "Details"]


def test_read_statement_file_uses_file_name_as_source(write_csv):
    path = write_csv(
        "statement-2024-01.csv",
        """
        Date,Amount,Type,Details
        10/01/2024,-12.50,POS,"Coffee, Large"
        """,
    )
    st = read_statement_file(path)
    assert st.source_id == "statement-2024-01.csv"
    assert st.rows == [
        {"Date": "10/01/2024", "Amount": "-12.50", "Type": "POS", "Details": "Coffee, Large"}
    ]


def test_missing_columns_reports_required_only():
    assert missing_columns(["Date", "Amount", "Type", "Details", "Extra"]) == []
    assert missing_columns(["Date", "Type"]) == ["Amount", "Details"]


def test_ingestor_assigns_unique_monotonic_ids_across_batches():
    ingestor = RecordIngestor()
    first = ingestor.ingest(
        read_statement_text(
            "Date,Amount,Type,Details\n10/01/2024,-1,POS,A\n11/01/2024,-2,POS,B\n",
            source_id="a.csv",
        )
    )
    second = ingestor.ingest(
        read_statement_text("Date,Amount,Type,Details\n12/01/2024,-3,POS,A\n", source_id="a.csv")
    )

    ids = [r.record_id for r in first.records + second.records]
    assert ids == [1, 2, 3]
    assert second.records[0].item_key == "POS_A"
    assert second.records[0].source_id == "a.csv"


def test_ingestor_keeps_all_original_columns():
    st = read_statement_text(
        "Date,Amount,Type,Details,Reference\n10/01/2024,-1.25,POS,A,REF-1\n", source_id="x.csv"
    )
    (record,) = RecordIngestor().ingest(st).records

    assert record.date == date(2024, 1, 10)
    assert record.amount == -1.25
    assert dict(record.row) == {
        "Date": "10/01/2024",
        "Amount": "-1.25",
        "Type": "POS",
        "Details": "A",
        "Reference": "REF-1",
    }
    with pytest.raises(TypeError):
        record.row["Amount"] = "0"  # type: ignore[index]


def test_ingestor_rejects_bad_rows_with_warnings(caplog):
    st = read_statement_text(
        "Date,Amount,Type,Details\n"
        "10/01/2024,-1,POS,Good\n"
        "2024-01-11,-2,POS,BadDate\n"
        "12/01/2024,n/a,POS,BadAmount\n"
        "13/01/2024,Infinity,POS,Infinite\n",
        source_id="mixed.csv",
    )
    with caplog.at_level("WARNING", logger="statement_totals"):
        result = RecordIngestor().ingest(st)

    assert [r.item_key for r in result.records] == ["POS_Good"]
    assert [(w.row_index, w.field, w.value) for w in result.warnings] == [
        (1, "Date", "2024-01-11"),
        (2, "Amount", "n/a"),
        (3, "Amount", "Infinity"),
    ]
    assert all(w.source_id == "mixed.csv" for w in result.warnings)
    assert "ingest:row_rejected" in caplog.text
    assert "mixed.csv row 2" in str(result.warnings[1])
