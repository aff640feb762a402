from datetime import date

from statement_totals.constants import DEFAULT_EXCLUDED_ITEMS
from statement_totals.models import ExcludedItem, ExclusionKind, TotalsConfig, TransactionRecord
from statement_totals.registry import classify_item, excluded_items_report, list_excluded_items

SALARY = "Salary_New Zealand Post"


def _rec(record_id: int, amount: float, item_key: str) -> TransactionRecord:
    return TransactionRecord(
        record_id=record_id,
        date=date(2024, 1, 10),
        amount=amount,
        item_key=item_key,
        source_id="s.csv",
    )


def test_list_is_sorted_union_of_exclusions_and_large_amount_keys():
    records = [
        _rec(1, -4, "POS_Coffee"),
        _rec(2, 1000, "Deposit_Bonus"),
        _rec(3, -1200, "Transfer_Savings"),
    ]
    keys = list_excluded_items(records, {"POS_Rent", SALARY})
    assert keys == sorted(["Deposit_Bonus", "POS_Rent", SALARY, "Transfer_Savings"])


def test_large_bonus_is_listed_as_large_amount():
    records = [_rec(1, 1500, "Deposit_Bonus"), _rec(2, -5, "POS_Coffee")]
    config = TotalsConfig(customExcludedItems=["Deposit_Bonus"])

    report = excluded_items_report(records, config)
    bonus = next(item for item in report if item.item_key == "Deposit_Bonus")

    assert bonus == ExcludedItem(
        item_key="Deposit_Bonus",
        kind=ExclusionKind.LARGE_AMOUNT,
        toggleable=True,
        custom_excluded=True,
    )
    assert "POS_Coffee" not in {item.item_key for item in report}


def test_classification_is_per_key_not_per_record():
    records = [
        _rec(1, -20, "Transfer_Savings"),
        _rec(2, -1000, "Transfer_Savings"),
        _rec(3, -30, "Transfer_Savings"),
    ]
    assert classify_item("Transfer_Savings", records, frozenset()) is ExclusionKind.LARGE_AMOUNT


def test_classification_precedence_default_then_large_then_custom():
    records = [_rec(1, 5000, SALARY), _rec(2, -10, "POS_Rent")]
    custom = frozenset({"POS_Rent"})

    assert classify_item(SALARY, records, custom) is ExclusionKind.DEFAULT
    assert classify_item("POS_Rent", records, custom) is ExclusionKind.CUSTOM
    assert classify_item("POS_Other", records, custom) is None


def test_report_lists_every_default_item_as_locked():
    report = excluded_items_report([], TotalsConfig())

    assert [item.item_key for item in report] == sorted(DEFAULT_EXCLUDED_ITEMS)
    assert all(item.kind is ExclusionKind.DEFAULT for item in report)
    assert not any(item.toggleable for item in report)


def test_toggling_a_default_item_leaves_listing_unchanged():
    records = [_rec(1, 5000, SALARY)]
    config = TotalsConfig()
    before = excluded_items_report(records, config)
    after = excluded_items_report(records, config.with_item_toggled(SALARY))
    assert before == after


def test_large_amount_key_reincluded_stays_listed_but_not_custom():
    records = [_rec(1, 1500, "Deposit_Bonus")]
    config = TotalsConfig(customExcludedItems=["Deposit_Bonus"]).with_item_toggled(
        "Deposit_Bonus"
    )

    (bonus,) = [i for i in excluded_items_report(records, config) if i.item_key == "Deposit_Bonus"]
    assert bonus.kind is ExclusionKind.LARGE_AMOUNT
    assert bonus.custom_excluded is False
