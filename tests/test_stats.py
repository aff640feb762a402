import math

import pytest
from statement_totals.stats import average, format_amount, selected_average, total_average


def test_average_of_empty_is_zero():
    assert average([]) == 0


def test_average_of_single_value_is_that_value():
    assert average([42.5]) == 42.5


def test_average_is_order_invariant():
    values = [1.5, -3.0, 10.25, 7.0]
    assert average(values) == pytest.approx(average(list(reversed(values))))
    assert average(values) == pytest.approx(15.75 / 4)


def test_total_average_uses_every_bucket():
    totals = {"2024-02-01-2024-02-29": -30.0, "2024-01-01-2024-01-31": -10.0}
    assert total_average(totals) == -20.0
    assert total_average({}) == 0


def test_selected_average_ignores_stale_and_duplicate_keys():
    totals = {"a": 10.0, "b": 20.0, "c": 60.0}
    assert selected_average(totals, ["a", "c"]) == 35.0
    assert selected_average(totals, ["a", "a", "c"]) == 35.0
    assert selected_average(totals, ["a", "gone"]) == 10.0
    assert selected_average(totals, []) == 0


def test_average_propagates_nan():
    assert math.isnan(average([1.0, math.nan]))


def test_format_amount():
    assert format_amount(50) == "50.00"
    assert format_amount(-1234.5) == "-1234.50"
    assert format_amount(3.14159) == "3.14"
    assert format_amount(math.nan) == "NaN"
