import threading
import time

import pytest
from statement_totals.pmap import p_map


def test_results_keep_input_order():
    def slow_square(x: int) -> int:
        time.sleep(0.01 * (5 - x))
        return x * x

    assert p_map(range(5), slow_square, concurrency=5) == [0, 1, 4, 9, 16]


def test_empty_input():
    assert p_map([], lambda x: x, concurrency=2) == []


@pytest.mark.parametrize("bad", [0, -1, True, 1.5])
def test_concurrency_must_be_positive_int(bad):
    with pytest.raises(ValueError):
        p_map([1], lambda x: x, concurrency=bad)


def test_concurrency_caps_in_flight_calls():
    lock = threading.Lock()
    active = 0
    peak = 0

    def track(x: int) -> int:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with lock:
            active -= 1
        return x

    assert p_map(range(8), track, concurrency=2) == list(range(8))
    assert peak <= 2


def test_stop_on_error_reraises_first_failure():
    def boom(x: int) -> int:
        if x == 2:
            raise RuntimeError("bad item")
        return x

    with pytest.raises(RuntimeError, match="bad item"):
        p_map(range(4), boom, concurrency=1)


def test_collect_errors_waits_for_all_and_groups_failures():
    seen: list[int] = []

    def boom(x: int) -> int:
        seen.append(x)
        if x % 2:
            raise ValueError(f"odd {x}")
        return x

    with pytest.raises(ExceptionGroup) as excinfo:
        p_map(range(6), boom, concurrency=3, stop_on_error=False)

    assert sorted(seen) == list(range(6))
    assert sorted(str(e) for e in excinfo.value.exceptions) == ["odd 1", "odd 3", "odd 5"]
