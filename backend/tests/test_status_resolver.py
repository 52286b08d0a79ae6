import asyncio
from datetime import datetime

import pytest

from conftest import FakeTimeEntryStore, make_entry
from time_tracking.exceptions import DegradedRead, StoreUnavailable
from time_tracking.services.status_resolver import resolve_status


def test_unknown_staff_is_clocked_out():
    assert asyncio.run(resolve_status(FakeTimeEntryStore(), "new_hire")) == "clock_out"


def test_latest_action_wins():
    store = FakeTimeEntryStore([
        make_entry("john_doe", "clock_in", datetime(2026, 3, 2, 9)),
        make_entry("john_doe", "lunch", datetime(2026, 3, 2, 12)),
        make_entry("jane_smith", "clock_out", datetime(2026, 3, 2, 13)),
    ])

    assert asyncio.run(resolve_status(store, "john_doe")) == "lunch"


def test_degraded_read_falls_back_to_default():
    store = FakeTimeEntryStore([make_entry("john_doe", "clock_in", datetime(2026, 3, 2, 9))])
    store.latest_error = DegradedRead("index building")

    assert asyncio.run(resolve_status(store, "john_doe")) == "clock_out"


def test_store_failure_propagates():
    store = FakeTimeEntryStore()
    store.fail_with = StoreUnavailable("connection refused")

    with pytest.raises(StoreUnavailable):
        asyncio.run(resolve_status(store, "john_doe"))
