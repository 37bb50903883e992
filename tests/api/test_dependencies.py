from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from badge_ledger.api import dependencies
from badge_ledger.core.clock import ManualClock
from badge_ledger.repos.store import InMemoryKeyValueStore
from badge_ledger.services.ledger import Ledger, build_ledger
from tests.conftest import OWNER


@pytest.fixture
def fresh_singleton(monkeypatch: pytest.MonkeyPatch) -> list[Ledger]:
    """Unset the process-wide ledger and record every build."""
    built: list[Ledger] = []
    guard = threading.Lock()

    def slow_build(settings, store, clock) -> Ledger:
        time.sleep(0.05)
        ledger = build_ledger(InMemoryKeyValueStore(), ManualClock(), owner=OWNER)
        with guard:
            built.append(ledger)
        return ledger

    monkeypatch.setattr(dependencies, "_ledger", None)
    monkeypatch.setattr(dependencies, "ledger_from_settings", slow_build)
    monkeypatch.setattr(dependencies, "_build_store", InMemoryKeyValueStore)
    return built


def test_concurrent_first_requests_share_one_ledger(
    fresh_singleton: list[Ledger],
) -> None:
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: dependencies.get_ledger(), range(8)))

    assert len(fresh_singleton) == 1
    assert all(ledger is fresh_singleton[0] for ledger in results)


def test_ledger_is_reused_after_first_build(fresh_singleton: list[Ledger]) -> None:
    first = dependencies.get_ledger()
    assert dependencies.get_ledger() is first
    assert len(fresh_singleton) == 1
