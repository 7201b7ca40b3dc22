"""Tests for background loading handed back through ``pump``."""

from __future__ import annotations

import logging
import time

from aquarium.assets import LoadScheduler

from .creature_helpers import DeferredExecutor, FakeLoader, ImmediateExecutor, make_asset


def test_outcomes_are_delivered_only_on_pump():
    executor = DeferredExecutor()
    scheduler = LoadScheduler(FakeLoader({"fish": make_asset()}), executor=executor)
    received = []
    scheduler.submit("fish", received.append)

    executor.run_all()
    assert received == []
    assert scheduler.pending == 1

    assert scheduler.pump() == 1
    assert received[0].ok
    assert scheduler.pending == 0


def test_load_errors_become_failed_outcomes():
    scheduler = LoadScheduler(FakeLoader(), executor=ImmediateExecutor())
    received = []
    scheduler.submit("ghost", received.append)
    scheduler.pump()
    assert not received[0].ok
    assert "ghost" in str(received[0].error)


def test_unexpected_loader_crash_is_logged(caplog):
    class CrashingLoader:
        def load(self, ref):
            raise RuntimeError("boom")

    scheduler = LoadScheduler(CrashingLoader(), executor=ImmediateExecutor())
    received = []
    scheduler.submit("fish", received.append)
    with caplog.at_level(logging.ERROR, logger="aquarium.assets"):
        scheduler.pump()
    assert isinstance(received[0].error, RuntimeError)
    assert "Loader crashed" in caplog.text


def test_owned_thread_pool_delivers_results():
    scheduler = LoadScheduler(FakeLoader({"fish": make_asset()}), max_workers=1)
    received = []
    try:
        scheduler.submit("fish", received.append)
        deadline = time.monotonic() + 5.0
        while not received and time.monotonic() < deadline:
            scheduler.pump()
            time.sleep(0.01)
        assert received and received[0].ok
    finally:
        scheduler.shutdown(wait=True)
