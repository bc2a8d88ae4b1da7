"""Tests for the cancellation registry."""

import threading

from retryhttp.transport import CancellationRegistry


def test_register_and_cancel_sets_signal():
    registry = CancellationRegistry()
    key = object()
    signal = registry.register(key)

    assert key in registry
    assert registry.cancel(key) is True
    assert signal.is_set()
    assert key not in registry


def test_cancel_unknown_key_is_noop():
    registry = CancellationRegistry()
    assert registry.cancel(object()) is False


def test_unregister_does_not_signal():
    registry = CancellationRegistry()
    key = object()
    signal = registry.register(key)

    registry.unregister(key, signal)
    assert not signal.is_set()
    assert registry.cancel(key) is False
    assert not signal.is_set()


def test_unregister_after_cancel_is_idempotent():
    registry = CancellationRegistry()
    key = object()
    signal = registry.register(key)

    registry.cancel(key)
    registry.unregister(key, signal)
    registry.unregister(key)
    assert signal.is_set()
    assert len(registry) == 0


def test_unregister_keeps_newer_signal():
    registry = CancellationRegistry()
    key = object()
    stale = registry.register(key)
    current = registry.register(key)

    registry.unregister(key, stale)
    assert key in registry
    registry.cancel(key)
    assert current.is_set()
    assert not stale.is_set()


def test_cancel_all():
    registry = CancellationRegistry()
    signals = [registry.register(object()) for _ in range(3)]

    assert registry.cancel_all() == 3
    assert all(s.is_set() for s in signals)
    assert len(registry) == 0


def test_concurrent_cancel_and_unregister():
    registry = CancellationRegistry()
    errors: list[BaseException] = []

    for _ in range(100):
        key = object()
        signal = registry.register(key)
        barrier = threading.Barrier(2)
        results = {}

        def cancel():
            barrier.wait()
            results["cancelled"] = registry.cancel(key)

        def unregister():
            barrier.wait()
            try:
                registry.unregister(key, signal)
            except BaseException as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=cancel), threading.Thread(target=unregister)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert key not in registry
        assert signal.is_set() is results["cancelled"]

    assert errors == []
