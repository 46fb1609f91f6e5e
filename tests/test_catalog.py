"""Unit tests for SchemaCatalog caching and single-flight builds."""

from __future__ import annotations

import threading

import pytest

from schemaql.compile.sqlserver import SQLServerDialect
from schemaql.schema.catalog import SchemaCatalog
from tests.fixtures import load_schema_snapshot
from tests.fixtures.dbapi import FakeProvider


class SlowProvider(FakeProvider):
    """Blocks inside load_schema until ``release`` is set."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.started = threading.Event()
        self.release = threading.Event()
        self._count_lock = threading.Lock()

    def load_schema(self):
        with self._count_lock:
            self.schema_loads += 1
        self.started.set()
        assert self.release.wait(timeout=5)
        return self._snapshot


class FlakyProvider(FakeProvider):
    """Fails the first ``failures`` schema loads."""

    def __init__(self, *args, failures: int = 1, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.failures = failures

    def load_schema(self):
        self.schema_loads += 1
        if self.schema_loads <= self.failures:
            raise ConnectionError("metadata query failed")
        return self._snapshot


def _provider(cls=FakeProvider, **kwargs):
    return cls(load_schema_snapshot(), SQLServerDialect(), **kwargs)


def test_first_resolve_builds_once(catalog):
    provider = _provider()
    first = catalog.resolve(provider)
    second = catalog.resolve(provider)
    assert first is second
    assert provider.schema_loads == 1


def test_same_identity_shares_snapshot(catalog):
    a = _provider(identity="db://one")
    b = _provider(identity="db://one")
    assert catalog.resolve(a) is catalog.resolve(b)
    assert b.schema_loads == 0


def test_different_identities_are_cached_separately(catalog):
    a = _provider(identity="db://one")
    b = _provider(identity="db://two")
    catalog.resolve(a)
    catalog.resolve(b)
    assert a.schema_loads == 1
    assert b.schema_loads == 1
    assert sorted(catalog.cached_identities()) == ["db://one", "db://two"]


def test_invalidate_one_identity(catalog):
    a = _provider(identity="db://one")
    b = _provider(identity="db://two")
    catalog.resolve(a)
    catalog.resolve(b)
    catalog.invalidate("db://one")
    assert catalog.cached_identities() == ["db://two"]
    catalog.resolve(a)
    assert a.schema_loads == 2


def test_invalidate_all(catalog):
    provider = _provider()
    catalog.resolve(provider)
    catalog.invalidate()
    assert catalog.cached_identities() == []
    catalog.resolve(provider)
    assert provider.schema_loads == 2


def test_invalidate_unknown_identity_is_noop(catalog):
    catalog.invalidate("db://never-seen")
    assert catalog.cached_identities() == []


def test_failed_build_is_not_cached(catalog):
    provider = _provider(FlakyProvider)
    with pytest.raises(ConnectionError):
        catalog.resolve(provider)
    assert catalog.cached_identities() == []
    snapshot = catalog.resolve(provider)
    assert snapshot.find_table("Customers").name == "Customers"
    assert provider.schema_loads == 2


def test_concurrent_first_use_builds_once(catalog):
    provider = _provider(SlowProvider)
    results = []
    errors = []

    def worker():
        try:
            results.append(catalog.resolve(provider))
        except Exception as exc:  # pragma: no cover - surfaced by the assert below
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    assert provider.started.wait(timeout=5)
    provider.release.set()
    for t in threads:
        t.join(timeout=5)

    assert errors == []
    assert len(results) == 8
    assert provider.schema_loads == 1
    assert all(r is results[0] for r in results)


def test_concurrent_failure_reaches_every_waiter(catalog):
    provider = _provider(SlowProvider)
    outcomes = []

    def failing_load():
        provider.started.set()
        assert provider.release.wait(timeout=5)
        raise ConnectionError("boom")

    provider.load_schema = failing_load

    def worker():
        try:
            catalog.resolve(provider)
        except ConnectionError as exc:
            outcomes.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    assert provider.started.wait(timeout=5)
    provider.release.set()
    for t in threads:
        t.join(timeout=5)

    assert len(outcomes) == 4
    assert catalog.cached_identities() == []


def test_default_is_a_singleton():
    assert SchemaCatalog.default() is SchemaCatalog.default()
