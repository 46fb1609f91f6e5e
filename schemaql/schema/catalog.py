"""Process-wide cache of SchemaSnapshots, keyed by endpoint identity.

``SchemaCatalog.resolve`` builds a snapshot the first time an endpoint is
seen and returns the cached instance afterwards.  Builds are single-flight:
while one thread builds the snapshot for an identity, every other thread
asking for the same identity waits for that build and receives the same
object.  A failed build is reported to all of its waiters and is not
cached, so the next ``resolve`` tries again.

Snapshots are never mutated; :meth:`SchemaCatalog.invalidate` drops them so
they are rebuilt wholesale on next use.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from concurrent.futures import Future
from typing import TYPE_CHECKING, ClassVar

from schemaql.schema.snapshot import SchemaSnapshot

if TYPE_CHECKING:
    from schemaql.execute.connection import ConnectionProvider

logger = logging.getLogger(__name__)


class SchemaCatalog:
    """Registry of schema snapshots with single-flight construction.

    Components receive a catalog by reference; :meth:`default` returns the
    shared process-wide instance used when none is passed.
    """

    _default: ClassVar[SchemaCatalog | None] = None
    _default_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshots: dict[Hashable, SchemaSnapshot] = {}
        self._in_flight: dict[Hashable, Future[SchemaSnapshot]] = {}

    @classmethod
    def default(cls) -> SchemaCatalog:
        """Return the process-wide catalog, creating it on first use."""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls()
            return cls._default

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, provider: ConnectionProvider) -> SchemaSnapshot:
        """Return the snapshot for ``provider``'s endpoint.

        Args:
            provider: Supplies the cache key and, on a miss, the snapshot.

        Returns:
            The cached :class:`SchemaSnapshot`, built now if necessary.

        Raises:
            Exception: Whatever ``provider.load_schema()`` raised.
        """
        key = provider.endpoint_identity
        with self._lock:
            snapshot = self._snapshots.get(key)
            if snapshot is not None:
                return snapshot
            future = self._in_flight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._in_flight[key] = future

        if not owner:
            logger.debug("Waiting for in-flight schema build for %s", provider.description)
            return future.result()
        return self._build(key, provider, future)

    def invalidate(self, endpoint_identity: Hashable | None = None) -> None:
        """Drop the cached snapshot for one endpoint, or all when ``None``.

        Builds already in flight are unaffected.
        """
        with self._lock:
            if endpoint_identity is None:
                self._snapshots.clear()
            else:
                self._snapshots.pop(endpoint_identity, None)

    def cached_identities(self) -> list[Hashable]:
        """Return the endpoint identities that currently have a snapshot."""
        with self._lock:
            return list(self._snapshots)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _build(
        self,
        key: Hashable,
        provider: ConnectionProvider,
        future: Future[SchemaSnapshot],
    ) -> SchemaSnapshot:
        try:
            snapshot = provider.load_schema()
        except BaseException as exc:
            with self._lock:
                del self._in_flight[key]
            future.set_exception(exc)
            raise

        with self._lock:
            self._snapshots[key] = snapshot
            del self._in_flight[key]
        future.set_result(snapshot)
        logger.info(
            "Built schema snapshot for %s (%d tables)",
            provider.description,
            len(snapshot.tables),
        )
        return snapshot
