"""Persistent Table - a named table bound to a blob on disk.

This module provides the PersistentTable class that ties the query
algebra to storage. Every call follows the same cycle:

    load()    read blob -> open (if keyed) -> decode
    mutate    pure in-memory change (mutations only)
    rewrite() encode -> seal (if keyed) -> overwrite blob

Nothing is cached between calls: each operation starts from a fresh
load, so changes made through another instance (or another process)
are always visible to the next call.

Usage:
    from condense import PersistentTable

    users = PersistentTable("users", "data")
    users.insert({"name": "Alice", "dept": "X"})
    users.where(["name"], "dept", "X")       # [{'name': 'Alice'}]

    vault = PersistentTable("secrets", "data", key="correct horse")
    vault.is_encrypted                       # True

Consistency:
    There is no locking. Two writers on the same location race: both
    load, both mutate, and the last rewrite wins, silently dropping the
    other's change. Callers that share a table across threads or
    processes must serialize mutating calls themselves (for example
    with an advisory file lock around each call).

    Row indices are positional. After remove(), every later row moves
    down by one; re-resolve indices with index_of() after any mutation.
"""

from __future__ import annotations

import re
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

from condense.adapters.outbound import FileBlobStore, JsonCodec, PasswordCipher
from condense.domain.entities import Row, Table, Value
from condense.domain.exceptions import CorruptDataError, DecryptionError
from condense.domain.services import mutations, predicates, projection, set_operations
from condense.domain.value_objects import EqualityMode, JoinMethod
from condense.infrastructure.config import Config, get_config
from condense.infrastructure.logging import get_logger
from condense.infrastructure.metrics import MetricsRegistry, get_metrics
from condense.infrastructure.tracing import trace_span
from condense.ports.outbound import BlobStore, Cipher, Codec


class PersistentTable:
    """A table persisted as one blob, optionally encrypted.

    State machine:

        (absent) --__init__()--> READY --any op--> READY
                                   |
                                delete()
                                   v
                                 ABSENT --load()--> [] (no error)

    Construction creates an empty blob if none exists. After delete()
    the instance stays usable: load() returns an empty table and the
    next mutation recreates the blob.
    """

    def __init__(
        self,
        name: str,
        directory: str | Path | None = None,
        key: str | None = "",
        *,
        blob_store: BlobStore | None = None,
        codec: Codec | None = None,
        cipher: Cipher | None = None,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Open (or create) a table.

        Args:
            name: Table name; also the file name without suffix.
            directory: Directory holding the table file. Defaults to
                ``storage.data_dir`` from the configuration.
            key: Password used to encrypt the blob; empty for none.
            blob_store: Storage to use instead of a file in ``directory``.
            codec: Serialization format (default JSON).
            cipher: Encryption scheme (default PBKDF2 + AES-GCM).
            config: Configuration (default: the global one).
            metrics: Metrics registry (default: the global one).
        """
        self._name = name
        self._key = key or ""
        self._config = config or get_config()

        if blob_store is None:
            storage = self._config.storage
            if directory is None:
                self._config.ensure_directories()
                directory = storage.data_dir
            blob_store = FileBlobStore.for_table(
                name, directory, suffix=storage.file_suffix, fsync=storage.fsync
            )
        self._blob_store = blob_store

        self._codec = codec or JsonCodec()
        self._cipher = cipher or PasswordCipher(
            kdf_iterations=self._config.encryption.kdf_iterations,
            salt_size=self._config.encryption.salt_size,
        )
        self._metrics = metrics or get_metrics()
        self._logger = get_logger(__name__, table=name)

        self._initialize()

    def _initialize(self) -> bool:
        """Create an empty blob if none exists; True if one was created."""
        if self._blob_store.exists():
            return False
        self._blob_store.write(b"")
        self._logger.debug(
            "table_created",
            location=self._blob_store.location,
            encrypted=self.is_encrypted,
        )
        return True

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def name(self) -> str:
        """Table name."""
        return self._name

    @property
    def key(self) -> str:
        """Password used to encrypt the table (empty if none)."""
        return self._key

    @property
    def is_encrypted(self) -> bool:
        """True when a key is configured, whatever the blob currently holds."""
        return self._key != ""

    @property
    def location(self) -> str:
        """Where the blob lives, e.g. the table file path."""
        return self._blob_store.location

    # =========================================================================
    # Instrumentation
    # =========================================================================

    @contextmanager
    def _operation(self, operation: str) -> Iterator[None]:
        """Trace, time and count one public operation."""
        start = time.perf_counter()
        attributes = {"condense.table": self._name, "condense.encrypted": self.is_encrypted}
        try:
            with trace_span(f"condense.{operation}", attributes):
                yield
        except Exception:
            self._metrics.operations_total.labels(operation=operation, status="error").inc()
            raise
        else:
            self._metrics.operations_total.labels(operation=operation, status="success").inc()
        finally:
            self._metrics.operation_latency_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )

    # =========================================================================
    # Storage
    # =========================================================================

    def _load(self) -> Table:
        data = self._blob_store.read()
        if not data:
            return []

        if self.is_encrypted:
            try:
                data = self._cipher.open(data, self._key)
            except DecryptionError:
                self._metrics.decryption_failures_total.inc()
                self._logger.warning("table_decryption_failed", location=self.location)
                raise
            if not data:
                return []

        try:
            table = self._codec.decode(data)
        except CorruptDataError as e:
            self._metrics.corrupt_loads_total.inc()
            self._logger.warning("table_corrupt", location=self.location, reason=e.reason)
            if e.location is None:
                raise CorruptDataError(e.reason, self.location) from e
            raise

        self._metrics.rows_loaded.observe(len(table))
        self._logger.debug("table_loaded", rows=len(table))
        return table

    def _rewrite(self, table: Table) -> Table:
        data = self._codec.encode(table)
        if self.is_encrypted and data:
            data = self._cipher.seal(data, self._key)

        self._blob_store.write(data)

        self._metrics.blob_bytes_written_total.inc(len(data))
        self._logger.debug("table_rewritten", rows=len(table), size=len(data))
        return table

    def _rows_of(self, other: PersistentTable | Sequence[Row]) -> Sequence[Row]:
        if isinstance(other, PersistentTable):
            return other.load()
        return other

    def load(self) -> Table:
        """Read the whole table.

        Returns:
            The rows; an empty list for an empty or missing blob.

        Raises:
            DecryptionError: If the key is wrong or the blob was tampered with.
            CorruptDataError: If the blob does not decode to a table.
        """
        with self._operation("load"):
            return self._load()

    def rewrite(self, table: Table) -> Table:
        """Replace the whole stored table with ``table`` and return it."""
        with self._operation("rewrite"):
            return self._rewrite(table)

    def delete(self) -> bool:
        """Delete the blob; True if it existed.

        A later load() returns an empty table rather than failing.
        """
        with self._operation("delete"):
            deleted = self._blob_store.delete()
            self._logger.debug("table_deleted", location=self.location, existed=deleted)
            return deleted

    # =========================================================================
    # Mutations (load -> mutate -> rewrite)
    # =========================================================================

    def insert(self, row: Row) -> Table:
        """Append ``row`` and return the updated table."""
        with self._operation("insert"):
            return self._rewrite(mutations.insert_row(self._load(), row))

    def remove(self, index: int) -> Table:
        """Remove the row at ``index``; later rows shift down by one.

        Raises:
            IndexOutOfRangeError: If no row has that index.
        """
        with self._operation("remove"):
            return self._rewrite(mutations.remove_row(self._load(), index))

    def update(self, index: int, changes: Row) -> Table:
        """Merge ``changes`` into the row at ``index``.

        Raises:
            IndexOutOfRangeError: If no row has that index.
        """
        with self._operation("update"):
            return self._rewrite(mutations.update_row(self._load(), index, changes))

    def set_field(self, field: str, value: Value, key: str, val: Value) -> Table:
        """Set ``field`` to ``value`` in every row whose ``key`` strictly equals ``val``."""
        with self._operation("set_field"):
            return self._rewrite(mutations.set_field(self._load(), field, value, key, val))

    def index_of(self, key: str, val: Value) -> int:
        """Index of the first row whose ``key`` strictly equals ``val``, or -1.

        The index is only valid until the next mutation.
        """
        with self._operation("index_of"):
            return mutations.index_of(self._load(), key, val)

    # =========================================================================
    # Queries (load -> pure algebra)
    # =========================================================================

    def select(self, fields: str | Iterable[str] | None = None) -> Table:
        """Project every row onto ``fields`` (all fields if empty)."""
        with self._operation("select"):
            return projection.select(fields, self._load())

    def where(self, fields: str | Iterable[str] | None, key: str, val: Value) -> Table:
        """Rows whose ``key`` strictly equals ``val``, projected onto ``fields``."""
        with self._operation("where"):
            return predicates.where(fields, key, val, self._load())

    def where_in(
        self,
        fields: str | Iterable[str] | None,
        key: str,
        values: Iterable[Value],
        mode: EqualityMode | str | None = None,
    ) -> Table:
        """Rows whose ``key`` is one of ``values``, projected onto ``fields``.

        ``mode`` defaults to ``query.in_equality`` from the configuration.
        """
        with self._operation("where_in"):
            return predicates.where_in(
                fields,
                key,
                values,
                self._load(),
                mode=mode or self._config.query.in_equality,
            )

    def like(
        self,
        fields: str | Iterable[str] | None,
        key: str,
        pattern: str | re.Pattern[str],
    ) -> Table:
        """Rows whose ``key`` matches the delimited regex ``pattern``."""
        with self._operation("like"):
            return predicates.like(fields, key, pattern, self._load())

    def exists(self, key: str, val: Value) -> bool:
        """Check whether any row strictly holds ``val`` at ``key``."""
        with self._operation("exists"):
            return predicates.exists(key, val, self._load())

    def count(self, field: str = "") -> int:
        """Count rows with a non-empty ``field``, or rows with any field."""
        with self._operation("count"):
            return predicates.count(field, self._load())

    def first(self, field: str) -> Value:
        """First non-empty value of ``field``.

        Raises:
            NotFoundError: If no row has one.
        """
        with self._operation("first"):
            return predicates.first(field, self._load())

    def last(self, field: str) -> Value:
        """Last non-empty value of ``field``.

        Raises:
            NotFoundError: If no row has one.
        """
        with self._operation("last"):
            return predicates.last(field, self._load())

    def get(self, field: str, key: str, val: Value) -> Value | None:
        """Value of ``field`` in the first row where ``key`` equals ``val``, else None."""
        with self._operation("get"):
            return predicates.get(field, key, val, self._load())

    def union(
        self,
        fields: str | Iterable[str] | None,
        other: PersistentTable | Sequence[Row],
    ) -> Table:
        """Merge this table with ``other`` on ``fields``, without duplicates."""
        with self._operation("union"):
            return set_operations.union(fields, self._load(), self._rows_of(other))

    def join(
        self,
        method: JoinMethod | str,
        fields: str | Iterable[str] | None,
        other: PersistentTable | Sequence[Row],
        match: Any,
    ) -> Table:
        """Join this table (left) with ``other`` (right) on one field pair.

        Args:
            method: inner, left, right or full.
            fields: Fields to return (empty for all).
            other: Right-hand table, persistent or in memory.
            match: ``(left_field, right_field)``, ``{left: right}`` or MatchKey.

        Raises:
            InvalidJoinMethodError: If ``method`` is unknown.
            InvalidMatchSpecificationError: If ``match`` is not one field pair.
        """
        with self._operation("join"):
            return set_operations.join(method, fields, self._load(), self._rows_of(other), match)

    def __repr__(self) -> str:
        return (
            f"PersistentTable(name={self._name!r}, location={self.location!r}, "
            f"encrypted={self.is_encrypted})"
        )
