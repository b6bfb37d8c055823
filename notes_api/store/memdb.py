"""
Notes API - In-Memory Transactional Store
==========================================

What:  A multi-table, multi-index in-memory database with snapshot reads
       and serialized writes.
How:   The committed state is an immutable root (tables + version). Readers
       pin the root they started on. A writer takes the writer lock, works on
       a copy-on-write view of the root, and publishes it with a single
       reference swap on commit.

Concurrency contract:
    - begin_read() never blocks and never blocks writers
    - begin_write() blocks while another write transaction is open
    - commit() is atomic: readers see all of a transaction's writes or none
    - a read transaction never observes commits made after it began
    - abort() after commit() (or a second abort()) is a no-op

Usage:
    with db.begin_write() as txn:
        txn.insert("notes", note)
        txn.commit()
    # leaving the block aborts, which is a no-op after commit

Index layout per table:
    unique index     → {key: record}
    non-unique index → {key: {id_key: record}}
    Committed dicts are never mutated; a write transaction clones a table
    the first time it touches it.
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, List, NamedTuple, Optional, Set

from notes_api.exceptions import StoreFault
from notes_api.store.schema import ID_INDEX, DBSchema, IndexSchema, TableSchema

logger = logging.getLogger(__name__)


class _Table:
    __slots__ = ("schema", "indexes")

    def __init__(
        self,
        schema: TableSchema,
        indexes: Optional[Dict[str, Dict[Hashable, Any]]] = None,
    ):
        self.schema = schema
        if indexes is None:
            indexes = {name: {} for name in schema.indexes}
        self.indexes = indexes

    def clone(self) -> "_Table":
        return _Table(
            self.schema,
            {name: dict(entries) for name, entries in self.indexes.items()},
        )


class _Root(NamedTuple):
    tables: Dict[str, _Table]
    version: int


class ReadTxn:
    """
    A read-only view pinned to the root that was committed when it began.

    Release it with abort() or by leaving its `with` block.
    """

    writable = False

    def __init__(self, db: "MemDB", tables: Dict[str, _Table], version: int):
        self._db = db
        self._tables = tables
        self.version = version
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.abort()

    def abort(self) -> None:
        self.closed = True

    # ── Lookups ───────────────────────────────────────────────────────────

    def get(self, table: str, index: str, *args: Any) -> List[Any]:
        """All records whose `index` key matches `args`, ordered by id key."""
        tbl = self._table(table)
        schema = self._index_schema(tbl, index)
        key = schema.indexer.from_args(*args)
        if key is None:
            return []
        entry = tbl.indexes[index].get(key)
        if entry is None:
            return []
        if schema.unique:
            return [entry]
        return [entry[id_key] for id_key in sorted(entry)]

    def first(self, table: str, index: str, *args: Any) -> Optional[Any]:
        matches = self.get(table, index, *args)
        return matches[0] if matches else None

    def scan(self, table: str) -> List[Any]:
        """Every record in `table`, ordered by id key."""
        ids = self._table(table).indexes[ID_INDEX]
        return [ids[key] for key in sorted(ids)]

    # ── Internals ─────────────────────────────────────────────────────────

    def _check_open(self) -> None:
        if self.closed:
            raise StoreFault(
                message="Transaction is already closed",
                context={"writable": self.writable},
            )

    def _table(self, name: str) -> _Table:
        self._check_open()
        try:
            return self._tables[name]
        except KeyError:
            raise StoreFault(
                message=f"Unknown table '{name}'",
                context={"table": name},
            ) from None

    @staticmethod
    def _index_schema(tbl: _Table, index: str) -> IndexSchema:
        try:
            return tbl.schema.indexes[index]
        except KeyError:
            raise StoreFault(
                message=f"Unknown index '{index}' on table '{tbl.schema.name}'",
                context={"table": tbl.schema.name, "index": index},
            ) from None


class WriteTxn(ReadTxn):
    """
    An exclusive read-write view. Holds the store's writer lock until
    commit() or abort(); reads see the transaction's own writes.
    """

    writable = True

    def __init__(self, db: "MemDB", tables: Dict[str, _Table], version: int):
        super().__init__(db, dict(tables), version)
        self._cloned: Set[str] = set()
        self._deferred: List[Callable[[], None]] = []
        self._changed = False

    def insert(self, table: str, obj: Any) -> None:
        """Insert `obj`, replacing any record with the same id."""
        tbl = self._table(table)
        id_key = self._id_key(tbl, obj)
        existing = tbl.indexes[ID_INDEX].get(id_key)

        # Compute every key before touching the table so a failure leaves
        # the transaction as it was.
        new_keys: Dict[str, Optional[Hashable]] = {}
        for name, schema in tbl.schema.indexes.items():
            key = schema.indexer.from_object(obj)
            if key is None and not schema.allow_missing:
                raise StoreFault(
                    message=f"Record is missing a value for index '{name}'",
                    context={"table": table, "index": name},
                )
            if schema.unique and key is not None and name != ID_INDEX:
                holder = tbl.indexes[name].get(key)
                if holder is not None and holder is not existing:
                    raise StoreFault(
                        message=f"Unique index '{name}' already holds this key",
                        context={"table": table, "index": name},
                    )
            new_keys[name] = key

        tbl = self._writable_table(table)
        if existing is not None:
            self._remove(tbl, id_key, existing)
        for name, key in new_keys.items():
            if key is None:
                continue
            entries = tbl.indexes[name]
            if tbl.schema.indexes[name].unique:
                entries[key] = obj
            else:
                bucket = dict(entries.get(key, {}))
                bucket[id_key] = obj
                entries[key] = bucket
        self._changed = True

    def delete(self, table: str, obj: Any) -> bool:
        """Remove the record sharing `obj`'s id. Returns False if there is none."""
        tbl = self._table(table)
        id_key = self._id_key(tbl, obj)
        existing = tbl.indexes[ID_INDEX].get(id_key)
        if existing is None:
            return False
        self._remove(self._writable_table(table), id_key, existing)
        self._changed = True
        return True

    def delete_all(self, table: str, index: str, *args: Any) -> int:
        """Remove every record matching the index lookup; returns how many."""
        matches = self.get(table, index, *args)
        for obj in matches:
            self.delete(table, obj)
        return len(matches)

    def defer(self, fn: Callable[[], None]) -> None:
        """Run `fn` after a successful commit. Deferred calls run in reverse order."""
        self._check_open()
        self._deferred.append(fn)

    def commit(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            if self._changed:
                version = self._db._publish(self._tables)
                logger.debug(
                    "Committed version %d (tables changed: %s)",
                    version,
                    ", ".join(sorted(self._cloned)),
                )
        finally:
            self._db._release_writer()
        deferred, self._deferred = self._deferred, []
        for fn in reversed(deferred):
            fn()

    def abort(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._tables = {}
        self._deferred = []
        self._db._release_writer()

    # ── Internals ─────────────────────────────────────────────────────────

    def _writable_table(self, name: str) -> _Table:
        tbl = self._table(name)
        if name not in self._cloned:
            tbl = tbl.clone()
            self._tables[name] = tbl
            self._cloned.add(name)
        return tbl

    @staticmethod
    def _id_key(tbl: _Table, obj: Any) -> Hashable:
        id_key = tbl.schema.indexes[ID_INDEX].indexer.from_object(obj)
        if id_key is None:
            raise StoreFault(
                message=f"Record is missing its '{ID_INDEX}' value",
                context={"table": tbl.schema.name},
            )
        return id_key

    @staticmethod
    def _remove(tbl: _Table, id_key: Hashable, obj: Any) -> None:
        for name, schema in tbl.schema.indexes.items():
            key = schema.indexer.from_object(obj)
            if key is None:
                continue
            entries = tbl.indexes[name]
            if schema.unique:
                if entries.get(key) is obj:
                    del entries[key]
                continue
            bucket = dict(entries.get(key, {}))
            bucket.pop(id_key, None)
            if bucket:
                entries[key] = bucket
            else:
                entries.pop(key, None)


class MemDB:
    """
    The in-memory database. Construct one per process and pass it to
    whatever needs it; there is no teardown.
    """

    def __init__(self, schema: DBSchema):
        schema.validate()
        self.schema = schema
        self._root = _Root(
            tables={name: _Table(table) for name, table in schema.tables.items()},
            version=0,
        )
        self._writer = threading.Lock()

    @property
    def version(self) -> int:
        return self._root.version

    def begin_read(self) -> ReadTxn:
        root = self._root
        return ReadTxn(self, root.tables, root.version)

    def begin_write(self) -> WriteTxn:
        self._writer.acquire()
        root = self._root
        return WriteTxn(self, root.tables, root.version)

    def _publish(self, tables: Dict[str, _Table]) -> int:
        version = self._root.version + 1
        self._root = _Root(tables=tables, version=version)
        return version

    def _release_writer(self) -> None:
        self._writer.release()
