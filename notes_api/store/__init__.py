# Store package init
"""
Notes API - In-Memory Store Package
====================================

What:  The transactional in-memory database backing the service.

Module Inventory:
    - schema.py: DBSchema / TableSchema / IndexSchema and the field indexers
    - memdb.py:  MemDB with ReadTxn (snapshot) and WriteTxn (exclusive)
"""

from notes_api.store.memdb import MemDB, ReadTxn, WriteTxn
from notes_api.store.schema import (
    ID_INDEX,
    DBSchema,
    IndexSchema,
    Indexer,
    StringFieldIndex,
    TableSchema,
    UUIDFieldIndex,
)

__all__ = [
    "ID_INDEX",
    "DBSchema",
    "IndexSchema",
    "Indexer",
    "MemDB",
    "ReadTxn",
    "StringFieldIndex",
    "TableSchema",
    "UUIDFieldIndex",
    "WriteTxn",
]
