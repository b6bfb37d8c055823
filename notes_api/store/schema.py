"""
Notes API - Store Schema
=========================

What:  Declarative description of the tables held by the in-memory store.
How:   A DBSchema holds TableSchemas; each TableSchema holds IndexSchemas;
       each IndexSchema pairs a name with an indexer that turns a record
       (or lookup arguments) into an index key.

Rules enforced by validate():
    - every table has an index named "id"
    - the "id" index is unique and does not allow missing values
    - index and table names match the keys they are registered under

Indexers:
    UUIDFieldIndex   → 16 raw bytes of a hyphenated UUID string attribute
    StringFieldIndex → the string attribute itself, optionally lower-cased
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional

from notes_api.exceptions import SchemaError, StoreFault

ID_INDEX = "id"

_UUID_HYPHENS = (8, 13, 18, 23)


class Indexer(ABC):
    """
    Extracts index keys from records and lookup arguments.

    from_object() returns None when the record has no value for the index.
    from_args() returns None when the arguments can never match a key,
    so a lookup with malformed caller input simply finds nothing.
    """

    @abstractmethod
    def from_object(self, obj: Any) -> Optional[Hashable]:
        """Key for `obj`, or None when it has no value for this index."""

    @abstractmethod
    def from_args(self, *args: Any) -> Optional[Hashable]:
        """Key for lookup arguments, or None when they cannot match."""


@dataclass(frozen=True)
class StringFieldIndex(Indexer):
    field: str
    lowercase: bool = False

    def from_object(self, obj: Any) -> Optional[Hashable]:
        value = getattr(obj, self.field, None)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise StoreFault(
                message=f"Field '{self.field}' is not a string",
                context={"field": self.field, "type": type(value).__name__},
            )
        return value.lower() if self.lowercase else value

    def from_args(self, *args: Any) -> Optional[Hashable]:
        if len(args) != 1 or not isinstance(args[0], str):
            return None
        return args[0].lower() if self.lowercase else args[0]


@dataclass(frozen=True)
class UUIDFieldIndex(Indexer):
    field: str

    def from_object(self, obj: Any) -> Optional[Hashable]:
        value = getattr(obj, self.field, None)
        if value is None or value == "":
            return None
        key = self._parse(value)
        if key is None:
            raise StoreFault(
                message=f"Field '{self.field}' does not hold a valid UUID",
                context={"field": self.field, "value": repr(value)},
            )
        return key

    def from_args(self, *args: Any) -> Optional[Hashable]:
        if len(args) != 1:
            return None
        return self._parse(args[0])

    @staticmethod
    def _parse(value: Any) -> Optional[bytes]:
        # 8-4-4-4-12 hex only: no bare hex, braces or urn:uuid: prefix
        if not isinstance(value, str) or len(value) != 36:
            return None
        if any(value[i] != "-" for i in _UUID_HYPHENS):
            return None
        try:
            return uuid.UUID(value).bytes
        except ValueError:
            return None


@dataclass(frozen=True)
class IndexSchema:
    name: str
    indexer: Indexer
    unique: bool = False
    allow_missing: bool = False

    def validate(self) -> None:
        if not self.name:
            raise SchemaError("Index is missing a name")
        if not isinstance(self.indexer, Indexer):
            raise SchemaError(
                f"Index '{self.name}' has no indexer",
                context={"index": self.name},
            )


@dataclass(frozen=True)
class TableSchema:
    name: str
    indexes: Dict[str, IndexSchema] = field(default_factory=dict)

    def validate(self) -> None:
        if not self.name:
            raise SchemaError("Table is missing a name")
        if ID_INDEX not in self.indexes:
            raise SchemaError(
                f"Table '{self.name}' must have an '{ID_INDEX}' index",
                context={"table": self.name},
            )
        id_index = self.indexes[ID_INDEX]
        if not id_index.unique:
            raise SchemaError(
                f"The '{ID_INDEX}' index of table '{self.name}' must be unique",
                context={"table": self.name},
            )
        if id_index.allow_missing:
            raise SchemaError(
                f"The '{ID_INDEX}' index of table '{self.name}' must not allow missing values",
                context={"table": self.name},
            )
        for name, index in self.indexes.items():
            if name != index.name:
                raise SchemaError(
                    f"Index name mismatch: '{name}' vs '{index.name}'",
                    context={"table": self.name},
                )
            index.validate()


@dataclass(frozen=True)
class DBSchema:
    tables: Dict[str, TableSchema] = field(default_factory=dict)

    def validate(self) -> None:
        if not self.tables:
            raise SchemaError("Schema has no tables")
        for name, table in self.tables.items():
            if name != table.name:
                raise SchemaError(
                    f"Table name mismatch: '{name}' vs '{table.name}'",
                )
            table.validate()
