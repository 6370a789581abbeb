"""
Schema Describer Interface
The live-schema handle the introspection engine pulls a snapshot from
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Union

from .schema import DatabaseSchema


class SchemaDescriber(ABC):
    """
    Abstract base class for anything that can produce a schema snapshot

    Connection handling and driver specifics live in implementations outside
    of the engine; the engine only ever calls ``describe``.
    """

    @abstractmethod
    def describe(self) -> DatabaseSchema:
        """Return an immutable snapshot of the physical schema"""
        pass


class SnapshotDescriber(SchemaDescriber):
    """
    Describer backed by a stored snapshot document

    Usage:
        describer = SnapshotDescriber("schema.yaml")
        result = IntrospectionEngine().introspect(describer)
    """

    def __init__(self, source: Union[str, Dict[str, Any]]):
        self.source = source

    def describe(self) -> DatabaseSchema:
        from .loader import load_schema_snapshot

        return load_schema_snapshot(self.source)
