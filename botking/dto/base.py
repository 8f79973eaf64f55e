"""
Shared helpers for artifact/record conversion.

Records are plain dicts shaped like persistence rows. Server-assigned fields
are only present once the artifact has them, so a transient artifact
converts to a record the Create schema accepts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from ..exceptions import ConstructionError
from ..validators.schema_registry import Entity

Record = dict[str, Any]

SERVER_FIELDS = ("id", "created_at", "updated_at")
TIMESTAMP_FIELDS = ("created_at", "updated_at")

A = TypeVar("A")


def attach_server_fields(record: Record, artifact: Any, fields: tuple[str, ...] = SERVER_FIELDS) -> Record:
    """Copy server-assigned values from the artifact into the record when set."""
    for name in fields:
        value = getattr(artifact, name, None)
        if value is not None:
            record[name] = value
    return record


def server_field_kwargs(record: Mapping[str, Any], fields: tuple[str, ...] = SERVER_FIELDS) -> dict[str, Any]:
    return {name: record.get(name) for name in fields}


class ArtifactConverter(ABC, Generic[A]):
    """
    Two-way projection between one artifact kind and its persistence record.

    Subclasses implement _to_record and _from_record; the public methods add
    server fields and wrap lookup and enum errors in ConstructionError.
    """

    entity: Entity
    server_fields: tuple[str, ...] = SERVER_FIELDS

    @abstractmethod
    def _to_record(self, artifact: A) -> Record:
        """Project the artifact's own fields into a record."""

    @abstractmethod
    def _from_record(self, record: Mapping[str, Any], server: dict[str, Any]) -> A:
        """Rebuild an artifact from a record plus its server-assigned values."""

    def to_dto(self, artifact: A) -> Record:
        return attach_server_fields(self._to_record(artifact), artifact, self.server_fields)

    def from_dto(self, record: Mapping[str, Any]) -> A:
        """
        Rebuild an artifact from a record.

        Raises:
            ConstructionError: If the record lacks fields or holds unknown enum values
        """
        try:
            return self._from_record(record, server_field_kwargs(record, self.server_fields))
        except (KeyError, ValueError, TypeError) as exc:
            raise ConstructionError(
                f"Cannot build {self.entity.value} artifact from record: {exc}",
                artifact_kind=self.entity.value,
                details={"record_keys": sorted(record)},
            ) from exc

    def to_update_payload(self, artifact: A) -> Record:
        """
        Record carrying the identity or composite key, without server timestamps.

        Raises:
            ConstructionError: If the artifact has no identity yet
        """
        payload = self.to_dto(artifact)
        for name in TIMESTAMP_FIELDS:
            payload.pop(name, None)
        if "id" in self.server_fields and payload.get("id") is None:
            raise ConstructionError(
                f"{self.entity.value} artifact has no identity to update",
                artifact_kind=self.entity.value,
            )
        return payload
