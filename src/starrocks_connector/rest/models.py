from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from starrocks_connector.common.settings import Settings


class _FeModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Field(_FeModel):
    name: str
    type: str
    comment: str = ""
    precision: int = 0
    scale: int = 0


class Schema(_FeModel):
    status: int
    properties: list[Field] = PydanticField(default_factory=list)

    def field_names(self) -> list[str]:
        return [f.name for f in self.properties]


class Tablet(_FeModel):
    routings: list[str] = PydanticField(default_factory=list)
    version: int = 0
    version_hash: int = PydanticField(default=0, alias="versionHash")
    schema_hash: int = PydanticField(default=0, alias="schemaHash")


class QueryPlan(_FeModel):
    status: int
    opaqued_query_plan: str = ""
    partitions: dict[str, Tablet] = PydanticField(default_factory=dict)


class BackendRow(_FeModel):
    ip: str
    http_port: int
    is_alive: bool = True

    @property
    def address(self) -> str:
        return f"{self.ip}:{self.http_port}"


class Backends(_FeModel):
    status: int | None = None
    backends: list[BackendRow] | None = None


@dataclass(frozen=True)
class PartitionDefinition:
    """One unit of read work: a set of tablets served by a single BE."""

    database: str
    table: str
    settings: Settings
    be_address: str
    tablet_ids: frozenset[int]
    query_plan: str

    @property
    def tablet_count(self) -> int:
        return len(self.tablet_ids)

    def __repr__(self) -> str:
        return (
            f"PartitionDefinition(database={self.database!r}, table={self.table!r}, "
            f"be_address={self.be_address!r}, tablet_ids={sorted(self.tablet_ids)}, "
            f"query_plan=<{len(self.query_plan)} chars>)"
        )
