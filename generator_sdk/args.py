"""Derived schema representation and the arguments handed to emitters."""

from __future__ import annotations

from dataclasses import dataclass

from .dmmf import Datasource
from .schema import Configuration, Datamodel, EnvVar, Enum, Field, Model


@dataclass(frozen=True)
class ModelSchema:
    name: str
    db_name: str
    fields: tuple[Field, ...]
    scalar_fields: tuple[Field, ...]
    relation_fields: tuple[Field, ...]
    id_fields: tuple[str, ...]
    unique_fields: tuple[str, ...]
    unique_constraints: tuple[tuple[str, ...], ...]
    documentation: str | None = None


@dataclass(frozen=True)
class Schema:
    provider: str | None
    models: tuple[ModelSchema, ...]
    enums: tuple[Enum, ...]

    def model(self, name: str) -> ModelSchema | None:
        return next((m for m in self.models if m.name == name), None)


@dataclass(frozen=True)
class GenerateArgs:
    """Everything an emitter gets to look at."""

    datamodel: Datamodel
    schema: Schema
    datamodel_str: str
    datasources: tuple[Datasource, ...]


def _build_model(model: Model) -> ModelSchema:
    """Derive the per-model view: ids, uniques, relations, db name."""
    id_attr = model.attribute("@@id")
    if id_attr is not None:
        id_fields = tuple(id_attr.list_args())
    else:
        id_fields = tuple(f.name for f in model.fields if f.has_attribute("@id"))

    constraints = tuple(
        tuple(attr.list_args()) for attr in model.attributes if attr.name == "@@unique"
    )
    map_attr = model.attribute("@@map")
    db_name = (map_attr.string_arg() if map_attr else None) or model.name

    return ModelSchema(
        name=model.name,
        db_name=db_name,
        fields=tuple(model.fields),
        scalar_fields=tuple(f for f in model.fields if f.kind != "object"),
        relation_fields=tuple(f for f in model.fields if f.kind == "object"),
        id_fields=id_fields,
        unique_fields=tuple(f.name for f in model.fields if f.has_attribute("@unique")),
        unique_constraints=constraints,
        documentation=model.documentation,
    )


def build_schema(datamodel: Datamodel, configuration: Configuration) -> Schema:
    """Build the derived schema from a compiled datamodel."""
    provider = None
    if configuration.datasources:
        value = configuration.datasources[0].properties.get("provider")
        if value is not None and not isinstance(value, EnvVar):
            provider = str(value)
    return Schema(
        provider=provider,
        models=tuple(_build_model(m) for m in datamodel.models),
        enums=tuple(datamodel.enums),
    )
