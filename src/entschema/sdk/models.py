"""Static analysis results extracted from engine source text."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer, field_validator

from entschema.inference.types import SemanticType


class SourceHint(BaseModel):
    """A type signal for one property, from one conversion site or field declaration.

    Serialized as ``{"class": ..., "name": ..., "ty": ...}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    class_name: str = Field(alias="class")
    property_name: str = Field(alias="name")
    semantic_type: SemanticType = Field(alias="ty")

    @field_validator("semantic_type", mode="before")
    @classmethod
    def _resolve_tag(cls, v: object) -> object:
        return SemanticType.from_tag(v) if isinstance(v, str) else v

    @field_serializer("semantic_type")
    def _serialize_tag(self, v: SemanticType) -> str:
        return v.value


class InheritEdge(BaseModel):
    """Direct base classes of one class, in declaration order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    class_name: str = Field(alias="name")
    bases: tuple[str, ...] = Field(alias="inherits")


class EntityLink(BaseModel):
    """An entity classname bound to the engine class implementing it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entity: str
    class_name: str = Field(alias="class")


HintList = TypeAdapter(list[SourceHint])
InheritList = TypeAdapter(list[InheritEdge])
LinkList = TypeAdapter(list[EntityLink])
