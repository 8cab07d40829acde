"""Synthesized schema models: the contract handed to code generation backends."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from entschema.inference.types import SemanticType

FORMAT_VERSION = 1


class PropertySchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Identifier valid in the backend grammar.")
    type: SemanticType
    optional: bool = Field(description="Absent from at least one observed instance.")
    rename_from: str | None = Field(
        default=None,
        description="Raw property key when it differs from ``name``.",
    )

    @property
    def key(self) -> str:
        """The raw key this property is read from."""
        return self.rename_from if self.rename_from is not None else self.name


class ClassSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    classname: str
    identifier: str
    occurrences: int
    reference_bearing: bool = Field(
        description="True when any property is a STRING borrowed from the input text.",
    )
    properties: tuple[PropertySchema, ...] = ()


class SchemaDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    format_version: int = FORMAT_VERSION
    classes: tuple[ClassSchema, ...] = ()
