"""Semantic property types and their cascade order."""

from enum import Enum


class SemanticType(str, Enum):
    """Closed set of value interpretations a property can resolve to.

    Declaration order is the cascade order: earlier members are narrower and
    are tried first. ``rank`` exposes that order for sorting and tie-breaks.
    """

    BOOL = "bool"
    TRISTATE = "tristate"  # affirmative / negative / matches criteria
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    I32 = "i32"
    F32 = "f32"
    COLOR = "color"
    LIGHT_COLOR = "light_color"
    ANGLES = "angles"
    VECTOR = "vector"
    STRING = "string"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def from_tag(cls, tag: str) -> "SemanticType":
        """Resolve a serialized type tag, accepting historical aliases."""
        return cls(_TAG_ALIASES.get(tag, tag))


_RANKS: dict[SemanticType, int] = {ty: i for i, ty in enumerate(SemanticType)}

_TAG_ALIASES = {
    "str": "string",
    "negated": "tristate",
    "lightcolor": "light_color",
}
