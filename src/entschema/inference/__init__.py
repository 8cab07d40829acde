"""Type inference over observed property values."""

from entschema.inference.cascade import (
    CANDIDATES,
    Classification,
    classify,
    classify_detailed,
)
from entschema.inference.parsers import PARSERS, count_parsed, parses
from entschema.inference.types import SemanticType

__all__ = [
    "CANDIDATES",
    "Classification",
    "PARSERS",
    "SemanticType",
    "classify",
    "classify_detailed",
    "count_parsed",
    "parses",
]
