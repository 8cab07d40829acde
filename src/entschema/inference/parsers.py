"""Value grammars for each semantic type.

Every parser takes one raw property string and returns the typed value, or
raises ``ValueError`` when the text does not belong to the grammar. Parsing
is strict: no surrounding whitespace, no digit-group underscores, no
implicit truncation of out-of-range integers.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from enum import Enum
from typing import Any, NamedTuple

from entschema.inference.types import SemanticType

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_F32_MAX = 3.4028234663852886e38


class TriState(Enum):
    NO = 0
    YES = 1
    MATCHING_CRITERIA = 2


class Color(NamedTuple):
    r: int
    g: int
    b: int


class LightColor(NamedTuple):
    r: int
    g: int
    b: int
    brightness: float


class Vector(NamedTuple):
    x: float
    y: float
    z: float


class Angles(NamedTuple):
    pitch: float
    yaw: float
    roll: float


_BOOL_TOKENS = {"0": False, "no": False, "1": True, "yes": True}
_TRISTATE_TOKENS = {
    "0": TriState.NO,
    "no": TriState.NO,
    "1": TriState.YES,
    "yes": TriState.YES,
    "2": TriState.MATCHING_CRITERIA,
}


def parse_bool(value: str) -> bool:
    try:
        return _BOOL_TOKENS[value]
    except KeyError:
        raise ValueError(f"not a boolean token: {value!r}") from None


def parse_tristate(value: str) -> TriState:
    try:
        return _TRISTATE_TOKENS[value]
    except KeyError:
        raise ValueError(f"not a tri-state token: {value!r}") from None


def _parse_unsigned(value: str, bits: int) -> int:
    if not _UNSIGNED_RE.fullmatch(value):
        raise ValueError(f"not an unsigned integer: {value!r}")
    number = int(value)
    if number >= 1 << bits:
        raise ValueError(f"{value!r} overflows u{bits}")
    return number


def parse_u8(value: str) -> int:
    return _parse_unsigned(value, 8)


def parse_u16(value: str) -> int:
    return _parse_unsigned(value, 16)


def parse_u32(value: str) -> int:
    return _parse_unsigned(value, 32)


def parse_i32(value: str) -> int:
    if not _SIGNED_RE.fullmatch(value):
        raise ValueError(f"not a signed integer: {value!r}")
    number = int(value)
    if not -(1 << 31) <= number < 1 << 31:
        raise ValueError(f"{value!r} overflows i32")
    return number


def parse_f32(value: str) -> float:
    """Parse single-precision float text. Out-of-range magnitudes round to infinity."""
    if not _FLOAT_RE.fullmatch(value):
        raise ValueError(f"not a float: {value!r}")
    number = float(value)
    if math.isfinite(number) and abs(number) > _F32_MAX:
        return math.copysign(math.inf, number)
    return number


def _components(value: str, allowed: tuple[int, ...]) -> list[str]:
    parts = value.split()
    if len(parts) not in allowed:
        raise ValueError(f"expected {' or '.join(map(str, allowed))} components: {value!r}")
    return parts


def parse_color(value: str) -> Color:
    r, g, b = (parse_u8(part) for part in _components(value, (3,)))
    return Color(r, g, b)


def parse_light_color(value: str) -> LightColor:
    *rgb, brightness = _components(value, (4,))
    r, g, b = (parse_u8(part) for part in rgb)
    return LightColor(r, g, b, parse_f32(brightness))


def parse_angles(value: str) -> Angles:
    pitch, yaw, roll = (parse_f32(part) for part in _components(value, (3,)))
    return Angles(pitch, yaw, roll)


def parse_vector(value: str) -> Vector:
    x, y, z = (parse_f32(part) for part in _components(value, (3,)))
    return Vector(x, y, z)


def parse_string(value: str) -> str:
    return value


PARSERS: dict[SemanticType, Callable[[str], Any]] = {
    SemanticType.BOOL: parse_bool,
    SemanticType.TRISTATE: parse_tristate,
    SemanticType.U8: parse_u8,
    SemanticType.U16: parse_u16,
    SemanticType.U32: parse_u32,
    SemanticType.I32: parse_i32,
    SemanticType.F32: parse_f32,
    SemanticType.COLOR: parse_color,
    SemanticType.LIGHT_COLOR: parse_light_color,
    SemanticType.ANGLES: parse_angles,
    SemanticType.VECTOR: parse_vector,
    SemanticType.STRING: parse_string,
}


def parses(semantic_type: SemanticType, value: str) -> bool:
    """Whether ``value`` belongs to the grammar of ``semantic_type``."""
    try:
        PARSERS[semantic_type](value)
    except ValueError:
        return False
    return True


def count_parsed(semantic_type: SemanticType, values: list[str]) -> int:
    """Number of values that parse as ``semantic_type``."""
    return sum(1 for value in values if parses(semantic_type, value))
