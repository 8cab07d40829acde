"""Type inference cascade.

Picks the narrowest SemanticType that explains the observed values of one
property. Candidates are attempted in SemanticType order; each attempt
reports how many values it parsed, and the first candidate that parses every
value wins. When none does, a near-unanimous best candidate is accepted with
its outliers logged; anything less falls back to STRING.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from entschema.core.logging import get_logger
from entschema.inference.parsers import count_parsed, parses
from entschema.inference.types import SemanticType

log = get_logger("cascade")

# Flag-bitmask-like names that never resolve to boolean or byte types.
FLAG_DENYLIST = frozenset({"spawnflags", "ammo"})
FLAG_BITMASK_NAME = "spawnflags"

COLOR_NAME_MARKERS = ("color", "light", "ambient")

TOLERANCE_PERCENT = 99


def _not_denylisted(name: str) -> bool:
    return name not in FLAG_DENYLIST


def _not_bitmask(name: str) -> bool:
    return name != FLAG_BITMASK_NAME


def _always(name: str) -> bool:  # noqa: ARG001
    return True


def _color_like(name: str) -> bool:
    return any(marker in name for marker in COLOR_NAME_MARKERS)


def _angles_like(name: str) -> bool:
    return "angles" in name or name.endswith("dir")


@dataclass(frozen=True, slots=True)
class Candidate:
    """One cascade step: a type and the property-name gate that enables it."""

    semantic_type: SemanticType
    applies_to: Callable[[str], bool]


CANDIDATES: tuple[Candidate, ...] = (
    Candidate(SemanticType.BOOL, _not_denylisted),
    Candidate(SemanticType.TRISTATE, _not_denylisted),
    Candidate(SemanticType.U8, _not_denylisted),
    Candidate(SemanticType.U16, _not_bitmask),
    Candidate(SemanticType.U32, _always),
    Candidate(SemanticType.I32, _always),
    Candidate(SemanticType.F32, _always),
    Candidate(SemanticType.COLOR, _color_like),
    Candidate(SemanticType.LIGHT_COLOR, _always),
    Candidate(SemanticType.ANGLES, _angles_like),
    Candidate(SemanticType.VECTOR, _always),
)


@dataclass(frozen=True, slots=True)
class CandidateCount:
    semantic_type: SemanticType
    parsed: int


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of one cascade run, with the evidence that produced it."""

    property_name: str
    semantic_type: SemanticType
    total: int
    counts: tuple[CandidateCount, ...] = ()
    outliers: tuple[str, ...] = field(default=())

    @property
    def exact(self) -> bool:
        """True when the chosen type parsed every value."""
        return not self.outliers


def tolerance_floor(total: int) -> int:
    """Smallest success count accepted despite outliers: ceil(total * 99%)."""
    return (total * TOLERANCE_PERCENT + 99) // 100


def classify_detailed(property_name: str, values: Sequence[str]) -> Classification:
    """Run the cascade and return the chosen type with per-candidate counts.

    An empty ``values`` sequence is vacuously parsed by the first candidate
    attempted for ``property_name``.
    """
    values = list(values)
    total = len(values)
    counts: list[CandidateCount] = []

    for candidate in CANDIDATES:
        if not candidate.applies_to(property_name):
            continue
        parsed = count_parsed(candidate.semantic_type, values)
        counts.append(CandidateCount(candidate.semantic_type, parsed))
        if parsed == total:
            return Classification(
                property_name=property_name,
                semantic_type=candidate.semantic_type,
                total=total,
                counts=tuple(counts),
            )

    best = max((c.parsed for c in counts), default=0)
    if total > 1 and best * 2 > total:
        distinct = sorted(set(values))
        log.warning(
            "cascade_ambiguous",
            property=property_name,
            total=total,
            counts={c.semantic_type.value: c.parsed for c in counts},
            distinct_values=distinct,
        )
        if best >= tolerance_floor(total):
            # counts is in cascade order, so the first hit is the narrowest
            chosen = next(c.semantic_type for c in counts if c.parsed == best)
            outliers = tuple(sorted({v for v in values if not parses(chosen, v)}))
            log.info(
                "cascade_accepted_with_outliers",
                property=property_name,
                semantic_type=chosen.value,
                parsed=best,
                total=total,
                outliers=list(outliers),
            )
            return Classification(
                property_name=property_name,
                semantic_type=chosen,
                total=total,
                counts=tuple(counts),
                outliers=outliers,
            )

    return Classification(
        property_name=property_name,
        semantic_type=SemanticType.STRING,
        total=total,
        counts=tuple(counts),
    )


def classify(property_name: str, values: Sequence[str]) -> SemanticType:
    """Return the narrowest SemanticType explaining (almost) all ``values``."""
    return classify_detailed(property_name, values).semantic_type
