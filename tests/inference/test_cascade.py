"""Tests for the type inference cascade."""

import pytest
from structlog.testing import capture_logs

from entschema.inference.cascade import (
    CANDIDATES,
    classify,
    classify_detailed,
    tolerance_floor,
)
from entschema.inference.types import SemanticType


class TestCascadeOrder:
    """The first candidate parsing every value wins."""

    @pytest.mark.parametrize(
        ("name", "values", "expected"),
        [
            ("startdisabled", ["0", "1", "no"], SemanticType.BOOL),
            ("negated", ["0", "1", "2"], SemanticType.TRISTATE),
            ("renderamt", ["0", "128", "255"], SemanticType.U8),
            ("health", ["100", "1000"], SemanticType.U16),
            ("seed", ["70000"], SemanticType.U32),
            ("offset", ["-5", "10"], SemanticType.I32),
            ("speed", ["1.5", "200"], SemanticType.F32),
            ("rendercolor", ["255 255 255"], SemanticType.COLOR),
            ("_light", ["255 255 255 200"], SemanticType.LIGHT_COLOR),
            ("angles", ["0 90 0"], SemanticType.ANGLES),
            ("movedir", ["0 -90 0"], SemanticType.ANGLES),
            ("origin", ["1.5 -2 3"], SemanticType.VECTOR),
            ("targetname", ["door_1", "door_2"], SemanticType.STRING),
        ],
    )
    def test_given_uniform_values_when_classified_then_narrowest_type(
        self, name: str, values: list[str], expected: SemanticType
    ) -> None:
        # When
        result = classify(name, values)

        # Then
        assert result is expected

    def test_color_requires_color_like_name(self) -> None:
        """Plain rgb triples fall through to VECTOR when the name is not color-like."""
        assert classify("tint", ["255 0 0"]) is SemanticType.VECTOR

    def test_angles_requires_angles_like_name(self) -> None:
        assert classify("origin", ["0 90 0"]) is SemanticType.VECTOR

    def test_candidates_follow_semantic_type_order(self) -> None:
        ranks = [candidate.semantic_type.rank for candidate in CANDIDATES]
        assert ranks == sorted(ranks)


class TestEmptyValues:
    def test_given_no_values_when_classified_then_first_attempted_candidate(self) -> None:
        assert classify("anything", []) is SemanticType.BOOL

    def test_given_no_values_for_flags_then_first_undenied_candidate(self) -> None:
        assert classify("ammo", []) is SemanticType.U16
        assert classify("spawnflags", []) is SemanticType.U32

    def test_empty_is_reproducible(self) -> None:
        assert classify_detailed("x", []) == classify_detailed("x", [])


class TestDenylist:
    def test_spawnflags_never_bool_tristate_or_u8(self) -> None:
        # Given values that would be BOOL/TRISTATE/U8 for any other name
        values = ["0", "1", "2", "4"]

        # When
        result = classify("spawnflags", values)

        # Then: U16 is also skipped for the bitmask name, U32 is next
        assert result not in (SemanticType.BOOL, SemanticType.TRISTATE, SemanticType.U8)
        assert result is SemanticType.U32

    def test_ammo_skips_byte_types_but_not_u16(self) -> None:
        assert classify("ammo", ["0", "1", "2", "4"]) is SemanticType.U16

    def test_same_values_unrestricted_name(self) -> None:
        assert classify("count", ["0", "1", "2", "4"]) is SemanticType.U8

    def test_spawnflags_negative_values_are_i32(self) -> None:
        assert classify("spawnflags", ["-1", "4"]) is SemanticType.I32


class TestOutlierTolerance:
    def test_given_one_outlier_in_hundred_floats_then_f32_and_logged(self) -> None:
        # Given
        values = [f"{i}.5" for i in range(99)] + ["NaNstring"]

        # When
        with capture_logs() as logs:
            result = classify_detailed("speed", values)

        # Then
        assert result.semantic_type is SemanticType.F32
        assert result.outliers == ("NaNstring",)
        assert not result.exact
        events = {entry["event"]: entry for entry in logs}
        assert events["cascade_ambiguous"]["property"] == "speed"
        assert "NaNstring" in events["cascade_ambiguous"]["distinct_values"]
        assert events["cascade_accepted_with_outliers"]["outliers"] == ["NaNstring"]

    def test_lowest_ordered_candidate_wins_ties(self) -> None:
        """When several candidates reach the best count the narrowest is taken."""
        values = ["1"] * 99 + ["oops"]
        assert classify("count", values) is SemanticType.BOOL

    def test_given_too_many_outliers_then_string(self) -> None:
        values = [str(i) for i in range(90)] + ["x"] * 10
        with capture_logs() as logs:
            result = classify("count", values)
        assert result is SemanticType.STRING
        assert [entry["event"] for entry in logs] == ["cascade_ambiguous"]

    def test_minority_parse_is_silent(self) -> None:
        with capture_logs() as logs:
            result = classify("message", ["1", "hello", "world"])
        assert result is SemanticType.STRING
        assert logs == []

    def test_single_value_never_logs(self) -> None:
        with capture_logs() as logs:
            assert classify("message", ["hello"]) is SemanticType.STRING
        assert logs == []

    @pytest.mark.parametrize(("total", "floor"), [(1, 1), (99, 99), (100, 99), (200, 198), (250, 248)])
    def test_tolerance_floor(self, total: int, floor: int) -> None:
        assert tolerance_floor(total) == floor


class TestDeterminism:
    def test_value_order_does_not_change_result(self) -> None:
        values = ["1.5", "2", "-3", "4e1"]
        assert classify("speed", values) is classify("speed", list(reversed(values)))

    def test_counts_are_recorded_per_attempt(self) -> None:
        result = classify_detailed("spawnflags", ["1", "x"])
        attempted = [count.semantic_type for count in result.counts]
        assert SemanticType.BOOL not in attempted
        assert SemanticType.U16 not in attempted
        assert attempted[0] is SemanticType.U32
