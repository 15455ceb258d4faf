"""Tests for deterministic random streams."""

import pytest

from radix_tribes.utils.rng import generate_seed, make_rng, weighted_choice


class TestGenerateSeed:
    def test_format(self) -> None:
        assert generate_seed(42, 3, "terrain") == "42:3:terrain"

    def test_negative_turn_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            generate_seed(42, -1, "terrain")


class TestMakeRng:
    def test_same_seed_same_stream(self) -> None:
        a = make_rng("1:0:terrain")
        b = make_rng("1:0:terrain")
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_different_contexts_differ(self) -> None:
        a = make_rng(generate_seed(1, 0, "terrain"))
        b = make_rng(generate_seed(1, 0, "poi"))
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]


class TestWeightedChoice:
    def test_zero_weight_never_chosen(self) -> None:
        rng = make_rng("weights")
        picks = {weighted_choice(rng, ["a", "b", "c"], [1.0, 0.0, 2.0]) for _ in range(200)}
        assert picks <= {"a", "c"}
        assert picks == {"a", "c"}

    def test_single_positive_weight(self) -> None:
        rng = make_rng("single")
        assert weighted_choice(rng, ["Plains", "Water"], [1.0, 0.0]) == "Plains"

    @pytest.mark.parametrize(
        ("options", "weights"),
        [
            ([], []),
            (["a"], [1.0, 2.0]),
            (["a", "b"], [1.0, -1.0]),
            (["a", "b"], [0.0, 0.0]),
        ],
    )
    def test_invalid_inputs(self, options, weights) -> None:
        with pytest.raises(ValueError):
            weighted_choice(make_rng("bad"), options, weights)
