"""
Tests for multilinear extensions: hypercube layout, χ_w, naive vs memoized evaluation.
"""
import random

import pytest

from zkblocks.common.field import FR, random_fr
from zkblocks.common.mle import (
    build_memoized_chi_table,
    compute_chi_w,
    get_hypercube_points,
    memoized_mle_evaluation,
    naive_mle_evaluation,
    point_to_index,
)
from zkblocks.errors import DimensionMismatchError

N_VARS = 5


def _poly(x):
    """x0·x1 + 3·x2·x4 + x3 + 7"""
    return x[0] * x[1] + FR(3) * x[2] * x[4] + x[3] + FR(7)


@pytest.fixture
def cube():
    return get_hypercube_points(N_VARS)


@pytest.fixture
def evals(cube):
    return [_poly(w) for w in cube]


class TestHypercube:
    def test_size(self, cube):
        assert len(cube) == 32
        assert all(len(w) == N_VARS for w in cube)

    def test_little_endian_order(self):
        cube = get_hypercube_points(3)
        assert cube[0] == [FR(0), FR(0), FR(0)]
        assert cube[1] == [FR(1), FR(0), FR(0)]
        assert cube[6] == [FR(0), FR(1), FR(1)]

    def test_point_to_index(self, cube):
        for i, w in enumerate(cube):
            assert point_to_index(w) == i

    def test_zero_vars(self):
        assert get_hypercube_points(0) == [[]]

    def test_negative_vars(self):
        with pytest.raises(ValueError):
            get_hypercube_points(-1)


class TestChi:
    def test_boolean_selector(self):
        cube = get_hypercube_points(3)
        for w in cube:
            for x in cube:
                assert compute_chi_w(w, x) == (FR(1) if w == x else FR(0))

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            compute_chi_w([FR(0), FR(1)], [FR(0)])

    def test_memoized_table_matches_chi(self, cube):
        rng = random.Random(31)
        r = [random_fr(rng) for _ in range(N_VARS)]
        table = build_memoized_chi_table(r)
        assert len(table) == len(cube)
        for i, w in enumerate(cube):
            assert table[i] == compute_chi_w(w, r)

    def test_table_sums_to_one(self):
        rng = random.Random(32)
        r = [random_fr(rng) for _ in range(4)]
        total = FR(0)
        for a in build_memoized_chi_table(r):
            total = total + a
        assert total == FR(1)


class TestMLEEvaluation:
    def test_agrees_on_hypercube(self, cube, evals):
        for w, value in zip(cube, evals):
            assert naive_mle_evaluation(evals, cube, w) == value

    def test_naive_and_memoized_agree(self, cube, evals):
        rng = random.Random(33)
        for _ in range(5):
            x = [random_fr(rng) for _ in range(N_VARS)]
            naive = naive_mle_evaluation(evals, cube, x)
            memo = memoized_mle_evaluation(evals, build_memoized_chi_table(x))
            assert naive == memo

    def test_multilinear_input_recovered(self):
        # f(x) = 2 + 3·x0 + 5·x0·x1 is already multilinear, so f̃ = f everywhere
        cube = get_hypercube_points(2)
        def f(x):
            return FR(2) + FR(3) * x[0] + FR(5) * x[0] * x[1]

        evals = [f(w) for w in cube]
        x = [FR(11), FR(13)]
        assert naive_mle_evaluation(evals, cube, x) == f(x)
        assert memoized_mle_evaluation(evals, build_memoized_chi_table(x)) == f(x)

    def test_int_evaluations(self):
        cube = get_hypercube_points(1)
        assert naive_mle_evaluation([4, 9], cube, [FR(2)]) == FR(14)

    def test_wrong_eval_count(self, cube):
        with pytest.raises(DimensionMismatchError):
            naive_mle_evaluation([FR(1)] * 31, cube, [FR(0)] * N_VARS)
        with pytest.raises(DimensionMismatchError):
            memoized_mle_evaluation([FR(1)] * 3, build_memoized_chi_table([FR(2)]))
