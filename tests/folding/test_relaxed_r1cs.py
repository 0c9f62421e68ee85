"""
Tests for the Relaxed-R1CS folding accumulator.

Covers:
- lift: u = 1, E = 0, satisfied by every z satisfying the base R1CS
- fold soundness for many challenges r (including 0 and 1)
- repeated folding (accumulated u, E no longer trivial)
- tampered witnesses are caught for every r ≠ 0
- matrix / length mismatches, immutability of inputs
- Fiat-Shamir challenge derivation
"""

import random

import pytest

from zkblocks.common.field import FR, CURVE_ORDER
from zkblocks.common.linalg import Vector
from zkblocks.common.transcript import Transcript
from zkblocks.errors import DimensionMismatchError
from zkblocks.folding.relaxed_r1cs import (
    RelaxedR1CSInstance,
    compute_e,
    compute_t,
    compute_u,
    compute_z,
    derive_challenge,
    fold,
    is_satisfied,
    lift,
)


def _challenges(count, seed=42):
    rng = random.Random(seed)
    return [FR(0), FR(1), FR(CURVE_ORDER - 1)] + [
        FR(rng.randrange(CURVE_ORDER)) for _ in range(count)
    ]


class TestLift:
    def test_base_case(self, r1cs, witness):
        instance = lift(r1cs)
        assert instance.u == FR(1)
        assert instance.e == Vector.zeros(r1cs.n_constraints)
        assert is_satisfied(instance, witness(3))

    def test_method_form(self, r1cs, witness):
        assert lift(r1cs).is_satisfied(witness(7))

    def test_unsatisfying_z(self, r1cs):
        assert not is_satisfied(lift(r1cs), Vector([1, 3, 36, 9, 27, 30]))

    def test_shares_base_matrices(self, r1cs):
        instance = lift(r1cs)
        assert instance.a is r1cs.a
        assert instance.n_instance == r1cs.n_instance


class TestComputeTerms:
    def test_compute_u(self, r1cs):
        instance = lift(r1cs)
        assert compute_u(instance, instance, FR(9)) == FR(10)

    def test_compute_z(self):
        z = compute_z(FR(2), Vector([1, 2]), Vector([3, 4]))
        assert z == Vector([7, 10])

    def test_cross_term_vanishes_for_same_witness(self, r1cs, witness):
        # 2·(Az∘Bz) - 2·Cz = 0 for a satisfying z under u = 1
        instance = lift(r1cs)
        z = witness(3)
        assert compute_t(instance, instance, z, z).is_zero()

    def test_cross_term_nonzero_for_different_witnesses(self, r1cs, witness):
        instance = lift(r1cs)
        assert not compute_t(instance, instance, witness(3), witness(5)).is_zero()

    def test_compute_e_for_lifted(self, r1cs, witness):
        instance = lift(r1cs)
        z1, z2 = witness(3), witness(5)
        r = FR(11)
        t = compute_t(instance, instance, z1, z2)
        assert compute_e(instance, instance, r, z1, z2) == t.scalar_mul(r)


class TestFold:
    @pytest.mark.parametrize("r", _challenges(100))
    def test_soundness(self, r1cs, witness, r):
        instance = lift(r1cs)
        folded, z = fold(instance, instance, r, witness(3), witness(5))
        assert is_satisfied(folded, z)

    def test_zero_challenge_returns_first(self, r1cs, witness):
        instance = lift(r1cs)
        folded, z = fold(instance, instance, FR(0), witness(3), witness(5))
        assert folded.u == instance.u
        assert folded.e == instance.e
        assert z == witness(3)

    def test_repeated_folding(self, r1cs, witness):
        rng = random.Random(99)
        acc, acc_z = lift(r1cs), witness(2)
        for x in range(3, 13):
            r = FR(rng.randrange(CURVE_ORDER))
            acc, acc_z = fold(acc, lift(r1cs), r, acc_z, witness(x))
            assert is_satisfied(acc, acc_z)
        assert acc.u != FR(1)
        assert not acc.e.is_zero()

    def test_fold_two_accumulated(self, r1cs, witness):
        base = lift(r1cs)
        acc1, z1 = fold(base, base, FR(3), witness(1), witness(2))
        acc2, z2 = fold(base, base, FR(4), witness(5), witness(6))
        folded, z = fold(acc1, acc2, FR(123456789), z1, z2)
        assert is_satisfied(folded, z)

    @pytest.mark.parametrize("r", _challenges(20, seed=7)[1:])
    def test_tampered_witness_detected(self, r1cs, witness, r):
        instance = lift(r1cs)
        tampered = Vector([1, 3, 36, 9, 27, 30])
        folded, z = fold(instance, instance, r, witness(5), tampered)
        assert not is_satisfied(folded, z)

    def test_pythagorean(self, pythagorean_r1cs, pythagorean_witness):
        instance = lift(pythagorean_r1cs)
        folded, z = fold(instance, instance, FR(31337),
                         pythagorean_witness(3, 4), pythagorean_witness(5, 12))
        assert is_satisfied(folded, z)

    def test_matrices_compared_by_value(self, r1cs, witness):
        instance1 = lift(r1cs)
        instance2 = RelaxedR1CSInstance(
            r1cs.a.to_lists(), r1cs.b.to_lists(), r1cs.c.to_lists(),
            FR(1), Vector.zeros(r1cs.n_constraints),
        )
        folded, z = fold(instance1, instance2, FR(5), witness(3), witness(4))
        assert is_satisfied(folded, z)


class TestFoldErrors:
    def test_different_matrices(self, r1cs, pythagorean_r1cs, witness, pythagorean_witness):
        with pytest.raises(DimensionMismatchError):
            fold(lift(r1cs), lift(pythagorean_r1cs), FR(2),
                 witness(3), pythagorean_witness(3, 4))

    def test_same_shape_different_values(self, r1cs, witness):
        other_a = r1cs.a.to_lists()
        other_a[3][0] = 6
        other = RelaxedR1CSInstance(other_a, r1cs.b, r1cs.c, FR(1), Vector.zeros(4))
        with pytest.raises(DimensionMismatchError):
            fold(lift(r1cs), other, FR(2), witness(3), witness(4))

    def test_wrong_z_length(self, r1cs, witness):
        instance = lift(r1cs)
        with pytest.raises(DimensionMismatchError):
            fold(instance, instance, FR(2), witness(3), Vector([1, 2, 3]))

    def test_cross_term_wrong_z_length(self, r1cs, witness):
        instance = lift(r1cs)
        with pytest.raises(DimensionMismatchError):
            compute_t(instance, instance, Vector([1]), witness(3))

    def test_wrong_error_vector_length(self, r1cs):
        with pytest.raises(DimensionMismatchError):
            RelaxedR1CSInstance(r1cs.a, r1cs.b, r1cs.c, FR(1), Vector.zeros(3))


class TestImmutability:
    def test_fold_does_not_mutate_inputs(self, r1cs, witness):
        instance1 = lift(r1cs)
        acc, acc_z = fold(instance1, instance1, FR(3), witness(1), witness(2))
        u_before, e_before = acc.u, acc.e
        z_before = acc_z
        fold(acc, instance1, FR(8), acc_z, witness(4))
        assert acc.u == u_before
        assert acc.e == e_before
        assert acc_z == z_before
        assert instance1.u == FR(1)
        assert instance1.e.is_zero()

    def test_instance_is_frozen(self, r1cs):
        instance = lift(r1cs)
        with pytest.raises(AttributeError):
            instance.u = FR(2)


class TestDeriveChallenge:
    def test_deterministic(self, r1cs, witness):
        instance = lift(r1cs)
        t = compute_t(instance, instance, witness(3), witness(5))
        r1 = derive_challenge(Transcript(b"nova"), instance, instance, t)
        r2 = derive_challenge(Transcript(b"nova"), instance, instance, t)
        assert r1 == r2

    def test_depends_on_cross_term(self, r1cs, witness):
        instance = lift(r1cs)
        t1 = compute_t(instance, instance, witness(3), witness(5))
        t2 = compute_t(instance, instance, witness(3), witness(6))
        r1 = derive_challenge(Transcript(b"nova"), instance, instance, t1)
        r2 = derive_challenge(Transcript(b"nova"), instance, instance, t2)
        assert r1 != r2

    def test_fold_with_derived_challenge(self, r1cs, witness):
        instance = lift(r1cs)
        z1, z2 = witness(3), witness(5)
        t = compute_t(instance, instance, z1, z2)
        r = derive_challenge(Transcript(b"nova"), instance, instance, t)
        folded, z = fold(instance, instance, r, z1, z2)
        assert is_satisfied(folded, z)
