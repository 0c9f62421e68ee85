"""
Tests for KZG: CRS setup, commit, open/verify (three equations), multi-open.

Pairings on py_ecc are slow, so the CRS fixtures are module-scoped and each
test performs at most a handful of verifications.
"""

import random

import pytest

from zkblocks.common.field import FR, G1, G2, Z1, ec_add, ec_mul, random_fr, random_g1, random_g2
from zkblocks.common.polynomial import Polynomial, vanishing_polynomial
from zkblocks.errors import (
    DegreeExceededError,
    DimensionMismatchError,
    DuplicateQueryPointError,
    EmptyQuerySetError,
    InconsistentEvaluationError,
)
from zkblocks.kzg.crs import CRS, setup
from zkblocks.kzg.kzg import (
    MultiOpening,
    commit,
    multi_open,
    open,
    verify,
    verify_from_encrypted_y,
    verify_multi_open,
    verify_no_g2_ops,
    verify_no_g2_ops_evm_opcode,
)

TAU = FR(1234567)


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def crs():
    """Known-τ CRS (degree 10)."""
    return setup(G1, G2, 10, TAU)


@pytest.fixture(scope="module")
def poly():
    """Degree-10 polynomial with fixed coefficients."""
    return Polynomial.random(10, random.Random(10))


@pytest.fixture(scope="module")
def opened(crs, poly):
    """(C, z, y, π) for poly opened at z = 7."""
    commitment = commit(crs, poly)
    y, proof = open(crs, poly, FR(7))
    return commitment, FR(7), y, proof


# ─────────────────────────────────────────────────────────────────────
# CRS
# ─────────────────────────────────────────────────────────────────────

class TestCRS:
    """setup / CRS.generate 테스트."""

    def test_lengths(self, crs):
        assert len(crs.crs1) == 11
        assert len(crs.crs2) == 11
        assert crs.degree == 10

    def test_first_elements_are_generators(self, crs):
        assert crs.crs1[0] == G1
        assert crs.crs2[0] == G2

    def test_powers_of_tau(self, crs):
        assert crs.crs1[1] == ec_mul(G1, TAU)
        assert crs.crs1[3] == ec_mul(G1, TAU ** 3)
        assert crs.vk == ec_mul(G2, TAU)
        assert crs.vk == crs.crs2[1]

    def test_immutable(self, crs):
        with pytest.raises(AttributeError):
            crs.vk = G2

    def test_negative_degree(self):
        with pytest.raises(ValueError):
            setup(G1, G2, -1, TAU)

    def test_zero_tau(self):
        with pytest.raises(ValueError):
            setup(G1, G2, 2, FR(0))

    def test_generate_deterministic(self):
        assert CRS.generate(2, seed=99) == CRS.generate(2, seed=99)

    def test_generate_different_seeds(self):
        assert CRS.generate(1, seed=1).crs1 != CRS.generate(1, seed=2).crs1


# ─────────────────────────────────────────────────────────────────────
# Commit
# ─────────────────────────────────────────────────────────────────────

class TestCommit:
    def test_constant(self, crs):
        assert commit(crs, Polynomial([7])) == ec_mul(G1, 7)

    def test_zero_polynomial_is_identity(self, crs):
        assert commit(crs, Polynomial.zero()) is Z1

    def test_equals_evaluation_at_tau(self, crs, poly):
        assert commit(crs, poly) == ec_mul(G1, poly.evaluate(TAU))

    def test_linearity(self, crs):
        a = Polynomial([1, 2, 3])
        b = Polynomial([4, 0, 0, 5])
        assert commit(crs, a + b) == ec_add(commit(crs, a), commit(crs, b))

    def test_deterministic(self, crs, poly):
        assert commit(crs, poly) == commit(crs, poly)

    def test_degree_exceeded(self, crs):
        too_big = Polynomial([0] * 11 + [1])
        with pytest.raises(DegreeExceededError):
            commit(crs, too_big)


# ─────────────────────────────────────────────────────────────────────
# Open / Verify
# ─────────────────────────────────────────────────────────────────────

class TestOpenVerify:
    def test_open_returns_evaluation(self, poly, opened):
        _, z, y, _ = opened
        assert y == poly.evaluate(z)

    def test_verify(self, crs, opened):
        commitment, z, y, proof = opened
        assert verify(crs, y, z, commitment, proof)

    def test_verify_no_g2_ops(self, crs, opened):
        commitment, z, y, proof = opened
        assert verify_no_g2_ops(crs, y, z, commitment, proof)

    def test_verify_evm_opcode(self, crs, opened):
        commitment, z, y, proof = opened
        assert verify_no_g2_ops_evm_opcode(crs, y, z, commitment, proof)

    def test_wrong_y_rejected(self, crs, opened):
        commitment, z, y, proof = opened
        assert not verify(crs, y + FR(1), z, commitment, proof)

    def test_wrong_y_rejected_by_all_variants(self, crs, opened):
        commitment, z, y, proof = opened
        assert not verify_no_g2_ops(crs, y + FR(1), z, commitment, proof)
        assert not verify_no_g2_ops_evm_opcode(crs, y + FR(1), z, commitment, proof)

    def test_wrong_z_rejected(self, crs, opened):
        commitment, z, y, proof = opened
        assert not verify(crs, y, z + FR(1), commitment, proof)

    def test_tampered_commitment_rejected(self, crs, opened):
        commitment, z, y, proof = opened
        assert not verify(crs, y, z, ec_add(commitment, G1), proof)

    def test_tampered_proof_rejected(self, crs, opened):
        commitment, z, y, proof = opened
        assert not verify(crs, y, z, commitment, ec_add(proof, G1))

    @pytest.mark.parametrize("field", [None, "y", "z", "commitment", "proof"])
    def test_variants_agree(self, crs, opened, field):
        commitment, z, y, proof = opened
        args = {"y": y, "z": z, "commitment": commitment, "proof": proof}
        if field in ("y", "z"):
            args[field] = args[field] + FR(1)
        elif field is not None:
            args[field] = ec_add(args[field], G1)

        results = [
            check(crs, args["y"], args["z"], args["commitment"], args["proof"])
            for check in (verify, verify_no_g2_ops, verify_no_g2_ops_evm_opcode)
        ]
        assert results == [field is None] * 3

    def test_open_with_supplied_y(self, crs, poly, opened):
        _, z, y, proof = opened
        assert open(crs, poly, z, y) == (y, proof)

    def test_inconsistent_y(self, crs, poly):
        z = FR(7)
        with pytest.raises(InconsistentEvaluationError):
            open(crs, poly, z, poly.evaluate(z) + FR(1))

    def test_open_degree_exceeded(self, crs):
        with pytest.raises(DegreeExceededError):
            open(crs, Polynomial([0] * 11 + [1]), FR(1))

    def test_verify_from_encrypted_y(self, crs, opened):
        commitment, z, y, proof = opened
        assert verify_from_encrypted_y(crs, ec_mul(crs.g1, y), z, commitment, proof)

    def test_degree_zero_crs(self):
        crs0 = setup(G1, G2, 0, FR(5))
        p = Polynomial([9])
        y, proof = open(crs0, p, FR(3))
        assert y == FR(9)
        assert proof is Z1
        assert verify(crs0, y, FR(3), commit(crs0, p), proof)


class TestRandomSetupScenario:
    """무작위 생성자와 τ, 차수 10 다항식."""

    @pytest.fixture(scope="class")
    def scenario(self):
        rng = random.Random(2718)
        g1 = random_g1(rng)
        g2 = random_g2(rng)
        crs = setup(g1, g2, 10, random_fr(rng))
        poly = Polynomial.random(10, rng)
        z = random_fr(rng)
        commitment = commit(crs, poly)
        y, proof = open(crs, poly, z)
        return crs, commitment, z, y, proof

    def test_accepts(self, scenario):
        crs, commitment, z, y, proof = scenario
        assert verify(crs, y, z, commitment, proof)

    def test_commitment_plus_g1_rejected(self, scenario):
        crs, commitment, z, y, proof = scenario
        assert not verify(crs, y, z, ec_add(commitment, crs.g1), proof)


# ─────────────────────────────────────────────────────────────────────
# Multi-open
# ─────────────────────────────────────────────────────────────────────

class TestMultiOpen:
    POINTS = [FR(1), FR(2), FR(3)]

    @pytest.fixture(scope="class")
    def batch(self, crs, poly):
        commitment = commit(crs, poly)
        values = [poly.evaluate(p) for p in self.POINTS]
        return commitment, values, multi_open(crs, poly, self.POINTS)

    def test_shape(self, batch):
        _, values, opening = batch
        assert isinstance(opening, MultiOpening)
        assert opening.vanishing == vanishing_polynomial(self.POINTS)
        assert opening.lagrange.degree < len(self.POINTS)
        for p, y in zip(self.POINTS, values):
            assert opening.lagrange.evaluate(p) == y

    def test_accepts(self, crs, batch):
        commitment, values, (proof, lagrange, vanishing) = batch
        assert verify_multi_open(crs, commitment, self.POINTS, values, lagrange, vanishing, proof)

    def test_wrong_value_rejected(self, crs, batch):
        commitment, values, (proof, lagrange, vanishing) = batch
        bad = [values[0] + FR(1)] + values[1:]
        assert not verify_multi_open(crs, commitment, self.POINTS, bad, lagrange, vanishing, proof)

    def test_shifted_lagrange_rejected(self, crs, batch):
        # L + Z still interpolates the claimed values, so only the pairing can catch it
        commitment, values, (proof, lagrange, vanishing) = batch
        shifted = lagrange + vanishing
        assert not verify_multi_open(crs, commitment, self.POINTS, values, shifted, vanishing, proof)

    def test_wrong_vanishing_rejected(self, crs, batch):
        commitment, values, (proof, lagrange, _) = batch
        wrong = vanishing_polynomial([FR(1), FR(2), FR(4)])
        assert not verify_multi_open(crs, commitment, self.POINTS, values, lagrange, wrong, proof)

    def test_tampered_proof_rejected(self, crs, batch):
        commitment, values, (proof, lagrange, vanishing) = batch
        assert not verify_multi_open(
            crs, commitment, self.POINTS, values, lagrange, vanishing, ec_add(proof, G2)
        )

    def test_tampered_commitment_rejected(self, crs, batch):
        commitment, values, (proof, lagrange, vanishing) = batch
        assert not verify_multi_open(
            crs, ec_add(commitment, G1), self.POINTS, values, lagrange, vanishing, proof
        )

    def test_oversized_lagrange_rejected(self, crs, batch):
        # L + Z·x⁸ still interpolates the claimed values but exceeds the CRS degree
        commitment, values, (proof, lagrange, vanishing) = batch
        oversized = lagrange + vanishing * Polynomial([0] * 8 + [1])
        assert oversized.degree > crs.degree
        assert verify_multi_open(
            crs, commitment, self.POINTS, values, oversized, vanishing, proof
        ) is False

    def test_oversized_vanishing_rejected(self, crs, batch):
        commitment, values, (proof, lagrange, vanishing) = batch
        oversized = vanishing * Polynomial([0] * 8 + [1])
        assert verify_multi_open(
            crs, commitment, self.POINTS, values, lagrange, oversized, proof
        ) is False

    def test_single_point(self, crs, poly):
        commitment = commit(crs, poly)
        proof, lagrange, vanishing = multi_open(crs, poly, [FR(5)])
        assert verify_multi_open(
            crs, commitment, [FR(5)], [poly.evaluate(5)], lagrange, vanishing, proof
        )

    def test_empty(self, crs, poly):
        with pytest.raises(EmptyQuerySetError):
            multi_open(crs, poly, [])

    def test_duplicate(self, crs, poly):
        with pytest.raises(DuplicateQueryPointError):
            multi_open(crs, poly, [FR(1), FR(1)])

    def test_verify_duplicate(self, crs, batch):
        commitment, values, (proof, lagrange, vanishing) = batch
        with pytest.raises(DuplicateQueryPointError):
            verify_multi_open(crs, commitment, [FR(1), FR(1), FR(3)], values,
                              lagrange, vanishing, proof)

    def test_verify_empty(self, crs, batch):
        commitment, _, (proof, lagrange, vanishing) = batch
        with pytest.raises(EmptyQuerySetError):
            verify_multi_open(crs, commitment, [], [], lagrange, vanishing, proof)

    def test_verify_length_mismatch(self, crs, batch):
        commitment, values, (proof, lagrange, vanishing) = batch
        with pytest.raises(DimensionMismatchError):
            verify_multi_open(crs, commitment, self.POINTS, values[:2],
                              lagrange, vanishing, proof)

    def test_too_many_points(self, crs, poly):
        with pytest.raises(DegreeExceededError):
            multi_open(crs, poly, [FR(i) for i in range(1, 13)])
