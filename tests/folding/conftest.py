import pytest

from zkblocks.common.field import FR
from zkblocks.common.linalg import Vector
from zkblocks.folding.example import cubic_r1cs, cubic_z
from zkblocks.folding.r1cs import R1CS

# ── a² + b² = c² ──
# z = (1, c², a, b, a², b²)
PYTHAGOREAN_A = [
    [0, 0, 1, 0, 0, 0],
    [0, 0, 0, 1, 0, 0],
    [0, 0, 0, 0, 1, 1],
]
PYTHAGOREAN_B = [
    [0, 0, 1, 0, 0, 0],
    [0, 0, 0, 1, 0, 0],
    [1, 0, 0, 0, 0, 0],
]
PYTHAGOREAN_C = [
    [0, 0, 0, 0, 1, 0],
    [0, 0, 0, 0, 0, 1],
    [0, 1, 0, 0, 0, 0],
]


def get_test_r1cs():
    """x³ + x + 5 = out, z = (1, x, out, x², x³, x³ + x)."""
    return cubic_r1cs()


def get_test_satisfying_witness(x):
    return cubic_z(get_test_r1cs(), x)


def get_pythagorean_r1cs():
    return R1CS(PYTHAGOREAN_A, PYTHAGOREAN_B, PYTHAGOREAN_C, n_instance=1)


def get_pythagorean_witness(a, b):
    a, b = FR(a), FR(b)
    return Vector([FR(1), a * a + b * b, a, b, a * a, b * b])


@pytest.fixture
def r1cs():
    return get_test_r1cs()


@pytest.fixture
def witness():
    """x → 만족하는 z 를 만드는 함수."""
    return get_test_satisfying_witness


@pytest.fixture
def pythagorean_r1cs():
    return get_pythagorean_r1cs()


@pytest.fixture
def pythagorean_witness():
    """(a, b) → 만족하는 z 를 만드는 함수."""
    return get_pythagorean_witness
