"""
Relaxed-R1CS 폴딩 누산기 (Nova 방식)
====================================

일반 R1CS는 두 만족 인스턴스의 선형결합을 허용하지 않는다.
(A·z)∘(B·z) 가 z에 대해 이차이므로 교차항이 생기기 때문이다.

**Relaxed R1CS**:
    (A·z) ∘ (B·z) = u·(C·z) + E

  스칼라 u와 오차 벡터 E(길이 n_constraints)가 교차항을 흡수한다.
  u = 1, E = 0 이면 일반 R1CS와 같다.

**폴딩 (챌린지 r)**:
    T = (A·z1)∘(B·z2) + (A·z2)∘(B·z1) - u1·(C·z2) - u2·(C·z1)
    u = u1 + r·u2
    E = E1 + r·T + r²·E2
    z = z1 + r·z2

  z1, z2가 각각 인스턴스 1, 2를 만족하면 접힌 z는 접힌 인스턴스를 만족한다.
  이는 **모든** r에 대해 항등적으로 성립한다. 그래서 실제 프로토콜은
  두 인스턴스를 고정한 뒤 예측 불가능한 r을 뽑아야 한다
  (derive_challenge 참조). 누산기는 r을 어떻게 골랐는지 관여하지 않는다.

**불변성**:
  폴딩은 항상 새 인스턴스를 만든다. 입력 인스턴스는 수정되지 않으므로
  이전 단계를 그대로 재사용하거나 감사(audit)할 수 있다.
  T는 캐시하지 않고 폴딩마다 새로 계산한다.

사용 예시:
    >>> inst = lift(r1cs)
    >>> folded, z = fold(inst, inst, FR(7), z1, z2)
    >>> is_satisfied(folded, z)  # True
"""

import logging

from zkblocks.common.field import FR
from zkblocks.common.linalg import Matrix, Vector
from zkblocks.folding.r1cs import check_same_shape
from zkblocks.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


def _to_fr(value):
    return value if isinstance(value, FR) else FR(value)


def _to_vector(value):
    return value if isinstance(value, Vector) else Vector(value)


class RelaxedR1CSInstance:
    """Relaxed-R1CS 인스턴스 (불변).

    속성:
        a, b, c: 기반 R1CS와 공유하는 행렬
        u: 스칼라
        e: 오차 벡터 (길이 n_constraints)
        n_instance: 공개 입력 개수
    """

    __slots__ = ("a", "b", "c", "u", "e", "n_instance")

    def __init__(self, a, b, c, u, e, n_instance=0):
        a = a if isinstance(a, Matrix) else Matrix.from_rows(a)
        b = b if isinstance(b, Matrix) else Matrix.from_rows(b)
        c = c if isinstance(c, Matrix) else Matrix.from_rows(c)
        check_same_shape(a, b, c)
        e = _to_vector(e)
        if e.size != a.num_rows:
            raise DimensionMismatchError(
                f"오차 벡터 길이 {e.size}가 제약 개수 {a.num_rows}와 다릅니다"
            )
        for name, value in (
            ("a", a), ("b", b), ("c", c), ("u", _to_fr(u)), ("e", e),
            ("n_instance", n_instance),
        ):
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError("RelaxedR1CSInstance는 수정할 수 없습니다")

    @property
    def n_constraints(self):
        return self.a.num_rows

    @property
    def n_variables(self):
        return self.a.num_cols

    def shares_matrices(self, other):
        """두 인스턴스가 같은 (A, B, C)를 쓰는지 (값 비교)."""
        return all(
            mine is theirs or mine == theirs
            for mine, theirs in ((self.a, other.a), (self.b, other.b), (self.c, other.c))
        )

    def is_satisfied(self, z):
        return is_satisfied(self, z)

    def __repr__(self):
        return (
            f"RelaxedR1CSInstance({self.n_constraints}x{self.n_variables}, "
            f"u={int(self.u)})"
        )


def lift(r1cs):
    """일반 R1CS를 u = 1, E = 0 인 Relaxed 인스턴스로 올린다.

    기반 R1CS를 만족하는 모든 z는 올린 인스턴스도 만족한다 (누산의 기저 단계).
    """
    return RelaxedR1CSInstance(
        r1cs.a, r1cs.b, r1cs.c,
        FR(1), Vector.zeros(r1cs.n_constraints),
        n_instance=r1cs.n_instance,
    )


def _check_compatible(instance1, instance2, *vectors):
    if not instance1.shares_matrices(instance2):
        raise DimensionMismatchError("두 인스턴스의 (A, B, C) 행렬이 다릅니다")
    for z in vectors:
        if z.size != instance1.n_variables:
            raise DimensionMismatchError(
                f"z 길이 {z.size}가 변수 개수 {instance1.n_variables}와 다릅니다"
            )


def compute_t(instance1, instance2, z1, z2):
    """교차항 T = (A·z1)∘(B·z2) + (A·z2)∘(B·z1) - u1·(C·z2) - u2·(C·z1)."""
    z1, z2 = _to_vector(z1), _to_vector(z2)
    _check_compatible(instance1, instance2, z1, z2)
    a, b, c = instance1.a, instance1.b, instance1.c
    az1, bz1, cz1 = a.mul_vector(z1), b.mul_vector(z1), c.mul_vector(z1)
    az2, bz2, cz2 = a.mul_vector(z2), b.mul_vector(z2), c.mul_vector(z2)
    return (
        az1.hadamard(bz2)
        .add(az2.hadamard(bz1))
        .sub(cz2.scalar_mul(instance1.u))
        .sub(cz1.scalar_mul(instance2.u))
    )


def compute_u(instance1, instance2, r):
    """u = u1 + r·u2."""
    return instance1.u + _to_fr(r) * instance2.u


def compute_e(instance1, instance2, r, z1, z2):
    """E = E1 + r·T + r²·E2."""
    r = _to_fr(r)
    t = compute_t(instance1, instance2, z1, z2)
    return instance1.e.add(t.scalar_mul(r)).add(instance2.e.scalar_mul(r * r))


def compute_z(r, z1, z2):
    """z = z1 + r·z2."""
    z1, z2 = _to_vector(z1), _to_vector(z2)
    return z1.add(z2.scalar_mul(_to_fr(r)))


def fold(instance1, instance2, r, z1, z2):
    """두 Relaxed 인스턴스를 챌린지 r로 접는다.

    Returns:
        tuple: (새 RelaxedR1CSInstance, 새 z)

    Raises:
        DimensionMismatchError: 행렬이 다르거나 z 길이가 맞지 않을 때
    """
    z1, z2 = _to_vector(z1), _to_vector(z2)
    _check_compatible(instance1, instance2, z1, z2)
    folded = RelaxedR1CSInstance(
        instance1.a, instance1.b, instance1.c,
        compute_u(instance1, instance2, r),
        compute_e(instance1, instance2, r, z1, z2),
        n_instance=instance1.n_instance,
    )
    logger.debug("Relaxed-R1CS 폴딩: constraints=%d", folded.n_constraints)
    return folded, compute_z(r, z1, z2)


def is_satisfied(instance, z):
    """(A·z) ∘ (B·z) == u·(C·z) + E 인지 원소별로 확인한다.

    비용은 세 번의 행렬-벡터 곱, 각 O(n_constraints × n_variables).
    """
    z = _to_vector(z)
    az = instance.a.mul_vector(z)
    bz = instance.b.mul_vector(z)
    cz = instance.c.mul_vector(z)
    return az.hadamard(bz) == cz.scalar_mul(instance.u).add(instance.e)


def derive_challenge(transcript, instance1, instance2, t):
    """두 인스턴스와 교차항 T를 흡수한 뒤 폴딩 챌린지 r을 뽑는다."""
    transcript.append_scalar(b"u1", instance1.u)
    transcript.append_vector(b"E1", instance1.e)
    transcript.append_scalar(b"u2", instance2.u)
    transcript.append_vector(b"E2", instance2.e)
    transcript.append_vector(b"T", t)
    return transcript.challenge_scalar(b"r")
