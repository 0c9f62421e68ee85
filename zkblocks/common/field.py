"""
기반 모듈: 유한체(Finite Field) 및 타원곡선 연산
================================================

KZG 커밋먼트와 Relaxed-R1CS 폴딩 전체에서 사용되는 기본 대수적 도구.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드. 모든 다항식 연산, 행렬-벡터 곱,
  폴딩 챌린지 r이 이 필드 위에서 계산된다.
  - 위수 p ≈ 2^254, 소수체
  - p - 1 = 2^28 × m (m은 홀수) → 최대 2^28차 단위근 지원

**타원곡선 연산**:
  G1, G2 그룹 연산과 페어링 e: G1 × G2 → GT.
  쌍선형성: e(a·P, b·Q) = e(P, Q)^(ab)

**주의 (0의 역원)**:
  py_ecc의 FQ는 0의 역원을 조용히 0으로 돌려준다.
  FR은 이를 막고 FieldInversionOfZeroError를 발생시킨다.

사용 예시:
    >>> from zkblocks.common.field import FR, G1, ec_mul
    >>> FR(3) * FR(7)       # FR(21)
    >>> P = ec_mul(G1, 5)   # 5·G1
    >>> FR(0).inverse()     # FieldInversionOfZeroError
"""

import secrets

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from zkblocks.errors import FieldInversionOfZeroError


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ를 상속하여 +, -, *, ** 를 그대로 사용하고,
    나눗셈과 역원만 0 검사를 추가해 재정의한다.

    예시:
        >>> x = FR(3)
        >>> x ** 2             # FR(9)
        >>> FR(1) / FR(3)      # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order

    def inverse(self):
        """모듈러 역원 x⁻¹.

        Raises:
            FieldInversionOfZeroError: x == 0 인 경우
        """
        if self.n % self.field_modulus == 0:
            raise FieldInversionOfZeroError("0의 역원은 존재하지 않습니다")
        return type(self)(pow(self.n, -1, self.field_modulus))

    def __truediv__(self, other):
        if not isinstance(other, FR):
            other = FR(other)
        return self * other.inverse()

    def __rtruediv__(self, other):
        return FR(other) * self.inverse()

    def __hash__(self):
        return hash(self.n)


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# G1, G2 그룹 표준 생성자
G1 = bn128.G1
G2 = bn128.G2

# 항등원 (무한원점). bn128에서는 None으로 표현한다.
Z1 = None

# GT의 곱셈 항등원
GT_ONE = bn128.FQ12.one()


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    scalar는 정수 또는 FR이며, CURVE_ORDER로 축소된다.
    G1, G2 모두에 사용한다.
    """
    if point is None:
        return None
    if isinstance(scalar, FQ):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원: -point."""
    return bn128.neg(point)


def ec_sub(p1, p2):
    """타원곡선 점 뺄셈: p1 - p2."""
    return bn128.add(p1, bn128.neg(p2))


def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2) → GT.

    주의:
        py_ecc.bn128.pairing의 인자 순서는 (G2, G1)이다.
        어느 한쪽이 무한원점이면 GT_ONE을 돌려준다.
    """
    if g2_point is None or g1_point is None:
        return GT_ONE
    return bn128.pairing(g2_point, g1_point)


# ─────────────────────────────────────────────────────────────────────
# 무작위 샘플링
# ─────────────────────────────────────────────────────────────────────

def random_fr(rng=None):
    """무작위 FR 원소.

    Args:
        rng: random.Random 인스턴스 (테스트 재현용). None이면 secrets 사용.
    """
    if rng is None:
        return FR(secrets.randbelow(CURVE_ORDER))
    return FR(rng.randrange(CURVE_ORDER))


def random_nonzero_fr(rng=None):
    """0이 아닌 무작위 FR 원소."""
    while True:
        x = random_fr(rng)
        if x != FR(0):
            return x


def random_g1(rng=None):
    """G1 위의 무작위 점 (항등원 제외)."""
    return ec_mul(G1, random_nonzero_fr(rng))


def random_g2(rng=None):
    """G2 위의 무작위 점 (항등원 제외)."""
    return ec_mul(G2, random_nonzero_fr(rng))


# ─────────────────────────────────────────────────────────────────────
# 단위근 (Roots of Unity)
# ─────────────────────────────────────────────────────────────────────

def get_root_of_unity(n):
    """n차 원시 단위근 ω (ω^n = 1, ω^k ≠ 1 for 0 < k < n).

    생성자 g = FR(5)에서 ω = g^((p-1)/n)으로 계산한다.

    Raises:
        ValueError: n이 2의 거듭제곱이 아니거나 2^28을 초과할 때
    """
    if n < 1 or n & (n - 1):
        raise ValueError(f"도메인 크기는 2의 거듭제곱이어야 합니다: {n}")
    if n > 1 << 28:
        raise ValueError(f"BN254 스칼라 필드의 2-adicity는 28입니다: {n}")
    return FR(5) ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """평가 도메인 [1, ω, ω², ..., ω^(n-1)]."""
    omega = get_root_of_unity(n)
    roots = [FR(1)]
    while len(roots) < n:
        roots.append(roots[-1] * omega)
    return roots
