"""
다항식 도구: Polynomial, NTT, 나눗셈, 보간
==========================================

KZG 열기 증명과 R1CS → QAP 변환이 공유하는 다항식 연산.

**표현**:
  계수 리스트 coeffs[i] = xⁱ의 계수. 최고차 쪽의 0은 항상 잘라낸다.
  따라서 같은 다항식은 같은 coeffs를 가지며 == 비교가 곧 값 비교이다.

**NTT (fft / ifft)**:
  길이 2^k 단위근 도메인에서 계수 ↔ 평가값 변환.
  QAP의 열 다항식이 이것으로 만들어진다.

**나눗셈 (poly_div)**:
  KZG 몫 q(x) = (p(x) - y) / (x - z), 일괄 열기의 (p - L) / Z,
  QAP의 P(x) / (x^n - 1) 에 쓰인다. 나머지 판정은 호출자 몫이다.

**보간**:
  - interpolate_on_roots_of_unity: 단위근 도메인 (IFFT)
  - interpolate: 임의의 서로 다른 점 (barycentric 가중치)
  - vanishing_polynomial: Z(x) = ∏(x - zᵢ)

사용 예시:
    >>> p = Polynomial([1, 2, 3])          # 1 + 2x + 3x²
    >>> p(2)                               # FR(17)
    >>> interpolate([0, 1], [1, 3])        # 1 + 2x
"""

from itertools import zip_longest

from zkblocks.common.field import FR, get_root_of_unity, random_fr, random_nonzero_fr
from zkblocks.common.utils import pad_to_power_of_2
from zkblocks.errors import (
    DimensionMismatchError,
    DuplicateQueryPointError,
    EmptyQuerySetError,
    FieldInversionOfZeroError,
)

_ZERO = FR(0)


def _fr(value):
    return value if isinstance(value, FR) else FR(value)


class Polynomial:
    """FR 계수 다항식 (coeffs[i]: xⁱ의 계수).

    int 또는 FR 스칼라와 섞어 +, -, * 할 수 있다.

    예시:
        >>> Polynomial([1, 1]) * Polynomial([FR(0) - FR(1), 1])   # x² - 1
    """

    def __init__(self, coeffs=None):
        coeffs = [_fr(c) for c in coeffs or ()]
        while coeffs and coeffs[-1] == _ZERO:
            coeffs.pop()
        self.coeffs = coeffs or [_ZERO]

    @staticmethod
    def _lift(value):
        if isinstance(value, Polynomial):
            return value
        if isinstance(value, (int, FR)):
            return Polynomial([value])
        return None

    @property
    def degree(self):
        """차수. 영 다항식도 0을 돌려준다 (is_zero로 구분)."""
        return len(self.coeffs) - 1

    def is_zero(self):
        return self.coeffs == [_ZERO]

    def evaluate(self, point):
        """p(point), Horner."""
        point = _fr(point)
        acc = _ZERO
        for c in self.coeffs[::-1]:
            acc = acc * point + c
        return acc

    __call__ = evaluate

    def __add__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Polynomial([a + b for a, b in zip_longest(self.coeffs, other.coeffs, fillvalue=_ZERO)])

    __radd__ = __add__

    def __neg__(self):
        return Polynomial([_ZERO - c for c in self.coeffs])

    def __sub__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other):
        return (-self) + other

    def __mul__(self, other):
        if isinstance(other, (int, FR)):
            k = _fr(other)
            return Polynomial([c * k for c in self.coeffs])
        if not isinstance(other, Polynomial):
            return NotImplemented
        out = [_ZERO] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == _ZERO:
                continue
            for j, b in enumerate(other.coeffs):
                out[i + j] += a * b
        return Polynomial(out)

    __rmul__ = __mul__

    def __eq__(self, other):
        other = self._lift(other)
        return other is not None and self.coeffs == other.coeffs

    def __repr__(self):
        if self.is_zero():
            return "Poly(0)"
        terms = []
        for i, c in enumerate(self.coeffs):
            if c == _ZERO:
                continue
            terms.append(str(int(c)) + ("" if i == 0 else "*x" if i == 1 else f"*x^{i}"))
        return f"Poly({' + '.join(terms)})"

    def __len__(self):
        return len(self.coeffs)

    def scale(self, scalar):
        return self * scalar

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def one(cls):
        return cls([1])

    @classmethod
    def linear(cls, root):
        """(x - root)."""
        return cls([_ZERO - _fr(root), 1])

    @classmethod
    def random(cls, degree, rng=None):
        """차수가 정확히 degree인 무작위 다항식."""
        return cls([random_fr(rng) for _ in range(degree)] + [random_nonzero_fr(rng)])

    @classmethod
    def from_evaluations(cls, evals, omega):
        """{ωⁱ} 위의 평가값 → 다항식 (IFFT)."""
        return cls(ifft(evals, omega))


# ─────────────────────────────────────────────────────────────────────
# NTT
# ─────────────────────────────────────────────────────────────────────

def fft(coeffs, omega):
    """계수 → [p(1), p(ω), ..., p(ω^{n-1})], n = len(coeffs) = 2^k.

    radix-2 분할: p(x) = E(x²) + x·O(x²)
        p(ωᵏ)       = E(ω²ᵏ) + ωᵏ·O(ω²ᵏ)
        p(ω^{k+n/2}) = E(ω²ᵏ) - ωᵏ·O(ω²ᵏ)
    """
    if len(coeffs) == 1:
        return [_fr(coeffs[0])]

    w2 = omega * omega
    evens = fft(coeffs[0::2], w2)
    odds = fft(coeffs[1::2], w2)

    lo, hi = [], []
    twiddle = FR(1)
    for e, o in zip(evens, odds):
        t = twiddle * o
        lo.append(e + t)
        hi.append(e - t)
        twiddle = twiddle * omega
    return lo + hi


def ifft(evals, omega):
    """평가값 → 계수: (1/n) · fft(evals, ω⁻¹)."""
    scale = FR(len(evals)).inverse()
    return [c * scale for c in fft(evals, omega.inverse())]


# ─────────────────────────────────────────────────────────────────────
# 나눗셈
# ─────────────────────────────────────────────────────────────────────

def poly_div(a, b):
    """a = q·b + r,  deg r < deg b 인 (q, r).

    Raises:
        FieldInversionOfZeroError: b가 영 다항식

    예시:
        >>> poly_div(Polynomial([FR(0) - FR(1), 0, 1]), Polynomial.linear(1))
        (Poly(1 + 1*x), Poly(0))
    """
    if b.is_zero():
        raise FieldInversionOfZeroError("영 다항식으로 나눌 수 없습니다")

    rem = list(a.coeffs)
    shift = len(rem) - len(b.coeffs)
    if shift < 0:
        return Polynomial.zero(), Polynomial(rem)

    top_inv = b.coeffs[-1].inverse()
    quot = [_ZERO] * (shift + 1)
    for k in range(shift, -1, -1):
        factor = rem[k + b.degree] * top_inv
        if factor == _ZERO:
            continue
        quot[k] = factor
        for j, c in enumerate(b.coeffs):
            rem[k + j] -= factor * c

    return Polynomial(quot), Polynomial(rem[:b.degree])


# ─────────────────────────────────────────────────────────────────────
# 보간 (Interpolation)
# ─────────────────────────────────────────────────────────────────────

def check_distinct_points(points):
    """평가 점 집합이 비어 있지 않고 서로 다른지 확인한다.

    Raises:
        EmptyQuerySetError, DuplicateQueryPointError
    """
    if not points:
        raise EmptyQuerySetError("평가 점 집합이 비어 있습니다")
    seen = set()
    for z in points:
        key = int(z) % FR.field_modulus
        if key in seen:
            raise DuplicateQueryPointError(f"중복된 평가 점: {key}")
        seen.add(key)


def vanishing_polynomial(points):
    """소거 다항식 Z(x) = ∏ (x - zᵢ).

    모든 zᵢ에서 0이 되는 유일한 최고차 계수 1의 다항식이다.

    Raises:
        EmptyQuerySetError: points가 비어 있을 때
    """
    if not points:
        raise EmptyQuerySetError("평가 점 집합이 비어 있습니다")
    result = Polynomial.one()
    for z in points:
        result = result * Polynomial.linear(z)
    return result


def interpolate(xs, ys):
    """임의의 서로 다른 점 위의 Lagrange 보간 (barycentric 형태).

    L(x) = Σⱼ yⱼ · wⱼ · l(x) / (x - xⱼ)

    여기서 l(x) = ∏ₘ (x - xₘ),  wⱼ = 1 / ∏_{m≠j} (xⱼ - xₘ).
    결과는 L(xᵢ) = yᵢ 를 만족하는 차수 < n 의 유일한 다항식이다.

    Raises:
        DimensionMismatchError: len(xs) != len(ys)
        EmptyQuerySetError: 점이 하나도 없을 때
        DuplicateQueryPointError: 같은 x가 두 번 나올 때
    """
    if len(xs) != len(ys):
        raise DimensionMismatchError(
            f"x 개수 {len(xs)}와 y 개수 {len(ys)}가 다릅니다"
        )
    xs = [x if isinstance(x, FR) else FR(x) for x in xs]
    ys = [y if isinstance(y, FR) else FR(y) for y in ys]
    check_distinct_points(xs)

    l_x = vanishing_polynomial(xs)

    result = Polynomial.zero()
    for j, x_j in enumerate(xs):
        if ys[j] == FR(0):
            continue
        denominator = FR(1)
        for m, x_m in enumerate(xs):
            if m != j:
                denominator = denominator * (x_j - x_m)
        w_j = denominator.inverse()
        basis, _ = poly_div(l_x, Polynomial.linear(x_j))
        result = result + basis * (w_j * ys[j])
    return result


def interpolate_on_roots_of_unity(evals):
    """단위근 도메인 위의 보간: L(ωⁱ) = evals[i].

    도메인 크기는 next_power_of_2(len(evals))이며,
    나머지 점의 평가값은 0으로 채운다.

    Returns:
        Polynomial: 차수 < 도메인 크기인 보간 다항식
    """
    if not evals:
        raise EmptyQuerySetError("평가값이 비어 있습니다")
    padded = pad_to_power_of_2([_fr(e) for e in evals])
    return Polynomial.from_evaluations(padded, get_root_of_unity(len(padded)))


def lagrange_basis(domain, i):
    """i번째 Lagrange 기저 다항식 L_i(x) = ∏_{j≠i} (x - d_j) / (d_i - d_j).

    성질: L_i(d_j) = δ_{ij}
    """
    result = Polynomial.one()
    denominator = FR(1)
    for j, d_j in enumerate(domain):
        if j == i:
            continue
        result = result * Polynomial.linear(d_j)
        denominator = denominator * (domain[i] - d_j)
    return result * denominator.inverse()
