"""
QAP (Quadratic Arithmetic Program)
==================================

R1CS 행렬의 각 열을 단위근 도메인 위에서 보간하여 다항식으로 만든다.

    Aⱼ(ωⁱ) = A[i][j]      (i: 제약 인덱스, j: 변수 인덱스)

위트니스 z에 대해
    A(x) = Σ zⱼ·Aⱼ(x),  B(x), C(x)도 같은 방식
    P(x) = A(x)·B(x) - C(x)

모든 제약이 만족되면 P(ωⁱ) = 0 이므로 Z_H(x) = x^n - 1 이 P(x)를 나눈다.
도메인 크기 n은 next_power_of_2(제약 개수)이며, 남는 행은 0으로 채운다
(0 행은 0·0 - 0 = 0 이므로 만족 여부에 영향이 없다).
"""

from zkblocks.common.field import FR
from zkblocks.common.linalg import Vector
from zkblocks.common.polynomial import Polynomial, interpolate_on_roots_of_unity, poly_div
from zkblocks.common.utils import get_omega_domain
from zkblocks.errors import DimensionMismatchError


def matrix_to_polynomials(matrix):
    """행렬의 각 열을 단위근 도메인 위에서 보간한 다항식 리스트."""
    return [
        interpolate_on_roots_of_unity(list(matrix.column(j)))
        for j in range(matrix.num_cols)
    ]


class QAP:
    """R1CS로부터 만든 QAP.

    속성:
        a_polys, b_polys, c_polys: 열 다항식 리스트
        omega, domain: 단위근 도메인
    """

    def __init__(self, a_polys, b_polys, c_polys, omega, domain):
        self.a_polys = a_polys
        self.b_polys = b_polys
        self.c_polys = c_polys
        self.omega = omega
        self.domain = domain

    @classmethod
    def from_r1cs(cls, r1cs):
        omega, domain = get_omega_domain(r1cs.n_constraints)
        return cls(
            matrix_to_polynomials(r1cs.a),
            matrix_to_polynomials(r1cs.b),
            matrix_to_polynomials(r1cs.c),
            omega,
            domain,
        )

    @property
    def n_variables(self):
        return len(self.a_polys)

    def vanishing(self):
        """Z_H(x) = x^n - 1."""
        n = len(self.domain)
        return Polynomial([FR(0) - FR(1)] + [FR(0)] * (n - 1) + [FR(1)])

    def _combine(self, polys, z):
        result = Polynomial.zero()
        for poly, z_j in zip(polys, z):
            if z_j != FR(0):
                result = result + poly * z_j
        return result

    def solution_polynomial(self, z):
        """P(x) = A(x)·B(x) - C(x)."""
        if not isinstance(z, Vector):
            z = Vector(z)
        if z.size != self.n_variables:
            raise DimensionMismatchError(
                f"z 길이 {z.size}가 변수 개수 {self.n_variables}와 다릅니다"
            )
        a = self._combine(self.a_polys, z)
        b = self._combine(self.b_polys, z)
        c = self._combine(self.c_polys, z)
        return a * b - c

    def divide_by_vanishing(self, z):
        """P(x) = H(x)·Z_H(x) + R(x) 의 (H, R)."""
        return poly_div(self.solution_polynomial(z), self.vanishing())

    def is_satisfied(self, z):
        """Z_H(x)가 P(x)를 나누는지 확인한다."""
        _, remainder = self.divide_by_vanishing(z)
        return remainder.is_zero()
