"""
KZG 다항식 커밋먼트 스킴
=========================

Kate-Zaverucha-Goldberg (KZG) 커밋먼트.

**커밋먼트**:
  C = Σ crs1[i]·cᵢ = p(τ)·g1
  τ를 모른 채로 "τ에서의 평가값을 지수에 올린 것"을 계산한다.
  이산로그 가정 하에서 바인딩(binding)이다. 하이딩(hiding)은 제공하지 않는다.

**단일 점 열기 (open / verify)**:
  1. y = p(z)
  2. q(x) = (p(x) - y) / (x - z)   (z가 p(x) - y의 근이므로 나머지 0)
  3. π = commit(q)
  4. 검증: e(π, vk - z·g2) == e(C - y·g1, g2)

**G2 연산 없는 변형**:
  verify_no_g2_ops, verify_no_g2_ops_evm_opcode는 같은 페어링 방정식을
  G2 스칼라곱 없이 다시 쓴 것이다. verify와 정확히 같은 입력 집합을
  수락/거부해야 한다.

    verify_no_g2_ops:            e(π, vk) · e(z·π, -g2) == e(C - y·g1, g2)
    verify_no_g2_ops_evm_opcode: e(π, vk) · e(-z·π - C + y·g1, g2) == 1

**일괄 열기 (multi_open / verify_multi_open)**:
  점 집합 {zᵢ}에 대해
    L(x): L(zᵢ) = p(zᵢ) 인 최소 차수 보간 다항식
    Z(x) = ∏ (x - zᵢ)
    q(x) = (p(x) - L(x)) / Z(x),   π = q(τ)·g2   (G2에서 커밋)
  검증 방정식:
    e(Z(τ)·g1, π) · e(L(τ)·g1 - C, g2) == 1
  정당성: p - L = q·Z 이므로 지수에서 Z(τ)q(τ) + L(τ) - p(τ) = 0.

검증 실패는 예외가 아니라 False이다. 잘못된 입력(빈 점 집합, 중복 점,
길이 불일치, 차수 초과)은 예외로 구분된다.

사용 예시:
    >>> crs = setup(G1, G2, 10, tau)
    >>> C = commit(crs, p)
    >>> y, proof = open(crs, p, z)
    >>> verify(crs, y, z, C, proof)  # True
"""

import logging
from collections import namedtuple

from zkblocks.common.field import FR, GT_ONE, ec_add, ec_mul, ec_neg, ec_pairing, ec_sub
from zkblocks.common.polynomial import (
    Polynomial,
    check_distinct_points,
    interpolate,
    poly_div,
    vanishing_polynomial,
)
from zkblocks.errors import (
    DegreeExceededError,
    DimensionMismatchError,
    InconsistentEvaluationError,
)

logger = logging.getLogger(__name__)


MultiOpening = namedtuple("MultiOpening", ["proof", "lagrange", "vanishing"])
MultiOpening.__doc__ = """일괄 열기 결과: (G2 증명 π, 보간 다항식 L, 소거 다항식 Z)."""


def _to_fr(value):
    return value if isinstance(value, FR) else FR(value)


def _check_degree(crs, poly):
    if poly.degree > crs.degree:
        raise DegreeExceededError(
            f"다항식 차수 {poly.degree}가 CRS 최대 차수 {crs.degree}를 초과합니다"
        )


def _msm(points, coeffs):
    """다중 스칼라곱 Σ points[i]·coeffs[i].

    각 항은 독립적이므로 순서와 무관하다 (그룹 덧셈은 교환·결합적).
    """
    result = None
    for point, coeff in zip(points, coeffs):
        if coeff == FR(0):
            continue
        result = ec_add(result, ec_mul(point, coeff))
    return result


# ─────────────────────────────────────────────────────────────────────
# 커밋 / 단일 점 열기
# ─────────────────────────────────────────────────────────────────────

def commit(crs, poly):
    """다항식을 KZG 커밋한다: C = Σ crs1[i]·cᵢ = p(τ)·g1.

    부수 효과가 없고 결정론적이다.

    Raises:
        DegreeExceededError: 다항식 차수 > CRS 차수 (잘라내지 않는다)

    예시:
        >>> commit(crs, Polynomial([FR(7)]))  # 7·g1
    """
    _check_degree(crs, poly)
    return _msm(crs.crs1, poly.coeffs)


def commit_g2(crs, poly):
    """G2 쪽 커밋: Σ crs2[i]·cᵢ = p(τ)·g2. 일괄 열기 증명에 쓰인다."""
    _check_degree(crs, poly)
    return _msm(crs.crs2, poly.coeffs)


def open(crs, poly, z, y=None):
    """단일 점 열기 증명을 만든다.

    q(x) = (p(x) - y) / (x - z),  π = commit(q)

    Args:
        crs: CRS
        poly: 열 다항식 p(x)
        z: 평가 점
        y: 주장하는 평가값. None이면 p(z)를 계산한다.

    Returns:
        tuple: (y, π)

    Raises:
        DegreeExceededError: 다항식 차수 > CRS 차수
        InconsistentEvaluationError: y ≠ p(z) (나머지가 0이 아님)
    """
    _check_degree(crs, poly)
    z = _to_fr(z)
    y = poly.evaluate(z) if y is None else _to_fr(y)

    quotient, remainder = poly_div(poly - y, Polynomial.linear(z))
    if not remainder.is_zero():
        raise InconsistentEvaluationError(
            f"p({int(z)}) ≠ {int(y)}: 나머지가 0이 아닙니다"
        )

    logger.debug("KZG 열기: degree=%d", poly.degree)
    return y, commit(crs, quotient)


def verify(crs, y, z, commitment, proof):
    """단일 점 열기 증명을 검증한다.

    e(π, vk - z·g2) == e(C - y·g1, g2)
    """
    y, z = _to_fr(y), _to_fr(z)
    vk_minus_z = ec_sub(crs.vk, ec_mul(crs.g2, z))
    c_minus_y = ec_sub(commitment, ec_mul(crs.g1, y))
    lhs = ec_pairing(vk_minus_z, proof)
    rhs = ec_pairing(crs.g2, c_minus_y)
    return lhs == rhs


def verify_no_g2_ops(crs, y, z, commitment, proof):
    """verify와 같은 방정식을 G2 스칼라곱 없이 검사한다.

    e(π, vk) · e(z·π, -g2) == e(C - y·g1, g2)

    -g2는 상수이므로 G2 쪽에는 고정된 점만 들어간다.
    """
    y, z = _to_fr(y), _to_fr(z)
    lhs = ec_pairing(crs.vk, proof) * ec_pairing(ec_neg(crs.g2), ec_mul(proof, z))
    rhs = ec_pairing(crs.g2, ec_sub(commitment, ec_mul(crs.g1, y)))
    return lhs == rhs


def verify_no_g2_ops_evm_opcode(crs, y, z, commitment, proof):
    """EVM 페어링 프리컴파일 형태: 페어링 곱이 1인지 확인한다.

    e(π, vk) · e(-z·π - C + y·g1, g2) == 1
    """
    y, z = _to_fr(y), _to_fr(z)
    g1_term = ec_add(ec_sub(ec_mul(proof, FR(0) - z), commitment), ec_mul(crs.g1, y))
    return ec_pairing(crs.vk, proof) * ec_pairing(crs.g2, g1_term) == GT_ONE


def verify_from_encrypted_y(crs, y_g1, z, commitment, proof):
    """평가값을 y·g1 형태로만 아는 검증자용.

    e(π, vk - z·g2) == e(C - y·g1, g2)
    """
    z = _to_fr(z)
    lhs = ec_pairing(ec_sub(crs.vk, ec_mul(crs.g2, z)), proof)
    rhs = ec_pairing(crs.g2, ec_sub(commitment, y_g1))
    return lhs == rhs


# ─────────────────────────────────────────────────────────────────────
# 일괄 열기 (Multi-point opening)
# ─────────────────────────────────────────────────────────────────────

def multi_open(crs, poly, z_values):
    """여러 점에서의 평가를 한 개의 G2 증명으로 연다.

    Returns:
        MultiOpening: (π ∈ G2, L, Z)

    Raises:
        EmptyQuerySetError: z_values가 비어 있을 때
        DuplicateQueryPointError: z_values에 중복이 있을 때
        DegreeExceededError: p 또는 Z의 차수 > CRS 차수
    """
    _check_degree(crs, poly)
    z_values = [_to_fr(z) for z in z_values]
    y_values = [poly.evaluate(z) for z in z_values]

    lagrange = interpolate(z_values, y_values)
    vanishing = vanishing_polynomial(z_values)
    _check_degree(crs, vanishing)

    quotient, remainder = poly_div(poly - lagrange, vanishing)
    if not remainder.is_zero():
        raise InconsistentEvaluationError("(p - L)가 Z로 나누어 떨어지지 않습니다")

    logger.debug("KZG 일괄 열기: degree=%d, points=%d", poly.degree, len(z_values))
    return MultiOpening(commit_g2(crs, quotient), lagrange, vanishing)


def verify_multi_open(crs, commitment, z_values, y_values, lagrange, vanishing, proof):
    """일괄 열기 증명을 검증한다.

    1. L(zᵢ) == yᵢ  (모든 i)
    2. Z(zᵢ) == 0, deg Z == 점 개수
    3. e(Z(τ)·g1, π) · e(L(τ)·g1 - C, g2) == 1

    L 또는 Z의 차수가 CRS 차수를 넘으면 예외 없이 False.

    Raises:
        DimensionMismatchError: z_values와 y_values 길이가 다를 때
        EmptyQuerySetError, DuplicateQueryPointError: 잘못된 점 집합
    """
    if len(z_values) != len(y_values):
        raise DimensionMismatchError(
            f"z 개수 {len(z_values)}와 y 개수 {len(y_values)}가 다릅니다"
        )
    z_values = [_to_fr(z) for z in z_values]
    y_values = [_to_fr(y) for y in y_values]
    check_distinct_points(z_values)

    for z, y in zip(z_values, y_values):
        if lagrange.evaluate(z) != y:
            return False
    if vanishing.is_zero() or vanishing.degree != len(z_values):
        return False
    for z in z_values:
        if vanishing.evaluate(z) != FR(0):
            return False
    if lagrange.degree > crs.degree or vanishing.degree > crs.degree:
        return False

    z_tau = commit(crs, vanishing)
    l_tau = commit(crs, lagrange)
    lhs = ec_pairing(proof, z_tau)
    rhs = ec_pairing(crs.g2, ec_sub(l_tau, commitment))
    return lhs * rhs == GT_ONE
