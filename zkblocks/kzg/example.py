"""
KZG 커밋먼트 데모
=================

실행:
    python -m zkblocks.kzg.example

흐름:
    1. CRS 생성 (trusted setup, degree 10)
    2. 무작위 다항식 커밋
    3. 한 점에서 열기 + 검증 (세 가지 검증식)
    4. 조작된 커밋먼트로 검증
    5. 일괄 열기 + 검증
"""

import random

from zkblocks.common.field import FR, G1, ec_add
from zkblocks.common.polynomial import Polynomial
from zkblocks.kzg.crs import CRS
from zkblocks.kzg.kzg import (
    commit,
    multi_open,
    open,
    verify,
    verify_multi_open,
    verify_no_g2_ops,
    verify_no_g2_ops_evm_opcode,
)


def main():
    print("=" * 60)
    print("  KZG Polynomial Commitment Demo")
    print("  곡선: BN254, 최대 차수 10")
    print("=" * 60)

    rng = random.Random(2024)

    # ── 1. CRS ──
    print("\n[1] CRS 생성 (trusted setup)...")
    crs = CRS.generate(degree=10, seed=12345)
    print(f"    crs1 길이: {len(crs.crs1)}")
    print(f"    crs2 길이: {len(crs.crs2)}")

    # ── 2. 커밋 ──
    print("\n[2] 다항식 커밋...")
    poly = Polynomial.random(10, rng)
    commitment = commit(crs, poly)
    print(f"    p(x) 차수: {poly.degree}")
    print(f"    C = ({str(int(commitment[0]))[:12]}..., "
          f"{str(int(commitment[1]))[:12]}...)")

    # ── 3. 열기 + 검증 ──
    print("\n[3] z = 7 에서 열기...")
    z = FR(7)
    y, proof = open(crs, poly, z)
    print(f"    y = p(7) = {str(int(y))[:20]}...")
    results = {
        "verify": verify(crs, y, z, commitment, proof),
        "verify_no_g2_ops": verify_no_g2_ops(crs, y, z, commitment, proof),
        "verify_no_g2_ops_evm_opcode": verify_no_g2_ops_evm_opcode(
            crs, y, z, commitment, proof
        ),
    }
    for name, ok in results.items():
        print(f"    {name}: {'✓' if ok else '✗'}")

    # ── 4. 조작된 커밋먼트 ──
    print("\n[4] 조작된 커밋먼트 (C + g1)로 검증...")
    fake_commitment = ec_add(commitment, G1)
    wrong_result = verify(crs, y, z, fake_commitment, proof)
    print(f"    검증 결과: {'성공 ✓' if wrong_result else '실패 ✗ (예상대로 실패)'}")

    # ── 5. 일괄 열기 ──
    print("\n[5] z ∈ {1, 2, 3} 일괄 열기...")
    points = [FR(1), FR(2), FR(3)]
    values = [poly.evaluate(p) for p in points]
    opening = multi_open(crs, poly, points)
    print(f"    L(x) 차수: {opening.lagrange.degree}, Z(x) 차수: {opening.vanishing.degree}")
    batch_ok = verify_multi_open(
        crs, commitment, points, values,
        opening.lagrange, opening.vanishing, opening.proof,
    )
    print(f"    검증 결과: {'성공 ✓' if batch_ok else '실패 ✗'}")

    result = all(results.values()) and batch_ok and not wrong_result
    print("\n" + "=" * 60)
    if result:
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return result


if __name__ == "__main__":
    main()
