"""
Relaxed-R1CS 폴딩 데모: x³ + x + 5 = out
========================================

실행:
    python -m zkblocks.folding.example

흐름:
    1. R1CS 구성 (4개 제약, 6개 변수)
    2. x = 3, x = 5 위트니스로 R1CS 만족 확인
    3. 두 인스턴스를 Relaxed 형태로 올리기 (u = 1, E = 0)
    4. Fiat-Shamir 챌린지 r 도출 후 폴딩
    5. 접힌 인스턴스 만족 확인
    6. 조작된 위트니스로 폴딩 (실패해야 함)
    7. QAP 나눗셈 검사
"""

from zkblocks.common.field import FR
from zkblocks.common.transcript import Transcript
from zkblocks.folding.qap import QAP
from zkblocks.folding.r1cs import R1CS
from zkblocks.folding.relaxed_r1cs import compute_t, derive_challenge, fold, is_satisfied, lift

# z = (1, x, out, sym1, y, sym2)
#   sym1 = x·x,  y = sym1·x,  sym2 = x + y,  out = sym2 + 5
CUBIC_A = [
    [0, 1, 0, 0, 0, 0],
    [0, 0, 0, 1, 0, 0],
    [0, 1, 0, 0, 1, 0],
    [5, 0, 0, 0, 0, 1],
]
CUBIC_B = [
    [0, 1, 0, 0, 0, 0],
    [0, 1, 0, 0, 0, 0],
    [1, 0, 0, 0, 0, 0],
    [1, 0, 0, 0, 0, 0],
]
CUBIC_C = [
    [0, 0, 0, 1, 0, 0],
    [0, 0, 0, 0, 1, 0],
    [0, 0, 0, 0, 0, 1],
    [0, 0, 1, 0, 0, 0],
]


def cubic_r1cs():
    """x³ + x + 5 = out 의 R1CS (공개 입력: x, out)."""
    return R1CS(CUBIC_A, CUBIC_B, CUBIC_C, n_instance=2)


def cubic_z(r1cs, x):
    """입력 x에 대한 만족 z = (1, x, x³+x+5, x², x³, x³+x)."""
    x = FR(x)
    return r1cs.build_z(
        [x, x * x * x + x + FR(5)],
        [x * x, x * x * x, x * x * x + x],
    )


def main():
    print("=" * 60)
    print("  Relaxed-R1CS Folding Demo")
    print("  회로: x³ + x + 5 = out")
    print("=" * 60)

    # ── 1. R1CS ──
    print("\n[1] R1CS 구성...")
    r1cs = cubic_r1cs()
    print(f"    제약 수: {r1cs.n_constraints}")
    print(f"    변수 수: {r1cs.n_variables} (공개 {r1cs.n_instance}, 비공개 {r1cs.n_witness})")

    # ── 2. 위트니스 ──
    print("\n[2] 위트니스 확인...")
    z1 = cubic_z(r1cs, 3)
    z2 = cubic_z(r1cs, 5)
    for name, z in (("z1", z1), ("z2", z2)):
        ok = r1cs.is_satisfied(z)
        print(f"    {name} = {[int(v) for v in z]} → {'✓' if ok else '✗'}")

    # ── 3. Relaxed 인스턴스 ──
    print("\n[3] Relaxed 인스턴스로 올리기 (u = 1, E = 0)...")
    instance1 = lift(r1cs)
    instance2 = lift(r1cs)
    print(f"    {instance1}")

    # ── 4. 폴딩 ──
    print("\n[4] 챌린지 도출 후 폴딩...")
    t = compute_t(instance1, instance2, z1, z2)
    r = derive_challenge(Transcript(b"folding-demo"), instance1, instance2, t)
    print(f"    T = {[int(v) for v in t]}")
    print(f"    r = {str(int(r))[:20]}...")
    folded, z = fold(instance1, instance2, r, z1, z2)

    # ── 5. 만족 확인 ──
    print("\n[5] 접힌 인스턴스 확인...")
    result = is_satisfied(folded, z)
    print(f"    검증 결과: {'성공 ✓' if result else '실패 ✗'}")

    # ── 6. 조작된 위트니스 ──
    print("\n[6] 조작된 위트니스 (out 변조)로 폴딩...")
    bad_z2 = r1cs.build_z([FR(5), FR(131)], [FR(25), FR(125), FR(130)])
    bad_folded, bad_z = fold(instance1, instance2, r, z1, bad_z2)
    wrong_result = is_satisfied(bad_folded, bad_z)
    print(f"    검증 결과: {'성공 ✓' if wrong_result else '실패 ✗ (예상대로 실패)'}")

    # ── 7. QAP ──
    print("\n[7] QAP 나눗셈 검사...")
    qap = QAP.from_r1cs(r1cs)
    qap_ok = qap.is_satisfied(z1)
    print(f"    도메인 크기: {len(qap.domain)}")
    print(f"    Z_H(x) | A(x)·B(x) - C(x): {'✓' if qap_ok else '✗'}")

    result = result and qap_ok and not wrong_result
    print("\n" + "=" * 60)
    if result:
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return result


if __name__ == "__main__":
    main()
