"""
Pedersen 커밋먼트
=================

C = m·g + r·h  (g, h ∈ G1, 서로의 이산로그를 아무도 모름)

  - 은닉(hiding): 무작위 r이 m을 가린다
  - 결속(binding): 다른 (m', r')로 같은 C를 만들려면 log_g(h)를 알아야 한다
  - 덧셈 준동형: C(m1, r1) + C(m2, r2) = C(m1 + m2, r1 + r2)

준동형 덕분에 폴딩처럼 인스턴스를 선형 결합하는 프로토콜에서
커밋된 값도 같은 계수로 결합할 수 있다.
"""

import hashlib

from zkblocks.common.field import CURVE_ORDER, FR, G1, ec_add, ec_mul, random_fr


class PedersenParams:
    """두 생성자 (g, h)."""

    __slots__ = ("g", "h")

    def __init__(self, g, h):
        if g is None or h is None:
            raise ValueError("Pedersen 생성자는 무한원점일 수 없습니다")
        object.__setattr__(self, "g", g)
        object.__setattr__(self, "h", h)

    def __setattr__(self, name, value):
        raise AttributeError("PedersenParams는 생성 후 수정할 수 없습니다")

    def __eq__(self, other):
        if not isinstance(other, PedersenParams):
            return NotImplemented
        return self.g == other.g and self.h == other.h

    @classmethod
    def generate(cls, seed=b"zkblocks-pedersen"):
        """g = G1, h = H(seed)·G1.

        h의 이산로그는 해시에서 나오므로 테스트/데모 전용이다.
        """
        if isinstance(seed, str):
            seed = seed.encode()
        k = int.from_bytes(hashlib.sha256(seed).digest(), "big") % CURVE_ORDER
        if k == 0:
            raise ValueError("시드가 항등원을 만듭니다")
        return cls(G1, ec_mul(G1, FR(k)))


def commit(params, message, blinding=None):
    """(C, r) = (m·g + r·h, r). blinding이 None이면 무작위 r을 뽑는다."""
    blinding = random_fr() if blinding is None else FR(int(blinding))
    point = ec_add(ec_mul(params.g, FR(int(message))), ec_mul(params.h, blinding))
    return point, blinding


def verify_opening(params, commitment, message, blinding):
    """C == m·g + r·h 인지 확인한다."""
    expected, _ = commit(params, message, blinding)
    return expected == commitment
