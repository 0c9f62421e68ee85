"""
Fiat-Shamir Transcript
======================

대화식 프로토콜의 검증자 난수를 해시로 대체한다.

폴딩에서의 용도:
  두 Relaxed-R1CS 인스턴스와 교차항 T가 모두 고정된 **뒤에**
  챌린지 r을 뽑아야 한다. r을 미리 알면 만족하지 않는 인스턴스도
  폴딩 결과를 맞출 수 있기 때문이다.
  누산기 자체는 r을 입력으로 받을 뿐이고, r을 고르는 것은 호출자 몫이다.

인코딩:
  각 항목은 [레이블 길이 1바이트][레이블][데이터] 로 버퍼에 붙는다.
  스칼라/좌표는 32바이트 빅엔디안, 벡터는 8바이트 길이 접두사를 가진다.

사용 예시:
    >>> t = Transcript(b"nova")
    >>> t.append_scalar(b"u1", FR(1))
    >>> r = t.challenge_scalar(b"r")
"""

import hashlib

from zkblocks.common.field import CURVE_ORDER, FR


def _word(value):
    return (int(value) % CURVE_ORDER).to_bytes(32, "big")


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    Prover와 Verifier가 같은 순서로 같은 데이터를 흡수하면 같은 챌린지가 나온다.
    """

    def __init__(self, label=b"zkblocks"):
        self.state = bytearray()
        self._absorb(b"domain", label)

    def _absorb(self, label, data):
        self.state += len(label).to_bytes(1, "big") + label + data

    def append_scalar(self, label, scalar):
        self._absorb(label, _word(scalar))

    def append_vector(self, label, vector):
        words = [_word(e) for e in vector]
        self._absorb(label, len(words).to_bytes(8, "big") + b"".join(words))

    def append_point(self, label, point):
        """G1 점 (x, y). 무한원점(None)은 64바이트의 0."""
        if point is None:
            data = bytes(64)
        else:
            data = b"".join(int(c).to_bytes(32, "big") for c in point)
        self._absorb(label, data)

    def challenge_scalar(self, label):
        """상태 해시에서 FR 챌린지를 뽑는다.

        해시는 상태에 다시 흡수되므로 연속 호출은 서로 다른 값을 준다.
        """
        self._absorb(label, b"")
        digest = hashlib.sha256(bytes(self.state)).digest()
        self.state += digest
        return FR(int.from_bytes(digest, "big"))
