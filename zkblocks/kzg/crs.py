"""
KZG Common Reference String (CRS)
=================================

신뢰 설정(trusted setup)으로 KZG 공개 파라미터를 만든다.

**CRS란?**
  비밀 값 τ ("toxic waste")로부터 계산되는 공개 파라미터:

      crs1 = [g1, τ·g1, τ²·g1, ..., τ^d·g1]
      crs2 = [g2, τ·g2, τ²·g2, ..., τ^d·g2]
      vk   = τ·g2

  crs2 전체가 필요한 이유: 일괄 열기(multi_open)의 증명은 G2에서 커밋된다.

**보안**:
  τ를 아는 사람은 어떤 커밋먼트든 임의의 값으로 열 수 있다.
  setup은 τ를 저장하지 않는다. 호출자도 τ를 즉시 폐기해야 한다.
  여기서는 단일 참여자 설정만 다룬다 (MPC 세레모니는 범위 밖).

**수명**:
  CRS는 한 번 만들어지면 읽기 전용이다. 여러 commit/open/verify 호출이
  동기화 없이 공유해도 안전하다.

사용 예시:
    >>> crs = setup(G1, G2, degree=10, tau=FR(1234))
    >>> crs = CRS.generate(degree=16, seed=42)
"""

import hashlib
import logging
import secrets

from zkblocks.common.field import CURVE_ORDER, FR, G1, G2, ec_mul

logger = logging.getLogger(__name__)


class CRS:
    """KZG 공개 파라미터 (불변).

    속성:
        g1, g2: 설정에 사용된 생성자
        crs1: (g1·τ^i) for i in [0, degree]
        crs2: (g2·τ^i) for i in [0, degree]
        vk: g2·τ
    """

    __slots__ = ("g1", "g2", "crs1", "crs2", "vk")

    def __init__(self, g1, g2, crs1, crs2, vk):
        if len(crs1) != len(crs2):
            raise ValueError("crs1과 crs2의 길이가 다릅니다")
        object.__setattr__(self, "g1", g1)
        object.__setattr__(self, "g2", g2)
        object.__setattr__(self, "crs1", tuple(crs1))
        object.__setattr__(self, "crs2", tuple(crs2))
        object.__setattr__(self, "vk", vk)

    def __setattr__(self, name, value):
        raise AttributeError("CRS는 생성 후 수정할 수 없습니다")

    @property
    def degree(self):
        """지원하는 최대 다항식 차수 d."""
        return len(self.crs1) - 1

    def __eq__(self, other):
        if not isinstance(other, CRS):
            return NotImplemented
        return (
            self.g1 == other.g1
            and self.g2 == other.g2
            and self.crs1 == other.crs1
            and self.crs2 == other.crs2
            and self.vk == other.vk
        )

    def __repr__(self):
        return f"CRS(degree={self.degree})"

    @classmethod
    def generate(cls, degree, seed=None):
        """표준 생성자 G1, G2로 CRS를 만든다.

        Args:
            degree: 최대 다항식 차수
            seed: 결정론적 τ를 위한 시드 (테스트/데모용).
                  None이면 secrets로 τ를 뽑는다.
        """
        if seed is not None:
            h = hashlib.sha256(str(seed).encode()).digest()
            tau_int = int.from_bytes(h, "big") % CURVE_ORDER
        else:
            tau_int = secrets.randbelow(CURVE_ORDER - 1) + 1
        return setup(G1, G2, degree, FR(tau_int))


def setup(g1, g2, degree, tau):
    """τ의 거듭제곱으로 두 생성자를 스케일하여 CRS를 만든다.

    crs1[i] = g1·τ^i,  crs2[i] = g2·τ^i  (i ∈ [0, degree]),  vk = g2·τ

    차수 한도마다 정확히 한 번, 어떤 commit/open보다 먼저 호출해야 한다.

    Args:
        g1: G1 생성자
        g2: G2 생성자
        degree: 최대 다항식 차수 (≥ 0). 0이면 상수 다항식만 커밋 가능.
        tau: 비밀 스칼라. 이 함수는 τ를 보관하지 않는다.

    Raises:
        ValueError: degree < 0 이거나 τ = 0 인 경우
    """
    if degree < 0:
        raise ValueError(f"CRS 차수는 0 이상이어야 합니다: {degree}")
    if not isinstance(tau, FR):
        tau = FR(tau)
    if tau == FR(0):
        raise ValueError("τ = 0 이면 모든 커밋먼트가 상수가 됩니다")

    crs1 = []
    crs2 = []
    tau_power = FR(1)
    for _ in range(degree + 1):
        crs1.append(ec_mul(g1, tau_power))
        crs2.append(ec_mul(g2, tau_power))
        tau_power = tau_power * tau

    logger.debug("KZG CRS 생성: degree=%d", degree)
    return CRS(g1, g2, crs1, crs2, ec_mul(g2, tau))
