"""
다중선형 확장 (Multilinear Extension, MLE)
=========================================

불리언 초입방체 {0,1}^v 위의 값 f(w)로부터 FR^v 전체로 확장된
다중선형 다항식 f̃ 를 평가한다. sumcheck 계열 프로토콜의 기본 도구.

    f̃(x) = Σ_{w ∈ {0,1}^v} f(w) · χ_w(x)
    χ_w(x) = Π_i (xᵢ·wᵢ + (1 - xᵢ)(1 - wᵢ))

**점 순서**:
  i번째 초입방체 점의 j번째 좌표는 (i >> j) & 1 (리틀 엔디안).
  평가값 리스트 evals[i]는 이 순서의 점에 대응한다.

**두 가지 평가 방법**:
  - naive_mle_evaluation: 점마다 χ_w(x)를 새로 계산, O(v · 2^v)
  - memoized_mle_evaluation: χ 테이블을 한 번 만들어 재사용.
    테이블은 좌표 하나씩 두 배로 늘려 O(2^v)에 만든다.

사용 예시:
    >>> cube = get_hypercube_points(2)
    >>> naive_mle_evaluation([1, 2, 3, 4], cube, [FR(5), FR(7)])
    >>> memoized_mle_evaluation([1, 2, 3, 4], build_memoized_chi_table([FR(5), FR(7)]))
"""

from zkblocks.common.field import FR
from zkblocks.errors import DimensionMismatchError

_ONE = FR(1)


def _fr(value):
    return value if isinstance(value, FR) else FR(value)


def get_hypercube_points(v):
    """{0,1}^v 의 2^v 개 점 (각 점은 FR 리스트)."""
    if v < 0:
        raise ValueError(f"변수 개수는 0 이상이어야 합니다: {v}")
    return [[FR((i >> j) & 1) for j in range(v)] for i in range(1 << v)]


def point_to_index(point):
    """초입방체 점 → 인덱스 (get_hypercube_points의 역)."""
    index = 0
    for j, bit in enumerate(point):
        if bit == _ONE:
            index |= 1 << j
    return index


def compute_chi_w(w, x):
    """χ_w(x) = Π (xᵢ·wᵢ + (1 - xᵢ)(1 - wᵢ)).

    w가 불리언 점이고 x도 불리언이면 w == x 일 때만 1.
    """
    if len(w) != len(x):
        raise DimensionMismatchError(f"점 차원이 다릅니다 ({len(w)} != {len(x)})")
    chi = _ONE
    for w_i, x_i in zip(w, x):
        w_i, x_i = _fr(w_i), _fr(x_i)
        chi = chi * (x_i * w_i + (_ONE - x_i) * (_ONE - w_i))
    return chi


def _check_evals(evals, size):
    if len(evals) != size:
        raise DimensionMismatchError(
            f"평가값 개수 {len(evals)}가 초입방체 크기 {size}와 다릅니다"
        )


def naive_mle_evaluation(evals, hypercube, x):
    """f̃(x) = Σ f(w)·χ_w(x), 점마다 χ를 직접 계산한다.

    Raises:
        DimensionMismatchError: len(evals) ≠ len(hypercube) 또는 차원 불일치
    """
    _check_evals(evals, len(hypercube))
    total = FR(0)
    for w, value in zip(hypercube, evals):
        total = total + _fr(value) * compute_chi_w(w, x)
    return total


def build_memoized_chi_table(r):
    """모든 w ∈ {0,1}^v 에 대한 χ_w(r) 테이블.

    j번째 좌표를 처리할 때 기존 테이블 A를
        A·(1 - r_j)  (w_j = 0인 절반) + A·r_j  (w_j = 1인 절반)
    으로 늘린다. table[i] == compute_chi_w(hypercube[i], r).
    """
    table = [_ONE]
    for r_j in r:
        r_j = _fr(r_j)
        not_r_j = _ONE - r_j
        table = [a * not_r_j for a in table] + [a * r_j for a in table]
    return table


def memoized_mle_evaluation(evals, chi_table):
    """미리 만든 χ 테이블로 f̃(r) = Σ f(w)·A[w] 를 계산한다."""
    _check_evals(evals, len(chi_table))
    total = FR(0)
    for value, chi in zip(evals, chi_table):
        total = total + _fr(value) * chi
    return total
