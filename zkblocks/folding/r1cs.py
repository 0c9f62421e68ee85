"""
R1CS (Rank-1 Constraint System)
===============================

세 행렬 (A, B, C)와 인스턴스-위트니스 벡터 z로 이차 제약을 표현한다.

    (A·z) ∘ (B·z) = C·z        (∘: Hadamard 곱)

**z 벡터 구성**:
    z = (1, 공개 입력..., 비공개 위트니스...)
    길이 = 행렬 열 개수 = 1 + n_instance + n_witness

**예시 (x³ + x + 5 = 35, x = 3)**:
    z = (1, 3, 35, 9, 27, 30)
    제약 4개: x·x = sym1, sym1·x = y, (x + y)·1 = sym2, (sym2 + 5)·1 = out

제약을 프로그램에서 생성하는 프런트엔드는 다루지 않는다.
행렬은 호출자가 직접 만든다.
"""

from zkblocks.common.linalg import Matrix, Vector
from zkblocks.errors import DimensionMismatchError


def _as_matrix(m):
    return m if isinstance(m, Matrix) else Matrix.from_rows(m)


def check_same_shape(a, b, c):
    """A, B, C의 행/열 개수가 모두 같은지 확인한다."""
    for name, m in (("B", b), ("C", c)):
        if m.num_rows != a.num_rows or m.num_cols != a.num_cols:
            raise DimensionMismatchError(
                f"행렬 {name}의 크기 {m.num_rows}x{m.num_cols}가 "
                f"A의 크기 {a.num_rows}x{a.num_cols}와 다릅니다"
            )


class R1CS:
    """일반 R1CS.

    속성:
        a, b, c: n_constraints × n_variables 행렬
        n_instance: 공개 입력 개수 (상수 1 제외)
    """

    __slots__ = ("a", "b", "c", "n_instance")

    def __init__(self, a, b, c, n_instance=0):
        a, b, c = _as_matrix(a), _as_matrix(b), _as_matrix(c)
        check_same_shape(a, b, c)
        if n_instance < 0 or 1 + n_instance > a.num_cols:
            raise DimensionMismatchError(
                f"공개 입력 개수 {n_instance}가 열 개수 {a.num_cols}와 맞지 않습니다"
            )
        self.a = a
        self.b = b
        self.c = c
        self.n_instance = n_instance

    @property
    def n_constraints(self):
        return self.a.num_rows

    @property
    def n_variables(self):
        """z의 길이 (상수 1 포함)."""
        return self.a.num_cols

    @property
    def n_witness(self):
        return self.a.num_cols - 1 - self.n_instance

    def build_z(self, public_inputs, witness):
        """z = (1, public_inputs..., witness...) 를 만든다."""
        if len(public_inputs) != self.n_instance or len(witness) != self.n_witness:
            raise DimensionMismatchError(
                f"공개 입력 {len(public_inputs)}개, 위트니스 {len(witness)}개는 "
                f"({self.n_instance}, {self.n_witness})와 맞지 않습니다"
            )
        return Vector([1] + list(public_inputs) + list(witness))

    def is_satisfied(self, z):
        """(A·z) ∘ (B·z) == C·z 인지 확인한다."""
        if not isinstance(z, Vector):
            z = Vector(z)
        az = self.a.mul_vector(z)
        bz = self.b.mul_vector(z)
        cz = self.c.mul_vector(z)
        return az.hadamard(bz) == cz
