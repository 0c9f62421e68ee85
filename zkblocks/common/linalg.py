"""
선형대수: FR 위의 벡터와 행렬
=============================

R1CS와 Relaxed-R1CS에서 쓰는 행렬-벡터 연산.
연산자 오버로딩 대신 이름 있는 메서드(add, sub, hadamard, scalar_mul, dot)를 쓴다.

크기 계약을 어기면 항상 DimensionMismatchError가 발생한다.
모든 연산은 새 객체를 돌려주며 입력을 수정하지 않는다.

사용 예시:
    >>> A = Matrix.from_rows([[1, 0], [0, 2]])
    >>> z = Vector([3, 4])
    >>> A.mul_vector(z)                 # Vector([3, 8])
    >>> z.hadamard(Vector([2, 2]))      # Vector([6, 8])
"""

from zkblocks.common.field import FR
from zkblocks.errors import DimensionMismatchError


def _to_fr(value):
    return value if isinstance(value, FR) else FR(value)


class Vector:
    """FR 원소의 불변(immutable) 벡터."""

    __slots__ = ("elements",)

    def __init__(self, elements):
        object.__setattr__(self, "elements", tuple(_to_fr(e) for e in elements))

    def __setattr__(self, name, value):
        raise AttributeError("Vector는 생성 후 수정할 수 없습니다")

    @classmethod
    def zeros(cls, size):
        """길이 size의 영벡터."""
        return cls([FR(0)] * size)

    @property
    def size(self):
        return len(self.elements)

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def __getitem__(self, i):
        return self.elements[i]

    def __eq__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self.elements == other.elements

    def __repr__(self):
        return "Vector([" + ", ".join(str(int(e)) for e in self.elements) + "])"

    def _check_size(self, other, op):
        if self.size != other.size:
            raise DimensionMismatchError(
                f"{op}: 벡터 길이가 다릅니다 ({self.size} != {other.size})"
            )

    def add(self, other):
        """원소별 덧셈."""
        self._check_size(other, "add")
        return Vector([a + b for a, b in zip(self.elements, other.elements)])

    def sub(self, other):
        """원소별 뺄셈."""
        self._check_size(other, "sub")
        return Vector([a - b for a, b in zip(self.elements, other.elements)])

    def hadamard(self, other):
        """Hadamard 곱 (원소별 곱셈) a ∘ b."""
        self._check_size(other, "hadamard")
        return Vector([a * b for a, b in zip(self.elements, other.elements)])

    def scalar_mul(self, scalar):
        """스칼라곱 s · v."""
        scalar = _to_fr(scalar)
        return Vector([e * scalar for e in self.elements])

    def dot(self, other):
        """내적 Σ aᵢ·bᵢ."""
        self._check_size(other, "dot")
        result = FR(0)
        for a, b in zip(self.elements, other.elements):
            result = result + a * b
        return result

    def is_zero(self):
        return all(e == FR(0) for e in self.elements)


class Matrix:
    """FR 원소의 직사각 행렬 (행 우선, 불변).

    속성:
        rows: Vector 튜플
        num_rows, num_cols: 행렬 크기
    """

    __slots__ = ("rows", "num_cols")

    def __init__(self, rows, num_cols=None):
        rows = tuple(r if isinstance(r, Vector) else Vector(r) for r in rows)
        if num_cols is None:
            if not rows:
                raise DimensionMismatchError("빈 행렬은 열 개수를 지정해야 합니다")
            num_cols = rows[0].size
        for i, row in enumerate(rows):
            if row.size != num_cols:
                raise DimensionMismatchError(
                    f"{i}번째 행의 길이 {row.size}가 열 개수 {num_cols}와 다릅니다"
                )
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "num_cols", num_cols)

    def __setattr__(self, name, value):
        raise AttributeError("Matrix는 생성 후 수정할 수 없습니다")

    @classmethod
    def from_rows(cls, rows):
        """정수/FR 2차원 리스트에서 행렬 생성."""
        return cls([Vector(r) for r in rows])

    @property
    def num_rows(self):
        return len(self.rows)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.num_cols == other.num_cols and self.rows == other.rows

    def __repr__(self):
        return f"Matrix({self.num_rows}x{self.num_cols})"

    def mul_vector(self, vec):
        """행렬-벡터 곱 M·z (길이 num_rows 벡터).

        비용: O(num_rows × num_cols)
        """
        if vec.size != self.num_cols:
            raise DimensionMismatchError(
                f"행렬 열 개수 {self.num_cols}와 벡터 길이 {vec.size}가 다릅니다"
            )
        return Vector([row.dot(vec) for row in self.rows])

    def column(self, j):
        """j번째 열 벡터."""
        return Vector([row[j] for row in self.rows])

    def to_lists(self):
        return [[int(e) for e in row] for row in self.rows]
