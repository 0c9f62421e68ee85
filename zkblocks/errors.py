"""
오류 분류 (Error taxonomy)
==========================

KZG 커밋먼트와 폴딩 누산기에서 발생하는 입력 오류들.

모든 예외는 ``ValueError``의 하위 클래스이다. 모든 연산이 순수 함수이므로
같은 입력으로 재시도해도 같은 오류가 난다 (재시도 없음).

검증 실패(페어링 검사 False)는 예외가 아니라 정상적인 결과값이다.
"""


class ZKBlocksError(ValueError):
    """이 패키지의 모든 입력 오류의 기반 클래스."""


class DimensionMismatchError(ZKBlocksError):
    """벡터/행렬 크기 계약 위반 (전제조건 실패)."""


class DegreeExceededError(ZKBlocksError):
    """다항식 차수가 CRS 최대 차수를 초과."""


class InconsistentEvaluationError(ZKBlocksError):
    """주장한 평가값 y가 p(z)와 다름 (나눗셈 나머지가 0이 아님)."""


class EmptyQuerySetError(ZKBlocksError):
    """일괄 열기(multi-open)의 평가 점 집합이 비어 있음."""


class DuplicateQueryPointError(ZKBlocksError):
    """평가 점 집합에 중복된 점이 있음."""


class FieldInversionOfZeroError(ZKBlocksError, ZeroDivisionError):
    """유한체에서 0의 역원을 구하려 함."""
