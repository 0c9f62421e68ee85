"""
공유 유틸리티: 2의 거듭제곱 도메인 크기 맞추기
"""

from zkblocks.common.field import FR, get_root_of_unity, get_roots_of_unity


def next_power_of_2(n):
    """n 이상의 가장 작은 2의 거듭제곱 (n ≤ 1 이면 1).

    예시:
        >>> next_power_of_2(3)  # 4
        >>> next_power_of_2(4)  # 4
    """
    return 1 if n <= 1 else 1 << (n - 1).bit_length()


def pad_to_power_of_2(lst, fill=None):
    """lst 뒤에 fill(기본 FR(0))을 붙여 길이를 2의 거듭제곱으로 만든다."""
    fill = FR(0) if fill is None else fill
    return list(lst) + [fill] * (next_power_of_2(len(lst)) - len(lst))


def get_omega_domain(n):
    """n개 이상의 점을 담는 단위근 도메인 (ω, [1, ω, ..., ω^(size-1)]).

    size = next_power_of_2(n). 남는 점은 R1CS의 0 행에 대응한다.
    """
    size = next_power_of_2(n)
    return get_root_of_unity(size), get_roots_of_unity(size)
