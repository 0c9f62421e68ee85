"""
KZG / 폴딩 데이터 직렬화/역직렬화 헬퍼
======================================

TinyDB에 저장하고 JSON으로 돌려줄 수 있는 형태로 객체를 변환한다.
FR, G1, G2, Polynomial, CRS, Matrix, RelaxedR1CSInstance 등.
정수는 JSON 숫자 범위를 넘으므로 모두 10진 문자열로 저장한다.
무한원점(None)은 JSON null이 된다.
"""

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from zkblocks.common.field import FR
from zkblocks.common.linalg import Matrix, Vector
from zkblocks.common.polynomial import Polynomial
from zkblocks.folding.relaxed_r1cs import RelaxedR1CSInstance
from zkblocks.kzg.crs import CRS


# ─── FR ───

def serialize_fr(val):
    """FR → "123" """
    return str(int(val))


def deserialize_fr(s):
    return FR(int(s))


def serialize_fr_list(values):
    """list[FR] / Vector → list[str]"""
    return [serialize_fr(v) for v in values]


def deserialize_fr_list(data):
    return [deserialize_fr(s) for s in data]


def deserialize_vector(data):
    return Vector(deserialize_fr_list(data))


# ─── 곡선 위의 점 ───

def serialize_g1(point):
    """G1 (x, y) → [x, y]"""
    if point is None:
        return None
    return [serialize_fr(c) for c in point]


def deserialize_g1(data):
    if data is None:
        return None
    x, y = data
    return (FQ(int(x)), FQ(int(y)))


def serialize_g2(point):
    """G2 (x, y), 좌표 ∈ FQ2 → [[x0, x1], [y0, y1]]"""
    if point is None:
        return None
    return [[serialize_fr(c) for c in coord.coeffs] for coord in point]


def deserialize_g2(data):
    if data is None:
        return None
    x, y = data
    return (bn128.FQ2([int(c) for c in x]), bn128.FQ2([int(c) for c in y]))


# ─── Polynomial ───

def serialize_poly(poly):
    """Polynomial → 계수 리스트 (낮은 차수부터)"""
    if poly is None:
        return None
    return serialize_fr_list(poly.coeffs)


def deserialize_poly(data):
    if data is None:
        return None
    return Polynomial(deserialize_fr_list(data))


# ─── Matrix ───

def serialize_matrix(matrix):
    """Matrix → {"rows": [[str]], "num_cols": int}"""
    return {
        "rows": [serialize_fr_list(row) for row in matrix.rows],
        "num_cols": matrix.num_cols,
    }


def deserialize_matrix(data):
    """dict → Matrix"""
    return Matrix([deserialize_fr_list(row) for row in data["rows"]],
                  num_cols=data["num_cols"])


# ─── CRS ───

def serialize_crs(crs):
    """CRS → dict (τ는 CRS에 없으므로 저장되지 않는다)"""
    return {
        "g1": serialize_g1(crs.g1),
        "g2": serialize_g2(crs.g2),
        "crs1": [serialize_g1(p) for p in crs.crs1],
        "crs2": [serialize_g2(p) for p in crs.crs2],
        "vk": serialize_g2(crs.vk),
    }


def deserialize_crs(data):
    """dict → CRS"""
    return CRS(
        deserialize_g1(data["g1"]),
        deserialize_g2(data["g2"]),
        [deserialize_g1(p) for p in data["crs1"]],
        [deserialize_g2(p) for p in data["crs2"]],
        deserialize_g2(data["vk"]),
    )


# ─── RelaxedR1CSInstance ───

def serialize_instance(instance):
    """RelaxedR1CSInstance → dict"""
    return {
        "a": serialize_matrix(instance.a),
        "b": serialize_matrix(instance.b),
        "c": serialize_matrix(instance.c),
        "u": serialize_fr(instance.u),
        "e": serialize_fr_list(instance.e),
        "n_instance": instance.n_instance,
    }


def deserialize_instance(data):
    """dict → RelaxedR1CSInstance"""
    return RelaxedR1CSInstance(
        deserialize_matrix(data["a"]),
        deserialize_matrix(data["b"]),
        deserialize_matrix(data["c"]),
        deserialize_fr(data["u"]),
        deserialize_vector(data["e"]),
        n_instance=data["n_instance"],
    )


# ─── 표시용 축약 ───

def fr_short(val, n=10):
    """FR → 앞 n자리만 보이는 문자열"""
    s = str(int(val))
    return s if len(s) <= n else s[:n] + "..."


def g1_short(point, n=10):
    """G1 point → "(x..., y...)" 또는 "O" (무한원점)"""
    if point is None:
        return "O"
    return f"({fr_short(point[0], n)}, {fr_short(point[1], n)})"
