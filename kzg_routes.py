"""
KZG Flask Blueprint
===================

CRS 설정 → 커밋 → 열기 → 검증 → 일괄 열기 흐름을 JSON으로 노출한다.
상태(CRS, 다항식, 커밋먼트, 증명)는 TinyDB에 "kzg.*" 키로 저장된다.
"""

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from zkblocks.common.field import ec_mul
from zkblocks.errors import ZKBlocksError
from zkblocks.kzg.crs import CRS
from zkblocks.kzg.kzg import (
    commit,
    multi_open,
    open as kzg_open,
    verify,
    verify_from_encrypted_y,
    verify_multi_open,
    verify_no_g2_ops,
    verify_no_g2_ops_evm_opcode,
)

from serializers import (
    serialize_fr, deserialize_fr,
    serialize_g1, deserialize_g1,
    serialize_g2, deserialize_g2,
    serialize_poly, deserialize_poly,
    serialize_fr_list, deserialize_fr_list,
    serialize_crs, deserialize_crs,
    g1_short,
)

kzg_bp = Blueprint('kzg', __name__, url_prefix='/kzg')

DATA = Query()

# DB는 app.py에서 주입
DB = None

VERIFIERS = {
    "pairing": verify,
    "no_g2_ops": verify_no_g2_ops,
    "evm": verify_no_g2_ops_evm_opcode,
}


def init_kzg_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


def _require(key, what):
    data = db_get(key)
    if data is None:
        raise ZKBlocksError(f"{what}이(가) 아직 없습니다")
    return data


@kzg_bp.errorhandler(ZKBlocksError)
def handle_zkblocks_error(err):
    return jsonify({"error": type(err).__name__, "message": str(err)}), 400


# ──────────────────────────────────────────────────────────────
# Setup
# ──────────────────────────────────────────────────────────────

@kzg_bp.route("/setup", methods=["POST"])
def kzg_setup():
    """CRS를 생성하고 이전 상태를 모두 지운다."""
    body = request.get_json(silent=True) or {}
    degree = int(body.get("degree", current_app.config["DEFAULT_DEGREE"]))
    seed = body.get("seed", current_app.config["SEED"])
    if degree < 0:
        raise ZKBlocksError(f"CRS 차수는 0 이상이어야 합니다: {degree}")

    crs = CRS.generate(degree, seed=seed)
    db_remove_prefix("kzg.")
    db_set("kzg.crs", serialize_crs(crs))
    current_app.logger.info("KZG CRS 생성: degree=%d", degree)

    return jsonify({
        "degree": crs.degree,
        "vk": serialize_g2(crs.vk),
        "crs1": [g1_short(p) for p in crs.crs1],
    })


# ──────────────────────────────────────────────────────────────
# Commit / Open / Verify
# ──────────────────────────────────────────────────────────────

@kzg_bp.route("/commit", methods=["POST"])
def kzg_commit():
    """{"coeffs": [...]} 다항식을 커밋한다 (낮은 차수부터)."""
    crs = deserialize_crs(_require("kzg.crs", "CRS"))
    body = request.get_json(silent=True) or {}
    poly = deserialize_poly([str(c) for c in body.get("coeffs", [])] or ["0"])

    commitment = commit(crs, poly)
    db_set("kzg.poly", serialize_poly(poly))
    db_set("kzg.commitment", serialize_g1(commitment))

    return jsonify({
        "degree": poly.degree,
        "commitment": serialize_g1(commitment),
    })


@kzg_bp.route("/open", methods=["POST"])
def kzg_open_route():
    """{"z": ..., "y": 생략 가능} 에서 커밋한 다항식을 연다."""
    crs = deserialize_crs(_require("kzg.crs", "CRS"))
    poly = deserialize_poly(_require("kzg.poly", "커밋한 다항식"))
    body = request.get_json(silent=True) or {}
    z = deserialize_fr(str(body.get("z", 0)))
    y = body.get("y")
    if y is not None:
        y = deserialize_fr(str(y))

    y, proof = kzg_open(crs, poly, z, y)
    db_set("kzg.opening", {
        "z": serialize_fr(z),
        "y": serialize_fr(y),
        "proof": serialize_g1(proof),
    })

    return jsonify({"z": serialize_fr(z), "y": serialize_fr(y), "proof": serialize_g1(proof)})


@kzg_bp.route("/verify", methods=["POST"])
def kzg_verify():
    """저장된 열기를 검증한다.

    요청 필드 (모두 생략 가능):
        variant: "pairing" | "no_g2_ops" | "evm" | "encrypted_y"
        y, z: 저장된 값 대신 사용할 값 (변조 실험용)
    """
    crs = deserialize_crs(_require("kzg.crs", "CRS"))
    commitment = deserialize_g1(_require("kzg.commitment", "커밋먼트"))
    opening = _require("kzg.opening", "열기 증명")
    body = request.get_json(silent=True) or {}

    variant = body.get("variant", "pairing")
    y = deserialize_fr(str(body.get("y", opening["y"])))
    z = deserialize_fr(str(body.get("z", opening["z"])))
    proof = deserialize_g1(opening["proof"])

    if variant == "encrypted_y":
        result = verify_from_encrypted_y(crs, ec_mul(crs.g1, y), z, commitment, proof)
    elif variant in VERIFIERS:
        result = VERIFIERS[variant](crs, y, z, commitment, proof)
    else:
        raise ZKBlocksError(f"알 수 없는 검증 방식: {variant}")

    return jsonify({"variant": variant, "result": result})


# ──────────────────────────────────────────────────────────────
# Multi-open
# ──────────────────────────────────────────────────────────────

@kzg_bp.route("/multi-open", methods=["POST"])
def kzg_multi_open():
    """{"points": [...]} 에서 일괄 열기 후 바로 검증한다."""
    crs = deserialize_crs(_require("kzg.crs", "CRS"))
    poly = deserialize_poly(_require("kzg.poly", "커밋한 다항식"))
    commitment = deserialize_g1(_require("kzg.commitment", "커밋먼트"))
    body = request.get_json(silent=True) or {}
    points = deserialize_fr_list([str(p) for p in body.get("points", [])])

    proof, lagrange, vanishing = multi_open(crs, poly, points)
    values = [poly.evaluate(p) for p in points]
    result = verify_multi_open(crs, commitment, points, values, lagrange, vanishing, proof)

    return jsonify({
        "points": serialize_fr_list(points),
        "values": serialize_fr_list(values),
        "lagrange": serialize_poly(lagrange),
        "vanishing": serialize_poly(vanishing),
        "proof": serialize_g2(proof),
        "result": result,
    })


# ──────────────────────────────────────────────────────────────
# State
# ──────────────────────────────────────────────────────────────

@kzg_bp.route("/state")
def kzg_state():
    crs = db_get("kzg.crs")
    return jsonify({
        "degree": len(crs["crs1"]) - 1 if crs else None,
        "poly": db_get("kzg.poly"),
        "commitment": db_get("kzg.commitment"),
        "opening": db_get("kzg.opening"),
    })


@kzg_bp.route("/clear", methods=["POST"])
def kzg_clear():
    db_remove_prefix("kzg.")
    return jsonify({"cleared": True})
