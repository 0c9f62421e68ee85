"""
Folding Flask Blueprint
=======================

x³ + x + 5 = out 예제 R1CS 위에서 Relaxed-R1CS 누산을 JSON으로 노출한다.

    /folding/load-example  누산기를 lift(R1CS), z(x)로 초기화
    /folding/fold          새 위트니스를 누산기에 접는다
    /folding/check         누산기가 만족되는지 확인
    /folding/qap           QAP 나눗셈 검사

상태는 TinyDB에 "folding.*" 키로 저장된다.
"""

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from zkblocks.common.field import FR
from zkblocks.common.transcript import Transcript
from zkblocks.errors import ZKBlocksError
from zkblocks.folding.example import cubic_r1cs, cubic_z
from zkblocks.folding.qap import QAP
from zkblocks.folding.relaxed_r1cs import compute_t, derive_challenge, fold, is_satisfied, lift

from serializers import (
    serialize_fr, deserialize_fr,
    serialize_fr_list, deserialize_vector,
    serialize_instance, deserialize_instance,
    serialize_poly,
)

folding_bp = Blueprint('folding', __name__, url_prefix='/folding')

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_folding_bp(db):
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


def _load_accumulator():
    instance = db_get("folding.acc.instance")
    z = db_get("folding.acc.z")
    if instance is None or z is None:
        raise ZKBlocksError("누산기가 없습니다. /folding/load-example을 먼저 호출하세요")
    return deserialize_instance(instance), deserialize_vector(z)


def _witness_from_body(r1cs, body):
    """요청 본문의 "z" (원소 리스트) 또는 "x" (입력값)로 z 벡터를 만든다."""
    if "z" in body:
        return deserialize_vector([str(v) for v in body["z"]])
    return cubic_z(r1cs, int(body.get("x", 3)))


@folding_bp.errorhandler(ZKBlocksError)
def handle_zkblocks_error(err):
    return jsonify({"error": type(err).__name__, "message": str(err)}), 400


# ──────────────────────────────────────────────────────────────
# 누산기
# ──────────────────────────────────────────────────────────────

@folding_bp.route("/load-example", methods=["POST"])
def folding_load_example():
    """누산기를 lift(R1CS)와 {"x": 생략 시 3}의 z로 초기화한다."""
    body = request.get_json(silent=True) or {}
    r1cs = cubic_r1cs()
    z = _witness_from_body(r1cs, body)

    db_remove_prefix("folding.")
    db_set("folding.acc.instance", serialize_instance(lift(r1cs)))
    db_set("folding.acc.z", serialize_fr_list(z))
    db_set("folding.steps", 0)

    return jsonify({
        "n_constraints": r1cs.n_constraints,
        "n_variables": r1cs.n_variables,
        "n_instance": r1cs.n_instance,
        "z": serialize_fr_list(z),
        "r1cs_satisfied": r1cs.is_satisfied(z),
    })


@folding_bp.route("/fold", methods=["POST"])
def folding_fold():
    """누산기에 새 위트니스를 접는다.

    요청 필드 (모두 생략 가능):
        x 또는 z: 새 위트니스
        r: 챌린지. 생략하면 트랜스크립트에서 도출한다.
    """
    body = request.get_json(silent=True) or {}
    acc, acc_z = _load_accumulator()
    r1cs = cubic_r1cs()
    fresh = lift(r1cs)
    z = _witness_from_body(r1cs, body)

    t = compute_t(acc, fresh, acc_z, z)
    if "r" in body:
        r = deserialize_fr(str(body["r"]))
    else:
        r = derive_challenge(Transcript(b"folding"), acc, fresh, t)

    folded, folded_z = fold(acc, fresh, r, acc_z, z)
    steps = (db_get("folding.steps") or 0) + 1
    db_set("folding.acc.instance", serialize_instance(folded))
    db_set("folding.acc.z", serialize_fr_list(folded_z))
    db_set("folding.steps", steps)
    current_app.logger.info("폴딩 %d단계 완료", steps)

    return jsonify({
        "steps": steps,
        "r": serialize_fr(r),
        "t": serialize_fr_list(t),
        "u": serialize_fr(folded.u),
        "e": serialize_fr_list(folded.e),
        "satisfied": is_satisfied(folded, folded_z),
    })


@folding_bp.route("/check", methods=["POST"])
def folding_check():
    acc, acc_z = _load_accumulator()
    return jsonify({
        "steps": db_get("folding.steps"),
        "u": serialize_fr(acc.u),
        "satisfied": is_satisfied(acc, acc_z),
    })


@folding_bp.route("/qap", methods=["POST"])
def folding_qap():
    """{"x" 또는 "z"} 위트니스에 대해 Z_H(x) | A·B - C 를 확인한다."""
    body = request.get_json(silent=True) or {}
    r1cs = cubic_r1cs()
    z = _witness_from_body(r1cs, body)
    qap = QAP.from_r1cs(r1cs)
    quotient, remainder = qap.divide_by_vanishing(z)

    return jsonify({
        "domain_size": len(qap.domain),
        "quotient": serialize_poly(quotient),
        "remainder": serialize_poly(remainder),
        "satisfied": remainder.is_zero(),
    })


@folding_bp.route("/state")
def folding_state():
    return jsonify({
        "steps": db_get("folding.steps"),
        "instance": db_get("folding.acc.instance"),
        "z": db_get("folding.acc.z"),
    })


@folding_bp.route("/clear", methods=["POST"])
def folding_clear():
    db_remove_prefix("folding.")
    return jsonify({"cleared": True})
