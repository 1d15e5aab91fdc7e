"""
SNARK Flask Blueprint — 해시 명제 증명 엔드포인트
==================================================

R1CS 구성 → 증명 생성 → 증명 검증을 JSON API 로 노출한다.
세션 상태(제약 시스템, 마지막 증명 묶음)는 TinyDB 에 직렬화되어 저장되고
요청마다 다시 구성된다.

  GET  /snark/constraints          현재 제약 시스템
  POST /snark/setup                {"witness_count": n}
  POST /snark/variables            {"name": ..., "value": ...}
  POST /snark/variables/update     {"name": ..., "value": ...}
  POST /snark/constraints          {"a": {...}, "b": {...}, "c": {...}}
  POST /snark/proof/generate       {"inputs": [...], "secret": ..., "chain": bool}
  POST /snark/proof/verify         {"inputs": [...], "secret": ..., "bundle": {...}}
  POST /snark/reset
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from zkp.snark.errors import InvalidInput, ZKProofError
from zkp.snark.field import FieldProvider
from zkp.snark.hashing import HashProvider
from zkp.snark.system import ZKProofSystem

from snark_serializers import (
    serialize_fr,
    deserialize_fr,
    serialize_constraint_system,
    deserialize_constraint_system,
    serialize_bundle,
    deserialize_bundle,
    fr_short,
)

logger = logging.getLogger(__name__)

snark_bp = Blueprint('snark', __name__, url_prefix='/snark')

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_snark_bp(db):
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


# ─── 시스템 재구성 ───

def get_field():
    return FieldProvider(modulus=current_app.config["FIELD_MODULUS"])


def load_system():
    """DB에 저장된 상태로 ZKProofSystem 을 재구성한다."""
    field = get_field()
    hasher = HashProvider(field, label=current_app.config["HASH_LABEL"])
    system = ZKProofSystem(field, hasher, debug=current_app.config["PROOF_DEBUG"])
    saved = db_get("snark.system")
    if saved:
        system.r1cs = deserialize_constraint_system(saved["r1cs"], field, hasher)
        system.constraints_set = saved["configured"]
    return system


def save_system(system):
    db_set("snark.system", {
        "configured": system.constraints_set,
        "r1cs": serialize_constraint_system(system.r1cs),
    })


def constraint_system_view(system):
    data = serialize_constraint_system(system.r1cs)
    data["configured"] = system.constraints_set
    return data


def error_response(exc, status=400):
    return jsonify({"error": str(exc), "kind": type(exc).__name__}), status


def request_json():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data


@snark_bp.errorhandler(ZKProofError)
def handle_zkp_error(exc):
    return error_response(exc)


# ──────────────────────────────────────────────────────────────
# R1CS
# ──────────────────────────────────────────────────────────────

@snark_bp.route("/constraints")
def constraints_page():
    """현재 제약 시스템을 반환한다."""
    return jsonify(constraint_system_view(load_system()))


@snark_bp.route("/setup", methods=["POST"])
def setup_constraints():
    """H(x1..xn) = y 제약을 설정한다."""
    data = request_json()
    system = load_system()
    system.setup_constraints(data.get("witness_count"))
    save_system(system)
    db_remove_prefix("snark.proof.")
    return jsonify(constraint_system_view(system))


@snark_bp.route("/variables", methods=["POST"])
def add_variable():
    data = request_json()
    system = load_system()
    name = system.r1cs.add_variable(data.get("name"), data.get("value", 0))
    save_system(system)
    return jsonify({"name": name, "value": serialize_fr(system.r1cs.get_variable(name))})


@snark_bp.route("/variables/update", methods=["POST"])
def update_variable():
    data = request_json()
    system = load_system()
    name = data.get("name")
    system.r1cs.update_variable(name, data.get("value"))
    save_system(system)
    return jsonify({"name": name, "value": serialize_fr(system.r1cs.get_variable(name))})


@snark_bp.route("/constraints", methods=["POST"])
def add_constraint():
    """일반 A·B = C 제약을 추가한다."""
    data = request_json()
    field = get_field()
    parts = []
    for key in ("a", "b", "c"):
        part = data.get(key)
        if isinstance(part, dict):
            part = {name: deserialize_fr(coeff, field) for name, coeff in part.items()}
        parts.append(part)
    system = load_system()
    system.r1cs.add_constraint(*parts)
    save_system(system)
    return jsonify(constraint_system_view(system))


# ──────────────────────────────────────────────────────────────
# Proving / Verifying
# ──────────────────────────────────────────────────────────────

@snark_bp.route("/proof/generate", methods=["POST"])
def generate_proof():
    """증명 묶음을 생성하고 저장한다.

    chain=true 이면 마지막으로 저장된 증명을 previous_proof 로 사용한다.
    """
    data = request_json()
    system = load_system()

    previous = None
    if data.get("chain"):
        saved = db_get("snark.proof.bundle")
        if saved is None:
            raise InvalidInput("No previous proof to chain")
        previous = deserialize_bundle(saved, system.field)

    bundle = system.generate_proof(data.get("inputs"), data.get("secret"), previous)
    if not bundle:
        return jsonify({"error": bundle.reason, "kind": "ProofUnavailable"}), 503

    save_system(system)
    serialized = serialize_bundle(bundle)
    db_set("snark.proof.bundle", serialized)
    return jsonify({
        "bundle": serialized,
        "output_short": fr_short(bundle.output),
        "depth": bundle.proof.depth,
    })


@snark_bp.route("/proof/verify", methods=["POST"])
def verify_proof():
    """전달된 (또는 저장된) 증명 묶음을 검증한다."""
    data = request_json()
    system = load_system()

    bundle_data = data.get("bundle") or db_get("snark.proof.bundle")
    if bundle_data is None:
        raise InvalidInput("No proof bundle to verify")
    try:
        bundle = deserialize_bundle(bundle_data, system.field)
    except InvalidInput as exc:
        logger.warning("Rejecting malformed bundle: %s", exc)
        return jsonify({"valid": False})

    valid = system.verify_proof(bundle, data.get("inputs"), data.get("secret"))
    return jsonify({"valid": valid})


@snark_bp.route("/reset", methods=["POST"])
def reset():
    """모든 SNARK 데이터를 클리어한다."""
    db_remove_prefix("snark.")
    return jsonify({"ok": True})
