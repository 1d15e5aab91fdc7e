"""
SNARK 데이터 직렬화/역직렬화 헬퍼
==================================

TinyDB/JSON 에 저장 가능한 형태로 SNARK 객체를 변환한다.
FR, 선형결합, ConstraintSystem, Proof (재귀 체인 포함), ProofBundle 등.
정수는 모두 10진수 문자열로 저장한다.
"""

from zkp.snark.engine import Proof
from zkp.snark.errors import InvalidInput
from zkp.snark.r1cs import ONE, ConstraintSystem
from zkp.snark.system import ProofBundle


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s, field):
    """str(int) → FR

    문자열만 10진수로 파싱한다. 그 외 값은 field.element 의 검사를 그대로 거친다
    (bool, 정수가 아닌 float 등은 InvalidInput).
    """
    if isinstance(s, str):
        try:
            s = int(s)
        except ValueError as exc:
            raise InvalidInput(f"Not a decimal field value: {s!r}") from exc
    return field.element(s)


def serialize_fr_list(vals):
    return [serialize_fr(v) for v in vals]


def deserialize_fr_list(data, field):
    return [deserialize_fr(s, field) for s in data]


# ─── 선형결합 ───

def serialize_combination(combination):
    """{name: FR} → {name: str}"""
    return {name: serialize_fr(coeff) for name, coeff in combination.items()}


def deserialize_combination(data, field):
    if not isinstance(data, dict):
        return data  # add_constraint 가 MalformedConstraint 로 거부
    return {name: deserialize_fr(coeff, field) for name, coeff in data.items()}


# ─── ConstraintSystem ───

def serialize_constraint_system(cs):
    """ConstraintSystem → dict"""
    return {
        "variables": {name: serialize_fr(v) for name, v in cs.variables.items()},
        "constraints": [
            {
                "A": serialize_combination(c.a),
                "B": serialize_combination(c.b),
                "C": serialize_combination(c.c),
            }
            for c in cs.constraints
        ],
    }


def deserialize_constraint_system(data, field, hasher=None):
    """dict → ConstraintSystem"""
    cs = ConstraintSystem(field, hasher)
    for name, value in data.get("variables", {}).items():
        if name == ONE:
            continue
        cs.add_variable(name, deserialize_fr(value, field))
    for c in data.get("constraints", []):
        cs.add_constraint(
            deserialize_combination(c.get("A"), field),
            deserialize_combination(c.get("B"), field),
            deserialize_combination(c.get("C"), field),
        )
    return cs


# ─── Proof ───

def serialize_proof(proof):
    """Proof → dict (previous_proof 는 중첩 dict)"""
    if proof is None:
        return None
    return {
        "results": serialize_fr_list(proof.results),
        "binding_hash": proof.binding_hash,
        "previous_proof": serialize_proof(proof.previous_proof),
        "challenge": serialize_fr(proof.challenge),
    }


def deserialize_proof(data, field):
    """dict → Proof"""
    if data is None:
        return None
    try:
        return Proof(
            tuple(deserialize_fr_list(data["results"], field)),
            data["binding_hash"],
            deserialize_proof(data.get("previous_proof"), field),
            deserialize_fr(data["challenge"], field),
        )
    except (KeyError, TypeError) as exc:
        raise InvalidInput(f"Malformed proof: {exc}") from exc


# ─── ProofBundle ───

def serialize_bundle(bundle):
    """ProofBundle → dict"""
    return {
        "proof": serialize_proof(bundle.proof),
        "output": serialize_fr(bundle.output),
        "commitment": serialize_fr(bundle.commitment) if bundle.commitment is not None else None,
    }


def deserialize_bundle(data, field):
    """dict → ProofBundle"""
    if not isinstance(data, dict):
        raise InvalidInput("Proof bundle must be an object")
    commitment = data.get("commitment")
    try:
        return ProofBundle(
            deserialize_proof(data["proof"], field),
            deserialize_fr(data["output"], field),
            deserialize_fr(commitment, field) if commitment is not None else None,
        )
    except KeyError as exc:
        raise InvalidInput(f"Malformed proof bundle: missing {exc}") from exc


# ─── 표시용 ───

def fr_short(val):
    """FR → 축약 문자열 (UI 표시용)"""
    if val is None:
        return "None"
    s = str(int(val))
    if len(s) <= 10:
        return s
    return s[:4] + "..." + s[-4:]
