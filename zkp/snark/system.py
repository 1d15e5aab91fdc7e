"""
ZK 증명 시스템 (Facade)
========================

R1CS → QAP → SNARK 파이프라인을 "H(x1, ..., xn) = y 를 증명/검증"하는
한 가지 사용 사례로 묶는다.

  ┌─────────────────────────────────────────────────────┐
  │  setup_constraints(n)                               │
  │    변수 x1..xn, y 생성 + 해시 제약 H(x1..xn) = y     │
  ├─────────────────────────────────────────────────────┤
  │  generate_proof(inputs, secret?, previous_proof?)   │
  │    output = H(inputs)                               │
  │    commitment = H(inputs ++ [secret])  (secret 있을 때) │
  │    QAP → ProofEngine.generate_proof                 │
  │    → ProofBundle{proof, output, commitment}         │
  ├─────────────────────────────────────────────────────┤
  │  verify_proof(bundle, inputs, secret?)              │
  │    output / commitment 재계산 비교                   │
  │    → ProofEngine.verify_proof (재귀 체인 포함)       │
  └─────────────────────────────────────────────────────┘

사용 예시:
    >>> zk = ZKProofSystem()
    >>> bundle = zk.generate_proof([1, 2, 3], secret=42)
    >>> zk.verify_proof(bundle, [1, 2, 3], secret=42)   # True
    >>> zk.verify_proof(bundle, [1, 2, 4], secret=42)   # False
"""

import logging
from collections import namedtuple

from zkp.snark.engine import Proof, ProofEngine, validate_inputs
from zkp.snark.errors import (
    InvalidInput,
    InvalidWitnessCount,
    ProofUnavailable,
    ProviderFailure,
    ZKProofError,
)
from zkp.snark.field import FieldProvider
from zkp.snark.hashing import HashProvider
from zkp.snark.qap import PolynomialForm
from zkp.snark.r1cs import ConstraintSystem

logger = logging.getLogger(__name__)


class ProofBundle(namedtuple("ProofBundle", ["proof", "output", "commitment"])):
    """facade 수준의 증명 묶음: {proof, output, commitment}."""

    __slots__ = ()

    def __new__(cls, proof, output, commitment=None):
        return super().__new__(cls, proof, output, commitment)


class ZKProofSystem:
    """다중 입력 해시 명제에 대한 증명 시스템.

    속성:
        field: FieldProvider
        hasher: HashProvider
        r1cs: ConstraintSystem
        constraints_set: 제약이 이미 설정되었는지 여부
    """

    def __init__(self, field=None, hasher=None, debug=False):
        self.field = field if field is not None else FieldProvider()
        self.hasher = hasher if hasher is not None else HashProvider(self.field)
        self.debug = debug
        self.r1cs = ConstraintSystem(self.field, self.hasher)
        self.constraints_set = False

    def setup_constraints(self, witness_count):
        """witness_count 개의 입력 변수와 출력 변수 y, 해시 제약 하나를 만든다.

        Raises:
            InvalidWitnessCount: witness_count 가 양의 정수가 아닐 때
        """
        if isinstance(witness_count, bool) or not isinstance(witness_count, int) or witness_count < 1:
            raise InvalidWitnessCount(f"Witness count must be a positive integer: {witness_count!r}")

        logger.info("Setting up constraints for %d witness(es)", witness_count)
        witness_vars = [self.r1cs.add_variable(f"x{i}") for i in range(1, witness_count + 1)]
        y = self.r1cs.add_variable("y")
        self.r1cs.add_hash_constraint(witness_vars, y)

        self.constraints_set = True
        logger.info("R1CS constraints set for H(%s) = %s", ", ".join(witness_vars), y)

    def _ensure_constraints(self, witness_count):
        if not self.constraints_set:
            self.setup_constraints(witness_count)

    def _commitment(self, witnesses, secret):
        return self.hasher.hash(witnesses + [self.field.element(secret)])

    def generate_proof(self, inputs, secret=None, previous_proof=None):
        """입력에 대한 증명 묶음을 생성한다.

        Args:
            inputs: 비어있지 않은 숫자 리스트
            secret: 커밋먼트에 묶을 비밀 값 (선택)
            previous_proof: 재귀 체인의 이전 Proof 또는 ProofBundle (선택)

        Returns:
            ProofBundle, 또는 provider 실패 시 ProofUnavailable

        Raises:
            InvalidInput: inputs 또는 secret 이 잘못되었을 때
        """
        witnesses = validate_inputs(self.field, inputs)
        if secret is not None:
            self.field.element(secret)
        if isinstance(previous_proof, ProofBundle):
            previous_proof = previous_proof.proof
        if previous_proof is not None and not isinstance(previous_proof, Proof):
            raise InvalidInput(f"previous_proof must be a Proof, got {type(previous_proof).__name__}")

        logger.debug("Received witness values: %s", [int(w) for w in witnesses])
        try:
            self._ensure_constraints(len(witnesses))
            output = self.hasher.hash(witnesses)
            commitment = None
            if secret is not None:
                commitment = self._commitment(witnesses, secret)

            qap = PolynomialForm(self.r1cs, debug=self.debug)
            engine = ProofEngine(qap, self.hasher, debug=self.debug)
            proof = engine.generate_proof(witnesses, previous_proof)
        except ProviderFailure as exc:
            logger.error("Failed to generate proof: %s", exc)
            return ProofUnavailable(str(exc))

        if not proof:
            return proof
        logger.info("Proof generated: output = %s", int(output))
        return ProofBundle(proof, output, commitment)

    def verify_proof(self, bundle, inputs, secret=None):
        """증명 묶음을 검증한다. 모든 불일치는 False 로 보고된다."""
        proof = getattr(bundle, "proof", None)
        output = getattr(bundle, "output", None)
        commitment = getattr(bundle, "commitment", None)
        if proof is None or output is None:
            logger.warning("Invalid proof format")
            return False

        try:
            witnesses = validate_inputs(self.field, inputs)
            expected_output = self.hasher.hash(witnesses)
            if int(expected_output) != int(output):
                logger.warning("Hash mismatch: computed %s, expected %s", int(expected_output), output)
                return False

            if commitment is not None and secret is not None:
                expected_commitment = self._commitment(witnesses, secret)
                if int(expected_commitment) != int(commitment):
                    logger.warning("Commitment mismatch")
                    return False

            self._ensure_constraints(len(witnesses))
            qap = PolynomialForm(self.r1cs, debug=self.debug)
            engine = ProofEngine(qap, self.hasher, debug=self.debug)
            is_valid = engine.verify_proof(proof, witnesses)
        except (ZKProofError, TypeError, ValueError) as exc:
            logger.warning("Proof verification failed: %s", exc)
            return False

        logger.info("Proof is %s", "VALID" if is_valid else "INVALID")
        return is_valid
