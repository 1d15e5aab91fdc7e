"""
SNARK 증명 엔진 — 생성과 검증
==============================

PolynomialForm 과 witness 입력으로 증명을 만들고 검증한다.

**증명 생성**:
  1. 챌린지 ζ = H(x1, ..., xn)
  2. 모든 QAP 함수를 ζ 에서 평가 (제약 순서 유지)
  3. 바인딩 해시 = SHA-256(평가값 리스트의 JSON)
  4. Proof{results, binding_hash, previous_proof, challenge}

**증명 검증**:
  1. ζ' = H(inputs) 를 다시 계산하여 proof.challenge 와 비교
  2. 각 위치 i 에서 f_i(ζ') 를 다시 계산하고 proof.results[i] 와 비교
     (두 값을 각각 해싱한 뒤 해시를 비교한다. 직접 비교와 보안상 차이는 없다)
  3. previous_proof 체인의 모든 링크를 **같은 inputs** 로 검증
  4. 결과 = 모든 검사의 AND

**재귀 증명 (recursive composition)**:
  previous_proof 는 "같은 명제를 다시 확인"하는 체인만 표현한다.
  서로 다른 명제를 잇는 체인은 지원하지 않는다. 체인은 유한하고
  순환이 없어야 한다 (호출자 책임, 내부에서 검사하지 않음).

사용 예시:
    >>> engine = ProofEngine(PolynomialForm(cs))
    >>> p0 = engine.generate_proof([1, 2, 3])
    >>> p1 = engine.generate_proof([1, 2, 3], previous_proof=p0)
    >>> engine.verify_proof(p1, [1, 2, 3])  # True
"""

import hashlib
import json
import logging
import secrets
from collections import namedtuple

from zkp.snark.errors import (
    EmptyPolynomialForm,
    InvalidEvaluationResult,
    InvalidInput,
    ProofUnavailable,
    ProviderFailure,
    ZKProofError,
)
from zkp.snark.hashing import HashProvider

logger = logging.getLogger(__name__)


class Proof(namedtuple("Proof", ["results", "binding_hash", "previous_proof", "challenge"])):
    """SNARK 증명 (생성 후 불변).

    속성:
        results: 제약별 평가값 튜플 (FR)
        binding_hash: results 에 대한 SHA-256 hex 다이제스트
        previous_proof: 이전 Proof 또는 None
        challenge: 평가에 사용한 챌린지 ζ (FR)
    """

    __slots__ = ()

    def chain(self):
        """self 부터 previous_proof 를 따라가며 모든 링크를 순서대로 yield."""
        link = self
        while link is not None:
            yield link
            link = getattr(link, "previous_proof", None)

    @property
    def depth(self):
        return sum(1 for _ in self.chain())


def validate_inputs(field, inputs):
    """witness 입력을 검사하고 필드 원소 리스트로 변환한다.

    Raises:
        InvalidInput: 시퀀스가 아니거나, 비었거나, 유한한 정수값이 아닌 원소가 있을 때
    """
    if isinstance(inputs, (str, bytes)) or not isinstance(inputs, (list, tuple)):
        raise InvalidInput("Invalid inputs. Must be a list of numbers.")
    if len(inputs) == 0:
        raise InvalidInput("Invalid inputs. At least one witness is required.")
    return [field.element(value) for value in inputs]


def serialize_results(results):
    """평가값 리스트 → 바인딩 해시 입력 JSON 문자열."""
    return json.dumps([str(int(r)) for r in results])


class ProofEngine:
    """QAP 위에서 동작하는 증명 생성/검증기.

    속성:
        qap: PolynomialForm
        hasher: HashProvider
        secret, commitment: 엔진 인스턴스의 디버그 식별자 (검증에 사용되지 않음)
    """

    def __init__(self, qap, hasher=None, debug=False):
        self.qap = qap
        self.field = qap.field
        self.hasher = hasher if hasher is not None else HashProvider(self.field)
        self.debug = debug

        self.secret = secrets.token_hex(32)
        self.commitment = hashlib.sha256(self.secret.encode()).hexdigest()
        if self.debug:
            logger.info("SNARK commitment created: %s", self.commitment)

    def _polynomials(self):
        polynomials = getattr(self.qap, "polynomials", None)
        if not polynomials:
            raise EmptyPolynomialForm("Invalid QAP. Polynomials are missing.")
        return polynomials

    def generate_proof(self, inputs, previous_proof=None):
        """witness 입력에 대한 증명을 생성한다.

        Args:
            inputs: 비어있지 않은 숫자 리스트
            previous_proof: 재귀 체인의 이전 Proof (선택)

        Returns:
            Proof, 또는 provider 실패 시 ProofUnavailable

        Raises:
            InvalidInput, EmptyPolynomialForm, InvalidEvaluationResult
        """
        witnesses = validate_inputs(self.field, inputs)
        polynomials = self._polynomials()
        logger.debug("Generating proof for witnesses: %s", [int(w) for w in witnesses])

        try:
            challenge = self.hasher.hash(witnesses)
            results = []
            for index, f in enumerate(polynomials):
                result = f(challenge)
                if not self.field.is_element(result):
                    raise InvalidEvaluationResult(
                        f"Polynomial {index + 1} returned an invalid value: {result!r}")
                if self.debug:
                    logger.info("f_%d(H(x1..xn)) = %s", index + 1, int(result))
                results.append(result)
            binding_hash = self.hasher.digest(serialize_results(results))
        except ProviderFailure as exc:
            logger.error("Proof generation failed: %s", exc)
            return ProofUnavailable(str(exc))

        proof = Proof(tuple(results), binding_hash, previous_proof, challenge)
        logger.info("Proof generated: %d evaluation(s), depth %d", len(results), proof.depth)
        return proof

    def _value_digest(self, value):
        return self.hasher.digest(str(int(value)))

    def _verify_link(self, proof, expected_challenge, polynomials):
        results = getattr(proof, "results", None)
        if not isinstance(results, (list, tuple)):
            logger.warning("Invalid proof format: results must be a sequence")
            return False
        if len(results) != len(polynomials):
            logger.warning("Proof has %d result(s), expected %d", len(results), len(polynomials))
            return False

        try:
            if int(getattr(proof, "challenge", None)) != int(expected_challenge):
                logger.warning("Hash mismatch: proof does not correspond to input witnesses")
                return False
            for index, f in enumerate(polynomials):
                expected = f(expected_challenge)
                if self._value_digest(expected) != self._value_digest(results[index]):
                    logger.warning("Evaluation mismatch at constraint %d", index + 1)
                    return False
        except (TypeError, ValueError, ZKProofError) as exc:
            logger.warning("Invalid proof values: %s", exc)
            return False
        return True

    def verify_proof(self, proof, inputs):
        """증명을 검증한다. 실패는 예외가 아니라 False 로 보고된다."""
        try:
            witnesses = validate_inputs(self.field, inputs)
            polynomials = self._polynomials()
            expected_challenge = self.hasher.hash(witnesses)
        except (InvalidInput, EmptyPolynomialForm, ProviderFailure) as exc:
            logger.warning("Proof verification failed: %s", exc)
            return False

        if proof is None:
            return False

        link = proof
        depth = 0
        while link is not None:
            if depth > 0:
                logger.debug("Verifying recursive proof (depth %d)", depth)
            if not self._verify_link(link, expected_challenge, polynomials):
                if depth > 0:
                    logger.warning("Recursive proof at depth %d is invalid", depth)
                return False
            link = getattr(link, "previous_proof", None)
            depth += 1

        logger.info("Proof is valid (%d link(s))", depth)
        return True
