"""
SNARK 파이프라인 오류 종류
==========================

두 가지 실패를 구분한다:

  - **구조적 오류 (예외)**: 잘못된 제약, 빈 제약 집합, 잘못된 witness 개수 등
    호출자의 프로그래밍 오류. 즉시 raise 되어 해당 연산을 중단한다.
  - **검증 실패 (값)**: 해시 불일치, 커밋먼트 불일치, 평가값 불일치 등.
    예외가 아니라 ``False`` 로 보고된다.

Provider(해시/필드) 오류가 증명 생성 중에 발생하면 ``ProofUnavailable``
결과 값으로 변환된다.
"""


class ZKProofError(Exception):
    """모든 파이프라인 오류의 기반 클래스."""


class InvalidInput(ZKProofError, ValueError):
    """witness/인자 시퀀스가 비었거나 잘못된 값을 포함한다."""


class InvalidWitnessCount(InvalidInput):
    pass


class UndefinedVariable(ZKProofError, LookupError):
    """바인딩되지 않은 변수 이름을 참조했다."""

    def __init__(self, name, message=None):
        self.name = name
        super().__init__(message or f"Variable {name!r} is not defined")


class UndefinedVariableInEvaluation(UndefinedVariable):
    pass


class MalformedConstraint(ZKProofError, TypeError):
    """A, B, C 중 하나가 선형결합(mapping)이 아니다."""


class EmptyConstraintSet(ZKProofError, ValueError):
    pass


class EmptyPolynomialForm(EmptyConstraintSet):
    pass


class InvalidEvaluationResult(ZKProofError, ArithmeticError):
    pass


class ProviderFailure(ZKProofError, RuntimeError):
    """필드/곡선 또는 해시 provider 가 실패했다."""


class ArtifactError(ZKProofError, OSError):
    """setup/proof 파일이 없거나 손상되었다."""


class ProofUnavailable:
    """증명 생성 실패를 나타내는 결과 값.

    ``bool(ProofUnavailable(...))`` 는 ``False`` 이므로 호출자는
    ``if not result:`` 로 "증명 없음"을 판별할 수 있다. 생성에는 성공했지만
    검증에서 거부되는 증명과 구분된다.
    """

    def __init__(self, reason):
        self.reason = reason

    def __bool__(self):
        return False

    def __repr__(self):
        return f"ProofUnavailable({self.reason!r})"
