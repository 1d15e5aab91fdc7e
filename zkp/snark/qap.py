"""
QAP 변환 (Polynomial Form)
===========================

R1CS 스냅샷으로부터 제약마다 하나의 단일 변수 평가 함수를 만든다.

**평가 방식**:
  챌린지 x 에서 각 선형결합을 다음과 같이 평가한다:

    eval_A(x) = Σ coeff · (1 if name == "1" else x)

  결과: f_i(x) = eval_A(x) · eval_B(x) - eval_C(x)

**주의 (건전성)**:
  실제 QAP 는 변수마다 별도의 wire 다항식을 제약 인덱스 위에서 보간한다.
  여기서는 상수가 아닌 모든 변수를 같은 챌린지 스칼라 x 로 치환하므로
  f_i(x) 는 일반적으로 0 이 아니다. 증명은 "다항식이 0 이다"가 아니라
  "prover 와 verifier 가 계산한 평가값이 같다"에만 의존한다.
  따라서 악의적인 prover 에 대한 건전성(soundness)은 보장되지 않는다.

사용 예시:
    >>> qap = PolynomialForm(cs)
    >>> f = qap[0]
    >>> f(FR(5))       # (A(5)·B(5) - C(5))
    >>> qap.evaluate(FR(5))   # 모든 제약의 평가값 리스트
"""

import logging

from zkp.snark.errors import (
    EmptyConstraintSet,
    InvalidEvaluationResult,
    InvalidInput,
    UndefinedVariableInEvaluation,
)
from zkp.snark.r1cs import ONE

logger = logging.getLogger(__name__)


class PolynomialForm:
    """R1CS 로부터 만든 제약별 평가 함수의 순서 있는 모음.

    생성 후에는 읽기 전용이며, 원본 ConstraintSystem 을 변경하지 않는다.

    속성:
        field: FieldProvider
        variables: 생성 시점의 변수 바인딩 스냅샷
        polynomials: 평가 함수 튜플 (제약 순서)
    """

    def __init__(self, constraint_system, debug=False):
        if constraint_system is None or not callable(getattr(constraint_system, "get_constraints", None)):
            raise InvalidInput("Invalid R1CS input. Cannot convert to QAP.")

        self.debug = debug
        constraints = constraint_system.get_constraints()
        if not constraints:
            raise EmptyConstraintSet(
                "R1CS has no constraints. Add constraints before QAP conversion.")

        self.field = constraint_system.field
        self.variables = dict(constraint_system.variables)
        self.polynomials = tuple(
            self._to_polynomial(index, constraint) for index, constraint in enumerate(constraints)
        )
        if self.debug:
            logger.info("QAP generated from %d constraint(s)", len(self.polynomials))

    def __len__(self):
        return len(self.polynomials)

    def __getitem__(self, index):
        return self.polynomials[index]

    def __iter__(self):
        return iter(self.polynomials)

    def _to_polynomial(self, index, constraint):
        a, b, c = (dict(part) for part in constraint)

        def polynomial(x):
            eval_a = self.evaluate_combination(a, x, index)
            eval_b = self.evaluate_combination(b, x, index)
            eval_c = self.evaluate_combination(c, x, index)
            result = eval_a * eval_b - eval_c
            logger.debug("Constraint %d: (%s * %s) - %s = %s",
                         index + 1, int(eval_a), int(eval_b), int(eval_c), int(result))
            return result

        polynomial.__name__ = f"constraint_{index + 1}"
        return polynomial

    def evaluate_combination(self, combination, x, index=None):
        """선형결합을 챌린지 x 에서 평가한다.

        Raises:
            UndefinedVariableInEvaluation: 상수가 아닌 변수를 치환할 x 가 없을 때
            InvalidEvaluationResult: 계수를 필드 원소로 해석할 수 없을 때
        """
        total = self.field.element(0)
        for name, coeff in combination.items():
            if name == ONE:
                term = self.field.element(1)
            else:
                term = self._substitute(name, x)
            try:
                coeff = self.field.element(coeff)
            except InvalidInput as exc:
                raise InvalidEvaluationResult(
                    f"Constraint {'?' if index is None else index + 1}: "
                    f"coefficient of {name!r} is not a field value ({coeff!r})") from exc
            total = total + coeff * term
        return total

    def _substitute(self, name, x):
        try:
            return self.field.element(x)
        except InvalidInput as exc:
            raise UndefinedVariableInEvaluation(
                name, f"Undefined variable {name!r} encountered during QAP evaluation") from exc

    def evaluate(self, x):
        """모든 제약 함수를 x 에서 평가한 결과 리스트."""
        return [f(x) for f in self.polynomials]
