"""
R1CS 제약 시스템 (Rank-1 Constraint System)
============================================

계산을 A·B = C 형태의 제약 목록으로 표현한다.

**구성 요소**:
  - 변수 바인딩: 이름 → 현재 필드 값. 상수 변수 "1" 은 항상 1로 바인딩됨
  - 선형결합(linear combination): 변수 이름 → 계수 dict
  - 제약: (A, B, C) 선형결합의 순서쌍. 추가만 가능하며 순서가 의미를 가짐
    (QAP 함수 순서 = 증명 벡터의 위치)

**특수 제약**:
  | 종류       | A                         | B          | C                          |
  |------------|---------------------------|------------|----------------------------|
  | 해시       | {x1: 1, ..., xn: 1}       | {"1": 1}   | {y: H(x1, ..., xn)}        |
  | 커밋먼트   | {balance: 1, secret: 1}   | {"1": 1}   | {out: H(balance, secret)}  |

  C 의 계수에 해시 값을 직접 기록하므로 출력 변수는 바인딩되지 않아도 된다.

사용 예시:
    >>> cs = ConstraintSystem()
    >>> cs.add_variable("x1", 3)
    >>> cs.add_variable("x2", 4)
    >>> cs.add_hash_constraint(["x1", "x2"], "y")
    >>> len(cs.get_constraints())  # 1
"""

import logging
from collections.abc import Mapping

from zkp.snark.errors import InvalidInput, MalformedConstraint, UndefinedVariable
from zkp.snark.field import FieldProvider
from zkp.snark.hashing import HashProvider

logger = logging.getLogger(__name__)

# 상수 변수 이름
ONE = "1"


class Constraint:
    """A·B = C 제약.

    속성:
        a, b, c: 선형결합 (변수 이름 → 계수)
    """

    def __init__(self, a, b, c):
        self.a = a
        self.b = b
        self.c = c

    def __iter__(self):
        return iter((self.a, self.b, self.c))

    def __eq__(self, other):
        if not isinstance(other, Constraint):
            return NotImplemented
        return tuple(self) == tuple(other)

    def __repr__(self):
        return f"Constraint(a={self.a!r}, b={self.b!r}, c={self.c!r})"

    def variable_names(self):
        """제약이 참조하는 모든 변수 이름 (상수 "1" 포함)."""
        names = []
        for combination in self:
            for name in combination:
                if name not in names:
                    names.append(name)
        return names

    def to_dict(self):
        return {"A": dict(self.a), "B": dict(self.b), "C": dict(self.c)}


class ConstraintSystem:
    """변수 바인딩과 제약 목록을 관리하는 R1CS.

    스레드 안전하지 않다. 한 번에 하나의 증명 구성 세션만 소유해야 한다.

    속성:
        field: FieldProvider
        hasher: HashProvider
        variables: 변수 이름 → FR 값
        constraints: Constraint 리스트 (추가 전용)
    """

    def __init__(self, field=None, hasher=None):
        self.field = field if field is not None else FieldProvider()
        self.hasher = hasher if hasher is not None else HashProvider(self.field)
        self.variables = {ONE: self.field.element(1)}
        self.constraints = []

    def __len__(self):
        return len(self.constraints)

    # ── 변수 ──

    def add_variable(self, name, value=0):
        """변수를 바인딩(또는 덮어쓰기)하고 이름을 반환한다.

        Raises:
            InvalidInput: 이름이 비어있거나 문자열이 아닐 때, 또는 상수 "1" 일 때
        """
        if not isinstance(name, str) or name.strip() == "":
            raise InvalidInput("Variable name must be a non-empty string")
        self._reject_constant(name)
        self.variables[name] = self.field.element(value)
        logger.debug("Variable added: %s = %s", name, value)
        return name

    def update_variable(self, name, value):
        self._reject_constant(name)
        if name not in self.variables:
            raise UndefinedVariable(name)
        self.variables[name] = self.field.element(value)
        logger.debug("Variable updated: %s = %s", name, value)

    def get_variable(self, name):
        if name not in self.variables:
            raise UndefinedVariable(name)
        return self.variables[name]

    @staticmethod
    def _reject_constant(name):
        if name == ONE:
            raise InvalidInput(f"Constant variable {ONE!r} is always bound to 1")

    def _require_bound(self, names):
        for name in names:
            if name not in self.variables:
                raise UndefinedVariable(name, f"Undefined variable used in constraint: {name!r}")

    # ── 제약 ──

    def add_hash_constraint(self, input_vars, output_var):
        """H(input_vars) = output_var 해시 제약을 추가한다.

        입력 변수의 현재 값으로 해시를 계산해 C 의 계수로 기록한다.

        Args:
            input_vars: 입력 변수 이름 리스트 (모두 바인딩되어 있어야 함)
            output_var: 출력 변수 이름 (바인딩 불필요)

        Raises:
            InvalidInput: input_vars 가 이름의 리스트가 아닐 때 (문자열 하나 등)
            UndefinedVariable: 입력 중 바인딩되지 않은 변수가 있을 때
        """
        if isinstance(input_vars, (str, bytes)):
            raise InvalidInput("input_vars must be a sequence of variable names, not a single string")
        input_vars = list(input_vars)
        self._require_bound(input_vars)

        hashed = self.hasher.hash([self.variables[v] for v in input_vars])
        one = self.field.element(1)
        constraint = Constraint(
            {v: one for v in input_vars},
            {ONE: one},
            {output_var: hashed},
        )
        self.constraints.append(constraint)
        logger.info("Hash constraint added: H(%s) = %s (%s)",
                    ", ".join(input_vars), output_var, int(hashed))
        return constraint

    def add_commitment_constraint(self, balance_var, secret_var, output_var):
        """output_var = H(balance, secret) 커밋먼트 제약을 추가한다."""
        self._require_bound([balance_var, secret_var])

        commitment = self.hasher.hash([self.variables[balance_var], self.variables[secret_var]])
        one = self.field.element(1)
        constraint = Constraint(
            {balance_var: one, secret_var: one},
            {ONE: one},
            {output_var: commitment},
        )
        self.constraints.append(constraint)
        logger.info("Commitment constraint added: %s = H(%s, %s)",
                    output_var, balance_var, secret_var)
        return constraint

    def add_constraint(self, a, b, c):
        """일반 A·B = C 제약을 추가한다.

        변수 이름은 여기서 검사하지 않는다 (평가 시점에 검사).

        Raises:
            MalformedConstraint: A, B, C 중 mapping 이 아닌 것이 있을 때
        """
        for label, part in (("A", a), ("B", b), ("C", c)):
            if not isinstance(part, Mapping):
                raise MalformedConstraint(
                    f"Invalid constraint format: {label} must be a mapping, got {type(part).__name__}")
        constraint = Constraint(dict(a), dict(b), dict(c))
        self.constraints.append(constraint)
        logger.debug("Constraint added: %r", constraint)
        return constraint

    def get_constraints(self):
        if not self.constraints:
            logger.warning("No constraints found in R1CS")
        return list(self.constraints)
