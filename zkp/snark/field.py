"""
SNARK 기반 모듈: 유한체(Finite Field) 및 타원곡선 Provider
===========================================================

파이프라인 전체(R1CS, QAP, SNARK)가 사용하는 필드/곡선 연산을 하나의
``FieldProvider`` 객체로 묶는다. 모듈 전역 modulus 대신 provider 인스턴스를
각 컴포넌트 생성자에 주입하므로, 서로 다른 modulus 를 쓰는 provider 가
테스트 안에서 공존할 수 있다.

**기본 설정**:
  - 필드: bn128 스칼라 필드 (위수 ≈ 2^254)
  - 생성자: bn128.G1

사용 예시:
    >>> field = FieldProvider()
    >>> field.element(3) * field.element(7)   # FR(21)
    >>> P = field.scalar_multiply(field.generator, 5)
    >>> field.points_equal(P, field.scalar_multiply(field.generator, 5))  # True
"""

import math
import numbers

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128

from zkp.snark.errors import InvalidInput


class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소."""
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order


class FieldProvider:
    """필드 산술과 곡선 스칼라 곱을 제공하는 설정 객체.

    속성:
        modulus: 필드 위수 (소수)
        generator: 스칼라 곱의 기준점
        FR: 이 modulus 에 대한 필드 원소 클래스
    """

    def __init__(self, modulus=CURVE_ORDER, generator=bn128.G1):
        if not isinstance(modulus, int) or modulus < 2:
            raise InvalidInput(f"Field modulus must be an integer > 1: {modulus!r}")
        self.modulus = modulus
        self.generator = generator
        if modulus == CURVE_ORDER:
            self.FR = FR
        else:
            self.FR = type("FR", (FQ,), {"field_modulus": modulus})

    def __repr__(self):
        return f"FieldProvider(modulus={self.modulus})"

    def element(self, value):
        """정수, 필드 원소 또는 정수값 float 를 필드 원소로 변환한다.

        Raises:
            InvalidInput: bool, 문자열, NaN/inf, 소수점이 있는 float 등
        """
        if isinstance(value, FQ):
            return self.FR(int(value) % self.modulus)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInput(f"Not a numeric field value: {value!r}")
        if isinstance(value, numbers.Integral):
            return self.FR(int(value) % self.modulus)
        if not math.isfinite(value) or not float(value).is_integer():
            raise InvalidInput(f"Not a finite integral value: {value!r}")
        return self.FR(int(value) % self.modulus)

    def reduce_modulo(self, value):
        return self.element(value)

    def is_element(self, value):
        return isinstance(value, self.FR)

    def scalar_multiply(self, point, scalar):
        """타원곡선 스칼라 곱셈: scalar · point (scalar 는 곡선 위수로 축약)."""
        return bn128.multiply(point, int(scalar) % bn128.curve_order)

    def points_equal(self, p1, p2):
        return bn128.eq(p1, p2)
