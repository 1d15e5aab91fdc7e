"""
SNARK Hash Provider
===================

필드 원소 시퀀스 → 필드 원소 하나로 가는 결정론적 해시.

제약 해싱(hash constraint), 커밋먼트, 챌린지 도출에 모두 사용된다.
PLONK 트랜스크립트와 같은 방식으로 SHA-256 다이제스트를 필드 위수로
축약한다:

    H(x1, ..., xn) = SHA-256(label || n || x1 || ... || xn) mod p

  - 각 원소는 고정 길이 빅엔디안 바이트열로 직렬화
  - 원소 개수를 포함하므로 길이가 다른 시퀀스는 다른 해시를 가짐
  - 순서가 바뀌면 다른 해시 (order-sensitive)

``digest(text)`` 는 증명 바인딩 해시와 값 비교용 hex 다이제스트를 만든다.

사용 예시:
    >>> hasher = HashProvider(FieldProvider())
    >>> y = hasher.hash([FR(1), FR(2), FR(3)])
    >>> hasher.digest("35")   # 64자리 hex 문자열
"""

import hashlib
import logging

from zkp.snark.errors import InvalidInput, ProviderFailure
from zkp.snark.field import FieldProvider

logger = logging.getLogger(__name__)


class HashProvider:
    """SHA-256 기반 필드 해시.

    속성:
        field: FieldProvider
        label: 도메인 분리용 바이트열 레이블
    """

    def __init__(self, field=None, label=b"zkp-snark"):
        self.field = field if field is not None else FieldProvider()
        self.label = label if isinstance(label, bytes) else str(label).encode()
        self._width = (self.field.modulus.bit_length() + 7) // 8

    def hash(self, elements):
        """필드 원소 시퀀스를 하나의 필드 원소로 해싱한다.

        Args:
            elements: 정수 또는 필드 원소의 시퀀스

        Returns:
            FR: 해시 값

        Raises:
            ProviderFailure: 원소를 인코딩할 수 없을 때
        """
        try:
            values = [self.field.element(e) for e in elements]
        except (InvalidInput, TypeError) as exc:
            raise ProviderFailure(f"Hash provider cannot encode inputs: {exc}") from exc

        state = bytearray(self.label)
        state.extend(len(values).to_bytes(8, "big"))
        for value in values:
            state.extend(int(value).to_bytes(self._width, "big"))
        h = hashlib.sha256(bytes(state)).digest()
        result = self.field.element(int.from_bytes(h, "big"))
        logger.debug("H(%s) = %s", ", ".join(str(int(v)) for v in values), int(result))
        return result

    def digest(self, text):
        """문자열의 SHA-256 hex 다이제스트."""
        if not isinstance(text, str):
            raise ProviderFailure(f"Digest input must be a string, got {type(text).__name__}")
        return hashlib.sha256(text.encode("utf-8")).hexdigest()
