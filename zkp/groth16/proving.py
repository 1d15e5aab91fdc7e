import logging
from collections import namedtuple

from zkp.snark.errors import InvalidInput
from zkp.snark.field import FieldProvider

logger = logging.getLogger(__name__)


class FixedConstantProof(namedtuple("FixedConstantProof", ["a", "b", "c", "witnesses"])):
    __slots__ = ()

    def to_dict(self):
        return {
            "A": str(self.a),
            "B": str(self.b),
            "C": str(self.c),
            "witnesses": [str(w) for w in self.witnesses],
        }

    @classmethod
    def from_dict(cls, data):
        try:
            witnesses = data["witnesses"]
            if not isinstance(witnesses, list):
                raise TypeError("witnesses must be a list")
            return cls(int(data["A"]), int(data["B"]), int(data["C"]), tuple(int(w) for w in witnesses))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidInput(f"Proof is missing required values: {exc}") from exc


def to_witnesses(values):
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple)) or len(values) == 0:
        raise InvalidInput("Witnesses must be a non-empty list of integers.")
    witnesses = []
    for w in values:
        if isinstance(w, bool) or (isinstance(w, float) and not w.is_integer()):
            raise InvalidInput(f"Invalid witness value: {w!r}")
        try:
            witnesses.append(int(w))
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidInput(f"Invalid witness value: {w!r}") from exc
    return witnesses


def witness_product(witnesses):
    product = 1
    for w in witnesses:
        product *= w
    return product


def fixed_constant_values(setup, witnesses, q):
    """(A, B, C) = (a·Πw, b·Πw, A·B·c) mod q"""
    product = witness_product(witnesses)
    a = (setup.a * product) % q
    b = (setup.b * product) % q
    c = (a * b * setup.c) % q
    return a, b, c


class FixedConstantProver:
    """Legacy proof variant: the setup constants multiplied by the witness product.

    No pairing is involved. Any two witness sets with the same product
    produce the same proof.
    """

    def __init__(self, setup, field=None):
        self.setup = setup
        self.field = field if field is not None else FieldProvider()

    def generate(self, witnesses):
        witnesses = to_witnesses(witnesses)
        logger.debug("Witnesses: %s", witnesses)
        a, b, c = fixed_constant_values(self.setup, witnesses, self.field.modulus)
        logger.info("Fixed-constant proof generated: A=%s B=%s C=%s", a, b, c)
        return FixedConstantProof(a, b, c, tuple(witnesses))
