import logging

from zkp.groth16.proving import fixed_constant_values, to_witnesses
from zkp.snark.errors import InvalidInput
from zkp.snark.field import FieldProvider

logger = logging.getLogger(__name__)


class FixedConstantVerifier:
    """Recomputes the fixed-constant proof for the given witnesses and compares exactly."""

    def __init__(self, setup, field=None):
        self.setup = setup
        self.field = field if field is not None else FieldProvider()

    def verify(self, proof, witnesses):
        if proof is None or any(getattr(proof, name, None) is None for name in ("a", "b", "c", "witnesses")):
            logger.warning("Proof is missing required values")
            return False
        try:
            witnesses = to_witnesses(witnesses)
            expected = fixed_constant_values(self.setup, witnesses, self.field.modulus)
            received = (int(proof.a), int(proof.b), int(proof.c))
        except (InvalidInput, TypeError, ValueError) as exc:
            logger.warning("Invalid proof or witnesses: %s", exc)
            return False

        logger.debug("Expected (A, B, C) = %s, received %s", expected, received)
        if received != expected:
            logger.warning("Invalid proof: verification failed")
            return False
        return True


def decode_hex_le(value, q):
    """little-endian hex string → int mod q"""
    if not isinstance(value, str):
        raise ValueError(f"expected a hex string, got {type(value).__name__}")
    return int.from_bytes(bytes.fromhex(value), "little") % q


class CurveEqualityCheck:
    """Stand-in for a pairing check.

    Accepts iff (A·B)·G == C·G, which is scalar-multiplication equality, not a
    bilinear pairing.
    """

    KEYS = ("A", "B", "C")

    def __init__(self, field=None):
        self.field = field if field is not None else FieldProvider()

    def check(self, proof, vk):
        if not isinstance(proof, dict) or not isinstance(vk, dict) \
                or any(not proof.get(k) or not vk.get(k) for k in self.KEYS):
            logger.warning("Invalid proof or verification key")
            return False

        q = self.field.modulus
        try:
            a, b, c = (decode_hex_le(proof[k], q) for k in self.KEYS)
            # the key is decoded for validation only
            for k in self.KEYS:
                decode_hex_le(vk[k], q)
        except ValueError as exc:
            logger.warning("Invalid proof values, expected hex-encoded integers: %s", exc)
            return False

        if a == 0 or b == 0 or c == 0:
            logger.warning("Invalid proof: zero values are not allowed")
            return False

        base = self.field.generator
        pairing_ab = self.field.scalar_multiply(base, (a * b) % q)
        pairing_c = self.field.scalar_multiply(base, c)
        is_valid = self.field.points_equal(pairing_ab, pairing_c)
        logger.info("Curve equality check: %s", "valid" if is_valid else "invalid")
        return is_valid
