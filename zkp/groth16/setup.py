from collections import namedtuple

from zkp.snark.errors import InvalidInput

# fixed "trusted setup" constants of the legacy proof variant
SETUP_A = 353736766909184192 * 10
SETUP_B = 635062968516021376 * 10
SETUP_C = 592282585571711104 * 10


class TrustedSetup(namedtuple("TrustedSetup", ["a", "b", "c"])):
    __slots__ = ()

    def to_dict(self):
        return {"A": str(self.a), "B": str(self.b), "C": str(self.c)}

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(int(data["A"]), int(data["B"]), int(data["C"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidInput(f"Malformed trusted setup: {exc}") from exc


def generate_trusted_setup():
    return TrustedSetup(SETUP_A, SETUP_B, SETUP_C)
