import json

import pytest

from zkp.snark.errors import InvalidInput
from zkp.snark.field import FR
from zkp.snark.qap import PolynomialForm
from zkp.snark.system import ZKProofSystem

from snark_serializers import (
    serialize_fr, deserialize_fr,
    serialize_constraint_system, deserialize_constraint_system,
    serialize_proof, deserialize_proof,
    serialize_bundle, deserialize_bundle,
    fr_short,
)


INPUTS = [1, 2, 3]


class TestFR:
    def test_decimal_string(self):
        assert serialize_fr(FR(35)) == "35"

    def test_deserialize(self, field):
        assert deserialize_fr("35", field) == FR(35)

    @pytest.mark.parametrize("bad", ["0x10", "1.5", None, "abc", 1.5, True, False, float("nan")])
    def test_deserialize_invalid(self, field, bad):
        """bool 이나 정수가 아닌 float 는 잘라내지 않고 거부한다"""
        with pytest.raises(InvalidInput):
            deserialize_fr(bad, field)

    @pytest.mark.parametrize("value", [35, 35.0, "35", FR(35)])
    def test_deserialize_numeric(self, field, value):
        assert deserialize_fr(value, field) == FR(35)

    def test_bundle_with_fractional_output(self, snark_data, field):
        data = serialize_bundle(snark_data["plain"])
        data["output"] = 1.5
        with pytest.raises(InvalidInput):
            deserialize_bundle(data, field)


class TestConstraintSystem:
    def test_json_safe(self, hash_cs):
        data = serialize_constraint_system(hash_cs)
        assert json.loads(json.dumps(data)) == data
        assert data["variables"]["x2"] == "2"

    def test_restored_system_evaluates_identically(self, hash_cs):
        restored = deserialize_constraint_system(serialize_constraint_system(hash_cs), hash_cs.field)
        assert restored.variables == hash_cs.variables
        assert restored.get_constraints() == hash_cs.get_constraints()
        x = FR(123)
        assert PolynomialForm(restored).evaluate(x) == PolynomialForm(hash_cs).evaluate(x)


class TestProofBundle:
    @pytest.fixture
    def chained(self, snark_data):
        return snark_data["system"].generate_proof(INPUTS, secret=9, previous_proof=snark_data["plain"])

    def test_proof_round_trip(self, chained, field):
        data = serialize_proof(chained.proof)
        assert json.loads(json.dumps(data)) == data
        assert deserialize_proof(data, field) == chained.proof

    def test_bundle_round_trip_still_verifies(self, chained, field):
        data = json.loads(json.dumps(serialize_bundle(chained)))
        restored = deserialize_bundle(data, field)
        assert restored.proof.depth == 2
        assert ZKProofSystem().verify_proof(restored, INPUTS, 9) is True

    def test_bundle_without_commitment(self, snark_data, field):
        data = serialize_bundle(snark_data["plain"])
        assert data["commitment"] is None
        assert deserialize_bundle(data, field).commitment is None

    @pytest.mark.parametrize("bad", [None, [], {"proof": None}, {"output": "1", "proof": {"results": []}}])
    def test_malformed_bundle(self, field, bad):
        with pytest.raises(InvalidInput):
            deserialize_bundle(bad, field)


class TestFrShort:
    def test_short_value(self):
        assert fr_short(FR(35)) == "35"

    def test_long_value(self):
        assert fr_short(FR(12345678901234)) == "1234...1234"

    def test_none(self):
        assert fr_short(None) == "None"
