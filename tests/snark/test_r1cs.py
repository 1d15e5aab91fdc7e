import logging

import pytest

from zkp.snark.errors import InvalidInput, MalformedConstraint, UndefinedVariable
from zkp.snark.field import FR
from zkp.snark.r1cs import ONE, Constraint, ConstraintSystem


class TestVariables:
    def test_constant_one_always_bound(self, cs):
        assert cs.get_variable(ONE) == FR(1)

    def test_add_returns_name(self, cs):
        assert cs.add_variable("x", 5) == "x"
        assert cs.get_variable("x") == FR(5)

    def test_default_value_zero(self, cs):
        cs.add_variable("x")
        assert cs.get_variable("x") == FR(0)

    def test_add_overwrites(self, cs):
        cs.add_variable("x", 5)
        cs.add_variable("x", 6)
        assert cs.get_variable("x") == FR(6)

    def test_update(self, cs):
        """add_variable("x", 5) → update_variable("x", 9) → 9"""
        cs.add_variable("x", 5)
        cs.update_variable("x", 9)
        assert cs.get_variable("x") == FR(9)

    def test_update_unbound_fails(self, cs):
        with pytest.raises(UndefinedVariable) as excinfo:
            cs.update_variable("y", 1)
        assert excinfo.value.name == "y"

    def test_get_unbound_fails(self, cs):
        with pytest.raises(UndefinedVariable):
            cs.get_variable("nope")

    @pytest.mark.parametrize("name", ["", "   ", None, 3])
    def test_invalid_name(self, cs, name):
        with pytest.raises(InvalidInput):
            cs.add_variable(name, 1)

    def test_constant_cannot_be_rebound(self, cs):
        """상수 변수 "1" 은 add/update 로 바꿀 수 없다"""
        with pytest.raises(InvalidInput):
            cs.add_variable(ONE, 5)
        with pytest.raises(InvalidInput):
            cs.update_variable(ONE, 7)
        assert cs.get_variable(ONE) == FR(1)

    def test_constant_hashes_as_one(self, cs):
        with pytest.raises(InvalidInput):
            cs.add_variable(ONE, 5)
        constraint = cs.add_hash_constraint([ONE], "y")
        assert constraint.c == {"y": cs.hasher.hash([1])}


class TestHashConstraint:
    def test_shape(self, hash_cs):
        (constraint,) = hash_cs.get_constraints()
        assert constraint.a == {"x1": FR(1), "x2": FR(1), "x3": FR(1)}
        assert constraint.b == {ONE: FR(1)}
        assert constraint.c == {"y": hash_cs.hasher.hash([1, 2, 3])}

    def test_output_not_bound(self, hash_cs):
        """출력 변수는 바인딩되지 않아도 된다"""
        assert "y" not in hash_cs.variables

    def test_uses_current_values(self, cs):
        cs.add_variable("a", 10)
        cs.add_hash_constraint(["a"], "out")
        cs.update_variable("a", 11)
        cs.add_hash_constraint(["a"], "out")
        first, second = cs.get_constraints()
        assert first.c["out"] == cs.hasher.hash([10])
        assert second.c["out"] == cs.hasher.hash([11])

    def test_unbound_input_fails(self, cs):
        cs.add_variable("a", 1)
        with pytest.raises(UndefinedVariable):
            cs.add_hash_constraint(["a", "b"], "out")
        assert len(cs) == 0

    @pytest.mark.parametrize("inputs", ["x1", b"x1"])
    def test_single_string_rejected(self, cs, inputs):
        """이름 하나를 문자열로 넘기면 글자 단위로 쪼개지 않고 거부한다"""
        cs.add_variable("x", 1)
        cs.add_variable("x1", 2)
        with pytest.raises(InvalidInput):
            cs.add_hash_constraint(inputs, "y")
        assert len(cs) == 0


class TestCommitmentConstraint:
    def test_shape(self, cs):
        cs.add_variable("balance", 100)
        cs.add_variable("secret", 7)
        constraint = cs.add_commitment_constraint("balance", "secret", "c")
        assert constraint.a == {"balance": FR(1), "secret": FR(1)}
        assert constraint.b == {ONE: FR(1)}
        assert constraint.c == {"c": cs.hasher.hash([100, 7])}

    def test_unbound_fails(self, cs):
        cs.add_variable("balance", 100)
        with pytest.raises(UndefinedVariable):
            cs.add_commitment_constraint("balance", "secret", "c")


class TestGenericConstraint:
    def test_append(self, cs):
        cs.add_constraint({"x": 1}, {ONE: 1}, {"y": 1})
        assert len(cs.get_constraints()) == 1

    def test_unknown_names_allowed_at_authoring(self, cs):
        cs.add_constraint({"ghost": 1}, {ONE: 1}, {})
        assert cs.get_constraints()[0].a == {"ghost": 1}

    @pytest.mark.parametrize("a, b, c", [
        (5, {}, {}),
        ({}, None, {}),
        ({}, {}, [("x", 1)]),
    ])
    def test_malformed(self, cs, a, b, c):
        with pytest.raises(MalformedConstraint):
            cs.add_constraint(a, b, c)

    def test_order_preserved(self, cs):
        for i in range(5):
            cs.add_constraint({ONE: i}, {ONE: 1}, {ONE: i})
        assert [c.a[ONE] for c in cs.get_constraints()] == [0, 1, 2, 3, 4]

    def test_get_constraints_returns_copy(self, cs):
        cs.add_constraint({}, {}, {})
        cs.get_constraints().clear()
        assert len(cs) == 1

    def test_stored_combination_is_copied(self, cs):
        a = {"x": 1}
        cs.add_constraint(a, {}, {})
        a["x"] = 2
        assert cs.get_constraints()[0].a == {"x": 1}


class TestEmptySystem:
    def test_empty_is_valid(self, cs):
        assert cs.get_constraints() == []

    def test_empty_logs_warning(self, cs, caplog):
        with caplog.at_level(logging.WARNING, logger="zkp.snark.r1cs"):
            cs.get_constraints()
        assert "No constraints" in caplog.text

    def test_default_providers(self):
        cs = ConstraintSystem()
        assert cs.hasher.field is cs.field


class TestConstraint:
    def test_iterates_as_abc(self):
        c = Constraint({"x": 1}, {ONE: 1}, {"y": 2})
        a, b, cc = c
        assert (a, b, cc) == ({"x": 1}, {ONE: 1}, {"y": 2})

    def test_variable_names(self):
        c = Constraint({"x": 1, ONE: 1}, {ONE: 1}, {"y": 2})
        assert c.variable_names() == ["x", ONE, "y"]

    def test_to_dict(self):
        c = Constraint({"x": 1}, {}, {})
        assert c.to_dict() == {"A": {"x": 1}, "B": {}, "C": {}}
