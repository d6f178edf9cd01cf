"""
Tests for rule expressions.

These tests verify:
    - Operator and logic symbols resolve to the closed enums
    - Unknown symbols resolve to None instead of raising
    - Expression objects are immutable
    - Conditions can be iterated across groups in declared order
"""

import pytest
from eligibility.expressions import (
    ComparisonOperator,
    ConditionExpression,
    ConditionGroup,
    EligibilityExpression,
    LogicOperator,
)


class TestComparisonOperator:
    """Test operator symbol resolution."""

    @pytest.mark.parametrize("symbol,expected", [
        ("==", ComparisonOperator.EQUALS),
        ("!=", ComparisonOperator.NOT_EQUALS),
        (">=", ComparisonOperator.GREATER_EQUAL),
        ("<=", ComparisonOperator.LESS_EQUAL),
        (">", ComparisonOperator.GREATER_THAN),
        ("<", ComparisonOperator.LESS_THAN),
    ])
    def test_parse_supported(self, symbol, expected):
        assert ComparisonOperator.parse(symbol) is expected

    @pytest.mark.parametrize("symbol", ["=", "===", "=>", "contains", None, 1])
    def test_parse_unsupported(self, symbol):
        """Unsupported symbols are reported as None, not raised."""
        assert ComparisonOperator.parse(symbol) is None

    def test_condition_exposes_operator(self):
        cond = ConditionExpression(var="age_years", op=">=", value=65)
        assert cond.operator is ComparisonOperator.GREATER_EQUAL

    def test_condition_keeps_raw_symbol(self):
        """The config symbol is kept even when it is not supported."""
        cond = ConditionExpression(var="age_years", op="=>", value=65)
        assert cond.op == "=>"
        assert cond.operator is None


class TestLogicOperator:
    """Test logic symbol resolution."""

    def test_parse(self):
        assert LogicOperator.parse("AND") is LogicOperator.AND
        assert LogicOperator.parse("OR") is LogicOperator.OR

    def test_parse_is_case_sensitive(self):
        assert LogicOperator.parse("and") is None
        assert LogicOperator.parse("XOR") is None

    def test_group_and_eligibility_expose_logic(self):
        group = ConditionGroup(logic="OR")
        eligibility = EligibilityExpression(logic="AND", groups=(group,))
        assert group.logic_operator is LogicOperator.OR
        assert eligibility.logic_operator is LogicOperator.AND


class TestImmutability:
    """Expressions are read-only config structure."""

    def test_condition_immutable(self):
        cond = ConditionExpression(var="x", op="==", value=1)
        with pytest.raises(AttributeError):
            cond.value = 2

    def test_group_immutable(self):
        group = ConditionGroup(logic="AND")
        with pytest.raises(AttributeError):
            group.logic = "OR"

    def test_default_children_are_empty_tuples(self):
        assert ConditionGroup(logic="AND").conditions == ()
        assert EligibilityExpression(logic="AND").groups == ()


def test_iter_conditions_in_declared_order():
    first = ConditionExpression(var="a", op="==", value=1)
    second = ConditionExpression(var="b", op="==", value=2)
    third = ConditionExpression(var="c", op="==", value=3)
    eligibility = EligibilityExpression(
        logic="OR",
        groups=(
            ConditionGroup(logic="AND", conditions=(first, second)),
            ConditionGroup(logic="AND"),
            ConditionGroup(logic="OR", conditions=(third,)),
        ),
    )
    assert list(eligibility.iter_conditions()) == [first, second, third]
