"""
Rule evaluation: conditions, groups and eligibility expressions.

Evaluation fails fast. An operator or logic symbol outside the supported
set is a config-authoring error and raises immediately; the structural
validator is the place that reports such problems in bulk.
"""

from __future__ import annotations

import math
import operator
from typing import Any, Callable, Dict, Mapping

from .expressions import (
    ComparisonOperator,
    ConditionExpression,
    ConditionGroup,
    EligibilityExpression,
    LogicOperator,
)


class EvaluationError(Exception):
    """Base class for errors raised while evaluating a rule."""
    pass


class UnsupportedOperator(EvaluationError):
    def __init__(self, symbol: Any):
        self.operator = symbol
        super().__init__(f"Unsupported operator: {symbol!r}")


class UnsupportedLogic(EvaluationError):
    def __init__(self, symbol: Any, level: str = "group"):
        self.logic = symbol
        self.level = level
        super().__init__(f"Unsupported {level} logic: {symbol!r}")


def is_number(value: Any) -> bool:
    """True for int or float values that are not bool and not NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _equals(lhs: Any, rhs: Any) -> bool:
    # True == 1 in Python; a boolean only ever equals another boolean here
    if isinstance(lhs, bool) != isinstance(rhs, bool):
        return False
    return lhs == rhs


def _not_equals(lhs: Any, rhs: Any) -> bool:
    return not _equals(lhs, rhs)


def _ordering(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def evaluate(lhs: Any, rhs: Any) -> bool:
        if not (is_number(lhs) and is_number(rhs)):
            return False
        return compare(lhs, rhs)
    return evaluate


_COMPARATORS: Dict[ComparisonOperator, Callable[[Any, Any], bool]] = {
    ComparisonOperator.EQUALS: _equals,
    ComparisonOperator.NOT_EQUALS: _not_equals,
    ComparisonOperator.GREATER_EQUAL: _ordering(operator.ge),
    ComparisonOperator.LESS_EQUAL: _ordering(operator.le),
    ComparisonOperator.GREATER_THAN: _ordering(operator.gt),
    ComparisonOperator.LESS_THAN: _ordering(operator.lt),
}


def compare(lhs: Any, op: Any, rhs: Any) -> bool:
    """
    Apply one comparison.

    Ordering operators only compare real numbers; None, strings,
    booleans, sequences and NaN on either side give False.

    Raises:
        UnsupportedOperator: if `op` is not a known operator symbol
    """
    comparison = op if isinstance(op, ComparisonOperator) else ComparisonOperator.parse(op)
    if comparison is None:
        raise UnsupportedOperator(op)
    return _COMPARATORS[comparison](lhs, rhs)


def evaluate_condition(variables: Mapping[str, Any], condition: ConditionExpression) -> bool:
    """Evaluate one condition; an unknown or non-string variable name reads as None."""
    lhs = variables.get(condition.var) if isinstance(condition.var, str) else None
    return compare(lhs, condition.op, condition.value)


def evaluate_group(variables: Mapping[str, Any], group: ConditionGroup) -> bool:
    """
    AND: every condition holds (True when there are none).
    OR: at least one condition holds (False when there are none).
    """
    logic = group.logic_operator
    if logic is LogicOperator.AND:
        return all(evaluate_condition(variables, c) for c in group.conditions)
    if logic is LogicOperator.OR:
        return any(evaluate_condition(variables, c) for c in group.conditions)
    raise UnsupportedLogic(group.logic, level="group")


def evaluate_eligibility(
    variables: Mapping[str, Any], eligibility: EligibilityExpression
) -> bool:
    """Combine a rule's groups with the same AND / OR semantics as a group."""
    logic = eligibility.logic_operator
    if logic is LogicOperator.AND:
        return all(evaluate_group(variables, g) for g in eligibility.groups)
    if logic is LogicOperator.OR:
        return any(evaluate_group(variables, g) for g in eligibility.groups)
    raise UnsupportedLogic(eligibility.logic, level="eligibility")
