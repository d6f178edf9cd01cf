"""
Rule Expressions

Eligibility logic is a fixed two-level tree:

    EligibilityExpression (AND / OR)
        -> ConditionGroup (AND / OR)
            -> ConditionExpression (var op value)

There is no recursion beyond these two levels.

ARCHITECTURAL RULE:
    Operator and logic symbols are stored exactly as they appear in the
    config. They are resolved against the closed enums below only when a
    rule is evaluated, so a misspelt symbol still loads (and the validator
    can report it) but fails loudly when evaluated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


class ComparisonOperator(Enum):
    """
    Comparison operators allowed in a condition.

    Keep this closed. Every operator here must have an entry in the
    evaluator's dispatch table.
    """

    EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    GREATER_THAN = ">"
    LESS_THAN = "<"

    @classmethod
    def parse(cls, symbol: Any) -> Optional["ComparisonOperator"]:
        """Return the operator for `symbol`, or None if it is not supported."""
        for op in cls:
            if op.value == symbol:
                return op
        return None


class LogicOperator(Enum):
    """Logic used to combine conditions in a group, or groups in a rule."""

    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, symbol: Any) -> Optional["LogicOperator"]:
        for logic in cls:
            if logic.value == symbol:
                return logic
        return None


@dataclass(frozen=True)
class ConditionExpression:
    """
    One atomic comparison against a derived variable.

    Example:
        {"var": "age_years", "op": ">=", "value": 65}

    Becomes:
        ConditionExpression(var="age_years", op=">=", value=65)

    Properties:
        var: Name of a variable_mapping entry
        op: Raw operator symbol
        value: Literal right-hand side (number, string, bool or None)

    IMPORTANT:
        This object does NOT validate that `var` exists.
        Reference validation belongs in the validator.
    """

    var: str
    op: Any
    value: Any = None

    @property
    def operator(self) -> Optional[ComparisonOperator]:
        return ComparisonOperator.parse(self.op)


@dataclass(frozen=True)
class ConditionGroup:
    """
    A logic node over atomic conditions.

    Properties:
        logic: Raw logic symbol ("AND" / "OR")
        conditions: Ordered conditions
    """

    logic: Any
    conditions: Tuple[ConditionExpression, ...] = field(default_factory=tuple)

    @property
    def logic_operator(self) -> Optional[LogicOperator]:
        return LogicOperator.parse(self.logic)


@dataclass(frozen=True)
class EligibilityExpression:
    """
    Top-level logic node of a rule, combining condition groups.

    Example:
        (age_years >= 65) OR (has_conditions == True AND age_years >= 18)

    Becomes:
        EligibilityExpression(
            logic="OR",
            groups=(
                ConditionGroup("AND", (ConditionExpression("age_years", ">=", 65),)),
                ConditionGroup("AND", (
                    ConditionExpression("has_conditions", "==", True),
                    ConditionExpression("age_years", ">=", 18),
                )),
            ),
        )
    """

    logic: Any
    groups: Tuple[ConditionGroup, ...] = field(default_factory=tuple)

    @property
    def logic_operator(self) -> Optional[LogicOperator]:
        return LogicOperator.parse(self.logic)

    def iter_conditions(self):
        """Yield every condition of every group, in declared order."""
        for group in self.groups:
            for condition in group.conditions:
                yield condition
