"""
Variable Builder: raw answers to typed variables.

Every variable_mapping entry produces exactly one variable, whether or not
its question was answered. This module never raises on bad answer data:
a number variable that cannot be coerced becomes NaN, which every
ordering comparison treats as False.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Union

from .answers import Answer, MultiSelect, Scalar, answer_from_raw, parse_number
from .model import VariableMapping, VariableType

NAN = float("nan")


def _to_number(answer: Answer) -> Union[int, float, None]:
    if answer is None:
        return None
    if isinstance(answer, MultiSelect):
        return NAN

    value = answer.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        if not value.strip():
            return 0
        number = parse_number(value)
        return NAN if number is None else number
    return NAN


def _to_boolean(answer: Answer, mapping: VariableMapping) -> bool:
    if mapping.true_when is not None:
        return isinstance(answer, Scalar) and answer.value in mapping.true_when

    if mapping.true_when_any_of is not None:
        selected = answer.values if isinstance(answer, MultiSelect) else ()
        return any(value in mapping.true_when_any_of for value in selected)

    if answer is None:
        return False
    if isinstance(answer, MultiSelect):
        return len(answer.values) > 0
    value = answer.value
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _passthrough(answer: Answer) -> Any:
    if answer is None:
        return None
    if isinstance(answer, MultiSelect):
        return list(answer.values)
    return answer.value


def build_variable(answer: Any, mapping: VariableMapping) -> Any:
    """Derive a single variable from one (raw or tagged) answer."""
    answer = answer_from_raw(answer)
    vtype = mapping.variable_type

    if vtype is VariableType.NUMBER:
        return _to_number(answer)
    if vtype is VariableType.BOOLEAN:
        return _to_boolean(answer, mapping)
    return _passthrough(answer)


def build_variables(
    answers: Mapping[str, Any], mapping: Mapping[str, VariableMapping]
) -> Dict[str, Any]:
    """
    Derive every declared variable from the collected answers.

    Args:
        answers: Question id -> raw or tagged answer (missing ids are unanswered)
        mapping: Variable name -> VariableMapping

    Returns:
        New dict of variable name -> value, in mapping order
    """
    variables: Dict[str, Any] = {}
    for name, var_mapping in mapping.items():
        question_id = var_mapping.from_question
        answer = answers.get(question_id) if isinstance(question_id, str) else None
        variables[name] = build_variable(answer, var_mapping)
    return variables
