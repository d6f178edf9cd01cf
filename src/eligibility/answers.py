"""
Answer values.

A questionnaire answer is either absent (None), a single value for number
and single-choice questions, or a selection of option values for
multi-choice questions. Raw answers coming from JSON are duck-typed; they
are converted to the tagged forms below before variables are derived.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from .evaluator import is_number
from .model import Question, QuestionType

NONE_OPTION = "none"


class AnswerValidationError(ValueError):
    """Raised when an answer is not acceptable for its question."""

    def __init__(self, question_id: str, message: str):
        self.question_id = question_id
        super().__init__(message)


@dataclass(frozen=True)
class Scalar:
    """A single answer value (number or option value)."""

    value: Union[int, float, str, bool]


@dataclass(frozen=True)
class MultiSelect:
    """The option values picked for a multi-choice question, in order."""

    values: Tuple[str, ...] = ()


Answer = Optional[Union[Scalar, MultiSelect]]


def answer_from_raw(raw: Any) -> Answer:
    """
    Convert a duck-typed raw answer to its tagged form.

    Lists and tuples become MultiSelect, None stays None, tagged values
    are returned unchanged and everything else is a Scalar.
    """
    if raw is None or isinstance(raw, (Scalar, MultiSelect)):
        return raw
    if isinstance(raw, (list, tuple)):
        return MultiSelect(tuple(raw))
    return Scalar(raw)


def parse_number(text: str) -> Optional[Union[int, float]]:
    """
    Parse a numeric string, or return None when it is not a number.

    Only plain decimal notation is accepted: digit separators ("1_000")
    and non-finite spellings ("inf", "nan") are not numbers.
    """
    text = text.strip()
    if "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _number_answer(question: Question, raw: Any) -> Answer:
    if _is_blank(raw):
        if question.required:
            raise AnswerValidationError(question.id, "Please enter a value to continue.")
        return None

    if isinstance(raw, bool):
        number = None
    elif isinstance(raw, (int, float)):
        number = raw if math.isfinite(raw) else None
    elif isinstance(raw, str):
        number = parse_number(raw)
    else:
        number = None

    if number is None:
        raise AnswerValidationError(question.id, "Please enter a valid number.")
    # bounds that are not numbers are ignored; the config validator flags them
    if is_number(question.min) and number < question.min:
        raise AnswerValidationError(
            question.id, f"Please enter a value of at least {question.min}."
        )
    if is_number(question.max) and number > question.max:
        raise AnswerValidationError(
            question.id, f"Please enter a value no greater than {question.max}."
        )
    return Scalar(number)


def _single_choice_answer(question: Question, raw: Any) -> Answer:
    if _is_blank(raw):
        if question.required:
            raise AnswerValidationError(question.id, "Please select an option to continue.")
        return None
    if question.options and raw not in question.option_values():
        raise AnswerValidationError(question.id, f"Unknown option: {raw!r}")
    return Scalar(raw)


def _multi_choice_answer(question: Question, raw: Any) -> Answer:
    if raw is None:
        selected: Sequence[Any] = ()
    elif isinstance(raw, MultiSelect):
        selected = raw.values
    elif isinstance(raw, (list, tuple)):
        selected = raw
    else:
        selected = (raw,)

    if question.required and not selected:
        raise AnswerValidationError(
            question.id, "Please select at least one option to continue."
        )
    if question.options:
        allowed = question.option_values()
        unknown = [value for value in selected if value not in allowed]
        if unknown:
            raise AnswerValidationError(
                question.id, f"Unknown options: {', '.join(map(str, unknown))}"
            )

    # "none" overrides any other selection
    if NONE_OPTION in selected:
        return MultiSelect((NONE_OPTION,))
    return MultiSelect(tuple(selected))


def validate_answer(question: Question, raw: Any) -> Answer:
    """
    Check one answer against its question and return it in tagged form.

    Number questions enforce required / numeric / min / max, choice
    questions enforce required and known options. A multi-choice
    selection that contains "none" collapses to just "none".

    Raises:
        AnswerValidationError: with a message suitable for the user
    """
    if isinstance(raw, Scalar):
        raw = raw.value

    qtype = question.question_type
    if qtype is QuestionType.NUMBER:
        return _number_answer(question, raw)
    if qtype is QuestionType.SINGLE_CHOICE:
        return _single_choice_answer(question, raw)
    if qtype is QuestionType.MULTI_CHOICE:
        return _multi_choice_answer(question, raw)
    # Unknown question types are accepted as given
    return answer_from_raw(raw)
