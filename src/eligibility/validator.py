"""
Config Validator: static cross-reference checks over one config.

Checks run independently and every violation is collected, so an author
sees all problems of a config in one pass.

    errors:   broken references and empty sections (the config cannot be
              trusted to evaluate correctly)
    warnings: suspicious but evaluable constructs

IMPORTANT: This module does NOT modify the config and never raises.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, List, Optional, Set

from .evaluator import is_number
from .expressions import ComparisonOperator
from .model import AssessmentConfig, QuestionType, VariableType


@dataclass
class ValidationReport:
    """Structural errors and warnings found in one config."""

    source: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _source_name(config: AssessmentConfig, source: Optional[str]) -> str:
    return source or config.source or config.meta.assessment_id or "<config>"


def _is_name(value: Any) -> bool:
    # ids and references are strings; anything else never resolves
    return isinstance(value, str)


def validate_config(config: AssessmentConfig, source: Optional[str] = None) -> ValidationReport:
    """
    Check referential integrity of a config.

    Errors:
    - variable_mapping.from_question must name an existing question
    - every condition var must name a variable_mapping entry
    - eligible / not-eligible message keys must exist in messages
    - questions and rules.vaccines must not be empty

    Warnings:
    - duplicate question or vaccine ids
    - unsupported operators and logic symbols
    - questionable question and variable definitions
    - variables and messages that nothing refers to

    Args:
        config: Config to check
        source: File name or locale used in messages (defaults to config.source)

    Returns:
        ValidationReport
    """
    name = _source_name(config, source)
    report = ValidationReport(source=name)

    questions_by_id = {q.id: q for q in config.questions if _is_name(q.id)}
    var_names = set(config.variable_mapping.keys())
    message_keys = set(config.messages.keys())

    # =========================================================================
    # 1. VARIABLE MAPPING -> QUESTIONS
    # =========================================================================

    for var_name, mapping in config.variable_mapping.items():
        if not _is_name(mapping.from_question) or mapping.from_question not in questions_by_id:
            report.add_error(
                f'Config {name}: variable "{var_name}" refers to non-existing '
                f'question "{mapping.from_question}".'
            )

    # =========================================================================
    # 2. RULES -> VARIABLES, MESSAGES
    # =========================================================================

    used_vars: Set[str] = set()
    used_messages: Set[str] = set()

    for rule in config.vaccines:
        for condition in rule.eligibility.iter_conditions():
            if _is_name(condition.var):
                used_vars.add(condition.var)
            if not _is_name(condition.var) or condition.var not in var_names:
                report.add_error(
                    f'Config {name}: vaccine "{rule.id}" uses variable "{condition.var}" '
                    f"which is not defined in variable_mapping."
                )

        out = rule.output
        used_messages.update(
            k for k in (out.eligible_message_key, out.not_eligible_message_key) if _is_name(k)
        )
        if out.eligible_message_key and not (
            _is_name(out.eligible_message_key) and out.eligible_message_key in message_keys
        ):
            report.add_error(
                f'Config {name}: vaccine "{rule.id}" uses eligible_message_key '
                f'"{out.eligible_message_key}" not found in messages.'
            )
        if out.not_eligible_message_key and not (
            _is_name(out.not_eligible_message_key) and out.not_eligible_message_key in message_keys
        ):
            report.add_error(
                f'Config {name}: vaccine "{rule.id}" uses not_eligible_message_key '
                f'"{out.not_eligible_message_key}" not found in messages.'
            )

    # =========================================================================
    # 3. EMPTY SECTIONS
    # =========================================================================

    if not config.questions:
        report.add_error(f"Config {name}: no questions defined.")
    if not config.vaccines:
        report.add_error(f"Config {name}: no vaccines rules defined.")

    # =========================================================================
    # 4. WARNING FLAGS
    # =========================================================================

    for qid, count in Counter(q.id for q in config.questions if _is_name(q.id)).items():
        if count > 1:
            report.add_warning(f'Config {name}: question id "{qid}" is defined {count} times.')
    for rid, count in Counter(r.id for r in config.vaccines if _is_name(r.id)).items():
        if count > 1:
            report.add_warning(f'Config {name}: vaccine id "{rid}" is defined {count} times.')

    for question in config.questions:
        if not _is_name(question.id):
            report.add_warning(f"Config {name}: question id {question.id!r} is not a string.")
        qtype = question.question_type
        if qtype is None:
            report.add_warning(
                f'Config {name}: question "{question.id}" has unknown type "{question.type}".'
            )
        elif qtype is QuestionType.NUMBER:
            for bound_name, bound in (("min", question.min), ("max", question.max)):
                if bound is not None and not is_number(bound):
                    report.add_warning(
                        f'Config {name}: question "{question.id}" has non-numeric '
                        f"{bound_name} {bound!r}."
                    )
            if is_number(question.min) and is_number(question.max) and question.min > question.max:
                report.add_warning(
                    f'Config {name}: question "{question.id}" has min {question.min} '
                    f"greater than max {question.max}."
                )
        elif not question.options:
            report.add_warning(f'Config {name}: question "{question.id}" has no options.')

    for var_name, mapping in config.variable_mapping.items():
        if mapping.variable_type is not VariableType.BOOLEAN:
            continue
        if mapping.true_when is not None and mapping.true_when_any_of is not None:
            report.add_warning(
                f'Config {name}: variable "{var_name}" declares both true_when and '
                f"true_when_any_of; true_when wins."
            )
        question = questions_by_id.get(mapping.from_question) if _is_name(mapping.from_question) else None
        if (
            mapping.true_when_any_of is not None
            and question is not None
            and question.question_type is not QuestionType.MULTI_CHOICE
        ):
            report.add_warning(
                f'Config {name}: variable "{var_name}" uses true_when_any_of on '
                f'non multi_choice question "{question.id}".'
            )

    for rule in config.vaccines:
        if rule.eligibility.logic_operator is None:
            report.add_warning(
                f'Config {name}: vaccine "{rule.id}" uses unsupported eligibility '
                f'logic "{rule.eligibility.logic}".'
            )
        for group in rule.eligibility.groups:
            if group.logic_operator is None:
                report.add_warning(
                    f'Config {name}: vaccine "{rule.id}" uses unsupported group '
                    f'logic "{group.logic}".'
                )
        for condition in rule.eligibility.iter_conditions():
            if ComparisonOperator.parse(condition.op) is None:
                report.add_warning(
                    f'Config {name}: vaccine "{rule.id}" uses unsupported operator '
                    f'"{condition.op}".'
                )

    unused_vars = sorted(map(str, var_names - used_vars))
    if unused_vars:
        report.add_warning(f"Config {name}: unused variables: {', '.join(unused_vars)}")
    unused_messages = sorted(map(str, message_keys - used_messages))
    if unused_messages:
        report.add_warning(f"Config {name}: unreferenced messages: {', '.join(unused_messages)}")

    return report
