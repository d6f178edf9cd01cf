"""
Assessment Runner: one complete evaluation of a config against answers.

Straight-line: derive variables, evaluate each rule in declared order,
resolve its message, then aggregate the locator flag. No I/O, no caching,
and neither the config nor the answers are modified.
"""

import logging
from typing import Any, Mapping

from .evaluator import evaluate_eligibility
from .model import AssessmentConfig, AssessmentResult, Message, VaccineResult, VaccineRule
from .variables import build_variables

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = Message(title="Demo result", body="No message configured.")
LOCATOR_CTA = "see_locations"


def resolve_message(config: AssessmentConfig, key: str) -> Message:
    """Look up a message; a missing key yields DEFAULT_MESSAGE."""
    message = config.messages.get(key)
    if message is None:
        logger.debug("Message %r not configured; using default", key)
        return DEFAULT_MESSAGE
    return message


def evaluate_rule(rule: VaccineRule, variables: Mapping[str, Any], config: AssessmentConfig) -> VaccineResult:
    eligible = evaluate_eligibility(variables, rule.eligibility)
    key = rule.output.eligible_message_key if eligible else rule.output.not_eligible_message_key
    message = resolve_message(config, key)
    return VaccineResult(
        id=rule.id,
        label=rule.label,
        description=rule.description,
        eligible=eligible,
        message_title=message.title,
        message_body=message.body,
        cta_type=rule.output.cta_type,
    )


def run_assessment(answers: Mapping[str, Any], config: AssessmentConfig) -> AssessmentResult:
    """
    Evaluate every rule of `config` against `answers`.

    Args:
        answers: Question id -> raw answer (scalar, list of option values, or None)
        config: Assessment configuration

    Returns:
        AssessmentResult with rules in declaration order

    Raises:
        EvaluationError: if a rule uses an unsupported operator or logic
    """
    variables = build_variables(answers, config.variable_mapping)
    vaccines = [evaluate_rule(rule, variables, config) for rule in config.vaccines]
    should_show_locator = any(v.eligible and v.cta_type == LOCATOR_CTA for v in vaccines)

    logger.debug(
        "Assessed %d rule(s) for %s: %d eligible",
        len(vaccines),
        config.source or config.meta.assessment_id or "<config>",
        sum(1 for v in vaccines if v.eligible),
    )
    return AssessmentResult(
        variables=variables,
        vaccines=vaccines,
        should_show_locator=should_show_locator,
    )
