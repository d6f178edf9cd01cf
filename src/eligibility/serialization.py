"""
Serialization helpers for assessment configs and results.

Configs are read from the per-locale JSON (or YAML) document shape:

    {meta, questions, variable_mapping, rules: {vaccines}, messages}

Reading is tolerant: missing or wrongly typed sections become empty, so a
partially written config still loads and the validator can report what
is wrong with it. Writing omits optional fields that are unset.
"""
from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Optional

import yaml

from eligibility.expressions import (
    ConditionExpression,
    ConditionGroup,
    EligibilityExpression,
)
from eligibility.model import (
    AssessmentConfig,
    AssessmentResult,
    ConfigMeta,
    Message,
    Question,
    QuestionOption,
    RuleOutput,
    VaccineResult,
    VaccineRule,
    VariableMapping,
)


def _tuple_or_none(values: Any) -> Optional[tuple]:
    if values is None:
        return None
    if isinstance(values, (list, tuple, set)):
        return tuple(values)
    return (values,)


def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def meta_from_dict(d: Dict[str, Any] | None) -> ConfigMeta:
    d = _as_dict(d)
    return ConfigMeta(
        market=d.get("market", ""),
        assessment_id=d.get("assessment_id", ""),
        version=d.get("version", ""),
        language=d.get("language", ""),
    )


def meta_to_dict(m: ConfigMeta) -> Dict[str, Any]:
    return {
        "market": m.market,
        "assessment_id": m.assessment_id,
        "version": m.version,
        "language": m.language,
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    d = _as_dict(d)
    return Question(
        id=d.get("id", ""),
        type=d.get("type", ""),
        label=d.get("label", ""),
        help_text=d.get("help_text"),
        required=bool(d.get("required", False)),
        min=d.get("min"),
        max=d.get("max"),
        options=[
            QuestionOption(value=o.get("value", ""), label=o.get("label", ""))
            for o in map(_as_dict, _as_list(d.get("options")))
        ],
    )


def question_to_dict(q: Question) -> Dict[str, Any]:
    d = {
        "id": q.id,
        "type": q.type,
        "label": q.label,
        "help_text": q.help_text,
        "required": q.required,
        "min": q.min,
        "max": q.max,
    }
    if q.options:
        d["options"] = [{"value": o.value, "label": o.label} for o in q.options]
    return _drop_none(d)


def mapping_from_dict(name: str, d: Dict[str, Any]) -> VariableMapping:
    d = _as_dict(d)
    return VariableMapping(
        name=name,
        from_question=d.get("from_question", ""),
        type=d.get("type", "passthrough"),
        true_when=_tuple_or_none(d.get("true_when")),
        true_when_any_of=_tuple_or_none(d.get("true_when_any_of")),
    )


def mapping_to_dict(m: VariableMapping) -> Dict[str, Any]:
    return _drop_none({
        "from_question": m.from_question,
        "type": m.type,
        "true_when": list(m.true_when) if m.true_when is not None else None,
        "true_when_any_of": list(m.true_when_any_of) if m.true_when_any_of is not None else None,
    })


def condition_from_dict(d: Dict[str, Any]) -> ConditionExpression:
    d = _as_dict(d)
    return ConditionExpression(var=d.get("var", ""), op=d.get("op"), value=d.get("value"))


def condition_to_dict(c: ConditionExpression) -> Dict[str, Any]:
    return {"var": c.var, "op": c.op, "value": c.value}


def group_from_dict(d: Dict[str, Any]) -> ConditionGroup:
    d = _as_dict(d)
    return ConditionGroup(
        logic=d.get("logic"),
        conditions=tuple(condition_from_dict(c) for c in _as_list(d.get("conditions"))),
    )


def group_to_dict(g: ConditionGroup) -> Dict[str, Any]:
    return {"logic": g.logic, "conditions": [condition_to_dict(c) for c in g.conditions]}


def eligibility_from_dict(d: Dict[str, Any] | None) -> EligibilityExpression:
    if not isinstance(d, dict):
        return EligibilityExpression(logic=None)
    return EligibilityExpression(
        logic=d.get("logic"),
        groups=tuple(group_from_dict(g) for g in _as_list(d.get("groups"))),
    )


def eligibility_to_dict(e: EligibilityExpression) -> Dict[str, Any]:
    return {"logic": e.logic, "groups": [group_to_dict(g) for g in e.groups]}


def rule_from_dict(d: Dict[str, Any]) -> VaccineRule:
    d = _as_dict(d)
    out = _as_dict(d.get("output"))
    return VaccineRule(
        id=d.get("id", ""),
        label=d.get("label", ""),
        description=d.get("description"),
        eligibility=eligibility_from_dict(d.get("eligibility")),
        output=RuleOutput(
            eligible_message_key=out.get("eligible_message_key", ""),
            not_eligible_message_key=out.get("not_eligible_message_key", ""),
            cta_type=out.get("cta_type", ""),
        ),
    )


def rule_to_dict(r: VaccineRule) -> Dict[str, Any]:
    return _drop_none({
        "id": r.id,
        "label": r.label,
        "description": r.description,
        "eligibility": eligibility_to_dict(r.eligibility),
        "output": {
            "eligible_message_key": r.output.eligible_message_key,
            "not_eligible_message_key": r.output.not_eligible_message_key,
            "cta_type": r.output.cta_type,
        },
    })


def message_from_dict(d: Dict[str, Any]) -> Message:
    d = _as_dict(d)
    return Message(title=d.get("title", ""), body=d.get("body", ""))


def config_from_dict(d: Dict[str, Any], source: Optional[str] = None) -> AssessmentConfig:
    d = _as_dict(d)
    rules = _as_dict(d.get("rules"))
    return AssessmentConfig(
        meta=meta_from_dict(d.get("meta")),
        questions=[question_from_dict(q) for q in _as_list(d.get("questions"))],
        variable_mapping={
            name: mapping_from_dict(name, m)
            for name, m in _as_dict(d.get("variable_mapping")).items()
        },
        vaccines=[rule_from_dict(r) for r in _as_list(rules.get("vaccines"))],
        messages={
            key: message_from_dict(m) for key, m in _as_dict(d.get("messages")).items()
        },
        source=source,
    )


def config_to_dict(c: AssessmentConfig) -> Dict[str, Any]:
    return {
        "meta": meta_to_dict(c.meta),
        "questions": [question_to_dict(q) for q in c.questions],
        "variable_mapping": {name: mapping_to_dict(m) for name, m in c.variable_mapping.items()},
        "rules": {"vaccines": [rule_to_dict(r) for r in c.vaccines]},
        "messages": {key: {"title": m.title, "body": m.body} for key, m in c.messages.items()},
    }


def config_to_json(c: AssessmentConfig) -> str:
    return json.dumps(config_to_dict(c), indent=2, ensure_ascii=False)


def config_from_json(s: str, source: Optional[str] = None) -> AssessmentConfig:
    return config_from_dict(json.loads(s), source=source)


def config_to_yaml(c: AssessmentConfig) -> str:
    return yaml.safe_dump(config_to_dict(c), sort_keys=False, allow_unicode=True)


def config_from_yaml(s: str, source: Optional[str] = None) -> AssessmentConfig:
    return config_from_dict(yaml.safe_load(s) or {}, source=source)


def vaccine_result_to_dict(v: VaccineResult) -> Dict[str, Any]:
    return {
        "id": v.id,
        "label": v.label,
        "description": v.description,
        "eligible": v.eligible,
        "messageTitle": v.message_title,
        "messageBody": v.message_body,
        "cta_type": v.cta_type,
    }


def _variable_to_json(value: Any) -> Any:
    # non-finite numbers have no JSON form; they are written as null
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (list, tuple)):
        return [_variable_to_json(v) for v in value]
    return value


def result_to_dict(r: AssessmentResult) -> Dict[str, Any]:
    variables: Dict[str, Any] = {
        name: _variable_to_json(value) for name, value in r.variables.items()
    }
    vaccines: List[Dict[str, Any]] = [vaccine_result_to_dict(v) for v in r.vaccines]
    return {
        "variables": variables,
        "vaccines": vaccines,
        "shouldShowLocator": r.should_show_locator,
    }


def result_to_json(r: AssessmentResult) -> str:
    return json.dumps(result_to_dict(r), ensure_ascii=False, allow_nan=False)
