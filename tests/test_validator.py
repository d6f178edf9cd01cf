"""
Tests for the Config Validator.

Tests verify that the validator correctly:
    - Reports unresolved question, variable and message references
    - Reports empty questions / vaccines sections
    - Accumulates every violation instead of stopping at the first
    - Names the config source, the entity and the missing reference
    - Flags suspicious constructs as warnings
"""

from eligibility.examples import build_example_config
from eligibility.expressions import ConditionExpression, ConditionGroup, EligibilityExpression
from eligibility.model import (
    AssessmentConfig,
    Question,
    QuestionOption,
    RuleOutput,
    VaccineRule,
    VariableMapping,
)
from eligibility.validator import validate_config


def _rule(rule_id="flu", conditions=(), logic="AND", group_logic="AND", output=None):
    return VaccineRule(
        id=rule_id,
        label=rule_id.title(),
        eligibility=EligibilityExpression(logic, (ConditionGroup(group_logic, tuple(conditions)),)),
        output=output or RuleOutput("", "", "see_locations"),
    )


def test_example_config_is_clean():
    report = validate_config(build_example_config())
    assert report.ok
    assert report.errors == []
    assert report.warnings == []
    assert report.source == "example"


def test_unknown_question_reference():
    config = build_example_config()
    config.variable_mapping["age_years"] = VariableMapping("age_years", "birth_year", "number")

    report = validate_config(config, source="logic_en_US.json")

    assert not report.ok
    assert report.errors == [
        'Config logic_en_US.json: variable "age_years" refers to non-existing question "birth_year".'
    ]


def test_unknown_variable_reference():
    config = build_example_config()
    config.vaccines.append(_rule("mmr", [ConditionExpression("is_student", "==", True)]))

    report = validate_config(config, source="logic_en_US.json")

    assert report.errors == [
        'Config logic_en_US.json: vaccine "mmr" uses variable "is_student" '
        "which is not defined in variable_mapping."
    ]


def test_unknown_message_keys_both_outcomes():
    config = build_example_config()
    config.vaccines[0].output = RuleOutput("flu_yes", "flu_no", "see_locations")

    report = validate_config(config, source="logic_en_US.json")

    assert report.errors == [
        'Config logic_en_US.json: vaccine "flu" uses eligible_message_key "flu_yes" not found in messages.',
        'Config logic_en_US.json: vaccine "flu" uses not_eligible_message_key "flu_no" not found in messages.',
    ]


def test_empty_message_keys_are_not_checked():
    config = build_example_config()
    config.vaccines.append(_rule("mmr", [ConditionExpression("age_years", ">=", 1)]))
    assert validate_config(config).errors == []


def test_scenario_d_no_vaccines():
    config = build_example_config()
    config.vaccines = []
    report = validate_config(config)
    assert any("no vaccines rules defined" in e for e in report.errors)


def test_no_questions():
    report = validate_config(AssessmentConfig(vaccines=[_rule()]), source="es_AR")
    assert "Config es_AR: no questions defined." in report.errors


def test_empty_config_accumulates_both_errors():
    report = validate_config(AssessmentConfig(source="logic_pt_BR.json"))
    assert report.errors == [
        "Config logic_pt_BR.json: no questions defined.",
        "Config logic_pt_BR.json: no vaccines rules defined.",
    ]


def test_all_violations_accumulated():
    """Every broken reference is reported in one pass."""
    config = build_example_config()
    config.variable_mapping["ghost"] = VariableMapping("ghost", "nowhere", "number")
    config.vaccines.append(_rule(
        "mmr",
        [ConditionExpression("a", "==", 1), ConditionExpression("b", "==", 2)],
        output=RuleOutput("x", "y", ""),
    ))

    report = validate_config(config)

    assert len(report.errors) == 5
    assert '"ghost"' in report.errors[0]
    assert '"a"' in report.errors[1]
    assert '"b"' in report.errors[2]
    assert 'eligible_message_key "x"' in report.errors[3]
    assert 'not_eligible_message_key "y"' in report.errors[4]


def test_source_defaults():
    config = build_example_config()
    config.source = None
    assert validate_config(config).source == "vaccine_eligibility_us"
    assert validate_config(AssessmentConfig()).source == "<config>"


class TestWarnings:
    """Suspicious constructs are warnings, never errors."""

    def test_unsupported_operator_and_logic(self):
        config = build_example_config()
        config.vaccines.append(_rule(
            "mmr",
            [ConditionExpression("age_years", "=>", 1)],
            logic="ANY",
            group_logic="all",
        ))
        report = validate_config(config)
        assert report.errors == []
        assert any('unsupported eligibility logic "ANY"' in w for w in report.warnings)
        assert any('unsupported group logic "all"' in w for w in report.warnings)
        assert any('unsupported operator "=>"' in w for w in report.warnings)

    def test_duplicate_ids(self):
        config = build_example_config()
        config.questions.append(Question(id="age", type="number"))
        config.vaccines.append(config.vaccines[0])
        report = validate_config(config)
        assert any('question id "age" is defined 2 times' in w for w in report.warnings)
        assert any('vaccine id "flu" is defined 2 times' in w for w in report.warnings)

    def test_question_definitions(self):
        config = build_example_config()
        config.questions.extend([
            Question(id="dob", type="date"),
            Question(id="height", type="number", min=10, max=5),
            Question(id="smoker", type="single_choice"),
        ])
        report = validate_config(config)
        assert any('"dob" has unknown type "date"' in w for w in report.warnings)
        assert any('"height" has min 10 greater than max 5' in w for w in report.warnings)
        assert any('"smoker" has no options' in w for w in report.warnings)

    def test_boolean_mapping_definitions(self):
        config = build_example_config()
        config.variable_mapping["is_pregnant"] = VariableMapping(
            "is_pregnant", "pregnant", "boolean", true_when=("yes",), true_when_any_of=("yes",)
        )
        report = validate_config(config)
        assert any("declares both true_when and true_when_any_of" in w for w in report.warnings)
        assert any('non multi_choice question "pregnant"' in w for w in report.warnings)

    def test_unused_variables_and_messages(self):
        config = build_example_config()
        config.questions.append(
            Question(id="lang", type="single_choice", options=[QuestionOption("en")])
        )
        config.variable_mapping["language"] = VariableMapping("language", "lang", "passthrough")
        config.messages["orphan"] = config.messages["flu_eligible"]
        report = validate_config(config)
        assert report.errors == []
        assert any("unused variables: language" in w for w in report.warnings)
        assert any("unreferenced messages: orphan" in w for w in report.warnings)

    def test_warnings_are_not_duplicated(self):
        config = build_example_config()
        config.vaccines.append(_rule(
            "mmr",
            [ConditionExpression("age_years", "=>", 1), ConditionExpression("age_years", "=>", 2)],
        ))
        report = validate_config(config)
        assert sum('unsupported operator "=>"' in w for w in report.warnings) == 1


def test_validator_does_not_modify_config():
    config = build_example_config()
    config.vaccines = []
    before = repr(config)
    validate_config(config)
    assert repr(config) == before


class TestWronglyTypedValues:
    """Hand-written values of the wrong type are reported, never raised."""

    def test_non_numeric_bounds(self):
        config = build_example_config()
        config.questions.extend([
            Question(id="height", type="number", min="0", max=10),
            Question(id="weight", type="number", min=50, max="20"),
        ])
        report = validate_config(config)
        assert report.errors == []
        assert "Config example: question \"height\" has non-numeric min '0'." in report.warnings
        assert "Config example: question \"weight\" has non-numeric max '20'." in report.warnings
        assert not any("greater than max" in w for w in report.warnings)

    def test_non_string_references_are_unresolved(self):
        config = build_example_config()
        config.variable_mapping["age_years"] = VariableMapping("age_years", ["age"], "number")
        config.vaccines.append(_rule(
            "mmr",
            [ConditionExpression(["age_years"], ">=", 1)],
            output=RuleOutput(["flu_eligible"], {"key": "flu_not_eligible"}, "learn_more"),
        ))

        report = validate_config(config)

        assert report.errors == [
            "Config example: variable \"age_years\" refers to non-existing question \"['age']\".",
            "Config example: vaccine \"mmr\" uses variable \"['age_years']\" "
            "which is not defined in variable_mapping.",
            "Config example: vaccine \"mmr\" uses eligible_message_key "
            "\"['flu_eligible']\" not found in messages.",
            "Config example: vaccine \"mmr\" uses not_eligible_message_key "
            "\"{'key': 'flu_not_eligible'}\" not found in messages.",
        ]

    def test_non_string_ids(self):
        config = build_example_config()
        config.questions.append(
            Question(id=["smoker"], type="single_choice", options=[QuestionOption("yes")])
        )
        config.vaccines.append(VaccineRule(
            id=["mmr"],
            label="MMR",
            eligibility=EligibilityExpression("OR", ()),
            output=RuleOutput("", "", "learn_more"),
        ))
        report = validate_config(config)
        assert report.errors == []
        assert "Config example: question id ['smoker'] is not a string." in report.warnings
