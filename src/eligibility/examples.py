"""
Example assessment config used by the demo and tests.

Builds the US English vaccine questionnaire in memory: four questions
(age, chronic conditions, pregnancy, healthcare work), five derived
variables and four vaccine rules mixing AND / OR at both levels.
The same config ships as data/logic_en_US.json.
"""
from eligibility.expressions import ConditionExpression, ConditionGroup, EligibilityExpression
from eligibility.model import (
    AssessmentConfig,
    ConfigMeta,
    Message,
    Question,
    QuestionOption,
    RuleOutput,
    VaccineRule,
    VariableMapping,
)

CHRONIC_CONDITIONS = ("diabetes", "asthma", "heart_disease", "immunocompromised")


def _when(var, op, value):
    return ConditionExpression(var=var, op=op, value=value)


def _all(*conditions):
    return ConditionGroup(logic="AND", conditions=tuple(conditions))


def _any(*conditions):
    return ConditionGroup(logic="OR", conditions=tuple(conditions))


def build_example_config(senior_age: int = 65) -> AssessmentConfig:
    config = AssessmentConfig(
        meta=ConfigMeta(
            market="US",
            assessment_id="vaccine_eligibility_us",
            version="1.0.0",
            language="en_US",
        ),
        source="example",
    )

    yes_no = [QuestionOption("yes", "Yes"), QuestionOption("no", "No")]
    config.questions = [
        Question(
            id="age",
            type="number",
            label="How old are you?",
            help_text="Enter your age in years.",
            required=True,
            min=0,
            max=120,
        ),
        Question(
            id="conditions",
            type="multi_choice",
            label="Do you have any of these conditions?",
            required=True,
            options=[
                QuestionOption("diabetes", "Diabetes"),
                QuestionOption("asthma", "Asthma or chronic lung disease"),
                QuestionOption("heart_disease", "Heart disease"),
                QuestionOption("immunocompromised", "Weakened immune system"),
                QuestionOption("none", "None of these"),
            ],
        ),
        Question(id="pregnant", type="single_choice", label="Are you pregnant?", options=list(yes_no)),
        Question(
            id="healthcare_worker",
            type="single_choice",
            label="Do you work in healthcare?",
            options=list(yes_no),
        ),
    ]

    config.variable_mapping = {
        "age_years": VariableMapping(name="age_years", from_question="age", type="number"),
        "has_conditions": VariableMapping(
            name="has_conditions",
            from_question="conditions",
            type="boolean",
            true_when_any_of=CHRONIC_CONDITIONS,
        ),
        "is_immunocompromised": VariableMapping(
            name="is_immunocompromised",
            from_question="conditions",
            type="boolean",
            true_when_any_of=("immunocompromised",),
        ),
        "is_pregnant": VariableMapping(
            name="is_pregnant", from_question="pregnant", type="boolean", true_when=("yes",)
        ),
        "is_hcw": VariableMapping(
            name="is_hcw", from_question="healthcare_worker", type="boolean", true_when=("yes",)
        ),
    }

    config.vaccines = [
        VaccineRule(
            id="flu",
            label="Flu",
            description="Seasonal influenza vaccine",
            eligibility=EligibilityExpression(
                logic="OR",
                groups=(
                    _all(_when("age_years", ">=", senior_age)),
                    _all(_when("has_conditions", "==", True)),
                    _all(_when("is_pregnant", "==", True)),
                    _all(_when("is_hcw", "==", True)),
                ),
            ),
            output=RuleOutput("flu_eligible", "flu_not_eligible", "see_locations"),
        ),
        VaccineRule(
            id="covid",
            label="COVID-19",
            description="Updated COVID-19 vaccine",
            eligibility=EligibilityExpression(
                logic="OR",
                groups=(
                    _all(_when("age_years", ">=", senior_age)),
                    _all(_when("is_immunocompromised", "==", True)),
                ),
            ),
            output=RuleOutput("covid_eligible", "covid_not_eligible", "see_locations"),
        ),
        VaccineRule(
            id="rsv",
            label="RSV",
            description="Respiratory syncytial virus vaccine",
            eligibility=EligibilityExpression(
                logic="AND",
                groups=(
                    _any(_when("age_years", ">=", 75), _when("has_conditions", "==", True)),
                    _all(_when("age_years", ">=", 60)),
                ),
            ),
            output=RuleOutput("rsv_eligible", "rsv_not_eligible", "talk_to_doctor"),
        ),
        VaccineRule(
            id="shingles",
            label="Shingles",
            eligibility=EligibilityExpression(
                logic="AND",
                groups=(_all(_when("age_years", ">=", 50)),),
            ),
            output=RuleOutput("shingles_eligible", "shingles_not_eligible", "learn_more"),
        ),
    ]

    config.messages = {
        "flu_eligible": Message("You can get a flu shot", "A yearly flu vaccine is recommended for you."),
        "flu_not_eligible": Message(
            "Flu shot not prioritized", "You are not in a priority group for the flu vaccine."
        ),
        "covid_eligible": Message("You can get a COVID-19 vaccine", "An updated dose is recommended for you."),
        "covid_not_eligible": Message(
            "COVID-19 vaccine not prioritized", "Ask a pharmacist whether a dose is right for you."
        ),
        "rsv_eligible": Message("Talk to your doctor about RSV", "You may benefit from an RSV vaccine."),
        "rsv_not_eligible": Message("RSV vaccine not recommended", "RSV vaccines are for older adults at risk."),
        "shingles_eligible": Message("Shingles vaccine recommended", "Two doses are recommended from age 50."),
        "shingles_not_eligible": Message("Shingles vaccine not yet recommended", "Check again when you turn 50."),
    }

    return config
