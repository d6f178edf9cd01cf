"""
Assessment Configuration Model

Defines the data structures of one locale's assessment configuration:
    - Questions (what the user is asked)
    - Variable mappings (how answers become variables)
    - Vaccine rules (eligibility logic + output)
    - Messages (user-facing text)
    - AssessmentConfig (root container)

and the result of one assessment run.

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about file formats or UI
        - Are read-only inputs to the engine
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .expressions import EligibilityExpression


class QuestionType(Enum):
    NUMBER = "number"
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"


class VariableType(Enum):
    """
    Declared type of a derived variable.

    Anything the config declares that is not `number` or `boolean`
    is handled as PASSTHROUGH.
    """

    NUMBER = "number"
    BOOLEAN = "boolean"
    PASSTHROUGH = "passthrough"


@dataclass
class ConfigMeta:
    """
    Identifies a config document.

    Properties:
        market: Market code (e.g. "US")
        assessment_id: Stable assessment identifier
        version: Config version string
        language: Locale of the texts (e.g. "en_US")
    """

    market: str = ""
    assessment_id: str = ""
    version: str = ""
    language: str = ""


@dataclass
class QuestionOption:
    value: str
    label: str = ""


@dataclass
class Question:
    """
    A single questionnaire step.

    Properties:
        id:
            Unique identifier, referenced by variable mappings
        type:
            Raw type string ("number", "single_choice", "multi_choice")
        label:
            Question text
        help_text:
            Optional secondary text
        required:
            Whether an answer must be given to continue
        min / max:
            Numeric bounds, meaningful for number questions only
        options:
            Ordered choices, meaningful for choice questions only
    """

    id: str
    type: str
    label: str = ""
    help_text: Optional[str] = None
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    options: List[QuestionOption] = field(default_factory=list)

    @property
    def question_type(self) -> Optional[QuestionType]:
        for qt in QuestionType:
            if qt.value == self.type:
                return qt
        return None

    def option_values(self) -> List[str]:
        return [opt.value for opt in self.options]


@dataclass
class VariableMapping:
    """
    Declares how one variable is derived from one answer.

    Properties:
        name:
            Variable name (the key in variable_mapping)
        from_question:
            Question id the variable reads
        type:
            Raw type string ("number", "boolean", anything else = passthrough)
        true_when:
            Boolean only. True when the scalar answer is one of these values.
        true_when_any_of:
            Boolean only. True when a multi-select answer shares a value
            with this collection.
    """

    name: str
    from_question: str
    type: str = VariableType.PASSTHROUGH.value
    true_when: Optional[Tuple[Any, ...]] = None
    true_when_any_of: Optional[Tuple[Any, ...]] = None

    @property
    def variable_type(self) -> VariableType:
        for vt in VariableType:
            if vt.value == self.type:
                return vt
        return VariableType.PASSTHROUGH


@dataclass
class RuleOutput:
    eligible_message_key: str = ""
    not_eligible_message_key: str = ""
    cta_type: str = ""


@dataclass
class VaccineRule:
    """
    One named eligibility outcome.

    Properties:
        id: Unique rule identifier
        label: Display name
        eligibility: Two-level logic tree deciding the outcome
        output: Message keys for both outcomes plus the CTA tag
        description: Optional display text
    """

    id: str
    label: str
    eligibility: EligibilityExpression
    output: RuleOutput = field(default_factory=RuleOutput)
    description: Optional[str] = None


@dataclass
class Message:
    title: str = ""
    body: str = ""


@dataclass
class AssessmentConfig:
    """
    Root container for one locale's assessment.

    INVARIANTS (checked by eligibility.validator, not at runtime):
        - Every from_question references an existing question id
        - Every condition var references an existing variable_mapping key
        - Every output message key references an existing message
        - questions and vaccines are non-empty

    Properties:
        meta: Identification of the document
        questions: Ordered questions
        variable_mapping: Variable name -> mapping, in declared order
        vaccines: Ordered rules (rules.vaccines in the document)
        messages: Message key -> message
        source: File name or locale the config was read from, if any
    """

    meta: ConfigMeta = field(default_factory=ConfigMeta)
    questions: List[Question] = field(default_factory=list)
    variable_mapping: Dict[str, VariableMapping] = field(default_factory=dict)
    vaccines: List[VaccineRule] = field(default_factory=list)
    messages: Dict[str, Message] = field(default_factory=dict)
    source: Optional[str] = None

    def get_question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_rule(self, rule_id: str) -> Optional[VaccineRule]:
        for rule in self.vaccines:
            if rule.id == rule_id:
                return rule
        return None

    def get_message(self, key: str) -> Optional[Message]:
        return self.messages.get(key)


@dataclass(frozen=True)
class VaccineResult:
    """Outcome of one rule within an assessment run."""

    id: str
    label: str
    description: Optional[str]
    eligible: bool
    message_title: str
    message_body: str
    cta_type: str


@dataclass
class AssessmentResult:
    """
    Output of one assessment run.

    Properties:
        variables: Derived variables, keyed by variable_mapping name
        vaccines: One result per rule, in rule declaration order
        should_show_locator: True when an eligible rule asks for locations
    """

    variables: Dict[str, Any] = field(default_factory=dict)
    vaccines: List[VaccineResult] = field(default_factory=list)
    should_show_locator: bool = False

    def get_vaccine(self, rule_id: str) -> Optional[VaccineResult]:
        for vaccine in self.vaccines:
            if vaccine.id == rule_id:
                return vaccine
        return None
