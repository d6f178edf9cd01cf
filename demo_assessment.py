"""
Demo: Validate the example config, run one assessment and print the result.
"""

from eligibility.examples import build_example_config
from eligibility.runner import run_assessment
from eligibility.serialization import config_to_json, result_to_dict
from eligibility.validator import validate_config


def print_validation(report):
    """Pretty-print a ValidationReport."""
    print()
    print("=" * 70)
    print(f"CONFIG VALIDATION: {report.source}")
    print("=" * 70)
    if report.errors:
        print("❌ ERRORS")
        for i, error in enumerate(report.errors, 1):
            print(f"  {i}. {error}")
    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    if report.ok and not report.warnings:
        print("✨ NO ISSUES - Config looks clean!")
    print()


def print_result(answers, result):
    """Pretty-print an AssessmentResult."""
    print("📝 ANSWERS")
    for question_id, value in answers.items():
        print(f"  {question_id}: {value}")
    print()

    print("📈 VARIABLES")
    for name, value in result["variables"].items():
        print(f"  {name}: {value}")
    print()

    print("💉 VACCINES")
    for vaccine in result["vaccines"]:
        status = "ELIGIBLE" if vaccine["eligible"] else "not eligible"
        print(f"  {vaccine['label']:<10} {status:<13} [{vaccine['cta_type']}]")
        print(f"    {vaccine['messageTitle']}: {vaccine['messageBody']}")
    print()

    print(f"📍 Show locator: {'YES' if result['shouldShowLocator'] else 'NO'}")
    print()


if __name__ == "__main__":
    config = build_example_config()

    print_validation(validate_config(config))

    answers = {
        "age": 70,
        "conditions": ["none"],
        "pregnant": "no",
        "healthcare_worker": "no",
    }
    result = run_assessment(answers, config)
    print_result(answers, result_to_dict(result))

    # Also save the config as JSON for inspection
    with open("example_config_output.json", "w", encoding="utf-8") as f:
        f.write(config_to_json(config))
    print("✅ Config exported to example_config_output.json")
