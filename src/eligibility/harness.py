"""
Offline conformance harness.

Runs a batch of named cases against the locale configs:

    [{"name": ..., "locale": "en_US",
      "answers": {...},
      "expected": {"vaccines": {"flu": true}, "shouldShowLocator": true}}]

Every configured locale is validated once before the cases run, so
structural problems are reported up front.

Usage:
    python -m eligibility.harness data/test-cases.json --config-dir data
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from eligibility.evaluator import EvaluationError
from eligibility.loader import ConfigLoadError, ConfigLoader
from eligibility.runner import run_assessment
from eligibility.validator import validate_config

logger = logging.getLogger(__name__)


@dataclass
class ConformanceCase:
    name: str
    locale: str
    answers: Dict[str, Any] = field(default_factory=dict)
    expected_vaccines: Dict[str, bool] = field(default_factory=dict)
    expected_locator: Optional[bool] = None


@dataclass
class CaseOutcome:
    name: str
    passed: bool
    mismatches: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class ConformanceReport:
    structural_errors: List[str] = field(default_factory=list)
    warnings: Dict[str, List[str]] = field(default_factory=dict)
    outcomes: List[CaseOutcome] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for o in self.outcomes if o.passed)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.passed)

    @property
    def ok(self) -> bool:
        return not self.structural_errors and self.failed == 0


def case_from_dict(d: Dict[str, Any]) -> ConformanceCase:
    expected = d.get("expected") or {}
    locator = expected.get("shouldShowLocator")
    return ConformanceCase(
        name=d.get("name", "<unnamed>"),
        locale=d.get("locale", ""),
        answers=d.get("answers") or {},
        expected_vaccines=dict(expected.get("vaccines") or {}),
        expected_locator=locator if isinstance(locator, bool) else None,
    )


def load_cases(path) -> List[ConformanceCase]:
    """Read a JSON or YAML list of cases."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of test cases in {path}")
    return [case_from_dict(d) for d in data]


def check_case(case: ConformanceCase, loader: ConfigLoader) -> CaseOutcome:
    """Run one case and compare every expected field."""
    try:
        config = loader.load(case.locale)
        result = run_assessment(case.answers, config)
    except (ConfigLoadError, EvaluationError) as e:
        return CaseOutcome(name=case.name, passed=False, error=str(e))

    mismatches = []
    for vaccine_id, expected_eligible in case.expected_vaccines.items():
        found = result.get_vaccine(vaccine_id)
        if found is None:
            mismatches.append(f'Expected vaccine "{vaccine_id}" in result, but it was not found.')
        elif found.eligible != expected_eligible:
            mismatches.append(
                f'Vaccine "{vaccine_id}": expected eligible={expected_eligible}, got {found.eligible}.'
            )

    if case.expected_locator is not None and result.should_show_locator != case.expected_locator:
        mismatches.append(
            f"shouldShowLocator: expected {case.expected_locator}, got {result.should_show_locator}."
        )

    return CaseOutcome(name=case.name, passed=not mismatches, mismatches=mismatches)


def run_conformance(
    cases: Sequence[ConformanceCase],
    loader: ConfigLoader,
    locales: Optional[Sequence[str]] = None,
) -> ConformanceReport:
    """Validate each locale once, then run every case."""
    report = ConformanceReport()

    for locale in locales if locales is not None else loader.locales():
        try:
            config = loader.load(locale)
        except ConfigLoadError as e:
            report.structural_errors.append(f"Error loading config for locale {locale}: {e}")
            continue
        validation = validate_config(config)
        report.structural_errors.extend(validation.errors)
        if validation.warnings:
            report.warnings[validation.source] = list(validation.warnings)

    for case in cases:
        outcome = check_case(case, loader)
        logger.debug("Case %s: %s", case.name, "passed" if outcome.passed else "failed")
        report.outcomes.append(outcome)

    return report


def format_report(report: ConformanceReport) -> str:
    lines = []

    for source, warnings in report.warnings.items():
        lines.append(f"Warnings in {source}:")
        lines.extend(f"  ⚠ {w}" for w in warnings)

    if report.structural_errors:
        lines.append("=" * 40)
        lines.append("STRUCTURAL CONFIG ERRORS:")
        lines.extend(f"  ❌ {e}" for e in report.structural_errors)
        lines.append("=" * 40)
    else:
        lines.append("✅ No structural config errors detected.")
    lines.append("")

    lines.append("Running test cases...")
    lines.append("")
    for outcome in report.outcomes:
        if outcome.error is not None:
            lines.append(f"❌ [{outcome.name}] - ERROR running test: {outcome.error}")
        elif outcome.passed:
            lines.append(f"✅ [{outcome.name}]")
        else:
            lines.append(f"❌ [{outcome.name}]")
            lines.extend(f"   - {m}" for m in outcome.mismatches)

    lines.append("")
    lines.append("=" * 40)
    lines.append(f"Tests passed: {report.passed}")
    lines.append(f"Tests failed: {report.failed}")
    lines.append("=" * 40)
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run eligibility conformance cases against locale configs")
    parser.add_argument("cases", help="Path to the test cases file (JSON or YAML)")
    parser.add_argument("--config-dir", default=".", help="Directory containing logic_<locale> files")
    parser.add_argument(
        "--locale",
        action="append",
        dest="locales",
        help="Locale to validate (repeatable); defaults to every logic file found",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loader = ConfigLoader.discover(args.config_dir)
    cases = load_cases(args.cases)
    report = run_conformance(cases, loader, locales=args.locales)
    print(format_report(report))
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
