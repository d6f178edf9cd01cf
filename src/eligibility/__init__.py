"""
Eligibility Questionnaire Rule Engine

Turns questionnaire answers into per-outcome eligibility decisions.

LAYERS:
-------
    model / expressions   configuration structure (questions, mappings, rules)
    answers / variables   raw answers -> typed variables
    evaluator             conditions -> groups -> eligibility
    runner                one complete assessment run
    validator             static cross-reference checks over a config

The engine itself performs no I/O and never mutates its inputs.
Loading locale files and driving batches of cases live in
`loader` and `harness`.
"""

__version__ = "0.1.0"
