#!/usr/bin/env python3
"""
Regression checker for the RadioText pipeline.

Parses tests/regression_cases.txt lines of the form:
  [@ascii] [@translit] Artist␟Title => Expected RT

Runs every record through the pipeline with the flagged configuration and
reports the cases whose RT differs from the expectation.
"""
import sys
from pathlib import Path
from typing import Dict, Tuple

ROOT = Path(__file__).resolve().parents[1]
CASES_FILE = ROOT / "tests" / "regression_cases.txt"

sys.path.insert(0, str(ROOT))

from rdstext.pipeline.orchestrator import RdsTextPipeline
from rdstext.utils.regression_cases import RegressionCase, load_cases


def pipeline_for(case: RegressionCase, pipelines: Dict[Tuple[bool, bool], RdsTextPipeline]) -> RdsTextPipeline:
    """Reuse one pipeline per flag combination."""
    key = (case.ascii_safe, case.transliterate)
    if key not in pipelines:
        pipelines[key] = RdsTextPipeline(case.config())
    return pipelines[key]


def main() -> int:
    """Run regression tests."""
    cases_file = Path(sys.argv[1]) if len(sys.argv) > 1 else CASES_FILE
    cases = load_cases(cases_file)

    total = len(cases)
    if total == 0:
        print("No test cases found.")
        return 0

    print(f"Running {total} regression cases from {cases_file}...")

    pipelines = {}
    failures = []
    for case in cases:
        got = pipeline_for(case, pipelines).process(case.raw).rt
        if got != case.expected:
            failures.append((case, got))

    passed = total - len(failures)
    print(f"\nChecked {total} cases: {passed} passed, {len(failures)} failed.")
    print(f"Success rate: {passed/total*100:.1f}%")

    if failures:
        print(f"\n{len(failures)} Failures:")
        for case, got in failures:
            print(f" - {case.label}: {case.raw!r}")
            print(f"     expected {case.expected!r}")
            print(f"     got      {got!r}")
        return 1

    print("All regression cases passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
