# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Verification report snapshots.

A Report is derived on demand from an engine's results and warnings. It is
never stored by the engine and never mutated. Reports built from the same
state compare equal; the generation instant is excluded from equality.

report_to_json() is the canonical text form used for export.
"""
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Sequence

import numpy as np

from simverify.domain.results import OperationalWarning, TestResult


@dataclass(frozen=True)
class ReportSummary:
    """Aggregate counts.

    total = passed + failed. Warnings count operational errors and are
    never part of total (warnings_in_total is always False).
    """
    total: int
    passed: int
    failed: int
    warnings: int
    pass_rate: str
    warnings_in_total: bool = False


@dataclass(frozen=True)
class Report:
    """Read-only snapshot of a verification run."""
    summary: ReportSummary
    tests: tuple[TestResult, ...]
    warnings: tuple[OperationalWarning, ...]
    generated_at: datetime = field(compare=False)


def format_pass_rate(passed: int, total: int) -> str:
    """Pass rate as a percentage with one decimal, e.g. "66.7%".

    Zero total gives "0.0%".
    """
    if total == 0:
        return "0.0%"
    return f"{passed / total * 100:.1f}%"


def build_report(
    results: Sequence[TestResult],
    warnings: Sequence[OperationalWarning],
    generated_at: datetime,
) -> Report:
    """Compute a Report from an ordered result sequence and warning log."""
    total = len(results)
    passed = sum(1 for r in results if r.passed)
    failed = total - passed
    summary = ReportSummary(
        total=total,
        passed=passed,
        failed=failed,
        warnings=len(warnings),
        pass_rate=format_pass_rate(passed, total),
    )
    return Report(
        summary=summary,
        tests=tuple(results),
        warnings=tuple(warnings),
        generated_at=generated_at,
    )


def _jsonable(value: Any) -> Any:
    """Convert report values to JSON-compatible primitives."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, np.ndarray)):
        return [_jsonable(v) for v in value]
    if isinstance(value, np.generic):
        return value.item()
    return value


def _test_to_dict(result: TestResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "type": result.kind.value,
        "passed": result.passed,
        "error": result.error,
        "tolerance": result.tolerance,
        "details": _jsonable(result.details),
        "timestamp": result.timestamp.isoformat(),
    }


def report_to_dict(report: Report) -> dict[str, Any]:
    """Canonical structured form of a report."""
    s = report.summary
    return {
        "summary": {
            "total": s.total,
            "passed": s.passed,
            "failed": s.failed,
            "warnings": s.warnings,
            "passRate": s.pass_rate,
            "warningsInTotal": s.warnings_in_total,
        },
        "tests": [_test_to_dict(r) for r in report.tests],
        "warnings": [
            {
                "kind": w.kind.value,
                "check": w.check,
                "message": w.message,
                "timestamp": w.timestamp.isoformat(),
            }
            for w in report.warnings
        ],
        "timestamp": report.generated_at.isoformat(),
    }


def report_to_json(report: Report) -> str:
    """Serialize a report as indented JSON text."""
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)
