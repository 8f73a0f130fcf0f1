# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JSON report file adapter.

Writes verification reports in the canonical JSON form.
"""
from simverify.domain.reports import Report, report_to_json
from simverify.ports import ReportWriter


class JsonReportWriter(ReportWriter):
    """Writes verification reports to JSON files."""

    def write_report(self, report: Report, path: str) -> None:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(report_to_json(report))
            f.write("\n")
