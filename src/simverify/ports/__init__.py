# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for verification report output.

Adapters implement these to write reports to different destinations.
"""
from typing import Protocol, runtime_checkable

from simverify.domain.reports import Report


@runtime_checkable
class ReportWriter(Protocol):
    """Port for writing a verification report."""

    def write_report(self, report: Report, path: str) -> None:
        """Write the report to the given path."""
        ...
