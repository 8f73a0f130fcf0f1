# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for reference data and report output.

External dependencies (urllib, json, file I/O) are confined to this layer.
"""
from simverify.adapters.horizons import HorizonsReferenceSource
from simverify.adapters.json_report import JsonReportWriter
from simverify.adapters.placeholder_reference import PlaceholderReferenceSource
