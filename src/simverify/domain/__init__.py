# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Domain layer: catalogs, geodesy, checks and reports. No I/O."""
