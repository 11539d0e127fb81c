# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""OpenEd catalog tools.

Taxonomy relationship matching between catalog resources and the
Redis-backed resource ratings export.
"""

__version__ = "0.1.0"
