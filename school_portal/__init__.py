# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Multi-tenant school portal.

Serves several schools from one deployment with role-scoped directories,
reviews and rating dashboards.
"""

__version__ = "1.0.0"
