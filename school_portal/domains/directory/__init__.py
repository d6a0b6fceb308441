# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory query service and CSV export.

Exports:
    DirectoryService: Scoped faculty, student and admin listings.
    iter_csv: Streaming CSV rendering of a listing.
    render_csv: Whole-document CSV rendering of a listing.
"""

from school_portal.domains.directory.export import CSV_COLUMNS, iter_csv, render_csv
from school_portal.domains.directory.service import (
    DirectoryService,
    faculty_summary,
    student_summary,
)

__all__ = [
    "CSV_COLUMNS",
    "DirectoryService",
    "faculty_summary",
    "iter_csv",
    "render_csv",
    "student_summary",
]
