# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""CSV rendering for directory listings.

Rows come from the same summaries the JSON listing returns, in the same
order; nothing here filters or reorders.
"""

import csv
import io
from collections.abc import Iterable, Iterator, Sequence

from pydantic import BaseModel

from school_portal.models.common import ResourceKind

CSV_COLUMNS: dict[ResourceKind, tuple[str, ...]] = {
    ResourceKind.FACULTY: ("name", "designation", "qualifications", "years_of_experience"),
    ResourceKind.STUDENTS: ("name", "roll_number", "grade", "section"),
    ResourceKind.ADMINS: ("name", "designation"),
}


def iter_csv(kind: ResourceKind, rows: Sequence[BaseModel] | Iterable[BaseModel]) -> Iterator[str]:
    """Yield CSV text: a header line, then one line per summary.

    Args:
        kind: Directory kind, selecting the columns.
        rows: Summaries in listing order.

    Yields:
        Encoded CSV chunks.
    """
    columns = CSV_COLUMNS[kind]
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow(columns)
    yield buffer.getvalue()

    for row in rows:
        buffer.seek(0)
        buffer.truncate(0)
        values = [getattr(row, column) for column in columns]
        writer.writerow(["" if v is None else v for v in values])
        yield buffer.getvalue()


def render_csv(kind: ResourceKind, rows: Iterable[BaseModel]) -> str:
    """The full CSV document as one string."""
    return "".join(iter_csv(kind, rows))
