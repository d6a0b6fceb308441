# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory endpoints.

- GET /directory/faculty - Scoped faculty listing
- GET /directory/students - Scoped student listing
- GET /directory/admins - Scoped admin listing

Every listing accepts format=csv, which streams the very same rows as CSV.
school_id is honoured for the super-admin only; for everyone else it is
replaced by their own school.
"""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from school_portal.api.dependencies import AppSettings, CurrentIdentity, DbSession
from school_portal.domains.access import AccessScopeResolver, RequestedFilters
from school_portal.domains.directory import DirectoryService, iter_csv
from school_portal.models.common import ExportFormat, ResourceKind
from school_portal.models.directory import AdminSummary, DirectorySearch, FacultySummary, StudentSummary

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class DirectoryParams:
    search: DirectorySearch
    requested: RequestedFilters
    sort: str | None
    format: ExportFormat


def directory_params(
    q: Annotated[str | None, Query(max_length=200)] = None,
    subject: Annotated[str | None, Query(max_length=100)] = None,
    grade: int | None = None,
    section: Annotated[str | None, Query(max_length=10)] = None,
    school_id: str | None = None,
    sort: str | None = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    format: ExportFormat = ExportFormat.JSON,
) -> DirectoryParams:
    """Collect the shared directory query string."""
    return DirectoryParams(
        search=DirectorySearch(q=q, subject=subject, grade=grade, section=section),
        requested=RequestedFilters(school_id=school_id, limit=limit, offset=offset),
        sort=sort,
        format=format,
    )


Params = Annotated[DirectoryParams, Depends(directory_params)]


def _csv_response(kind: ResourceKind, rows: list) -> StreamingResponse:
    return StreamingResponse(
        iter_csv(kind, rows),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={kind.value}.csv"},
    )


async def _listing(
    kind: ResourceKind,
    identity: CurrentIdentity,
    db: DbSession,
    settings: AppSettings,
    params: DirectoryParams,
):
    scope = await AccessScopeResolver(db, settings.directory.max_page_size).resolve(
        identity, kind, params.requested
    )
    service = DirectoryService(db)
    list_method = {
        ResourceKind.FACULTY: service.list_faculty,
        ResourceKind.STUDENTS: service.list_students,
        ResourceKind.ADMINS: service.list_admins,
    }[kind]
    rows = await list_method(scope, params.search, params.sort)

    if params.format is ExportFormat.CSV:
        logger.info("Directory CSV export: kind=%s, rows=%d", kind.value, len(rows))
        return _csv_response(kind, rows)
    return rows


@router.get("/faculty", response_model=list[FacultySummary])
async def list_faculty(identity: CurrentIdentity, db: DbSession, settings: AppSettings, params: Params):
    """Faculty with their subjects and teaching assignments, ordered by name."""
    return await _listing(ResourceKind.FACULTY, identity, db, settings, params)


@router.get("/students", response_model=list[StudentSummary])
async def list_students(identity: CurrentIdentity, db: DbSession, settings: AppSettings, params: Params):
    """Students ordered by grade, section and roll number.

    Faculty callers only see students enrolled in sections they teach.
    """
    return await _listing(ResourceKind.STUDENTS, identity, db, settings, params)


@router.get("/admins", response_model=list[AdminSummary])
async def list_admins(identity: CurrentIdentity, db: DbSession, settings: AppSettings, params: Params):
    """Administrators ordered by name."""
    return await _listing(ResourceKind.ADMINS, identity, db, settings, params)
