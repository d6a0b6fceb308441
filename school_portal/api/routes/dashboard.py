# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dashboard endpoint.

- GET /dashboard - Role-branched summary for the caller
"""

from fastapi import APIRouter

from school_portal.api.dependencies import CurrentIdentity, DbSession
from school_portal.domains.dashboard import DashboardService
from school_portal.models.dashboard import Dashboard

router = APIRouter()


@router.get("", response_model=Dashboard)
async def get_dashboard(identity: CurrentIdentity, db: DbSession) -> Dashboard:
    """The caller's dashboard; the shape depends on their role."""
    return await DashboardService(db).build(identity)
