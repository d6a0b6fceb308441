# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API routes package.

Modules:
    health: Liveness and database check.
    auth: Login.
    dashboard: Role-branched summary.
    directory: Scoped faculty, student and admin listings.
    reviews: Review creation and listing.
"""

from fastapi import APIRouter

from school_portal.api.routes import auth, dashboard, directory, health, reviews

router = APIRouter()

router.include_router(health.router, tags=["Health"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
router.include_router(directory.router, prefix="/directory", tags=["Directory"])
router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])

__all__ = ["router"]
