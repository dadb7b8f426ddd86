# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    reference: Cascading location options and school resolution.
    profiles: School profile submit, lookup and dependent amendments.
    activity: Activity feed across profile history logs.
    dashboard: Dashboard totals.
    school_heads: School head personnel records.
"""

from fastapi import APIRouter

from insighted.api.v1 import activity, dashboard, profiles, reference, school_heads

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(reference.router, prefix="/reference", tags=["Reference"])
router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
router.include_router(activity.router, prefix="/activity", tags=["Activity"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
router.include_router(school_heads.router, prefix="/school-heads", tags=["School heads"])

__all__ = ["router"]
