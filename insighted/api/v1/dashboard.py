# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dashboard API endpoint.

- GET / - Profile totals, project counts and school summaries
"""

import logging

from fastapi import APIRouter, Depends

from insighted.api.dependencies import get_dashboard_service
from insighted.domains.dashboard.service import DashboardOverview, DashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=DashboardOverview,
    summary="Dashboard overview",
)
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardOverview:
    return await service.overview()
