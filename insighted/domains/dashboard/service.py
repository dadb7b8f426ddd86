# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dashboard aggregates over submitted school profiles.

Example:
    >>> dashboard = DashboardService(store)
    >>> overview = await dashboard.overview()
    >>> overview.delayed_projects
    2
"""

import logging
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from insighted.domains.profile.schemas import ProfileSummary, ProjectStatus
from insighted.domains.profile.service import ProfileStore
from insighted.utils.datetime import utc_today

logger = logging.getLogger(__name__)


class DashboardOverview(BaseModel):
    """Totals and per-school summaries for the dashboard."""

    model_config = ConfigDict(frozen=True)

    as_of: date
    total_profiles: int = 0
    total_enrolment: int = 0
    completed_projects: int = 0
    ongoing_projects: int = 0
    delayed_projects: int = 0
    projects_by_status: dict[str, int] = Field(default_factory=dict)
    schools: list[ProfileSummary] = Field(default_factory=list)


def is_delayed(summary: ProfileSummary, today: date) -> bool:
    """A project is delayed when it is not completed and past its target date."""
    return (
        summary.project_status is not None
        and summary.project_status != ProjectStatus.COMPLETED.value
        and summary.target_completion_date is not None
        and summary.target_completion_date < today
    )


class DashboardService:
    """Aggregates ProfileStore summaries into dashboard totals."""

    def __init__(self, store: ProfileStore) -> None:
        self._store = store

    async def overview(self, today: date | None = None) -> DashboardOverview:
        """Build the dashboard overview.

        Args:
            today: Reference date for delay detection; defaults to today (UTC).

        Returns:
            Dashboard totals and school summaries ordered by name.
        """
        today = today or utc_today()
        summaries = await self._store.list_summaries()

        by_status: dict[str, int] = {}
        for summary in summaries:
            if summary.project_status:
                by_status[summary.project_status] = by_status.get(summary.project_status, 0) + 1

        overview = DashboardOverview(
            as_of=today,
            total_profiles=len(summaries),
            total_enrolment=sum(summary.grand_total or 0 for summary in summaries),
            completed_projects=by_status.get(ProjectStatus.COMPLETED.value, 0),
            ongoing_projects=by_status.get(ProjectStatus.ONGOING.value, 0),
            delayed_projects=sum(1 for summary in summaries if is_delayed(summary, today)),
            projects_by_status=by_status,
            schools=summaries,
        )

        logger.info(
            "Dashboard overview: profiles=%d, enrolment=%d, delayed=%d",
            overview.total_profiles,
            overview.total_enrolment,
            overview.delayed_projects,
        )
        return overview
