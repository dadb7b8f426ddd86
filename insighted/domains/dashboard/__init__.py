# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dashboard domain."""

from insighted.domains.dashboard.service import DashboardOverview, DashboardService, is_delayed

__all__ = ["DashboardOverview", "DashboardService", "is_delayed"]
