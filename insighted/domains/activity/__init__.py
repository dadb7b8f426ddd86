# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed domain."""

from insighted.domains.activity.service import ActivityFeed, ActivityItem

__all__ = ["ActivityFeed", "ActivityItem"]
