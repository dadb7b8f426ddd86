# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Audit trail domain.

Append-only per-school history log shared by profile submits and
dependent record amendments.
"""

from insighted.domains.audit.trail import (
    AuditIntegrityError,
    AuditTrail,
    HistoryEntry,
    parse_history,
)

__all__ = [
    "AuditIntegrityError",
    "AuditTrail",
    "HistoryEntry",
    "parse_history",
]
