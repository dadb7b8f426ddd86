# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School head domain."""

from insighted.domains.school_head.schemas import SchoolHeadFields, SchoolHeadRecord
from insighted.domains.school_head.service import (
    SchoolHeadPersistenceError,
    SchoolHeadService,
    SchoolHeadServiceError,
    SchoolHeadValidationError,
)

__all__ = [
    "SchoolHeadFields",
    "SchoolHeadRecord",
    "SchoolHeadPersistenceError",
    "SchoolHeadService",
    "SchoolHeadServiceError",
    "SchoolHeadValidationError",
]
