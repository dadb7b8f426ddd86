# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School profile domain.

Provides the ProfileStore with lock-on-first-submit profile writes and
audited amendments of dependent records.
"""

from insighted.domains.profile.schemas import (
    DEPENDENT_FIELD_NAMES,
    PROFILE_FIELD_NAMES,
    DependentFields,
    DependentRecord,
    EnrolmentFields,
    ProfileAggregate,
    ProfileFields,
    ProfileSummary,
    ProjectStatus,
    ProjectStatusFields,
)
from insighted.domains.profile.service import (
    ACTION_FIELD_MODELS,
    ENROLMENT_UPDATE_ACTION,
    PROFILE_UPDATE_ACTION,
    PROJECT_STATUS_UPDATE_ACTION,
    ProfileNotFoundError,
    ProfilePersistenceError,
    ProfileServiceError,
    ProfileStore,
    ProfileValidationError,
    describe_dependent_change,
    validate_school_id,
)

__all__ = [
    # Schemas
    "DEPENDENT_FIELD_NAMES",
    "PROFILE_FIELD_NAMES",
    "DependentFields",
    "DependentRecord",
    "EnrolmentFields",
    "ProfileAggregate",
    "ProfileFields",
    "ProfileSummary",
    "ProjectStatus",
    "ProjectStatusFields",
    # Service
    "ACTION_FIELD_MODELS",
    "ENROLMENT_UPDATE_ACTION",
    "PROFILE_UPDATE_ACTION",
    "PROJECT_STATUS_UPDATE_ACTION",
    "ProfileNotFoundError",
    "ProfilePersistenceError",
    "ProfileServiceError",
    "ProfileStore",
    "ProfileValidationError",
    "describe_dependent_change",
    "validate_school_id",
]
