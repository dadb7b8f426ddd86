# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School profile API endpoints.

This module provides endpoints for school profiles:
- GET /{school_id}/exists - Whether the profile form is locked
- GET /{school_id} - Get a profile with its history
- GET /by-submitter/{uid} - Get the profile a user submitted
- PUT /{school_id} - Submit or re-save identity and location fields
- POST /{school_id}/enrolment - Amend enrolment figures
- POST /{school_id}/project-status - Amend project status

Writes read the submitter identity from the ``X-Submitter-Id`` header.

Example:
    PUT /api/v1/profiles/100001
    {
        "schoolName": "Example ES",
        "region": "Region I",
        "province": "Ilocos Norte"
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from insighted.api.dependencies import get_profile_store, require_submitter
from insighted.domains.profile.schemas import (
    DependentRecord,
    EnrolmentFields,
    ProfileAggregate,
    ProfileFields,
    ProjectStatusFields,
)
from insighted.domains.profile.service import (
    ENROLMENT_UPDATE_ACTION,
    PROJECT_STATUS_UPDATE_ACTION,
    ProfileNotFoundError,
    ProfileStore,
    ProfileValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ExistsResponse(BaseModel):
    """Result of a profile existence check."""

    school_id: str
    exists: bool


def _unprocessable(error: ProfileValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))


@router.get(
    "/by-submitter/{uid}",
    response_model=ProfileAggregate,
    summary="Get profile by submitter",
)
async def get_profile_by_submitter(
    uid: str,
    store: ProfileStore = Depends(get_profile_store),
) -> ProfileAggregate:
    """Get the most recent profile submitted by a user.

    Raises:
        HTTPException: 404 when the user has not submitted a profile.
    """
    profile = await store.find_by_submitter(uid)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No profile submitted by this user",
        )
    return profile


@router.get(
    "/{school_id}/exists",
    response_model=ExistsResponse,
    summary="Check profile existence",
)
async def check_profile_exists(
    school_id: str,
    store: ProfileStore = Depends(get_profile_store),
) -> ExistsResponse:
    """Check whether a school already submitted its profile."""
    try:
        exists = await store.check_exists(school_id)
    except ProfileValidationError as e:
        raise _unprocessable(e)
    return ExistsResponse(school_id=school_id, exists=exists)


@router.get(
    "/{school_id}",
    response_model=ProfileAggregate,
    summary="Get profile",
)
async def get_profile(
    school_id: str,
    store: ProfileStore = Depends(get_profile_store),
) -> ProfileAggregate:
    """Get a school profile with its full history.

    Raises:
        HTTPException: 422 for a malformed ID, 404 when not found.
    """
    try:
        profile = await store.get_profile(school_id)
    except ProfileValidationError as e:
        raise _unprocessable(e)

    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"School profile {school_id} not found",
        )
    return profile


@router.put(
    "/{school_id}",
    response_model=ProfileAggregate,
    summary="Submit profile",
    description="Insert the profile or re-save its identity fields. Appends one history entry.",
)
async def submit_profile(
    school_id: str,
    data: ProfileFields,
    submitted_by: str = Depends(require_submitter),
    store: ProfileStore = Depends(get_profile_store),
) -> ProfileAggregate:
    """Submit or re-save a school profile.

    Raises:
        HTTPException: 422 for a malformed ID.
    """
    logger.info("Submitting profile: school_id=%s, by=%s", school_id, submitted_by)

    try:
        return await store.submit_or_amend(school_id, data, submitted_by)
    except ProfileValidationError as e:
        raise _unprocessable(e)


async def _amend(
    store: ProfileStore,
    school_id: str,
    data: EnrolmentFields | ProjectStatusFields,
    submitted_by: str,
    action_label: str,
) -> DependentRecord:
    try:
        return await store.amend_dependent(school_id, data, submitted_by, action_label)
    except ProfileValidationError as e:
        raise _unprocessable(e)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"School profile {school_id} not found",
        )


@router.post(
    "/{school_id}/enrolment",
    response_model=DependentRecord,
    summary="Update enrolment",
)
async def update_enrolment(
    school_id: str,
    data: EnrolmentFields,
    submitted_by: str = Depends(require_submitter),
    store: ProfileStore = Depends(get_profile_store),
) -> DependentRecord:
    """Amend enrolment figures of an existing profile.

    Project fields are rejected here; they go through ``/project-status``.
    """
    return await _amend(store, school_id, data, submitted_by, ENROLMENT_UPDATE_ACTION)


@router.post(
    "/{school_id}/project-status",
    response_model=DependentRecord,
    summary="Update project status",
)
async def update_project_status(
    school_id: str,
    data: ProjectStatusFields,
    submitted_by: str = Depends(require_submitter),
    store: ProfileStore = Depends(get_profile_store),
) -> DependentRecord:
    """Amend the construction project status of an existing profile."""
    return await _amend(store, school_id, data, submitted_by, PROJECT_STATUS_UPDATE_ACTION)
