# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School head API endpoints.

This module provides endpoints for school head records:
- GET /{uid} - Get the school head record of a user
- PUT /{uid} - Insert or overwrite the school head record of a user
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from insighted.api.dependencies import get_school_head_service, require_submitter
from insighted.domains.school_head.schemas import SchoolHeadFields, SchoolHeadRecord
from insighted.domains.school_head.service import SchoolHeadService, SchoolHeadValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{uid}",
    response_model=SchoolHeadRecord,
    summary="Get school head",
)
async def get_school_head(
    uid: str,
    service: SchoolHeadService = Depends(get_school_head_service),
) -> SchoolHeadRecord:
    """Get the school head record saved for a user.

    Raises:
        HTTPException: 404 when the user has not saved one.
    """
    try:
        head = await service.get(uid)
    except SchoolHeadValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if head is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No school head saved for this user",
        )
    return head


@router.put(
    "/{uid}",
    response_model=SchoolHeadRecord,
    summary="Save school head",
)
async def save_school_head(
    uid: str,
    data: SchoolHeadFields,
    submitted_by: str = Depends(require_submitter),
    service: SchoolHeadService = Depends(get_school_head_service),
) -> SchoolHeadRecord:
    """Insert or overwrite the school head record of a user."""
    logger.info("Saving school head: uid=%s, by=%s", uid, submitted_by)
    try:
        return await service.save(uid, data)
    except SchoolHeadValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
