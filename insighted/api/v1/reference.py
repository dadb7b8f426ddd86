# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reference data API endpoints.

This module provides endpoints used by the location picker:
- GET /options/{level} - Cascading option list for a hierarchy level
- GET /schools/{identifier} - Resolve a school by ID
- GET /schools?name= - Resolve a school by exact name

Example:
    GET /api/v1/reference/options/province?region=Region%20I
    {"level": "province", "options": ["Ilocos Norte", "Ilocos Sur"]}
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from insighted.api.dependencies import get_reference_index
from insighted.domains.reference.index import ReferenceIndex
from insighted.domains.reference.models import HierarchyLevel
from insighted.domains.reference.resolver import (
    InvalidIdentifierError,
    ResolvedCandidate,
    resolve_by_id,
    resolve_by_name,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class OptionsResponse(BaseModel):
    """Option list for one hierarchy level."""

    level: HierarchyLevel
    options: list[str]


@router.get(
    "/options/{level}",
    response_model=OptionsResponse,
    summary="List hierarchy options",
    description="Distinct values at a level under the already chosen parent values.",
)
async def list_options(
    level: HierarchyLevel,
    region: Annotated[str | None, Query()] = None,
    province: Annotated[str | None, Query()] = None,
    municipality: Annotated[str | None, Query()] = None,
    division: Annotated[str | None, Query()] = None,
    index: ReferenceIndex = Depends(get_reference_index),
) -> OptionsResponse:
    """List the options of a hierarchy level.

    An unknown or missing parent yields an empty list, never an error.
    """
    parents = {
        HierarchyLevel.REGION.value: region,
        HierarchyLevel.PROVINCE.value: province,
        HierarchyLevel.MUNICIPALITY.value: municipality,
        HierarchyLevel.DIVISION.value: division,
    }
    options = index.options_for(level, {k: v for k, v in parents.items() if v})
    return OptionsResponse(level=level, options=list(options))


@router.get(
    "/schools/{identifier}",
    response_model=ResolvedCandidate,
    summary="Resolve school by ID",
)
async def resolve_school_by_id(
    identifier: str,
    index: ReferenceIndex = Depends(get_reference_index),
) -> ResolvedCandidate:
    """Resolve a school ID (``100001`` or ``100001.0``) to a candidate.

    Raises:
        HTTPException: 422 for a blank identifier, 404 when not found.
    """
    try:
        candidate = resolve_by_id(identifier, index)
    except InvalidIdentifierError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    if candidate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"School {identifier} not found in reference data",
        )
    return candidate


@router.get(
    "/schools",
    response_model=ResolvedCandidate,
    summary="Resolve school by name",
)
async def resolve_school_by_name(
    name: Annotated[str, Query(min_length=1, description="Exact school name, any case")],
    index: ReferenceIndex = Depends(get_reference_index),
) -> ResolvedCandidate:
    """Resolve a school by case-insensitive exact name.

    Raises:
        HTTPException: 404 when no school has that name.
    """
    candidate = resolve_by_name(name, index)
    if candidate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"School named {name!r} not found in reference data",
        )
    return candidate
