# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Resolve raw school identifiers and names against the reference index.

The resolver turns operator input (a typed school ID, a pasted school name,
or free-text location values) into a candidate whose hierarchy values are the
canonical spellings from the reference index.

Hierarchy normalization is find-or-pass-through: each level is matched
against the options of its already resolved parent chain, and values with no
match are kept as entered rather than dropped.

Known limitation: ``resolve_by_name`` returns the first row, in dataset
order, whose display name matches. Duplicate school names resolve to
whichever appears first; this is not a "best match".
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass

from insighted.domains.reference.index import ReferenceIndex
from insighted.domains.reference.models import (
    CHAINS,
    HierarchyLevel,
    ReferenceRow,
    normalize_identifier,
)

logger = logging.getLogger(__name__)


class InvalidIdentifierError(ValueError):
    """Raised when a school identifier is structurally invalid (e.g. blank)."""

    pass


@dataclass(frozen=True)
class HierarchySelection:
    """Location hierarchy values for one school.

    Place chain: region, province, municipality, barangay.
    Division chain: division, district.
    """

    region: str = ""
    province: str = ""
    municipality: str = ""
    barangay: str = ""
    division: str = ""
    district: str = ""
    legislative_district: str = ""

    @classmethod
    def from_row(cls, row: ReferenceRow) -> "HierarchySelection":
        return cls(**{level.value: row.value_at(level) for level in HierarchyLevel})

    def value_at(self, level: HierarchyLevel) -> str:
        return getattr(self, level.value)

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class ResolvedCandidate:
    """A reference match ready to pre-fill a profile form.

    Attributes:
        school_id: Normalized school identifier.
        school_name: Display name from the reference dataset.
        hierarchy: Location values normalized against the index.
        mother_school_id: Parent school identifier, if any.
        latitude: Latitude in degrees; None when the dataset value is
            missing, not a number or out of range.
        longitude: Longitude in degrees, same rules as latitude.
    """

    school_id: str
    school_name: str
    hierarchy: HierarchySelection
    mother_school_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    def as_profile_fields(self) -> dict[str, str | float | None]:
        """Field mapping accepted by ``ProfileStore.submit_or_amend``."""
        return {
            "school_name": self.school_name,
            **self.hierarchy.as_dict(),
            "mother_school_id": self.mother_school_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


def normalize_hierarchy(
    raw: Mapping[str, str | None],
    index: ReferenceIndex,
) -> HierarchySelection:
    """Normalize free-text hierarchy values against the index.

    Levels are resolved strictly top-down within each chain, so a province is
    only matched among the provinces of the already resolved region. A value
    with no matching option is passed through unchanged (trimmed).

    The result depends only on ``(raw, index)``, and normalizing an already
    normalized selection returns it unchanged.

    Args:
        raw: Partial hierarchy keyed by level name; missing levels are empty.
        index: Reference index to match against.

    Returns:
        The normalized hierarchy selection.
    """
    resolved: dict[str, str] = {}
    for chain in CHAINS:
        for level in chain:
            value = (raw.get(level.value) or "").strip()
            if value:
                value = index.match(level, resolved, value) or value
            resolved[level.value] = value
    return HierarchySelection(**resolved)


def _coordinate(raw: str | None, bound: float) -> float | None:
    """Parse a dataset coordinate; unusable values become None."""
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.debug("Ignoring non-numeric coordinate %r", raw)
        return None
    if not math.isfinite(value) or abs(value) > bound:
        logger.debug("Ignoring out-of-range coordinate %r", raw)
        return None
    return value


def _candidate_from_row(row: ReferenceRow, index: ReferenceIndex) -> ResolvedCandidate:
    parent = normalize_identifier(row.parent_identifier) if row.parent_identifier else ""
    return ResolvedCandidate(
        school_id=normalize_identifier(row.identifier),
        school_name=row.display_name,
        hierarchy=normalize_hierarchy(HierarchySelection.from_row(row).as_dict(), index),
        mother_school_id=parent or None,
        latitude=_coordinate(row.latitude, 90),
        longitude=_coordinate(row.longitude, 180),
    )


def resolve_by_id(identifier: str, index: ReferenceIndex) -> ResolvedCandidate | None:
    """Find the reference row for a school identifier.

    The identifier is trimmed and any ``.suffix`` is stripped, so
    ``"100001.0"`` resolves the row for ``"100001"``.

    Args:
        identifier: Raw school identifier.
        index: Reference index to search.

    Returns:
        The resolved candidate, or None if no row matches.

    Raises:
        InvalidIdentifierError: If the identifier is blank.
    """
    key = normalize_identifier(identifier)
    if not key:
        raise InvalidIdentifierError(f"Blank school identifier: {identifier!r}")

    row = index.get_row(key)
    if row is None:
        logger.debug("No reference row for school id %s", key)
        return None
    return _candidate_from_row(row, index)


def resolve_by_name(name: str, index: ReferenceIndex) -> ResolvedCandidate | None:
    """Find a school by case-insensitive exact display name.

    Returns:
        The first matching candidate in dataset order, or None.
    """
    if not name or not name.strip():
        return None

    row = index.find_by_name(name)
    if row is None:
        logger.debug("No reference row for school name %r", name)
        return None
    return _candidate_from_row(row, index)
