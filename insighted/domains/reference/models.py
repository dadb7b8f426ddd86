# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reference row and hierarchy level definitions.

Two independent hierarchies are described here and must never be mixed:

- Place chain: region -> province -> municipality -> barangay
- Division chain: division -> district

Legislative district is a flat level with no parent.
"""

from dataclasses import dataclass
from enum import Enum


class HierarchyLevel(str, Enum):
    """One rung of a reference hierarchy."""

    REGION = "region"
    PROVINCE = "province"
    MUNICIPALITY = "municipality"
    BARANGAY = "barangay"
    DIVISION = "division"
    DISTRICT = "district"
    LEGISLATIVE_DISTRICT = "legislative_district"


PLACE_CHAIN: tuple[HierarchyLevel, ...] = (
    HierarchyLevel.REGION,
    HierarchyLevel.PROVINCE,
    HierarchyLevel.MUNICIPALITY,
    HierarchyLevel.BARANGAY,
)
DIVISION_CHAIN: tuple[HierarchyLevel, ...] = (
    HierarchyLevel.DIVISION,
    HierarchyLevel.DISTRICT,
)
LEGISLATIVE_CHAIN: tuple[HierarchyLevel, ...] = (HierarchyLevel.LEGISLATIVE_DISTRICT,)

# Resolution order: every chain is walked top-down.
CHAINS: tuple[tuple[HierarchyLevel, ...], ...] = (PLACE_CHAIN, DIVISION_CHAIN, LEGISLATIVE_CHAIN)


def parents_of(level: HierarchyLevel) -> tuple[HierarchyLevel, ...]:
    """Return the levels above ``level`` in its own chain, top first."""
    for chain in CHAINS:
        if level in chain:
            return chain[: chain.index(level)]
    raise ValueError(f"Unknown hierarchy level: {level}")


def normalize_key(value: str | None) -> str:
    """Matching key: case-folded, every non-alphanumeric character removed.

    >>> normalize_key("Region I (Ilocos)")
    'regioniilocos'
    """
    if not value:
        return ""
    return "".join(ch for ch in value.casefold() if ch.isalnum())


def normalize_identifier(value: object) -> str:
    """Strip whitespace and any ``.suffix`` from a school identifier.

    Spreadsheet exports often turn ``100001`` into ``100001.0``; only the
    integer-like prefix is significant.

    >>> normalize_identifier(" 100001.0 ")
    '100001'
    """
    if value is None:
        return ""
    return str(value).strip().split(".")[0].strip()


@dataclass(frozen=True)
class ReferenceRow:
    """One school in the reference dataset.

    Coordinates are kept as the dataset's raw strings.
    """

    identifier: str
    display_name: str
    region: str = ""
    province: str = ""
    municipality: str = ""
    barangay: str = ""
    division: str = ""
    district: str = ""
    legislative_district: str = ""
    parent_identifier: str | None = None
    latitude: str | None = None
    longitude: str | None = None

    def value_at(self, level: HierarchyLevel) -> str:
        """Value of this row at the given hierarchy level."""
        return getattr(self, level.value) or ""
