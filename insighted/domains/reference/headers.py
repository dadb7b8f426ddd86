# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Header alias table for reference dataset ingestion.

Reference exports do not share a fixed schema: the same column shows up as
``School ID``, ``school_id`` or ``SCHOOLID``, and legislative district as
``Leg District`` or ``Legislative District (Congressional)``. Headers are
resolved once per dataset against the table below:

1. Exact pass: a header whose normalized form is one of the field's exact
   spellings.
2. Substring pass: for fields still unresolved, a header whose normalized
   form contains one of the field's tokens.

A header is claimed by at most one field. Fields are tried in table order,
so legislative district is claimed before district.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from insighted.domains.reference.models import ReferenceRow, normalize_key


@dataclass(frozen=True)
class HeaderAlias:
    """Accepted spellings for one canonical reference field.

    Attributes:
        name: ReferenceRow attribute name.
        exact: Normalized header spellings matched exactly.
        contains: Normalized tokens matched as substrings.
    """

    name: str
    exact: frozenset[str]
    contains: tuple[str, ...] = ()


HEADER_ALIASES: tuple[HeaderAlias, ...] = (
    HeaderAlias("identifier", frozenset({"schoolid", "beisschoolid", "id"})),
    HeaderAlias("display_name", frozenset({"schoolname", "name"}), ("schoolname",)),
    HeaderAlias(
        "legislative_district",
        frozenset({"legdistrict", "legislativedistrict"}),
        ("legislative",),
    ),
    HeaderAlias(
        "parent_identifier",
        frozenset({"motherschoolid", "motherschool", "motherid"}),
        ("motherschool",),
    ),
    HeaderAlias("region", frozenset({"region"}), ("region",)),
    HeaderAlias("province", frozenset({"province"}), ("province",)),
    HeaderAlias(
        "municipality",
        frozenset({"municipality", "city", "citymunicipality", "municipalitycity"}),
        ("municipality",),
    ),
    HeaderAlias("barangay", frozenset({"barangay", "brgy"}), ("barangay",)),
    HeaderAlias("division", frozenset({"division", "schoolsdivision"}), ("division",)),
    HeaderAlias("district", frozenset({"district", "schooldistrict"}), ("district",)),
    HeaderAlias("latitude", frozenset({"latitude", "lat"}), ("latitude",)),
    HeaderAlias("longitude", frozenset({"longitude", "long", "lng", "lon"}), ("longitude",)),
)

_OPTIONAL_FIELDS = frozenset({"parent_identifier", "latitude", "longitude"})


@dataclass(frozen=True)
class ResolvedHeaders:
    """Canonical field name -> header name for one dataset."""

    columns: Mapping[str, str] = field(default_factory=dict)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.columns

    def value(self, record: Mapping[str, str | None], field_name: str) -> str:
        """Trimmed value of a canonical field, ``""`` when absent."""
        header = self.columns.get(field_name)
        if header is None:
            return ""
        raw = record.get(header)
        return str(raw).strip() if raw is not None else ""

    def to_row(self, record: Mapping[str, str | None]) -> ReferenceRow:
        """Convert one raw record into a ReferenceRow."""
        values = {alias.name: self.value(record, alias.name) for alias in HEADER_ALIASES}
        for name in _OPTIONAL_FIELDS:
            values[name] = values[name] or None
        return ReferenceRow(**values)


def resolve_headers(headers: Iterable[str]) -> ResolvedHeaders:
    """Map dataset headers onto canonical reference fields.

    Args:
        headers: Header names as they appear in the dataset.

    Returns:
        ResolvedHeaders with one entry per field that could be matched.
    """
    normalized = [(header, normalize_key(header)) for header in headers if header]
    columns: dict[str, str] = {}
    claimed: set[str] = set()

    for alias in HEADER_ALIASES:
        for header, key in normalized:
            if header not in claimed and key in alias.exact:
                columns[alias.name] = header
                claimed.add(header)
                break

    for alias in HEADER_ALIASES:
        if alias.name in columns:
            continue
        for header, key in normalized:
            if header in claimed:
                continue
            if any(token in key for token in alias.contains):
                columns[alias.name] = header
                claimed.add(header)
                break

    return ResolvedHeaders(columns=columns)
