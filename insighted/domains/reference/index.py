# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reference index for cascading option lists and lookups.

The ReferenceIndex is a pure, rebuildable view over a set of ReferenceRows.
For every hierarchy level it records which values occur under which parent
chain, so a location picker can narrow provinces by region, municipalities by
province and so on, and districts by division.

Values are grouped by their normalized key (see ``normalize_key``); the
display spelling is the one from the first row that carried the value.

Example:
    >>> index = ReferenceIndex.build(rows)
    >>> index.options_for(HierarchyLevel.PROVINCE, {"region": "Region I"})
    ('Ilocos Norte', 'Ilocos Sur')
    >>> index.districts_of("Ilocos Norte")
    ('Bacarra', 'Laoag City I')
"""

import itertools
import logging
from collections.abc import Iterable, Mapping

from insighted.domains.reference.headers import resolve_headers
from insighted.domains.reference.models import (
    CHAINS,
    HierarchyLevel,
    ReferenceRow,
    normalize_identifier,
    normalize_key,
    parents_of,
)

logger = logging.getLogger(__name__)

# (level, normalized parent keys) -> {normalized value key: display value}
_OptionBuckets = dict[tuple[HierarchyLevel, tuple[str, ...]], dict[str, str]]


class ReferenceDataError(Exception):
    """Base exception for reference dataset errors."""

    pass


class EmptyReferenceError(ReferenceDataError):
    """Raised when the reference dataset is missing or has no rows.

    Callers treat this as "dropdowns unusable, resolution disabled".
    """

    pass


class MissingHeaderError(ReferenceDataError):
    """Raised when a required reference column cannot be resolved."""

    pass


class ReferenceIndex:
    """Lookup structures derived from a reference dataset.

    Build instances with ``ReferenceIndex.build`` or
    ``ReferenceIndex.from_records``.
    """

    def __init__(
        self,
        rows: tuple[ReferenceRow, ...],
        buckets: _OptionBuckets,
        by_identifier: dict[str, ReferenceRow],
        by_name: dict[str, ReferenceRow],
    ) -> None:
        self._rows = rows
        self._buckets = buckets
        self._options = {
            bucket_key: tuple(sorted(values.values(), key=str.casefold))
            for bucket_key, values in buckets.items()
        }
        self._by_identifier = by_identifier
        self._by_name = by_name

    @classmethod
    def build(cls, rows: Iterable[ReferenceRow]) -> "ReferenceIndex":
        """Build an index from reference rows.

        Args:
            rows: Reference rows in dataset order.

        Returns:
            The built index.

        Raises:
            EmptyReferenceError: If ``rows`` is empty.
        """
        rows = tuple(rows)
        if not rows:
            raise EmptyReferenceError("Reference dataset has no rows")

        buckets: _OptionBuckets = {}
        by_identifier: dict[str, ReferenceRow] = {}
        by_name: dict[str, ReferenceRow] = {}

        for row in rows:
            for chain in CHAINS:
                path: list[str] = []
                for level in chain:
                    display = row.value_at(level).strip()
                    key = normalize_key(display)
                    if not key:
                        # Nothing below an empty level is reachable.
                        break
                    buckets.setdefault((level, tuple(path)), {}).setdefault(key, display)
                    path.append(key)

            identifier = normalize_identifier(row.identifier)
            if identifier:
                by_identifier.setdefault(identifier, row)

            name_key = row.display_name.strip().casefold()
            if name_key:
                by_name.setdefault(name_key, row)

        logger.info(
            "Reference index built: rows=%d, schools=%d, option_lists=%d",
            len(rows),
            len(by_identifier),
            len(buckets),
        )

        return cls(rows, buckets, by_identifier, by_name)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, str | None]]) -> "ReferenceIndex":
        """Build an index from raw string-keyed records (e.g. CSV rows).

        Header names are resolved once, from the first record, through the
        header alias table.

        Args:
            records: Raw records with dataset-specific header names.

        Returns:
            The built index.

        Raises:
            EmptyReferenceError: If there are no records.
            MissingHeaderError: If no column maps to the school identifier.
        """
        iterator = iter(records)
        first = next(iterator, None)
        if first is None:
            raise EmptyReferenceError("Reference dataset has no rows")

        headers = resolve_headers(first.keys())
        if "identifier" not in headers:
            raise MissingHeaderError(
                f"No school identifier column among headers: {', '.join(first.keys())}"
            )
        logger.debug("Resolved reference headers: %s", dict(headers.columns))

        return cls.build(headers.to_row(record) for record in itertools.chain([first], iterator))

    @property
    def rows(self) -> tuple[ReferenceRow, ...]:
        """All rows, in dataset order."""
        return self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def _parent_path(
        self,
        level: HierarchyLevel,
        parents: Mapping[str, str] | None,
    ) -> tuple[str, ...] | None:
        """Normalized parent keys for ``level``; None if a parent is missing."""
        path: list[str] = []
        for parent_level in parents_of(level):
            key = normalize_key((parents or {}).get(parent_level.value))
            if not key:
                return None
            path.append(key)
        return tuple(path)

    def options_for(
        self,
        level: HierarchyLevel | str,
        parents: Mapping[str, str] | None = None,
    ) -> tuple[str, ...]:
        """Distinct values at ``level`` under the given parent selection.

        Args:
            level: Hierarchy level to list.
            parents: Already chosen values of the levels above, keyed by
                level name (``{"region": "Region I"}``). Matched by
                normalized key.

        Returns:
            Display values sorted case-insensitively; empty when a parent is
            missing or has no children.
        """
        level = HierarchyLevel(level)
        path = self._parent_path(level, parents)
        if path is None:
            return ()
        return self._options.get((level, path), ())

    def match(
        self,
        level: HierarchyLevel | str,
        parents: Mapping[str, str] | None,
        value: str | None,
    ) -> str | None:
        """Canonical display value matching ``value`` at ``level``, if any."""
        level = HierarchyLevel(level)
        key = normalize_key(value)
        if not key:
            return None
        path = self._parent_path(level, parents)
        if path is None:
            return None
        return self._buckets.get((level, path), {}).get(key)

    def districts_of(self, division: str) -> tuple[str, ...]:
        """Districts that belong to a division."""
        return self.options_for(HierarchyLevel.DISTRICT, {HierarchyLevel.DIVISION.value: division})

    def legislative_districts(self) -> tuple[str, ...]:
        """All legislative districts."""
        return self.options_for(HierarchyLevel.LEGISLATIVE_DISTRICT)

    def get_row(self, identifier: str) -> ReferenceRow | None:
        """First row whose identifier matches after normalization."""
        return self._by_identifier.get(normalize_identifier(identifier))

    def find_by_name(self, name: str) -> ReferenceRow | None:
        """First row whose display name matches case-insensitively."""
        return self._by_name.get(name.strip().casefold())
