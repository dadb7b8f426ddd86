# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reference data domain.

Provides the reference index used for cascading location pickers and the
resolver that matches school identifiers and names against it.
"""

from insighted.domains.reference.headers import (
    HEADER_ALIASES,
    HeaderAlias,
    ResolvedHeaders,
    resolve_headers,
)
from insighted.domains.reference.index import (
    EmptyReferenceError,
    MissingHeaderError,
    ReferenceDataError,
    ReferenceIndex,
)
from insighted.domains.reference.loader import load_reference_index
from insighted.domains.reference.models import (
    HierarchyLevel,
    ReferenceRow,
    normalize_identifier,
    normalize_key,
)
from insighted.domains.reference.resolver import (
    HierarchySelection,
    InvalidIdentifierError,
    ResolvedCandidate,
    normalize_hierarchy,
    resolve_by_id,
    resolve_by_name,
)

__all__ = [
    "HEADER_ALIASES",
    "EmptyReferenceError",
    "HeaderAlias",
    "HierarchyLevel",
    "HierarchySelection",
    "InvalidIdentifierError",
    "MissingHeaderError",
    "ReferenceDataError",
    "ReferenceIndex",
    "ReferenceRow",
    "ResolvedCandidate",
    "ResolvedHeaders",
    "load_reference_index",
    "normalize_hierarchy",
    "normalize_identifier",
    "normalize_key",
    "resolve_by_id",
    "resolve_by_name",
]
