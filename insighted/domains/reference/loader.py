# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reference dataset loader.

Reads the school reference CSV export and builds a ReferenceIndex from it.
Column names are resolved through the header alias table, so exports with
differently spelled headers load without changes.
"""

import csv
import logging
from pathlib import Path

from insighted.domains.reference.index import EmptyReferenceError, ReferenceIndex

logger = logging.getLogger(__name__)


def load_reference_index(path: Path | str, encoding: str = "utf-8-sig") -> ReferenceIndex:
    """Load a reference index from a CSV file.

    Args:
        path: Path to the CSV export.
        encoding: File encoding. The default strips a UTF-8 byte order mark.

    Returns:
        The built ReferenceIndex.

    Raises:
        EmptyReferenceError: If the file is missing or has no data rows.
        MissingHeaderError: If no column maps to the school identifier.
    """
    path = Path(path)
    if not path.is_file():
        raise EmptyReferenceError(f"Reference dataset not found: {path}")

    logger.info("Loading reference dataset from %s", path)

    with path.open(newline="", encoding=encoding) as handle:
        reader = csv.DictReader(handle)
        index = ReferenceIndex.from_records(reader)

    logger.info("Loaded %d reference rows from %s", len(index), path.name)
    return index
