"""InsightEd school profile backend.

Reference-data driven school profile submission with lock-on-submit
semantics and an append-only audit trail for dependent records.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
