# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP API for InsightEd.

Run with:
    uvicorn insighted.api.app:create_app --factory --port 3000
"""

from insighted.api.app import create_app

__all__ = ["create_app"]
