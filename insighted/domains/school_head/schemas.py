# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models for school head records."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from insighted.domains.profile.schemas import FormModel


class SchoolHeadFields(FormModel):
    """School head personnel fields as sent by the form client."""

    last_name: str = Field(..., min_length=1, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: str | None = Field(None, max_length=100)
    item_number: str | None = Field(None, max_length=64)
    position_title: str | None = Field(None, max_length=100)
    date_hired: date | None = None


class SchoolHeadRecord(BaseModel):
    """Stored school head record."""

    model_config = ConfigDict(frozen=True)

    user_uid: str
    last_name: str
    first_name: str
    middle_name: str | None = None
    item_number: str | None = None
    position_title: str | None = None
    date_hired: date | None = None
    created_at: datetime
    updated_at: datetime
