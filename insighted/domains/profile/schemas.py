# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models for school profiles and their dependent records.

Request models accept both snake_case field names and the camelCase keys sent
by the form client (``schoolName``, ``esTotal``, ``grade1``). Blank strings
from form inputs are treated as missing values. Responses are always
serialized with snake_case names.
"""

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from insighted.domains.audit.trail import HistoryEntry


class ProjectStatus(str, Enum):
    """Construction project status reported by engineers."""

    NOT_YET_STARTED = "Not Yet Started"
    UNDER_PROCUREMENT = "Under Procurement"
    ONGOING = "Ongoing"
    FOR_FINAL_INSPECTION = "For Final Inspection"
    COMPLETED = "Completed"


class FormModel(BaseModel):
    """Base for models validated from form submissions."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data: Any) -> Any:
        """Treat empty form inputs as missing values."""
        if isinstance(data, Mapping):
            return {
                key: None if isinstance(value, str) and not value.strip() else value
                for key, value in data.items()
            }
        return data


class ProfileFields(FormModel):
    """Identity and location fields written by a profile submit.

    These fields are locked in the UI once the profile exists.
    """

    school_name: str = Field(..., min_length=1, max_length=255)
    region: str | None = Field(None, max_length=255)
    province: str | None = Field(None, max_length=255)
    municipality: str | None = Field(None, max_length=255)
    barangay: str | None = Field(None, max_length=255)
    division: str | None = Field(None, max_length=255)
    district: str | None = Field(None, max_length=255)
    legislative_district: str | None = Field(None, max_length=255)
    mother_school_id: str | None = Field(None, max_length=32)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


PROFILE_FIELD_NAMES: tuple[str, ...] = tuple(ProfileFields.model_fields)


class EnrolmentFields(FormModel):
    """Enrolment figures amended after submit.

    Every field is optional: an amendment only touches the fields it sets.
    """

    curricular_offering: str | None = Field(None, max_length=100)
    es_total: int | None = Field(None, ge=0)
    jhs_total: int | None = Field(None, ge=0)
    shs_total: int | None = Field(None, ge=0)
    grand_total: int | None = Field(None, ge=0)
    grade_kinder: int | None = Field(None, ge=0)
    grade_1: int | None = Field(None, ge=0)
    grade_2: int | None = Field(None, ge=0)
    grade_3: int | None = Field(None, ge=0)
    grade_4: int | None = Field(None, ge=0)
    grade_5: int | None = Field(None, ge=0)
    grade_6: int | None = Field(None, ge=0)
    grade_7: int | None = Field(None, ge=0)
    grade_8: int | None = Field(None, ge=0)
    grade_9: int | None = Field(None, ge=0)
    grade_10: int | None = Field(None, ge=0)
    grade_11: int | None = Field(None, ge=0)
    grade_12: int | None = Field(None, ge=0)

    # Senior high strands
    abm_11: int | None = Field(None, ge=0)
    abm_12: int | None = Field(None, ge=0)
    stem_11: int | None = Field(None, ge=0)
    stem_12: int | None = Field(None, ge=0)
    humss_11: int | None = Field(None, ge=0)
    humss_12: int | None = Field(None, ge=0)
    gas_11: int | None = Field(None, ge=0)
    gas_12: int | None = Field(None, ge=0)
    tvl_ict_11: int | None = Field(None, ge=0)
    tvl_ict_12: int | None = Field(None, ge=0)
    tvl_he_11: int | None = Field(None, ge=0)
    tvl_he_12: int | None = Field(None, ge=0)
    tvl_ia_11: int | None = Field(None, ge=0)
    tvl_ia_12: int | None = Field(None, ge=0)
    tvl_afa_11: int | None = Field(None, ge=0)
    tvl_afa_12: int | None = Field(None, ge=0)
    arts_11: int | None = Field(None, ge=0)
    arts_12: int | None = Field(None, ge=0)
    sports_11: int | None = Field(None, ge=0)
    sports_12: int | None = Field(None, ge=0)


class ProjectStatusFields(FormModel):
    """Construction project details and status reported by engineers."""

    project_name: str | None = Field(None, max_length=255)
    contractor_name: str | None = Field(None, max_length=255)
    project_allocation: Decimal | None = Field(None, ge=0, max_digits=14, decimal_places=2)
    batch_of_funds: str | None = Field(None, max_length=100)
    notice_to_proceed: date | None = None
    project_status: ProjectStatus | None = None
    accomplishment_percentage: int | None = Field(None, ge=0, le=100)
    status_as_of: date | None = None
    target_completion_date: date | None = None
    actual_completion_date: date | None = None
    project_remarks: str | None = None


class DependentFields(EnrolmentFields, ProjectStatusFields):
    """Every field amendable after submit, as stored on the profile."""

    pass


DEPENDENT_FIELD_NAMES: tuple[str, ...] = tuple(DependentFields.model_fields)


class ProfileAggregate(BaseModel):
    """Full post-write state of a school profile."""

    model_config = ConfigDict(frozen=True)

    school_id: str
    school_name: str
    region: str | None = None
    province: str | None = None
    municipality: str | None = None
    barangay: str | None = None
    division: str | None = None
    district: str | None = None
    legislative_district: str | None = None
    mother_school_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    submitted_by: str
    submitted_at: datetime
    updated_at: datetime
    history: tuple[HistoryEntry, ...] = ()
    dependent: DependentFields = Field(default_factory=DependentFields)


class DependentRecord(BaseModel):
    """Dependent field values after an amendment.

    Attributes:
        entry: The history entry appended by the amendment.
        history_length: Number of entries in the profile's log afterwards.
    """

    model_config = ConfigDict(frozen=True)

    school_id: str
    fields: DependentFields
    entry: HistoryEntry
    history_length: int
    updated_at: datetime


class ProfileSummary(BaseModel):
    """Dashboard projection of a profile."""

    model_config = ConfigDict(frozen=True)

    school_id: str
    school_name: str
    region: str | None = None
    division: str | None = None
    submitted_by: str
    submitted_at: datetime
    curricular_offering: str | None = None
    grand_total: int | None = None
    project_name: str | None = None
    project_status: str | None = None
    accomplishment_percentage: int | None = None
    target_completion_date: date | None = None
