# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Profile store for school profiles and their dependent records.

This module provides the ProfileStore that handles:
- Existence checks used to decide whether a profile form is locked
- Submit-or-amend of identity and location fields (lock-on-first-submit)
- Amendment of dependent records (enrolment, project status)
- Read projections for profile pages and the dashboard

Every write appends exactly one entry to the profile's history log, in the
same transaction as the data change.

Example:
    >>> store = ProfileStore(client)
    >>> profile = await store.submit_or_amend("100001", fields, "user-42")
    >>> record = await store.amend_dependent(
    ...     "100001", {"es_total": 120}, "user-42", "Enrolment Update"
    ... )
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from insighted.domains.audit.trail import (
    AuditIntegrityError,
    AuditTrail,
    HistoryEntry,
    parse_history,
)
from insighted.domains.profile.schemas import (
    DEPENDENT_FIELD_NAMES,
    DependentFields,
    DependentRecord,
    EnrolmentFields,
    ProfileAggregate,
    ProfileFields,
    ProfileSummary,
    ProjectStatusFields,
)
from insighted.infrastructure.database.connection import (
    UPSERT_INSERTS,
    DatabaseClient,
    DatabaseError,
)
from insighted.infrastructure.database.models import SchoolProfile
from insighted.utils.datetime import ensure_utc, utc_now
from insighted.utils.logging import profile_log_context

logger = logging.getLogger(__name__)

PROFILE_UPDATE_ACTION = "Profile Update"
ENROLMENT_UPDATE_ACTION = "Enrolment Update"
PROJECT_STATUS_UPDATE_ACTION = "Project Status Update"

# Fields each built-in action may change; other labels accept every dependent field.
ACTION_FIELD_MODELS: dict[str, type[BaseModel]] = {
    ENROLMENT_UPDATE_ACTION: EnrolmentFields,
    PROJECT_STATUS_UPDATE_ACTION: ProjectStatusFields,
}

SCHOOL_ID_PATTERN = re.compile(r"[0-9]{6}")


class ProfileServiceError(Exception):
    """Base exception for profile service errors."""

    pass


class ProfileNotFoundError(ProfileServiceError):
    """Raised when a dependent amendment targets a profile that does not exist."""

    pass


class ProfileValidationError(ProfileServiceError):
    """Raised when input is rejected before any write."""

    pass


class ProfilePersistenceError(ProfileServiceError):
    """Raised when the storage layer fails; nothing was written."""

    pass


def validate_school_id(school_id: str) -> str:
    """Return the trimmed school ID if it is exactly six ASCII digits.

    Raises:
        ProfileValidationError: If the ID is malformed.
    """
    value = (school_id or "").strip()
    if not SCHOOL_ID_PATTERN.fullmatch(value):
        raise ProfileValidationError(f"School ID must be exactly 6 digits, got {school_id!r}")
    return value


def describe_dependent_change(changes: Mapping[str, Any]) -> str | None:
    """Short human-readable summary of a dependent amendment.

    >>> describe_dependent_change({"project_status": "Ongoing", "accomplishment_percentage": 45})
    'Status: Ongoing (45%)'
    """
    parts: list[str] = []

    if changes.get("project_name"):
        parts.append(f"Project: {changes['project_name']}")

    if changes.get("curricular_offering"):
        parts.append(f"Offering: {changes['curricular_offering']}")

    totals = [
        f"{label} {changes[name]}"
        for label, name in (
            ("ES", "es_total"),
            ("JHS", "jhs_total"),
            ("SHS", "shs_total"),
            ("Total", "grand_total"),
        )
        if changes.get(name) is not None
    ]
    if totals:
        parts.append("Enrolment: " + ", ".join(totals))

    status = changes.get("project_status")
    percentage = changes.get("accomplishment_percentage")
    if status and percentage is not None:
        parts.append(f"Status: {status} ({percentage}%)")
    elif status:
        parts.append(f"Status: {status}")
    elif percentage is not None:
        parts.append(f"Accomplishment: {percentage}%")

    if not parts and changes:
        parts.append("Updated: " + ", ".join(sorted(changes)))

    return "; ".join(parts) or None


class ProfileStore:
    """Authoritative store for school profiles.

    The identity and location fields are written by ``submit_or_amend``;
    dependent fields only change through ``amend_dependent``. Both append to
    the same per-school history log.

    Attributes:
        _client: Storage client that owns the engine.

    Example:
        >>> store = ProfileStore(client)
        >>> if not await store.check_exists("100001"):
        ...     await store.submit_or_amend("100001", fields, "user-42")
    """

    def __init__(self, client: DatabaseClient) -> None:
        """Initialize the profile store.

        Args:
            client: Connected database client.
        """
        self._client = client
        self._trail: AuditTrail | None = None

    @property
    def trail(self) -> AuditTrail:
        """Audit trail bound to the client's SQL dialect."""
        if self._trail is None:
            self._trail = AuditTrail(self._client.dialect_name)
        return self._trail

    async def check_exists(self, school_id: str) -> bool:
        """Check whether a profile has been submitted for a school.

        Raises:
            ProfileValidationError: If the school ID is malformed.
            ProfilePersistenceError: If the storage layer fails.
        """
        school_id = validate_school_id(school_id)
        try:
            async with self._client.transaction() as session:
                result = await session.execute(
                    select(SchoolProfile.school_id).where(SchoolProfile.school_id == school_id)
                )
                return result.scalar_one_or_none() is not None
        except DatabaseError as e:
            raise ProfilePersistenceError(f"Existence check failed for {school_id}") from e

    async def get_profile(self, school_id: str) -> ProfileAggregate | None:
        """Get a profile by school ID.

        Returns:
            The profile aggregate, or None if no profile exists.
        """
        school_id = validate_school_id(school_id)
        try:
            async with self._client.transaction() as session:
                profile = await self._get_by_id(session, school_id)
                return self._to_aggregate(profile) if profile else None
        except DatabaseError as e:
            raise ProfilePersistenceError(f"Failed to load profile {school_id}") from e

    async def find_by_submitter(self, submitted_by: str) -> ProfileAggregate | None:
        """Get the most recently submitted profile of a user.

        Args:
            submitted_by: Opaque submitter identity.

        Returns:
            The profile aggregate, or None if the user has not submitted one.
        """
        try:
            async with self._client.transaction() as session:
                result = await session.execute(
                    select(SchoolProfile)
                    .where(SchoolProfile.submitted_by == submitted_by)
                    .order_by(SchoolProfile.submitted_at.desc())
                    .limit(1)
                )
                profile = result.scalar_one_or_none()
                return self._to_aggregate(profile) if profile else None
        except DatabaseError as e:
            raise ProfilePersistenceError("Failed to look up profile by submitter") from e

    async def list_summaries(self) -> list[ProfileSummary]:
        """List every profile as a dashboard summary, ordered by school name."""
        try:
            async with self._client.transaction() as session:
                result = await session.execute(
                    select(SchoolProfile).order_by(
                        SchoolProfile.school_name.asc(),
                        SchoolProfile.school_id.asc(),
                    )
                )
                return [self._to_summary(profile) for profile in result.scalars().all()]
        except DatabaseError as e:
            raise ProfilePersistenceError("Failed to list profiles") from e

    async def submit_or_amend(
        self,
        school_id: str,
        fields: ProfileFields | Mapping[str, Any],
        submitted_by: str,
    ) -> ProfileAggregate:
        """Insert a profile or overwrite its identity fields, appending history.

        A new profile is inserted with a history log holding one
        "Profile Update" entry. An existing profile gets the same field set
        overwritten, ``submitted_by``/``submitted_at`` refreshed and one
        entry appended. Both happen in one transaction.

        Args:
            school_id: Six-digit school ID.
            fields: Identity and location fields.
            submitted_by: Opaque submitter identity.

        Returns:
            The profile as read back after the write.

        Raises:
            ProfileValidationError: If the ID or fields are invalid.
            ProfilePersistenceError: If the write fails; nothing is stored.
        """
        school_id = validate_school_id(school_id)
        profile_fields = self._validate(ProfileFields, fields)
        values = profile_fields.model_dump()

        with profile_log_context(school_id=school_id, action=PROFILE_UPDATE_ACTION):
            try:
                async with self._client.transaction() as session:
                    if self.trail.is_native:
                        entry = await self._upsert(session, school_id, values, submitted_by)
                    else:
                        entry = await self._insert_or_update(
                            session, school_id, values, submitted_by
                        )
                    profile = await self._get_by_id(session, school_id)
            except (DatabaseError, AuditIntegrityError) as e:
                logger.error("Profile submit failed for %s: %s", school_id, e)
                raise ProfilePersistenceError(f"Failed to save profile {school_id}") from e

            logger.info(
                "Profile saved: school_id=%s, by=%s, entry=%s, history=%d",
                school_id,
                submitted_by,
                entry.entry_id,
                len(profile.history_log),
            )

        return self._to_aggregate(profile)

    async def amend_dependent(
        self,
        school_id: str,
        dependent_fields: BaseModel | Mapping[str, Any],
        submitted_by: str,
        action_label: str,
    ) -> DependentRecord:
        """Merge dependent fields into an existing profile and log the change.

        Only the fields present in ``dependent_fields`` are written; the rest
        keep their stored values. Exactly one history entry is appended,
        labelled ``action_label`` with a summary of the change.

        "Enrolment Update" accepts only enrolment fields and "Project Status
        Update" only project fields, so the label always matches the change.

        Args:
            school_id: Six-digit school ID.
            dependent_fields: Enrolment or project fields to change.
            submitted_by: Opaque submitter identity.
            action_label: History action, e.g. "Enrolment Update".

        Returns:
            The dependent record after the write.

        Raises:
            ProfileValidationError: If the ID, label or fields are invalid,
                including identity or location fields and fields outside
                the action's field set.
            ProfileNotFoundError: If no profile exists for the school.
            ProfilePersistenceError: If the write fails; nothing is stored.
        """
        school_id = validate_school_id(school_id)
        if not action_label or not action_label.strip():
            raise ProfileValidationError("Action label is required")
        action_label = action_label.strip()

        model = ACTION_FIELD_MODELS.get(action_label, DependentFields)
        update_fields = self._validate(model, dependent_fields)
        changes = update_fields.model_dump(exclude_unset=True)
        detail = describe_dependent_change(changes)

        with profile_log_context(school_id=school_id, action=action_label):
            try:
                async with self._client.transaction() as session:
                    result = await session.execute(
                        select(SchoolProfile.school_id)
                        .where(SchoolProfile.school_id == school_id)
                        .with_for_update()
                    )
                    if result.scalar_one_or_none() is None:
                        raise ProfileNotFoundError(f"School profile {school_id} not found")

                    # Every amendment moves updated_at, an empty one included.
                    await session.execute(
                        update(SchoolProfile)
                        .where(SchoolProfile.school_id == school_id)
                        .values(**changes, updated_at=utc_now())
                        .execution_options(synchronize_session=False)
                    )

                    entry = await self.trail.append(
                        session, school_id, submitted_by, action_label, detail
                    )
                    profile = await self._get_by_id(session, school_id)
            except (DatabaseError, AuditIntegrityError) as e:
                logger.error("Dependent amendment failed for %s: %s", school_id, e)
                raise ProfilePersistenceError(f"Failed to update {school_id}") from e

            logger.info(
                "Dependent record amended: school_id=%s, action=%s, fields=%s",
                school_id,
                action_label,
                ",".join(sorted(changes)) or "-",
            )

        return DependentRecord(
            school_id=school_id,
            fields=self._to_dependent(profile),
            entry=entry,
            history_length=len(profile.history_log),
            updated_at=ensure_utc(profile.updated_at),
        )

    # =========================================================================
    # Write helpers
    # =========================================================================

    async def _upsert(
        self,
        session: AsyncSession,
        school_id: str,
        values: dict[str, Any],
        submitted_by: str,
    ) -> HistoryEntry:
        """Single-statement INSERT ... ON CONFLICT DO UPDATE with log append."""
        entry = HistoryEntry(submitter=submitted_by, action=PROFILE_UPDATE_ACTION)
        now = entry.timestamp
        insert = UPSERT_INSERTS[self.trail.dialect_name]

        stmt = insert(SchoolProfile).values(
            school_id=school_id,
            **values,
            submitted_by=submitted_by,
            submitted_at=now,
            created_at=now,
            updated_at=now,
            history_log=[entry.to_json()],
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[SchoolProfile.school_id],
            set_={
                **values,
                "submitted_by": submitted_by,
                "submitted_at": now,
                "updated_at": now,
                "history_log": self.trail.appended_log(entry),
            },
        )
        await session.execute(stmt)
        await self.trail.verify(session, school_id, entry)
        return entry

    async def _insert_or_update(
        self,
        session: AsyncSession,
        school_id: str,
        values: dict[str, Any],
        submitted_by: str,
    ) -> HistoryEntry:
        """Locked read-then-write for dialects without a native upsert."""
        result = await session.execute(
            select(SchoolProfile.school_id)
            .where(SchoolProfile.school_id == school_id)
            .with_for_update()
        )
        now = utc_now()

        if result.scalar_one_or_none() is None:
            entry = HistoryEntry(submitter=submitted_by, action=PROFILE_UPDATE_ACTION, timestamp=now)
            session.add(
                SchoolProfile(
                    school_id=school_id,
                    **values,
                    submitted_by=submitted_by,
                    submitted_at=now,
                    history_log=[entry.to_json()],
                )
            )
            await session.flush()
            await self.trail.verify(session, school_id, entry)
            return entry

        await session.execute(
            update(SchoolProfile)
            .where(SchoolProfile.school_id == school_id)
            .values(**values, submitted_by=submitted_by, submitted_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return await self.trail.append(session, school_id, submitted_by, PROFILE_UPDATE_ACTION)

    # =========================================================================
    # Read helpers
    # =========================================================================

    async def _get_by_id(self, session: AsyncSession, school_id: str) -> SchoolProfile | None:
        """Load a profile row, bypassing any stale identity-map state."""
        result = await session.execute(
            select(SchoolProfile)
            .where(SchoolProfile.school_id == school_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _validate(model: type[Any], data: Any) -> Any:
        """Validate input into ``model``, mapping errors to ProfileValidationError.

        Instances of another model are re-checked field by field, so a wider
        model cannot slip fields past a narrower one.
        """
        if type(data) is model:
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ProfileValidationError(str(e)) from e

    @staticmethod
    def _to_dependent(profile: SchoolProfile) -> DependentFields:
        return DependentFields.model_validate(
            {name: getattr(profile, name) for name in DEPENDENT_FIELD_NAMES}
        )

    def _to_aggregate(self, profile: SchoolProfile) -> ProfileAggregate:
        """Convert a profile row to its aggregate."""
        return ProfileAggregate(
            school_id=profile.school_id,
            school_name=profile.school_name,
            region=profile.region,
            province=profile.province,
            municipality=profile.municipality,
            barangay=profile.barangay,
            division=profile.division,
            district=profile.district,
            legislative_district=profile.legislative_district,
            mother_school_id=profile.mother_school_id,
            latitude=profile.latitude,
            longitude=profile.longitude,
            submitted_by=profile.submitted_by,
            submitted_at=ensure_utc(profile.submitted_at),
            updated_at=ensure_utc(profile.updated_at),
            history=parse_history(profile.history_log),
            dependent=self._to_dependent(profile),
        )

    @staticmethod
    def _to_summary(profile: SchoolProfile) -> ProfileSummary:
        return ProfileSummary(
            school_id=profile.school_id,
            school_name=profile.school_name,
            region=profile.region,
            division=profile.division,
            submitted_by=profile.submitted_by,
            submitted_at=ensure_utc(profile.submitted_at),
            curricular_offering=profile.curricular_offering,
            grand_total=profile.grand_total,
            project_name=profile.project_name,
            project_status=profile.project_status,
            accomplishment_percentage=profile.accomplishment_percentage,
            target_completion_date=profile.target_completion_date,
        )
