# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the profile store against a SQLite database."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import update

from insighted.domains.audit.trail import AuditIntegrityError, AuditTrail
from insighted.domains.profile.schemas import PROFILE_FIELD_NAMES, DependentFields, ProfileFields
from insighted.domains.profile.service import (
    ENROLMENT_UPDATE_ACTION,
    PROFILE_UPDATE_ACTION,
    PROJECT_STATUS_UPDATE_ACTION,
    ProfileNotFoundError,
    ProfilePersistenceError,
    ProfileStore,
    ProfileValidationError,
    describe_dependent_change,
    validate_school_id,
)
from insighted.infrastructure.database.connection import DatabaseClient
from insighted.infrastructure.database.models import SchoolProfile


class TestValidateSchoolId:
    """Tests for school ID validation."""

    def test_valid(self) -> None:
        assert validate_school_id("100001") == "100001"
        assert validate_school_id(" 100001 ") == "100001"

    @pytest.mark.parametrize("school_id", ["", "12345", "1234567", "abcdef", "100001.0", "１２３４５６"])
    def test_invalid(self, school_id) -> None:
        with pytest.raises(ProfileValidationError):
            validate_school_id(school_id)


class TestDescribeDependentChange:
    """Tests for history detail summaries."""

    def test_enrolment_summary(self) -> None:
        detail = describe_dependent_change(
            {"curricular_offering": "Purely ES", "es_total": 120, "grand_total": 120}
        )

        assert detail == "Offering: Purely ES; Enrolment: ES 120, Total 120"

    def test_status_summary(self) -> None:
        detail = describe_dependent_change({"project_status": "Ongoing", "accomplishment_percentage": 45})

        assert detail == "Status: Ongoing (45%)"

    def test_other_fields_are_listed(self) -> None:
        assert describe_dependent_change({"grade_2": 5, "grade_1": 4}) == "Updated: grade_1, grade_2"

    def test_no_changes(self) -> None:
        assert describe_dependent_change({}) is None


class TestSubmitOrAmend:
    """Tests for submit_or_amend."""

    @pytest.mark.asyncio
    async def test_first_submit_creates_profile(self, profile_store, profile_fields) -> None:
        assert await profile_store.check_exists("100001") is False

        profile = await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        assert await profile_store.check_exists("100001") is True
        assert profile.school_id == "100001"
        assert profile.school_name == "Example ES"
        assert profile.legislative_district == "1st District"
        assert profile.mother_school_id is None
        assert profile.latitude == pytest.approx(18.1978)
        assert profile.submitted_by == "user-42"
        assert profile.submitted_at.tzinfo is not None
        assert len(profile.history) == 1
        assert profile.history[0].action == PROFILE_UPDATE_ACTION
        assert profile.history[0].submitter == "user-42"

    @pytest.mark.asyncio
    async def test_second_submit_appends_and_overwrites(self, profile_store, profile_fields) -> None:
        first = await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        second = await profile_store.submit_or_amend(
            "100001",
            {**profile_fields, "schoolName": "Example Elementary School", "barangay": "Barangay 2"},
            "user-43",
        )

        assert second.school_name == "Example Elementary School"
        assert second.barangay == "Barangay 2"
        assert second.submitted_by == "user-43"
        assert len(second.history) == 2
        assert second.history[0] == first.history[0]
        assert second.history[1].submitter == "user-43"
        assert second.history[1].action == PROFILE_UPDATE_ACTION

    @pytest.mark.asyncio
    async def test_history_grows_with_every_call(self, profile_store, profile_fields) -> None:
        for _ in range(3):
            profile = await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        assert len(profile.history) == 3
        assert len({entry.entry_id for entry in profile.history}) == 3

    @pytest.mark.asyncio
    async def test_accepts_model_instance(self, profile_store) -> None:
        fields = ProfileFields(school_name="Vigan Central School", region="Region I")

        profile = await profile_store.submit_or_amend("100003", fields, "user-9")

        assert profile.region == "Region I"
        assert profile.province is None

    @pytest.mark.asyncio
    async def test_invalid_school_id_writes_nothing(self, profile_store, profile_fields) -> None:
        with pytest.raises(ProfileValidationError):
            await profile_store.submit_or_amend("10001", profile_fields, "user-42")

        assert await profile_store.list_summaries() == []

    @pytest.mark.asyncio
    async def test_missing_school_name_writes_nothing(self, profile_store, profile_fields) -> None:
        with pytest.raises(ProfileValidationError):
            await profile_store.submit_or_amend("100001", {**profile_fields, "schoolName": ""}, "user-42")

        assert await profile_store.check_exists("100001") is False

    @pytest.mark.asyncio
    async def test_dependent_fields_rejected_on_submit(self, profile_store, profile_fields) -> None:
        with pytest.raises(ProfileValidationError):
            await profile_store.submit_or_amend("100001", {**profile_fields, "esTotal": 5}, "user-42")

    @pytest.mark.asyncio
    async def test_failed_verification_rolls_back(self, profile_store, profile_fields) -> None:
        with patch.object(
            AuditTrail, "verify", AsyncMock(side_effect=AuditIntegrityError("entry missing"))
        ):
            with pytest.raises(ProfilePersistenceError):
                await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        assert await profile_store.check_exists("100001") is False

    @pytest.mark.asyncio
    async def test_storage_failure(self, tmp_path, profile_fields) -> None:
        client = DatabaseClient(f"sqlite+aiosqlite:///{tmp_path / 'closed.db'}")
        store = ProfileStore(client)

        with pytest.raises(ProfilePersistenceError):
            await store.submit_or_amend("100001", profile_fields, "user-42")

    @pytest.mark.asyncio
    async def test_read_then_write_path(self, db_client, profile_fields) -> None:
        """Test the locked insert-or-update used when no native upsert exists."""
        store = ProfileStore(db_client)
        store._trail = AuditTrail("generic")

        first = await store.submit_or_amend("100001", profile_fields, "user-42")
        second = await store.submit_or_amend("100001", {**profile_fields, "district": "Laoag City II"}, "user-43")

        assert len(first.history) == 1
        assert len(second.history) == 2
        assert second.district == "Laoag City II"
        assert second.history[0] == first.history[0]


class TestAmendDependent:
    """Tests for amend_dependent."""

    @pytest.mark.asyncio
    async def test_enrolment_scenario(self, profile_store, profile_fields) -> None:
        submitted = await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        record = await profile_store.amend_dependent(
            "100001", {"esTotal": 120}, "user-42", ENROLMENT_UPDATE_ACTION
        )
        profile = await profile_store.get_profile("100001")

        assert record.fields.es_total == 120
        assert record.history_length == 2
        assert record.entry.action == ENROLMENT_UPDATE_ACTION
        assert [entry.action for entry in profile.history] == [
            PROFILE_UPDATE_ACTION,
            ENROLMENT_UPDATE_ACTION,
        ]
        assert profile.dependent.es_total == 120
        for name in PROFILE_FIELD_NAMES:
            assert getattr(profile, name) == getattr(submitted, name)

    @pytest.mark.asyncio
    async def test_missing_profile_fails_without_history(self, profile_store) -> None:
        with pytest.raises(ProfileNotFoundError):
            await profile_store.amend_dependent(
                "999999", {"esTotal": 10}, "user-1", ENROLMENT_UPDATE_ACTION
            )

        assert await profile_store.check_exists("999999") is False
        assert await profile_store.get_profile("999999") is None

    @pytest.mark.asyncio
    async def test_partial_updates_merge(self, profile_store, profile_fields, enrolment_fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")
        await profile_store.amend_dependent("100001", enrolment_fields, "user-42", ENROLMENT_UPDATE_ACTION)

        record = await profile_store.amend_dependent(
            "100001", {"grade1": 25}, "user-42", ENROLMENT_UPDATE_ACTION
        )

        assert record.fields.grade_1 == 25
        assert record.fields.grade_2 == 20
        assert record.fields.es_total == 120
        assert record.fields.curricular_offering == "Purely ES"
        assert record.history_length == 3

    @pytest.mark.asyncio
    async def test_project_status(self, profile_store, profile_fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        record = await profile_store.amend_dependent(
            "100001",
            {
                "projectStatus": "Ongoing",
                "accomplishmentPercentage": 45,
                "statusAsOf": "2025-06-01",
                "targetCompletionDate": "2025-12-15",
            },
            "engineer-3",
            PROJECT_STATUS_UPDATE_ACTION,
        )

        assert record.fields.project_status == "Ongoing"
        assert record.fields.status_as_of == date(2025, 6, 1)
        assert record.fields.target_completion_date == date(2025, 12, 15)
        assert record.entry.detail == "Status: Ongoing (45%)"
        assert record.entry.submitter == "engineer-3"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [
            {"schoolName": "Renamed"},
            {"region": "Region II"},
            {"esTotal": -1},
            {"accomplishmentPercentage": 101},
            {"projectStatus": "Done"},
        ],
    )
    async def test_invalid_fields_rejected(self, profile_store, profile_fields, fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        with pytest.raises(ProfileValidationError):
            await profile_store.amend_dependent("100001", fields, "user-42", ENROLMENT_UPDATE_ACTION)

        profile = await profile_store.get_profile("100001")
        assert len(profile.history) == 1
        assert profile.school_name == "Example ES"

    @pytest.mark.asyncio
    async def test_blank_action_label_rejected(self, profile_store, profile_fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        with pytest.raises(ProfileValidationError):
            await profile_store.amend_dependent("100001", {"esTotal": 1}, "user-42", "  ")

    @pytest.mark.asyncio
    async def test_empty_amendment_still_logged(self, profile_store, profile_fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        record = await profile_store.amend_dependent("100001", {}, "user-42", ENROLMENT_UPDATE_ACTION)

        assert record.history_length == 2
        assert record.entry.detail is None

    @pytest.mark.asyncio
    async def test_project_details(self, profile_store, profile_fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        record = await profile_store.amend_dependent(
            "100001",
            {
                "projectName": "Two-storey classroom",
                "contractorName": "Laoag Builders",
                "projectAllocation": "1500000.50",
                "batchOfFunds": "Batch 1",
                "noticeToProceed": "2025-01-15",
                "projectStatus": "Completed",
                "accomplishmentPercentage": 100,
                "actualCompletionDate": "2025-05-30",
            },
            "engineer-3",
            PROJECT_STATUS_UPDATE_ACTION,
        )
        summaries = await profile_store.list_summaries()

        assert record.fields.project_name == "Two-storey classroom"
        assert record.fields.contractor_name == "Laoag Builders"
        assert record.fields.project_allocation == Decimal("1500000.50")
        assert record.fields.notice_to_proceed == date(2025, 1, 15)
        assert record.fields.actual_completion_date == date(2025, 5, 30)
        assert record.entry.detail == "Project: Two-storey classroom; Status: Completed (100%)"
        assert summaries[0].project_name == "Two-storey classroom"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("fields", "action"),
        [
            ({"projectStatus": "Completed", "accomplishmentPercentage": 100}, ENROLMENT_UPDATE_ACTION),
            ({"projectName": "Covered court"}, ENROLMENT_UPDATE_ACTION),
            ({"grandTotal": 120}, PROJECT_STATUS_UPDATE_ACTION),
            ({"curricularOffering": "Purely ES"}, PROJECT_STATUS_UPDATE_ACTION),
        ],
    )
    async def test_fields_must_match_action(self, profile_store, profile_fields, fields, action) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        with pytest.raises(ProfileValidationError):
            await profile_store.amend_dependent("100001", fields, "user-42", action)

        profile = await profile_store.get_profile("100001")
        assert len(profile.history) == 1
        assert profile.dependent.project_status is None
        assert profile.dependent.grand_total is None

    @pytest.mark.asyncio
    async def test_model_instance_cannot_widen_action(self, profile_store, profile_fields) -> None:
        """Test a full dependent model is checked against the action's field set."""
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")
        fields = DependentFields(grand_total=120, project_status="Completed")

        with pytest.raises(ProfileValidationError):
            await profile_store.amend_dependent("100001", fields, "user-42", ENROLMENT_UPDATE_ACTION)

    @pytest.mark.asyncio
    async def test_custom_action_accepts_all_dependent_fields(self, profile_store, profile_fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        record = await profile_store.amend_dependent(
            "100001", {"grandTotal": 80, "projectStatus": "Ongoing"}, "admin-1", "Data Correction"
        )

        assert record.entry.action == "Data Correction"
        assert record.fields.grand_total == 80
        assert record.fields.project_status == "Ongoing"


class TestReads:
    """Tests for read projections."""

    @pytest.mark.asyncio
    async def test_get_profile_unknown(self, profile_store) -> None:
        assert await profile_store.get_profile("123456") is None

    @pytest.mark.asyncio
    async def test_find_by_submitter(self, profile_store, profile_fields) -> None:
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")

        profile = await profile_store.find_by_submitter("user-42")

        assert profile is not None
        assert profile.school_id == "100001"
        assert await profile_store.find_by_submitter("someone-else") is None

    @pytest.mark.asyncio
    async def test_list_summaries_ordered_by_name(self, profile_store, profile_fields) -> None:
        await profile_store.submit_or_amend("100003", {"schoolName": "Vigan Central School"}, "user-1")
        await profile_store.submit_or_amend("100001", profile_fields, "user-42")
        await profile_store.amend_dependent("100001", {"grandTotal": 120}, "user-42", ENROLMENT_UPDATE_ACTION)

        summaries = await profile_store.list_summaries()

        assert [summary.school_id for summary in summaries] == ["100001", "100003"]
        assert summaries[0].grand_total == 120
        assert summaries[1].grand_total is None

    @pytest.mark.asyncio
    async def test_reads_tolerate_legacy_history(self, db_client, profile_store) -> None:
        await profile_store.submit_or_amend("100003", {"schoolName": "Vigan Central School"}, "user-1")
        async with db_client.transaction() as session:
            await session.execute(
                update(SchoolProfile)
                .where(SchoolProfile.school_id == "100003")
                .values(history_log=[{"user": "legacy", "action": "X", "timestamp": "Dec 01, 10:00 AM"}])
            )

        profile = await profile_store.get_profile("100003")
        by_submitter = await profile_store.find_by_submitter("user-1")

        assert profile.history[0].timestamp is None
        assert profile.history[0].submitter == "legacy"
        assert by_submitter.school_id == "100003"
