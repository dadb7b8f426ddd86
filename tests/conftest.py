# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Reference dataset rows and index
- A SQLite-backed DatabaseClient and ProfileStore
- Sample profile and dependent payloads
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio

from insighted.core.config import clear_settings_cache
from insighted.domains.profile.service import ProfileStore
from insighted.domains.reference.index import ReferenceIndex
from insighted.domains.reference.models import ReferenceRow
from insighted.infrastructure.database.connection import DatabaseClient


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment patches take effect."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Reference Fixtures
# =============================================================================


@pytest.fixture
def reference_rows() -> list[ReferenceRow]:
    """Provide a small reference dataset spanning two regions."""
    return [
        ReferenceRow(
            identifier="100001",
            display_name="Example ES",
            region="Region I",
            province="Ilocos Norte",
            municipality="Laoag City",
            barangay="Barangay 1 San Lorenzo",
            division="Ilocos Norte",
            district="Laoag City I",
            legislative_district="1st District",
            latitude="18.1978",
            longitude="120.5936",
        ),
        ReferenceRow(
            identifier="100002.0",
            display_name="Bacarra CS",
            region="Region I",
            province="Ilocos Norte",
            municipality="Bacarra",
            barangay="Poblacion",
            division="Ilocos Norte",
            district="Bacarra",
            legislative_district="1st District",
            parent_identifier="100001",
        ),
        ReferenceRow(
            identifier="100003",
            display_name="Vigan Central School",
            region="Region I",
            province="Ilocos Sur",
            municipality="Vigan City",
            barangay="Ayusan Norte",
            division="Vigan City",
            district="Vigan North",
            legislative_district="1st District",
        ),
        ReferenceRow(
            identifier="200001",
            display_name="Example ES",
            region="Region II",
            province="Cagayan",
            municipality="Tuguegarao City",
            barangay="Centro 1",
            division="Tuguegarao City",
            district="Tuguegarao East",
            legislative_district="3rd District",
        ),
    ]


@pytest.fixture
def reference_index(reference_rows: list[ReferenceRow]) -> ReferenceIndex:
    """Provide an index built from the sample reference rows."""
    return ReferenceIndex.build(reference_rows)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_client(tmp_path) -> AsyncGenerator[DatabaseClient, None]:
    """Provide a connected client on a fresh SQLite database file."""
    client = DatabaseClient(f"sqlite+aiosqlite:///{tmp_path / 'profiles.db'}")
    await client.connect()
    await client.create_schema()
    yield client
    await client.close()


@pytest.fixture
def profile_store(db_client: DatabaseClient) -> ProfileStore:
    """Provide a ProfileStore bound to the SQLite client."""
    return ProfileStore(db_client)


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def profile_fields() -> dict[str, Any]:
    """Provide profile form fields as sent by the form client."""
    return {
        "schoolName": "Example ES",
        "region": "Region I",
        "province": "Ilocos Norte",
        "municipality": "Laoag City",
        "barangay": "Barangay 1 San Lorenzo",
        "division": "Ilocos Norte",
        "district": "Laoag City I",
        "legislativeDistrict": "1st District",
        "motherSchoolId": "",
        "latitude": "18.1978",
        "longitude": "120.5936",
    }


@pytest.fixture
def enrolment_fields() -> dict[str, Any]:
    """Provide an enrolment amendment payload."""
    return {
        "curricularOffering": "Purely ES",
        "esTotal": 120,
        "jhsTotal": 0,
        "shsTotal": 0,
        "grandTotal": 120,
        "gradeKinder": 20,
        "grade1": 20,
        "grade2": 20,
        "grade3": 20,
        "grade4": 20,
        "grade5": 10,
        "grade6": 10,
    }
