# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for reference header alias resolution."""

from insighted.domains.reference.headers import HEADER_ALIASES, resolve_headers


class TestResolveHeaders:
    """Tests for resolve_headers."""

    def test_exact_spellings(self) -> None:
        """Test that common export headers map to canonical fields."""
        headers = resolve_headers(
            [
                "School ID",
                "School Name",
                "Region",
                "Province",
                "Municipality/City",
                "Barangay",
                "Division",
                "District",
                "Leg District",
                "Mother School ID",
                "Latitude",
                "Longitude",
            ]
        )

        assert headers.columns == {
            "identifier": "School ID",
            "display_name": "School Name",
            "region": "Region",
            "province": "Province",
            "municipality": "Municipality/City",
            "barangay": "Barangay",
            "division": "Division",
            "district": "District",
            "legislative_district": "Leg District",
            "parent_identifier": "Mother School ID",
            "latitude": "Latitude",
            "longitude": "Longitude",
        }

    def test_case_and_punctuation_are_ignored(self) -> None:
        headers = resolve_headers(["SCHOOLID", "school_name", "BEIS School ID"])

        assert headers.columns["identifier"] == "SCHOOLID"
        assert headers.columns["display_name"] == "school_name"

    def test_legislative_substring_never_lands_in_district(self) -> None:
        """Test that a long legislative header is claimed before district."""
        headers = resolve_headers(["Legislative District (Congressional)", "District"])

        assert headers.columns["legislative_district"] == "Legislative District (Congressional)"
        assert headers.columns["district"] == "District"

    def test_lone_legislative_header_leaves_district_unresolved(self) -> None:
        headers = resolve_headers(["Legislative District"])

        assert headers.columns == {"legislative_district": "Legislative District"}
        assert "district" not in headers

    def test_substring_pass(self) -> None:
        headers = resolve_headers(["Schools Division Office", "Region Name"])

        assert headers.columns["division"] == "Schools Division Office"
        assert headers.columns["region"] == "Region Name"

    def test_header_claimed_once(self) -> None:
        """Test that one header never feeds two fields."""
        headers = resolve_headers(["District"])

        assert list(headers.columns.values()) == ["District"]

    def test_legislative_alias_listed_before_district(self) -> None:
        names = [alias.name for alias in HEADER_ALIASES]

        assert names.index("legislative_district") < names.index("district")


class TestResolvedHeadersToRow:
    """Tests for ResolvedHeaders.to_row."""

    def test_values_are_trimmed(self) -> None:
        headers = resolve_headers(["School ID", "School Name", "Region"])

        row = headers.to_row({"School ID": " 100001 ", "School Name": " Example ES", "Region": "Region I "})

        assert row.identifier == "100001"
        assert row.display_name == "Example ES"
        assert row.region == "Region I"

    def test_missing_columns_default_to_empty(self) -> None:
        headers = resolve_headers(["School ID", "School Name"])

        row = headers.to_row({"School ID": "100001", "School Name": "Example ES"})

        assert row.province == ""
        assert row.district == ""

    def test_blank_optional_fields_become_none(self) -> None:
        headers = resolve_headers(["School ID", "School Name", "Latitude", "Longitude", "Mother School ID"])

        row = headers.to_row(
            {
                "School ID": "100001",
                "School Name": "Example ES",
                "Latitude": "",
                "Longitude": "  ",
                "Mother School ID": None,
            }
        )

        assert row.latitude is None
        assert row.longitude is None
        assert row.parent_identifier is None
