# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the reference index."""

import pytest

from insighted.domains.reference.index import (
    EmptyReferenceError,
    MissingHeaderError,
    ReferenceIndex,
)
from insighted.domains.reference.models import (
    HierarchyLevel,
    ReferenceRow,
    normalize_identifier,
    normalize_key,
    parents_of,
)


class TestNormalization:
    """Tests for key and identifier normalization."""

    def test_normalize_key(self) -> None:
        assert normalize_key("Region I (Ilocos)") == "regioniilocos"
        assert normalize_key("  LAOAG-CITY ") == "laoagcity"
        assert normalize_key(None) == ""
        assert normalize_key(" - ") == ""

    def test_normalize_identifier(self) -> None:
        assert normalize_identifier(" 100001.0 ") == "100001"
        assert normalize_identifier("100001") == "100001"
        assert normalize_identifier(100001) == "100001"
        assert normalize_identifier(None) == ""

    def test_parents_of(self) -> None:
        assert parents_of(HierarchyLevel.BARANGAY) == (
            HierarchyLevel.REGION,
            HierarchyLevel.PROVINCE,
            HierarchyLevel.MUNICIPALITY,
        )
        assert parents_of(HierarchyLevel.DISTRICT) == (HierarchyLevel.DIVISION,)
        assert parents_of(HierarchyLevel.LEGISLATIVE_DISTRICT) == ()


class TestBuild:
    """Tests for ReferenceIndex.build."""

    def test_empty_rows_raise(self) -> None:
        with pytest.raises(EmptyReferenceError):
            ReferenceIndex.build([])

    def test_len_and_rows(self, reference_index, reference_rows) -> None:
        assert len(reference_index) == len(reference_rows)
        assert reference_index.rows == tuple(reference_rows)

    def test_display_uses_first_seen_spelling(self) -> None:
        index = ReferenceIndex.build(
            [
                ReferenceRow(identifier="1", display_name="A", region="Region I"),
                ReferenceRow(identifier="2", display_name="B", region="REGION I"),
                ReferenceRow(identifier="3", display_name="C", region="region-i"),
            ]
        )

        assert index.options_for(HierarchyLevel.REGION) == ("Region I",)

    def test_blank_values_are_ignored(self) -> None:
        index = ReferenceIndex.build(
            [
                ReferenceRow(identifier="1", display_name="A", region="Region I", province=""),
                ReferenceRow(identifier="2", display_name="B", region="  "),
            ]
        )

        assert index.options_for(HierarchyLevel.REGION) == ("Region I",)
        assert index.options_for(HierarchyLevel.PROVINCE, {"region": "Region I"}) == ()


class TestOptionsFor:
    """Tests for cascading option lists."""

    def test_top_level(self, reference_index) -> None:
        assert reference_index.options_for(HierarchyLevel.REGION) == ("Region I", "Region II")

    def test_provinces_of_region(self, reference_index) -> None:
        assert reference_index.options_for(HierarchyLevel.PROVINCE, {"region": "Region I"}) == (
            "Ilocos Norte",
            "Ilocos Sur",
        )

    def test_single_province_scenario(self) -> None:
        index = ReferenceIndex.build(
            [
                ReferenceRow(
                    identifier="100001",
                    display_name="Example ES",
                    region="Region I",
                    province="Ilocos Norte",
                )
            ]
        )

        assert index.options_for("province", {"region": "Region I"}) == ("Ilocos Norte",)

    def test_parent_matching_is_normalized(self, reference_index) -> None:
        assert reference_index.options_for(HierarchyLevel.PROVINCE, {"region": " region i "}) == (
            "Ilocos Norte",
            "Ilocos Sur",
        )

    def test_municipalities_sorted_case_insensitively(self, reference_index) -> None:
        options = reference_index.options_for(
            HierarchyLevel.MUNICIPALITY,
            {"region": "Region I", "province": "Ilocos Norte"},
        )

        assert options == ("Bacarra", "Laoag City")

    def test_missing_parent_returns_empty(self, reference_index) -> None:
        assert reference_index.options_for(HierarchyLevel.PROVINCE) == ()
        assert reference_index.options_for(HierarchyLevel.BARANGAY, {"region": "Region I"}) == ()

    def test_unknown_parent_returns_empty(self, reference_index) -> None:
        assert reference_index.options_for(HierarchyLevel.PROVINCE, {"region": "Region XIII"}) == ()

    def test_province_from_other_region_has_no_children(self, reference_index) -> None:
        options = reference_index.options_for(
            HierarchyLevel.MUNICIPALITY,
            {"region": "Region II", "province": "Ilocos Norte"},
        )

        assert options == ()

    def test_options_are_reachable_from_rows(self, reference_index, reference_rows) -> None:
        """Every option is backed by a row under the same parent chain."""
        for region in reference_index.options_for(HierarchyLevel.REGION):
            for province in reference_index.options_for(HierarchyLevel.PROVINCE, {"region": region}):
                parents = {"region": region, "province": province}
                for municipality in reference_index.options_for(HierarchyLevel.MUNICIPALITY, parents):
                    assert any(
                        normalize_key(row.region) == normalize_key(region)
                        and normalize_key(row.province) == normalize_key(province)
                        and normalize_key(row.municipality) == normalize_key(municipality)
                        for row in reference_rows
                    )


class TestDivisionHierarchy:
    """Tests for the division -> district hierarchy."""

    def test_districts_of_division(self, reference_index) -> None:
        assert reference_index.districts_of("Ilocos Norte") == ("Bacarra", "Laoag City I")
        assert reference_index.districts_of("Vigan City") == ("Vigan North",)

    def test_division_chain_independent_of_place_chain(self, reference_index) -> None:
        """A region never narrows districts; only the division does."""
        assert reference_index.options_for(HierarchyLevel.DISTRICT, {"region": "Region I"}) == ()
        assert reference_index.districts_of("Region I") == ()

    def test_legislative_districts_are_flat(self, reference_index) -> None:
        assert reference_index.legislative_districts() == ("1st District", "3rd District")


class TestLookups:
    """Tests for row lookups."""

    def test_get_row_normalizes_identifier(self, reference_index) -> None:
        row = reference_index.get_row("100002")

        assert row is not None
        assert row.display_name == "Bacarra CS"
        assert reference_index.get_row("100001.0").display_name == "Example ES"

    def test_get_row_unknown(self, reference_index) -> None:
        assert reference_index.get_row("999999") is None

    def test_find_by_name_first_row_wins(self, reference_index) -> None:
        row = reference_index.find_by_name("EXAMPLE es")

        assert row is not None
        assert row.identifier == "100001"

    def test_match(self, reference_index) -> None:
        assert reference_index.match(HierarchyLevel.PROVINCE, {"region": "Region I"}, "ilocos-sur") == "Ilocos Sur"
        assert reference_index.match(HierarchyLevel.PROVINCE, {"region": "Region I"}, "Cagayan") is None
        assert reference_index.match(HierarchyLevel.PROVINCE, {"region": "Region I"}, "") is None


class TestFromRecords:
    """Tests for building from raw records."""

    def test_from_records(self) -> None:
        records = [
            {
                "School ID": "100001.0",
                "School Name": "Example ES",
                "Region": "Region I",
                "Province": "Ilocos Norte",
                "Division": "Ilocos Norte",
                "District": "Laoag City I",
                "Legislative District": "1st District",
            },
        ]

        index = ReferenceIndex.from_records(records)

        assert index.get_row("100001").province == "Ilocos Norte"
        assert index.districts_of("Ilocos Norte") == ("Laoag City I",)
        assert index.legislative_districts() == ("1st District",)

    def test_from_records_empty(self) -> None:
        with pytest.raises(EmptyReferenceError):
            ReferenceIndex.from_records([])

    def test_from_records_without_identifier_column(self) -> None:
        with pytest.raises(MissingHeaderError):
            ReferenceIndex.from_records([{"Name": "Example ES", "Region": "Region I"}])
