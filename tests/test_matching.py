"""
Tests for cross-dataset matching in matching.py.

Structural matching is the default: a municipality present in both datasets
with different category values does NOT match.

Run: uv run pytest tests/test_matching.py -v
"""

import pytest

from muni_clusters.matching import (
    filter_common_municipalities,
    outer_join_municipalities,
    shared_names_without_match,
)
from muni_clusters.models import Dataset, MunicipalityRecord

# ── filter_common_municipalities (structural) ────────────────────────────────


class TestStructuralMatch:
    """Full-record equality matching."""

    def test_identical_record_matches_differing_does_not(
        self, education: Dataset, pop_growth: Dataset
    ) -> None:
        matches = filter_common_municipalities(education.records, pop_growth.records)
        assert [m.municipality for m in matches] == ["Aurora"]

    def test_pair_holds_both_records(self, education: Dataset, pop_growth: Dataset) -> None:
        (match,) = filter_common_municipalities(education.records, pop_growth.records)
        assert match.first == education.records[0]
        assert match.second == pop_growth.records[0]

    def test_same_name_different_weight_no_match(self) -> None:
        a = [MunicipalityRecord("X", {1: (5, 0.5)})]
        b = [MunicipalityRecord("X", {1: (5, 0.6)})]
        assert filter_common_municipalities(a, b) == []

    def test_extra_category_no_match(self) -> None:
        a = [MunicipalityRecord("X", {1: (5, 0.5)})]
        b = [MunicipalityRecord("X", {1: (5, 0.5), 2: (1, 0.1)})]
        assert filter_common_municipalities(a, b) == []

    def test_preserves_first_dataset_order(self) -> None:
        x = MunicipalityRecord("X", {1: (1, 0.1)})
        y = MunicipalityRecord("Y", {1: (1, 0.2)})
        matches = filter_common_municipalities([y, x], [x, y])
        assert [m.municipality for m in matches] == ["Y", "X"]

    def test_one_pair_per_first_dataset_entry(self) -> None:
        x = MunicipalityRecord("X", {1: (1, 0.1)})
        matches = filter_common_municipalities([x], [x, x])
        assert len(matches) == 1

    def test_duplicates_in_first_dataset_each_match(self) -> None:
        x = MunicipalityRecord("X", {1: (1, 0.1)})
        matches = filter_common_municipalities([x, x], [x])
        assert len(matches) == 2

    def test_empty_inputs(self) -> None:
        x = MunicipalityRecord("X")
        assert filter_common_municipalities([], [x]) == []
        assert filter_common_municipalities([x], []) == []


# ── filter_common_municipalities (key) ───────────────────────────────────────


class TestKeyMatch:
    """Name-only matching."""

    def test_same_name_matches_despite_different_data(
        self, education: Dataset, pop_growth: Dataset
    ) -> None:
        matches = filter_common_municipalities(education.records, pop_growth.records, mode="key")
        assert [m.municipality for m in matches] == ["Aurora", "Brindle"]

    def test_first_partner_wins(self) -> None:
        a = [MunicipalityRecord("X", {1: (1, 0.1)})]
        b = [MunicipalityRecord("X", {1: (1, 0.2)}), MunicipalityRecord("X", {1: (1, 0.3)})]
        (match,) = filter_common_municipalities(a, b, mode="key")
        assert match.second.weight(1) == 0.2

    def test_unknown_mode_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown match mode"):
            filter_common_municipalities([], [], mode="fuzzy")


# ── shared_names_without_match ───────────────────────────────────────────────


class TestSharedNamesWithoutMatch:
    def test_reports_dropped_overlap(self, education: Dataset, pop_growth: Dataset) -> None:
        matches = filter_common_municipalities(education.records, pop_growth.records)
        dropped = shared_names_without_match(education.records, pop_growth.records, matches)
        assert dropped == ["Brindle"]

    def test_nothing_dropped_under_key_mode(self, education: Dataset, pop_growth: Dataset) -> None:
        matches = filter_common_municipalities(education.records, pop_growth.records, mode="key")
        assert shared_names_without_match(education.records, pop_growth.records, matches) == []

    def test_reported_once(self) -> None:
        a = [MunicipalityRecord("X", {1: (1, 0.1)}), MunicipalityRecord("X", {1: (1, 0.3)})]
        b = [MunicipalityRecord("X", {1: (1, 0.2)})]
        assert shared_names_without_match(a, b, []) == ["X"]


# ── outer_join_municipalities ────────────────────────────────────────────────


class TestOuterJoin:
    def test_all_names_present(self, education: Dataset, pop_growth: Dataset) -> None:
        rows = outer_join_municipalities(education.records, pop_growth.records)
        assert [r.municipality for r in rows] == [
            "Aurora",
            "Brindle",
            "Caldera",
            "Dunmore",
            "Eastvale",
        ]

    def test_identical_row(self, education: Dataset, pop_growth: Dataset) -> None:
        rows = {r.municipality: r for r in outer_join_municipalities(education.records, pop_growth.records)}
        assert rows["Aurora"].identical
        assert rows["Aurora"].differing_categories == ()

    def test_value_diff(self, education: Dataset, pop_growth: Dataset) -> None:
        rows = {r.municipality: r for r in outer_join_municipalities(education.records, pop_growth.records)}
        # Brindle: education {1,2,3}, pop_growth {1,2}; all three differ
        assert rows["Brindle"].differing_categories == (1, 2, 3)
        assert not rows["Brindle"].identical

    def test_one_sided_rows(self, education: Dataset, pop_growth: Dataset) -> None:
        rows = {r.municipality: r for r in outer_join_municipalities(education.records, pop_growth.records)}
        assert rows["Caldera"].second is None
        assert rows["Eastvale"].first is None

    def test_only_changed_categories_listed(self) -> None:
        a = [MunicipalityRecord("X", {1: (1, 0.1), 2: (2, 0.2)})]
        b = [MunicipalityRecord("X", {1: (1, 0.1), 2: (3, 0.2)})]
        (row,) = outer_join_municipalities(a, b)
        assert row.differing_categories == (2,)
