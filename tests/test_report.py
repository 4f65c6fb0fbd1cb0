"""
Tests for cluster assignment views in report.py.

Run: uv run pytest tests/test_report.py -v
"""

import polars as pl
import pytest

from muni_clusters.models import MunicipalityRecord
from muni_clusters.report import ClusterAssignment, cluster_profiles

# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def assignment() -> ClusterAssignment:
    """Four municipalities across three clusters; cluster 1 is empty."""
    return ClusterAssignment.from_labels(["A", "B", "C", "D"], [2, 0, 2, 0], 3)


# ── ClusterAssignment ────────────────────────────────────────────────────────


class TestClusterAssignment:
    def test_all_keys_present(self, assignment: ClusterAssignment) -> None:
        assert list(assignment) == [0, 1, 2]
        assert assignment[1] == []

    def test_members_grouped_in_input_order(self, assignment: ClusterAssignment) -> None:
        assert assignment[0] == ["B", "D"]
        assert assignment[2] == ["A", "C"]

    def test_labels_kept(self, assignment: ClusterAssignment) -> None:
        assert assignment.labels == [2, 0, 2, 0]

    def test_sizes(self, assignment: ClusterAssignment) -> None:
        assert assignment.sizes() == {0: 2, 1: 0, 2: 2}

    def test_k(self, assignment: ClusterAssignment) -> None:
        assert assignment.k == 3
        assert len(assignment) == 3

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            ClusterAssignment.from_labels(["A", "B"], [0], 1)

    def test_label_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            ClusterAssignment.from_labels(["A"], [3], 2)

    def test_empty(self) -> None:
        empty = ClusterAssignment.empty()
        assert len(empty) == 0
        assert list(empty.pairs()) == []

    def test_str(self, assignment: ClusterAssignment) -> None:
        assert str(assignment) == "{0: ['B', 'D'], 1: [], 2: ['A', 'C']}"


# ── Flat pair view ───────────────────────────────────────────────────────────


class TestClusterPairs:
    """Lazy, restartable (cluster_index, municipality) sequence."""

    def test_flat_pairs(self, assignment: ClusterAssignment) -> None:
        assert list(assignment.pairs()) == [(0, "B"), (0, "D"), (2, "A"), (2, "C")]

    def test_restartable(self, assignment: ClusterAssignment) -> None:
        pairs = assignment.pairs()
        assert list(pairs) == list(pairs)

    def test_lazy(self, assignment: ClusterAssignment) -> None:
        it = iter(assignment.pairs())
        assert next(it) == (0, "B")
        assert next(it) == (0, "D")

    def test_len(self, assignment: ClusterAssignment) -> None:
        assert len(assignment.pairs()) == 4

    def test_municipalities(self, assignment: ClusterAssignment) -> None:
        assert assignment.municipalities() == ["B", "D", "A", "C"]


# ── Frames ───────────────────────────────────────────────────────────────────


class TestToFrame:
    def test_columns_and_rows(self, assignment: ClusterAssignment) -> None:
        df = assignment.to_frame()
        assert df.columns == ["cluster_id", "municipality"]
        assert df.height == 4
        assert df["cluster_id"].to_list() == [0, 0, 2, 2]

    def test_empty_frame(self) -> None:
        df = ClusterAssignment.empty().to_frame()
        assert df.height == 0
        assert df.schema["cluster_id"] == pl.Int64


class TestClusterProfiles:
    def test_profile_counts_and_means(self, assignment: ClusterAssignment) -> None:
        data = [
            MunicipalityRecord("A", {1: (1, 0.2)}),
            MunicipalityRecord("B", {2: (1, 0.5)}),
            MunicipalityRecord("C", {1: (1, 0.4)}),
            MunicipalityRecord("D", {2: (1, 0.7)}),
        ]
        profiles = cluster_profiles(assignment, data)
        assert profiles["cluster_id"].to_list() == [0, 1, 2]
        assert profiles["n_municipalities"].to_list() == [2, 0, 2]
        row2 = profiles.filter(pl.col("cluster_id") == 2).row(0, named=True)
        assert row2["w1"] == pytest.approx(0.3)
        assert row2["w2"] == pytest.approx(0.0)
        row0 = profiles.filter(pl.col("cluster_id") == 0).row(0, named=True)
        assert row0["w2"] == pytest.approx(0.6)

    def test_empty_cluster_has_null_means(self, assignment: ClusterAssignment) -> None:
        data = [MunicipalityRecord(n, {1: (1, 0.1)}) for n in "ABCD"]
        profiles = cluster_profiles(assignment, data)
        row1 = profiles.filter(pl.col("cluster_id") == 1).row(0, named=True)
        assert row1["w1"] is None

    def test_record_count_mismatch(self, assignment: ClusterAssignment) -> None:
        with pytest.raises(ValueError):
            cluster_profiles(assignment, [MunicipalityRecord("A")])
