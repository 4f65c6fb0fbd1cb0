"""Cluster assignments and the views export code consumes."""

from dataclasses import dataclass, field
from typing import Iterator, Sequence

import polars as pl

from muni_clusters.features import feature_columns, feature_matrix
from muni_clusters.models import CategoryRecord


class ClusterPairs:
    """Flat, restartable view of (cluster_index, municipality) pairs.

    Iterating yields pairs lazily in cluster-index order, members in input order.
    Each ``iter()`` starts over.
    """

    def __init__(self, clusters: dict[int, list[str]]) -> None:
        self._clusters = clusters

    def __iter__(self) -> Iterator[tuple[int, str]]:
        for cluster_id in sorted(self._clusters):
            for name in self._clusters[cluster_id]:
                yield cluster_id, name

    def __len__(self) -> int:
        return sum(len(v) for v in self._clusters.values())


@dataclass
class ClusterAssignment:
    """Cluster index -> municipality names.

    Every key 0..k-1 is present, possibly with an empty list. ``labels`` keeps the
    per-record cluster index in input order.
    """

    clusters: dict[int, list[str]] = field(default_factory=dict)
    labels: list[int] = field(default_factory=list)
    inertia: float | None = None
    silhouette: float | None = None
    n_iter: int = 0

    @classmethod
    def empty(cls) -> "ClusterAssignment":
        return cls()

    @classmethod
    def from_labels(cls, names: Sequence[str], labels: Sequence[int], k: int) -> "ClusterAssignment":
        if len(names) != len(labels):
            raise ValueError(f"{len(names)} names but {len(labels)} labels")
        clusters: dict[int, list[str]] = {j: [] for j in range(k)}
        for name, label in zip(names, labels):
            if label not in clusters:
                raise ValueError(f"label {label} outside 0..{k - 1}")
            clusters[label].append(name)
        return cls(clusters=clusters, labels=[int(x) for x in labels])

    @property
    def k(self) -> int:
        return len(self.clusters)

    def __len__(self) -> int:
        return len(self.clusters)

    def __getitem__(self, cluster_id: int) -> list[str]:
        return self.clusters[cluster_id]

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.clusters))

    def items(self) -> list[tuple[int, list[str]]]:
        return [(c, self.clusters[c]) for c in sorted(self.clusters)]

    def sizes(self) -> dict[int, int]:
        return {c: len(members) for c, members in self.items()}

    def pairs(self) -> ClusterPairs:
        return ClusterPairs(self.clusters)

    def municipalities(self) -> list[str]:
        return [name for _, name in self.pairs()]

    def to_frame(self) -> pl.DataFrame:
        """One row per (cluster_id, municipality) pair."""
        rows = list(self.pairs())
        return pl.DataFrame(
            {
                "cluster_id": [c for c, _ in rows],
                "municipality": [m for _, m in rows],
            },
            schema={"cluster_id": pl.Int64, "municipality": pl.Utf8},
        )

    def __str__(self) -> str:
        body = ", ".join(f"{c}: {members!r}" for c, members in self.items())
        return "{" + body + "}"


def cluster_profiles(assignment: ClusterAssignment, data: Sequence[CategoryRecord]) -> pl.DataFrame:
    """Member count and mean weight per category for each cluster.

    ``data`` must be the records the assignment was computed from, in the same order.
    Empty clusters appear with n_municipalities = 0 and null weights.
    """
    if len(data) != len(assignment.labels):
        raise ValueError(
            f"assignment covers {len(assignment.labels)} records, got {len(data)}"
        )
    cols = feature_columns()
    X = feature_matrix(data)
    df = pl.DataFrame(X, schema=cols, orient="row")
    df = df.with_columns(pl.Series("cluster_id", assignment.labels, dtype=pl.Int64))

    agg = df.group_by("cluster_id").agg(
        [pl.len().alias("n_municipalities")] + [pl.col(c).mean() for c in cols]
    )
    all_ids = pl.DataFrame({"cluster_id": list(range(assignment.k))}, schema={"cluster_id": pl.Int64})
    return (
        all_ids.join(agg, on="cluster_id", how="left")
        .with_columns(pl.col("n_municipalities").fill_null(0).cast(pl.Int64))
        .sort("cluster_id")
    )
