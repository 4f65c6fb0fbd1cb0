"""K-means clustering of municipalities on their category-weight vectors.

Lloyd's algorithm with:
  - Initialization: k distinct points drawn without replacement from the distinct
    rows of the input (first occurrences, input order) using an explicitly passed
    ``numpy.random.Generator``. Same input + k + seed -> same result.
    If the input has fewer than k distinct rows, the surplus centroids start on
    the first chosen centroid and can only ever stay empty.
  - Assignment: nearest centroid by Euclidean distance; ties go to the lowest
    cluster index.
  - Update: centroid = arithmetic mean of its members.
  - Empty clusters: re-seeded from the point farthest from its own centroid,
    taken from a cluster with more than one member. If every such point sits
    exactly on its centroid, the empty centroid stays frozen in place.
  - Stop when assignments stop changing or after ``max_iter`` iterations.
"""

from typing import Sequence

import numpy as np
from sklearn.metrics import silhouette_score

from muni_clusters.config import K_RANGE, MAX_ITER, RANDOM_SEED
from muni_clusters.errors import EmptyInput, InvalidClusterCount
from muni_clusters.features import feature_matrix
from muni_clusters.models import CategoryRecord
from muni_clusters.report import ClusterAssignment


def _squared_distances(X: np.ndarray, centers: np.ndarray) -> np.ndarray:
    """(n, k) matrix of squared Euclidean distances."""
    diff = X[:, None, :] - centers[None, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def assign_to_nearest(X: np.ndarray, centers: np.ndarray) -> np.ndarray:
    """Nearest centroid per row; ties go to the lowest cluster index."""
    return np.argmin(_squared_distances(X, centers), axis=1)


class KMeans:
    """Seeded k-means over the rows of a feature matrix.

    Attributes (after ``fit``):
        labels_: cluster index per row, shape (n,).
        cluster_centers_: centroids, shape (k, n_features).
        inertia_: within-cluster sum of squared distances.
        n_iter_: iterations run.
        converged_: True if assignments stabilized before ``max_iter``.
        n_reseeded_: number of empty-cluster re-seeds performed.
    """

    def __init__(
        self,
        n_clusters: int,
        max_iter: int = MAX_ITER,
        rng: np.random.Generator | None = None,
        seed: int = RANDOM_SEED,
    ) -> None:
        if max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {max_iter}")
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.labels_: np.ndarray | None = None
        self.cluster_centers_: np.ndarray | None = None
        self.inertia_ = 0.0
        self.n_iter_ = 0
        self.converged_ = False
        self.n_reseeded_ = 0

    def _init_centers(self, X: np.ndarray) -> np.ndarray:
        k = self.n_clusters
        _, first_idx = np.unique(X, axis=0, return_index=True)
        distinct = np.sort(first_idx)
        m = min(k, len(distinct))
        chosen = self.rng.choice(distinct, size=m, replace=False)
        centers = np.empty((k, X.shape[1]), dtype=float)
        centers[:m] = X[chosen]
        centers[m:] = X[chosen[0]]
        return centers

    def _reseed_empty(
        self, X: np.ndarray, labels: np.ndarray, centers: np.ndarray, dist: np.ndarray
    ) -> None:
        """Move far-away points into empty clusters, in place."""
        counts = np.bincount(labels, minlength=self.n_clusters)
        own = dist[np.arange(len(labels)), labels].copy()
        for j in np.flatnonzero(counts == 0):
            donors = counts[labels] > 1
            candidates = np.where(donors, own, -1.0)
            i = int(np.argmax(candidates))
            if candidates[i] <= 0.0:
                continue
            counts[labels[i]] -= 1
            labels[i] = j
            counts[j] = 1
            centers[j] = X[i]
            own[i] = 0.0
            self.n_reseeded_ += 1

    def fit(self, X: np.ndarray) -> "KMeans":
        X = np.asarray(X, dtype=float)
        if X.ndim != 2:
            raise ValueError(f"expected a 2D feature matrix, got shape {X.shape}")
        n = X.shape[0]
        if n == 0:
            raise EmptyInput("centroid initialization")
        if self.n_clusters <= 0 or self.n_clusters > n:
            raise InvalidClusterCount(self.n_clusters, n)

        centers = self._init_centers(X)
        labels: np.ndarray | None = None
        self.n_reseeded_ = 0
        self.converged_ = False

        for it in range(1, self.max_iter + 1):
            dist = _squared_distances(X, centers)
            new_labels = np.argmin(dist, axis=1)
            self._reseed_empty(X, new_labels, centers, dist)

            for j in range(self.n_clusters):
                members = X[new_labels == j]
                if len(members):
                    centers[j] = members.mean(axis=0)

            self.n_iter_ = it
            if labels is not None and np.array_equal(new_labels, labels):
                self.converged_ = True
                break
            labels = new_labels

        self.labels_ = labels
        self.cluster_centers_ = centers
        dist = _squared_distances(X, centers)
        self.inertia_ = float(dist[np.arange(n), labels].sum())
        return self

    def fit_predict(self, X: np.ndarray) -> np.ndarray:
        return self.fit(X).labels_

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Assign new rows to the fitted centroids."""
        if self.cluster_centers_ is None:
            raise ValueError("KMeans is not fitted")
        return assign_to_nearest(np.asarray(X, dtype=float), self.cluster_centers_)


def cluster_silhouette(X: np.ndarray, labels: np.ndarray) -> float:
    """Silhouette score, or -1.0 when it is undefined for this labeling."""
    n_labels = len(set(labels.tolist()))
    if n_labels < 2 or n_labels > len(labels) - 1:
        return -1.0
    return float(silhouette_score(X, labels))


def k_means_clustering(
    data: Sequence[CategoryRecord],
    k: int,
    rng: np.random.Generator | None = None,
    seed: int = RANDOM_SEED,
    max_iter: int = MAX_ITER,
) -> ClusterAssignment:
    """Cluster records by their feature vectors and map labels back to names.

    Zero records yield an empty assignment. ``k`` must be positive, and for a
    non-empty input at most ``len(data)``; otherwise InvalidClusterCount.
    """
    if k <= 0:
        raise InvalidClusterCount(k, len(data))
    if len(data) == 0:
        return ClusterAssignment.empty()

    X = feature_matrix(data)
    km = KMeans(k, max_iter=max_iter, rng=rng, seed=seed)
    labels = km.fit_predict(X)
    assignment = ClusterAssignment.from_labels(
        [r.municipality_name() for r in data], labels.tolist(), k
    )
    assignment.inertia = km.inertia_
    assignment.silhouette = cluster_silhouette(X, labels)
    assignment.n_iter = km.n_iter_
    return assignment


def find_optimal_k(
    data: Sequence[CategoryRecord],
    k_range: range = K_RANGE,
    seed: int = RANDOM_SEED,
    max_iter: int = MAX_ITER,
) -> dict:
    """Scan k values, reporting inertia and silhouette for each.

    Only k values in 1..len(data) are tried. Each k gets a fresh generator from
    ``seed`` so results do not depend on scan order.
    """
    if len(data) == 0:
        raise EmptyInput("find_optimal_k")
    n = len(data)
    ks = [k for k in k_range if 1 <= k <= n]
    if not ks:
        raise InvalidClusterCount(k_range.start, n)

    X = feature_matrix(data)
    inertias = []
    silhouettes = []
    for k in ks:
        km = KMeans(k, max_iter=max_iter, rng=np.random.default_rng(seed))
        labels = km.fit_predict(X)
        sil = cluster_silhouette(X, labels)
        inertias.append(km.inertia_)
        silhouettes.append(sil)
        print(f"    k={k}: inertia={km.inertia_:.4f}, silhouette={sil:.4f}")

    best_k = ks[silhouettes.index(max(silhouettes))]
    return {
        "k_range": ks,
        "inertias": inertias,
        "silhouettes": silhouettes,
        "best_k_silhouette": best_k,
    }
