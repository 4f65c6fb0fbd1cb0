"""Weighted similarity graph over one dataset's municipalities.

Nodes: one per record, in input order, keyed by position (0..n-1) so repeated
municipality names give distinct nodes. Node attr 'municipality' holds the name.
Edges: directed, both directions for every pair of distinct records whose
feature vectors have a finite cosine similarity > threshold; weight = similarity in (0, 1].
No self-loops. Edges carry only a 'weight' attribute, never a label.
"""

from typing import Sequence

import networkx as nx
import numpy as np

from muni_clusters.config import EDGE_SIMILARITY_THRESHOLD
from muni_clusters.features import feature_matrix
from muni_clusters.models import CategoryRecord


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity of two vectors; 0.0 if either is all zeros."""
    norm = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    return float(np.dot(a, b) / norm)


def _similarity_matrix(X: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(X, axis=1)
    safe = np.where(norms == 0.0, 1.0, norms)
    unit = X / safe[:, None]
    sim = unit @ unit.T
    # Zero vectors are similar to nothing
    sim[norms == 0.0, :] = 0.0
    sim[:, norms == 0.0] = 0.0
    return np.clip(sim, -1.0, 1.0)


def create_graph(
    data: Sequence[CategoryRecord],
    threshold: float = EDGE_SIMILARITY_THRESHOLD,
) -> nx.DiGraph:
    """Build the directed similarity graph for ``data``."""
    if not 0.0 <= threshold < 1.0:
        raise ValueError(f"threshold must be in [0, 1), got {threshold}")

    G = nx.DiGraph()
    for idx, record in enumerate(data):
        G.add_node(idx, municipality=record.municipality_name())

    n = len(data)
    if n < 2:
        return G

    sim = _similarity_matrix(feature_matrix(data))
    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            s = float(sim[i, j])
            if not np.isfinite(s) or s <= threshold:
                continue
            G.add_edge(i, j, weight=min(s, 1.0))

    return G


def graph_summary(G: nx.DiGraph) -> dict:
    """Node/edge counts, density, and mean edge weight."""
    n_edges = G.number_of_edges()
    weights = [d["weight"] for _, _, d in G.edges(data=True)]
    return {
        "n_nodes": G.number_of_nodes(),
        "n_edges": n_edges,
        "density": nx.density(G) if G.number_of_nodes() > 1 else 0.0,
        "mean_weight": float(np.mean(weights)) if weights else 0.0,
    }
