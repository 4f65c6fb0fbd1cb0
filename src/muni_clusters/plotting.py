"""2D scatter plot of a cluster assignment."""

from pathlib import Path
from typing import Callable, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Patch

from muni_clusters.config import CLUSTER_CMAP, PLOT_DPI, PLOT_RANGE, PLOT_SIZE_PX, RANDOM_SEED
from muni_clusters.report import ClusterAssignment

CoordinateLookup = Callable[[str], Optional[tuple[float, float]]]


def random_coordinates(
    rng: np.random.Generator | None = None, seed: int = RANDOM_SEED
) -> CoordinateLookup:
    """Placeholder lookup: a uniform random point in the plot range per call.

    There is no real geographic source yet; pass a proper lookup to
    ``plot_clusters`` when one exists.
    """
    gen = rng if rng is not None else np.random.default_rng(seed)
    lo, hi = PLOT_RANGE

    def lookup(municipality: str) -> tuple[float, float]:
        x, y = gen.uniform(lo, hi, size=2)
        return float(x), float(y)

    return lookup


def save_fig(fig: plt.Figure, path: Path, dpi: int = PLOT_DPI) -> None:
    fig.savefig(path, dpi=dpi, facecolor="white")
    plt.close(fig)
    print(f"  Saved: {path.name}")


def cluster_points(
    assignment: ClusterAssignment, coordinates: CoordinateLookup
) -> dict[int, list[tuple[float, float]]]:
    """Resolve coordinates per cluster; municipalities without one are skipped."""
    points: dict[int, list[tuple[float, float]]] = {c: [] for c in assignment}
    for cluster_id, name in assignment.pairs():
        xy = coordinates(name)
        if xy is not None:
            points[cluster_id].append(xy)
    return points


def plot_clusters(
    assignment: ClusterAssignment,
    path: Path,
    coordinates: CoordinateLookup | None = None,
    title: str = "Cluster Plot",
) -> dict[int, list[tuple[float, float]]]:
    """Scatter every municipality at its coordinates, colored by cluster.

    Returns the plotted points per cluster.
    """
    lookup = coordinates if coordinates is not None else random_coordinates()
    points = cluster_points(assignment, lookup)

    width, height = PLOT_SIZE_PX
    fig, ax = plt.subplots(figsize=(width / PLOT_DPI, height / PLOT_DPI))
    cmap = plt.get_cmap(CLUSTER_CMAP)
    k = max(assignment.k, 1)

    for cluster_id, xy in points.items():
        if not xy:
            continue
        xs, ys = zip(*xy)
        ax.scatter(
            xs,
            ys,
            c=[cmap(cluster_id / max(k - 1, 1))],
            s=40,
            alpha=0.8,
            edgecolors="black",
            linewidth=0.5,
        )

    lo, hi = PLOT_RANGE
    ax.set_xlim(lo, hi)
    ax.set_ylim(lo, hi)
    ax.set_title(title, fontsize=16)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    if assignment.k:
        handles = [
            Patch(facecolor=cmap(i / max(k - 1, 1)), label=f"Cluster {i} ({len(assignment[i])})")
            for i in assignment
        ]
        ax.legend(handles=handles, loc="upper right", fontsize=8)

    save_fig(fig, Path(path))
    return points
