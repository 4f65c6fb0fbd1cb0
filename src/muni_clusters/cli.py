"""Command-line driver: load both datasets, match, graph, cluster, plot."""

import argparse
from pathlib import Path

import numpy as np

from muni_clusters.config import (
    DEFAULT_K,
    DEFAULT_MATCH_MODE,
    EDGE_SIMILARITY_THRESHOLD,
    EDUCATION_DATA_FILE,
    EDUCATION_GRAPH_FILE,
    EDUCATION_PLOT_FILE,
    K_RANGE,
    MATCH_MODES,
    MAX_ITER,
    POP_GROWTH_DATA_FILE,
    POP_GROWTH_GRAPH_FILE,
    POP_GROWTH_PLOT_FILE,
    RANDOM_SEED,
)
from muni_clusters.errors import DataFormatError, MuniClusterError
from muni_clusters.graph import create_graph, graph_summary
from muni_clusters.kmeans import find_optimal_k, k_means_clustering
from muni_clusters.loader import load_dataset
from muni_clusters.matching import (
    filter_common_municipalities,
    outer_join_municipalities,
    shared_names_without_match,
)
from muni_clusters.models import Dataset
from muni_clusters.output import save_clusters_csv, save_join_csv, save_matches_csv, write_dot
from muni_clusters.plotting import plot_clusters, random_coordinates
from muni_clusters.run_context import RunContext

# (dataset name, display label, graph file, plot file)
DATASETS = (
    ("education", "Education", EDUCATION_GRAPH_FILE, EDUCATION_PLOT_FILE),
    ("pop_growth", "Pop Growth", POP_GROWTH_GRAPH_FILE, POP_GROWTH_PLOT_FILE),
)


def print_header(title: str) -> None:
    width = 60
    print(f"\n{'=' * width}")
    print(f"  {title}")
    print(f"{'=' * width}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="muni-clusters",
        description="Graph and cluster municipalities by education and population-growth data.",
    )
    parser.add_argument(
        "education",
        nargs="?",
        type=Path,
        default=Path(EDUCATION_DATA_FILE),
        help=f"Education dataset JSON (default: {EDUCATION_DATA_FILE})",
    )
    parser.add_argument(
        "pop_growth",
        nargs="?",
        type=Path,
        default=Path(POP_GROWTH_DATA_FILE),
        help=f"Population-growth dataset JSON (default: {POP_GROWTH_DATA_FILE})",
    )
    parser.add_argument("--k", type=int, default=DEFAULT_K, help=f"Clusters (default: {DEFAULT_K})")
    parser.add_argument(
        "--auto-k",
        action="store_true",
        help=f"Pick k per dataset by silhouette over {K_RANGE.start}..{K_RANGE.stop - 1}",
    )
    parser.add_argument(
        "--seed", type=int, default=RANDOM_SEED, help=f"Random seed (default: {RANDOM_SEED})"
    )
    parser.add_argument(
        "--max-iter",
        type=int,
        default=MAX_ITER,
        help=f"K-means iteration cap (default: {MAX_ITER})",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=EDGE_SIMILARITY_THRESHOLD,
        help=f"Minimum cosine similarity for a graph edge (default: {EDGE_SIMILARITY_THRESHOLD})",
    )
    parser.add_argument(
        "--match-mode",
        choices=MATCH_MODES,
        default=DEFAULT_MATCH_MODE,
        help=f"How municipalities are matched across datasets (default: {DEFAULT_MATCH_MODE})",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "--results-root",
        type=Path,
        default=None,
        help="Write a dated run directory with run_log.txt and run_info.json under this root",
    )
    return parser


def _load(path: Path, name: str) -> Dataset | None:
    try:
        dataset = load_dataset(path, name=name)
    except (OSError, DataFormatError) as e:
        print(f"  ERROR: could not read {name} data: {e}")
        return None
    print(f"  {name}: {len(dataset)} municipalities from {path}")
    return dataset


def _match(
    education: Dataset, pop_growth: Dataset, mode: str, data_dir: Path
) -> int:
    """Match the two datasets and save the result. Returns the number of failures."""
    matches = filter_common_municipalities(education.records, pop_growth.records, mode=mode)
    print(f"  {len(matches)} common municipalities ({mode} match)")
    if mode == "structural":
        dropped = shared_names_without_match(education.records, pop_growth.records, matches)
        if dropped:
            print(
                f"  WARNING: {len(dropped)} municipality name(s) appear in both datasets "
                "with different data and were not matched"
            )
    try:
        save_matches_csv(matches, data_dir / "common_municipalities.csv")
        if mode == "key":
            rows = outer_join_municipalities(education.records, pop_growth.records)
            save_join_csv(rows, data_dir / "municipality_join.csv")
    except OSError as e:
        print(f"  ERROR: could not write match output: {e}")
        return 1
    return 0


def _graph(dataset: Dataset, threshold: float, path: Path) -> int:
    try:
        G = create_graph(dataset.records, threshold=threshold)
        summary = graph_summary(G)
        print(
            f"  {dataset.name}: {summary['n_nodes']} nodes, {summary['n_edges']} edges, "
            f"density={summary['density']:.3f}"
        )
        write_dot(G, path)
    except (OSError, ValueError) as e:
        print(f"  ERROR: {dataset.name} graph export failed: {e}")
        return 1
    return 0


def _cluster_and_plot(
    dataset: Dataset,
    label: str,
    args: argparse.Namespace,
    data_dir: Path,
    plot_path: Path,
) -> int:
    k = args.k
    try:
        if args.auto_k:
            print(f"  {dataset.name}: scanning k...")
            analysis = find_optimal_k(
                dataset.records, K_RANGE, seed=args.seed, max_iter=args.max_iter
            )
            k = analysis["best_k_silhouette"]
            print(f"  {dataset.name}: best k by silhouette = {k}")
        assignment = k_means_clustering(
            dataset.records,
            k,
            rng=np.random.default_rng(args.seed),
            max_iter=args.max_iter,
        )
    except (MuniClusterError, ValueError) as e:
        print(f"  ERROR: {dataset.name} clustering failed, skipping plot: {e}")
        return 1

    print(f"{label} Clusters: {assignment}")
    failures = 0
    try:
        save_clusters_csv(assignment, data_dir / f"{dataset.name}_clusters.csv")
        plot_clusters(
            assignment,
            plot_path,
            coordinates=random_coordinates(np.random.default_rng(args.seed)),
        )
    except (OSError, ValueError) as e:
        print(f"  ERROR: {dataset.name} cluster export failed: {e}")
        failures += 1
    return failures


def run_pipeline(args: argparse.Namespace, data_dir: Path, plots_dir: Path) -> int:
    """Run every step; one dataset's failure never stops the other. Returns failure count."""
    failures = 0

    print_header("Step 1: Loading datasets")
    datasets: dict[str, Dataset | None] = {
        "education": _load(args.education, "education"),
        "pop_growth": _load(args.pop_growth, "pop_growth"),
    }
    failures += sum(1 for d in datasets.values() if d is None)

    print_header("Step 2: Matching municipalities")
    if datasets["education"] is not None and datasets["pop_growth"] is not None:
        failures += _match(
            datasets["education"], datasets["pop_growth"], args.match_mode, data_dir
        )
    else:
        print("  Skipped: both datasets are required")

    print_header("Step 3: Building graphs")
    for name, _, graph_file, _ in DATASETS:
        dataset = datasets[name]
        if dataset is not None:
            failures += _graph(dataset, args.threshold, data_dir / graph_file)

    print_header("Step 4: Clustering")
    for name, label, _, plot_file in DATASETS:
        dataset = datasets[name]
        if dataset is not None:
            failures += _cluster_and_plot(dataset, label, args, data_dir, plots_dir / plot_file)

    return failures


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.results_root is not None:
        with RunContext("clusters", params=vars(args), results_root=args.results_root) as ctx:
            failures = run_pipeline(args, ctx.data_dir, ctx.plots_dir)
    else:
        out = args.output or Path(".")
        out.mkdir(parents=True, exist_ok=True)
        failures = run_pipeline(args, out, out)

    if failures:
        print(f"\nFinished with {failures} failed step(s)")
        return 1
    print("\nDone")
    return 0
