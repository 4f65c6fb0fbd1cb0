"""File output: DOT graphs, cluster CSVs, and matched-municipality CSVs."""

import csv
from pathlib import Path
from typing import Sequence

import networkx as nx

from muni_clusters.models import MatchedPair, MunicipalityDiff
from muni_clusters.report import ClusterAssignment


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def graph_to_dot(G: nx.DiGraph) -> str:
    """Render a graph as DOT text. Nodes are labeled with their municipality;
    edges are written without labels."""
    lines = ["digraph {"]
    for node, attrs in G.nodes(data=True):
        label = _dot_escape(str(attrs.get("municipality", node)))
        lines.append(f'    {node} [ label = "{label}" ]')
    for u, v in G.edges():
        lines.append(f"    {u} -> {v} [ ]")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(G: nx.DiGraph, path: Path) -> Path:
    path = Path(path)
    path.write_text(graph_to_dot(G), encoding="utf-8")
    print(f"  {path} ({G.number_of_nodes()} nodes, {G.number_of_edges()} edges)")
    return path


def save_clusters_csv(assignment: ClusterAssignment, path: Path) -> Path:
    """One row per (cluster_id, municipality)."""
    path = Path(path)
    assignment.to_frame().write_csv(path)
    print(f"  {path} ({len(assignment.pairs())} rows)")
    return path


def save_matches_csv(matches: Sequence[MatchedPair], path: Path) -> Path:
    """Matched municipalities with the number of categories each side defines."""
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["municipality", "n_categories_first", "n_categories_second"])
        for m in matches:
            writer.writerow([m.municipality, len(m.first.categories), len(m.second.categories)])
    print(f"  {path} ({len(matches)} rows)")
    return path


def save_join_csv(rows: Sequence[MunicipalityDiff], path: Path) -> Path:
    """Key-based outer join: presence on each side and the differing categories."""
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["municipality", "in_first", "in_second", "differing_categories"])
        for row in rows:
            writer.writerow(
                [
                    row.municipality,
                    row.first is not None,
                    row.second is not None,
                    " ".join(str(c) for c in row.differing_categories),
                ]
            )
    print(f"  {path} ({len(rows)} rows)")
    return path
