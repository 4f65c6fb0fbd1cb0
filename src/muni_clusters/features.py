"""Feature vectors over the fixed category range."""

from typing import Sequence

import numpy as np

from muni_clusters.config import CATEGORY_RANGE
from muni_clusters.models import CategoryRecord


def extract_features(record: CategoryRecord, categories: range = CATEGORY_RANGE) -> np.ndarray:
    """Return the weight vector for ``record`` over ``categories``.

    Index i holds the weight of category ``categories[i]``. Categories the record
    does not define contribute 0.0 (zero-fill, not imputation). The length is
    always ``len(categories)``; categories outside the range are ignored.
    """
    values = []
    for category in categories:
        w = record.weight(category)
        values.append(0.0 if w is None else float(w))
    return np.array(values, dtype=float)


def feature_matrix(
    records: Sequence[CategoryRecord], categories: range = CATEGORY_RANGE
) -> np.ndarray:
    """Stack feature vectors into an (n_records, n_categories) matrix, input order kept."""
    if len(records) == 0:
        return np.zeros((0, len(categories)), dtype=float)
    return np.vstack([extract_features(r, categories) for r in records])


def feature_columns(categories: range = CATEGORY_RANGE) -> list[str]:
    """Column names for a feature matrix: w1..w10."""
    return [f"w{c}" for c in categories]

