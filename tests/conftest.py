"""Shared fixtures: small education / population-growth datasets."""

import pytest

from muni_clusters.models import Dataset, MunicipalityRecord


def make_record(name: str, weights: dict[int, float], count: int = 10) -> MunicipalityRecord:
    """Record whose categories all share one count."""
    return MunicipalityRecord(name, {c: (count, w) for c, w in weights.items()})


@pytest.fixture
def scenario_records() -> list[MunicipalityRecord]:
    """A and C identical, B different."""
    return [
        MunicipalityRecord("A", {1: (5, 0.5)}),
        MunicipalityRecord("B", {1: (3, 0.9)}),
        MunicipalityRecord("C", {1: (5, 0.5)}),
    ]


@pytest.fixture
def education() -> Dataset:
    return Dataset(
        "education",
        (
            make_record("Aurora", {1: 0.6, 2: 0.3, 3: 0.1}),
            make_record("Brindle", {1: 0.1, 2: 0.2, 3: 0.7}),
            make_record("Caldera", {1: 0.55, 2: 0.35, 3: 0.1}),
            make_record("Dunmore", {4: 0.5, 5: 0.5}),
        ),
    )


@pytest.fixture
def pop_growth() -> Dataset:
    return Dataset(
        "pop_growth",
        (
            make_record("Aurora", {1: 0.6, 2: 0.3, 3: 0.1}),  # identical to education
            make_record("Brindle", {1: 0.4, 2: 0.6}),  # same name, different data
            make_record("Eastvale", {6: 1.0}),
        ),
    )
