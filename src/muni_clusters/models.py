"""Data classes for municipality statistics records."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Protocol


class CategoryRecord(Protocol):
    """Anything keyed by municipality that can report a per-category weight."""

    def municipality_name(self) -> str: ...

    def weight(self, category: int) -> Optional[float]: ...


@dataclass(frozen=True)
class MunicipalityRecord:
    """One municipality's statistics: category -> (count, weight).

    Education attainment and population-growth datasets share this shape.
    Equality is structural: same municipality and the same category data.
    Categories are stored read-only; the hash covers the municipality only.
    """

    municipality: str
    categories: Mapping[int, tuple[int, float]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", MappingProxyType(dict(self.categories)))

    def municipality_name(self) -> str:
        return self.municipality

    def weight(self, category: int) -> Optional[float]:
        entry = self.categories.get(category)
        if entry is None:
            return None
        return entry[1]

    def count(self, category: int) -> Optional[int]:
        entry = self.categories.get(category)
        if entry is None:
            return None
        return entry[0]


@dataclass(frozen=True)
class Dataset:
    """A named collection of records, e.g. 'education' or 'pop_growth'."""

    name: str
    records: tuple[MunicipalityRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    @property
    def municipalities(self) -> list[str]:
        return [r.municipality for r in self.records]


@dataclass(frozen=True)
class MatchedPair:
    """A municipality whose full record compares equal across two datasets."""

    municipality: str
    first: MunicipalityRecord
    second: MunicipalityRecord


@dataclass(frozen=True)
class MunicipalityDiff:
    """One row of a key-based outer join between two datasets."""

    municipality: str
    first: Optional[MunicipalityRecord]
    second: Optional[MunicipalityRecord]
    differing_categories: tuple[int, ...] = ()

    @property
    def in_both(self) -> bool:
        return self.first is not None and self.second is not None

    @property
    def identical(self) -> bool:
        return self.in_both and not self.differing_categories
