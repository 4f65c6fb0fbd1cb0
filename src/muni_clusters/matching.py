"""Matching municipalities across two independently keyed datasets.

Two policies are available:

  structural  A record from the first dataset matches only a record in the second
              dataset that is fully equal (same municipality AND the same category
              data). A municipality present in both with different values does not
              match. This is the default.
  key         Records match on municipality name alone; category data may differ.

``outer_join_municipalities`` gives the full key-based picture: every name from
either side with the categories whose (count, weight) differ.
"""

from typing import Sequence

from muni_clusters.config import DEFAULT_MATCH_MODE, MATCH_MODES
from muni_clusters.models import MatchedPair, MunicipalityDiff, MunicipalityRecord


def filter_common_municipalities(
    data1: Sequence[MunicipalityRecord],
    data2: Sequence[MunicipalityRecord],
    mode: str = DEFAULT_MATCH_MODE,
) -> list[MatchedPair]:
    """Return one MatchedPair per entry of ``data1`` that has a partner in ``data2``.

    Output preserves ``data1`` order. For each entry the first partner in ``data2``
    wins. No index is built: this is a plain O(n*m) scan.
    """
    if mode not in MATCH_MODES:
        raise ValueError(f"Unknown match mode {mode!r}; expected one of {MATCH_MODES}")

    common: list[MatchedPair] = []
    for entry1 in data1:
        for entry2 in data2:
            if mode == "structural":
                hit = entry2 == entry1
            else:
                hit = entry2.municipality == entry1.municipality
            if hit:
                common.append(MatchedPair(entry1.municipality, entry1, entry2))
                break
    return common


def shared_names_without_match(
    data1: Sequence[MunicipalityRecord],
    data2: Sequence[MunicipalityRecord],
    matches: Sequence[MatchedPair],
) -> list[str]:
    """Names present in both datasets that produced no match.

    Under structural matching, overlapping municipalities with differing data are
    silently dropped; callers use this to warn about it.
    """
    names2 = {r.municipality for r in data2}
    matched = {m.municipality for m in matches}
    seen: set[str] = set()
    missing = []
    for r in data1:
        name = r.municipality
        if name in names2 and name not in matched and name not in seen:
            missing.append(name)
            seen.add(name)
    return missing


def _differing_categories(a: MunicipalityRecord, b: MunicipalityRecord) -> tuple[int, ...]:
    keys = set(a.categories) | set(b.categories)
    return tuple(sorted(c for c in keys if a.categories.get(c) != b.categories.get(c)))


def outer_join_municipalities(
    data1: Sequence[MunicipalityRecord],
    data2: Sequence[MunicipalityRecord],
) -> list[MunicipalityDiff]:
    """Key-based outer join with a per-category value diff.

    Rows for names in ``data1`` come first (``data1`` order), followed by names
    only found in ``data2`` (``data2`` order). If a name repeats within one
    dataset, its first record is used.
    """
    first_by_name: dict[str, MunicipalityRecord] = {}
    for r in data1:
        first_by_name.setdefault(r.municipality, r)
    second_by_name: dict[str, MunicipalityRecord] = {}
    for r in data2:
        second_by_name.setdefault(r.municipality, r)

    rows: list[MunicipalityDiff] = []
    for name, rec1 in first_by_name.items():
        rec2 = second_by_name.get(name)
        if rec2 is None:
            rows.append(MunicipalityDiff(name, rec1, None))
        else:
            rows.append(MunicipalityDiff(name, rec1, rec2, _differing_categories(rec1, rec2)))
    for name, rec2 in second_by_name.items():
        if name not in first_by_name:
            rows.append(MunicipalityDiff(name, None, rec2))
    return rows
