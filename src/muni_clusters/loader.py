"""Load municipality datasets from JSON files.

Expected layout, one array per file:

    [
      {"municipality": "Aurora", "data": {"1": [120, 0.35], "2": [80, 0.23]}},
      ...
    ]

Category keys are integers written as JSON strings; each value is a
[count, weight] pair.
"""

import json
import math
from pathlib import Path

from muni_clusters.errors import DataFormatError
from muni_clusters.models import Dataset, MunicipalityRecord


def parse_record(obj: object, path: Path | str = "<memory>") -> MunicipalityRecord:
    """Convert one decoded JSON object into a MunicipalityRecord."""
    if not isinstance(obj, dict):
        raise DataFormatError(path, f"expected an object, got {type(obj).__name__}")
    name = obj.get("municipality")
    if not isinstance(name, str) or not name:
        raise DataFormatError(path, "missing or empty 'municipality'")
    raw = obj.get("data", {})
    if not isinstance(raw, dict):
        raise DataFormatError(path, f"{name}: 'data' must be an object")

    categories: dict[int, tuple[int, float]] = {}
    for key, value in raw.items():
        try:
            category = int(key)
        except ValueError:
            raise DataFormatError(path, f"{name}: category key {key!r} is not an integer") from None
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise DataFormatError(path, f"{name}: category {category} must be [count, weight]")
        count, weight = value
        if isinstance(count, bool) or not isinstance(count, int):
            raise DataFormatError(path, f"{name}: category {category} count must be an integer")
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise DataFormatError(path, f"{name}: category {category} weight must be a number")
        if not math.isfinite(weight):
            raise DataFormatError(path, f"{name}: category {category} weight must be finite")
        categories[category] = (count, float(weight))

    return MunicipalityRecord(municipality=name, categories=categories)


def load_dataset(path: Path | str, name: str | None = None) -> Dataset:
    """Read a JSON dataset file into a Dataset named ``name`` (default: file stem)."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise DataFormatError(path, f"invalid JSON ({e})") from e
    except UnicodeDecodeError as e:
        raise DataFormatError(path, f"not valid UTF-8 ({e})") from e

    if not isinstance(raw, list):
        raise DataFormatError(path, "top level must be a JSON array of records")

    records = tuple(parse_record(obj, path) for obj in raw)
    return Dataset(name=name or path.stem, records=records)
