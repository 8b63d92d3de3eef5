from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

"""Synthetic contact spreadsheets for manual runs and perf tests.

Generated data contains the defects the analysis looks for:
- repeated names (case / whitespace variants) -> duplicates
- blank names, phones and emails -> missing data
- a limited set of schools -> grouping, including blanks -> "Unknown"
"""

__all__ = [
    "SAMPLE_HEADERS",
    "generate_contacts",
    "write_sample_file",
]

SAMPLE_HEADERS = ["Name", "Phone", "Email", "School", "Address"]

_FIRST = ["Ann", "Bob", "Carla", "Dmitri", "Eun-ji", "Farah", "Gus", "Hana", "Ivo", "Jane"]
_LAST = ["Doe", "Smith", "Okafor", "Tanaka", "Novak", "Silva", "Berg", "Khan"]
_SCHOOLS = ["North High", "South High", "East Academy", "West College"]


def generate_contacts(
    rows: int,
    seed: int = 42,
    duplicate_rate: float = 0.1,
    blank_rate: float = 0.05,
) -> pd.DataFrame:
    """Generate a contact table with SAMPLE_HEADERS columns (all str).

    Args:
        rows: Number of data rows
        seed: Random seed for reproducible data
        duplicate_rate: Share of rows re-using an earlier name (case/space varied)
        blank_rate: Share of blank cells per column
    """
    rng = np.random.default_rng(seed)
    names: list[str] = []
    for i in range(rows):
        if names and rng.random() < duplicate_rate:
            prev = names[int(rng.integers(0, len(names)))]
            names.append(f" {prev.upper()} " if rng.random() < 0.5 else prev)
        else:
            names.append(f"{rng.choice(_FIRST)} {rng.choice(_LAST)} {i}")

    data: dict[str, list[Any]] = {
        "Name": names,
        "Phone": [f"555-{int(n):04d}" for n in rng.integers(0, 10_000, rows)],
        "Email": [f"user{i}@example.com" for i in range(rows)],
        "School": rng.choice(_SCHOOLS, rows).tolist(),
        "Address": [f"{int(n)} Main St" for n in rng.integers(1, 999, rows)],
    }
    for col in SAMPLE_HEADERS:
        blanks = rng.random(rows) < blank_rate
        data[col] = ["" if b else v for v, b in zip(data[col], blanks)]
    return pd.DataFrame(data, columns=SAMPLE_HEADERS)


def write_sample_file(output_path: Path, rows: int, seed: int = 42) -> Path:
    """Write generated contacts as .csv / .xlsx / .ods depending on the suffix."""
    df = generate_contacts(rows, seed=seed)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = output_path.suffix.lower()
    if suffix == ".csv":
        df.to_csv(output_path, index=False)
    elif suffix in (".xlsx", ".ods"):
        df.to_excel(output_path, sheet_name="Sheet1", index=False)
    else:
        raise ValueError(f"unsupported sample format: {suffix}")
    return output_path
