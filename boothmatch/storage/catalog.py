from __future__ import annotations

from pathlib import Path

import pandas as pd

from ..recommendations.models import Booth

CATALOG_COLUMNS = ["id", "name", "company", "description", "location", "tags", "looking_for"]


def _split_terms(value: str) -> list[str]:
    return [t.strip() for t in value.split(",") if t.strip()]


def load_booth_catalog(path: Path) -> list[Booth]:
    """Read the booth catalog CSV into ``Booth`` records, keeping file order."""
    df = pd.read_csv(path, dtype=str).fillna("")

    missing = [c for c in ("id", "name") if c not in df.columns]
    if missing:
        raise ValueError(f"Booth catalog {path} is missing columns: {', '.join(missing)}")
    for col in CATALOG_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    df["tags_list"] = df["tags"].apply(_split_terms)
    df["looking_for_list"] = df["looking_for"].apply(_split_terms)

    booths: list[Booth] = []
    for _, row in df.iterrows():
        booths.append(Booth(
            id=row["id"].strip(),
            name=row["name"].strip(),
            company=row["company"].strip(),
            description=row["description"].strip() or None,
            location=row["location"].strip() or None,
            tags=row["tags_list"],
            looking_for=row["looking_for_list"],
        ))
    return booths
