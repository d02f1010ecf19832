from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

_DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "booths.csv"


@dataclass(frozen=True)
class StorageConfig:
    booth_catalog_path: Path = field(
        default_factory=lambda: Path(os.getenv("BOOTH_CATALOG_PATH", str(_DEFAULT_CATALOG)))
    )
    recommendations_per_user: int = 5


DEFAULT_STORAGE_CONFIG = StorageConfig()
