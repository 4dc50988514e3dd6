"""Tabular export of stored mappings."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from loguru import logger

from ..mapping.store import MappingStore

COLUMNS = ["id", "conference"]


def mappings_frame(store: MappingStore) -> pd.DataFrame:
    """Return every stored mapping as a DataFrame sorted by id."""
    rows = list(store.items())
    frame = pd.DataFrame(rows, columns=COLUMNS)
    if frame.empty:
        return frame.astype({"id": "int64", "conference": "string"})
    return frame.sort_values("id").reset_index(drop=True)


def export_mappings(store: MappingStore, destination: Path) -> int:
    """Write the mappings to ``destination`` as CSV and return the row count."""
    frame = mappings_frame(store)
    destination.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(destination, index=False)
    logger.info("Exported {} mappings to {}", len(frame), destination)
    return len(frame)
