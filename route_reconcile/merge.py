"""Combine registry, backfilled and override airports into the output airport table."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from route_reconcile.openflights import AIRPORT_COLUMNS, AIRPORT_FIELDS
from route_reconcile.tabular import partition

logger = logging.getLogger(__name__)


def to_output_airports(usable: pd.DataFrame) -> pd.DataFrame:
    """Map registry rows onto the output airport columns."""
    rename = {registry: column for registry, column, _ in AIRPORT_FIELDS}
    return usable[list(rename)].rename(columns=rename)[AIRPORT_COLUMNS].reset_index(drop=True)


def merge_airports(primary: pd.DataFrame, backfilled: pd.DataFrame, overrides: pd.DataFrame) -> pd.DataFrame:
    """
    Stack the three airport sources: registry first, backfilled second, overrides last.

    Nothing is de-duplicated. Lookups by code return the first row in this order,
    so an override can add an airport but cannot replace one already present.
    """
    frames = [frame[AIRPORT_COLUMNS] for frame in (primary, backfilled, overrides)]
    return pd.concat(frames, ignore_index=True).astype(object)


class AirportIndex:
    """First-match lookup of output airport rows by IATA code."""

    def __init__(self, airports: pd.DataFrame, key: str = "IATA3"):
        self._rows: Dict[str, dict] = {}
        for record in airports.to_dict(orient="records"):
            self._rows.setdefault(record[key], record)

    def find(self, code: str) -> Optional[dict]:
        return self._rows.get(code)

    def __contains__(self, code) -> bool:
        return code in self._rows

    def __len__(self) -> int:
        return len(self._rows)


def still_unknown(no_data: Iterable[str], overrides: pd.DataFrame) -> List[str]:
    """Codes without lookup data that the override table does not supply either."""
    supplied = set(overrides["IATA3"])
    unknown, _ = partition(no_data, lambda code: code in supplied)
    return unknown
