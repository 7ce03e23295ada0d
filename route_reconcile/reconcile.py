"""Set arithmetic between the route feed and the airport registry."""
from __future__ import annotations

from typing import Iterable, List, Set, Tuple

import pandas as pd

from route_reconcile.tabular import partition

# The registry uses either marker for an airport without an IATA location code
ABSENT_CODES = {"\\N", ""}


def has_location_code(code) -> bool:
    return isinstance(code, str) and code not in ABSENT_CODES


def unique_route_airports(routes: pd.DataFrame) -> List[str]:
    """Codes used as either endpoint of a route, in first-seen order."""
    seen = {}
    for source, destination in zip(routes["source_airport"], routes["destination_airport"]):
        seen.setdefault(source, None)
        seen.setdefault(destination, None)
    return list(seen)


def partition_airports(airports: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Return ``(usable, codeless)`` registry rows."""
    codeless, usable = partition(airports.to_dict(orient="records"), lambda row: has_location_code(row["iata"]))
    columns = list(airports.columns)
    return (
        pd.DataFrame(usable, columns=columns, dtype=object),
        pd.DataFrame(codeless, columns=columns, dtype=object),
    )


def known_codes(usable: pd.DataFrame) -> Set[str]:
    return set(usable["iata"])


def gap_codes(route_codes: Iterable[str], known: Set[str]) -> List[str]:
    """Route airports that the usable registry does not describe."""
    return [code for code in route_codes if code not in known]
