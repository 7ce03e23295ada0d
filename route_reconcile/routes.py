"""
Resolve routes against the merged airport table and compute their length.

Output route IDs are the plain concatenation of source airport, destination airport
and airline code (e.g. ``JFKLAXAA``). The key is only unambiguous because airport
codes are always three characters and airline codes two.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Collection, List, Optional, Tuple

import pandas as pd
from geopy.distance import geodesic

from route_reconcile.merge import AirportIndex
from route_reconcile.openflights import EQUIPMENT_SLOTS, ROUTE_COLUMNS

logger = logging.getLogger(__name__)

KM_PER_RADIAN = 6372.8
PROGRESS_EVERY = 1000


def _radians(value) -> float:
    degrees = float(value)
    if not math.isfinite(degrees):
        raise ValueError(f"Coordinate is not a finite number: {value!r}")
    return degrees / 180.0 * math.pi


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def haversine(lat1, lng1, lat2, lng2) -> int:
    """Great circle distance in whole kilometres; coordinates in decimal degrees."""
    lat1, lng1, lat2, lng2 = (_radians(value) for value in (lat1, lng1, lat2, lng2))
    sin_dlat = math.sin((lat2 - lat1) / 2)
    sin_dlng = math.sin((lng2 - lng1) / 2)
    a = sin_dlat * sin_dlat + sin_dlng * sin_dlng * math.cos(lat1) * math.cos(lat2)
    # Float noise can push a marginally past 1 for antipodal points
    return _round_half_up(2 * math.asin(math.sqrt(min(1.0, a))) * KM_PER_RADIAN)


def geodesic_distance(lat1, lng1, lat2, lng2) -> int:
    """Ellipsoidal (WGS-84) distance in whole kilometres."""
    return _round_half_up(geodesic((float(lat1), float(lng1)), (float(lat2), float(lng2))).km)


DISTANCE_FUNCTIONS = {
    "haversine": haversine,
    "geodesic": geodesic_distance,
}


def equipment_slots(equipment) -> List[Optional[str]]:
    """Spread a space separated equipment list over the fixed equipment columns."""
    codes = equipment.split() if isinstance(equipment, str) else []
    codes = codes[:EQUIPMENT_SLOTS]
    return codes + [None] * (EQUIPMENT_SLOTS - len(codes))


def route_id(source: str, destination: str, airline: str) -> str:
    return f"{source}{destination}{airline}"


@dataclass
class RouteStats:
    considered: int = 0
    dropped_unknown: int = 0
    dropped_unresolved: int = 0
    computed: int = 0


def resolve_routes(
    routes: pd.DataFrame,
    airports: AirportIndex,
    unknown: Collection[str] = (),
    distance: Callable[..., int] = haversine,
) -> Tuple[pd.DataFrame, RouteStats]:
    """Build output route rows for every route whose endpoints are both known."""
    unknown = set(unknown)
    stats = RouteStats(considered=len(routes))
    rows = []

    for position, route in enumerate(routes.to_dict(orient="records")):
        if position % PROGRESS_EVERY == 0:
            logger.debug("Resolved %i of %i routes", position, stats.considered, extra={"stage": "routes"})

        source = route["source_airport"]
        destination = route["destination_airport"]
        if source in unknown or destination in unknown:
            stats.dropped_unknown += 1
            continue

        start = airports.find(source)
        end = airports.find(destination)
        if start is None or end is None:
            logger.warning(
                "Airport information missing for route %s -> %s",
                source,
                destination,
                extra={"source_airport": source, "destination_airport": destination},
            )
            stats.dropped_unresolved += 1
            continue

        try:
            length = distance(start["Latitude"], start["Longitude"], end["Latitude"], end["Longitude"])
        except (TypeError, ValueError):
            logger.warning(
                "Unusable coordinates for route %s -> %s",
                source,
                destination,
                extra={"source_airport": source, "destination_airport": destination},
            )
            stats.dropped_unresolved += 1
            continue

        airline = route["airline"]
        rows.append(
            [
                route_id(source, destination, airline),
                source,
                destination,
                airline,
                length,
            ]
            + equipment_slots(route["equipment"])
        )

    stats.computed = len(rows)
    return pd.DataFrame(rows, columns=ROUTE_COLUMNS, dtype=object), stats


def append_override_routes(computed: pd.DataFrame, overrides: pd.DataFrame) -> pd.DataFrame:
    """Append curated routes verbatim; their distance is taken as supplied."""
    return pd.concat([computed[ROUTE_COLUMNS], overrides[ROUTE_COLUMNS]], ignore_index=True).astype(object)
