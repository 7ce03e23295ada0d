"""
OpenFlights.org source definitions: feed locations, column layouts and the mapping
between registry rows, airport search results and the output airport table.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
import requests

from route_reconcile.errors import MissingInputError, SourceDownloadError
from route_reconcile.tabular import read_table

logger = logging.getLogger(__name__)

URLS = {
    "api": "https://openflights.org/php/apsearch.php",
    "airports": "https://raw.githubusercontent.com/jpatokal/openflights/master/data/airports.dat",
    "routes": "https://raw.githubusercontent.com/jpatokal/openflights/master/data/routes.dat",
    "airlines": "https://raw.githubusercontent.com/jpatokal/openflights/master/data/airlines.dat",
    "equipment": "https://raw.githubusercontent.com/jpatokal/openflights/master/data/planes.dat",
}

# Positional columns of the raw .dat feeds (no header row)
AIRPORT_DAT_COLUMNS = [
    "id", "name", "city", "country", "iata", "icao", "lat", "lng",
    "elevation", "tz", "dst", "olson_tz_name", "type", "source",
]
ROUTE_DAT_COLUMNS = [
    "airline", "airline_id", "source_airport", "source_airport_id",
    "destination_airport", "destination_airport_id", "codeshare", "stops", "equipment",
]

EQUIPMENT_SLOTS = 9

# Output tables; column order here is the column order written to disk
AIRPORT_COLUMNS = ["IATA3", "Name", "City", "Country", "Elevation", "Latitude", "Longitude"]
ROUTE_COLUMNS = [
    "ID", "StartingAirport", "DestinationAirport", "Airline", "Distance",
] + [f"Equipment{slot}" for slot in range(1, EQUIPMENT_SLOTS + 1)]

# (registry column, output column, airport search field)
AIRPORT_FIELDS = [
    ("iata", "IATA3", "iata"),
    ("name", "Name", "name"),
    ("city", "City", "city"),
    ("country", "Country", "country"),
    ("elevation", "Elevation", "elevation"),
    ("lat", "Latitude", "x"),
    ("lng", "Longitude", "y"),
]


def airport_search_form(iata: str) -> dict:
    """Form body of an airport search POST for a single IATA code."""
    return {
        "action": "SEARCH",
        "apid": "",
        "city": "",
        "code": "",
        "country": "ALL",
        "db": "airports",
        "dst": "U",
        "elevation": "",
        "iata": iata,
        "iatafilter": "false",
        "icao": "",
        "name": "",
        "offset": "0",
        "timezone": "",
        "x": "",
        "y": "",
    }


def _require(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise MissingInputError(path)
    return path


def load_airports(path: Path) -> pd.DataFrame:
    """Load the airport registry feed (14 positional columns)."""
    return read_table(_require(path), AIRPORT_DAT_COLUMNS, has_header=False)


def load_routes(path: Path) -> pd.DataFrame:
    """
    Load the route feed, keeping only routes flown by an airline with a 2-character code.

    Some routes identify the airline by its 3-character ICAO code instead; those rows
    cannot be matched against IATA airline codes and are dropped here.
    """
    routes = read_table(_require(path), ROUTE_DAT_COLUMNS, has_header=False)
    mask = routes["airline"].astype(str).str.len() == 2
    return routes.loc[mask].reset_index(drop=True)


def load_override_airports(path: Path) -> pd.DataFrame:
    return read_table(_require(path), AIRPORT_COLUMNS, has_header=True)


def load_override_routes(path: Path) -> pd.DataFrame:
    return read_table(_require(path), ROUTE_COLUMNS, has_header=True)


def fetch_file(url: str, path: Path, session=None, timeout: float = 30.0) -> Path:
    """Download ``url`` into ``path``; empty bodies are reported but not written."""
    http = session or requests
    path = Path(path)
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.error("Download failed for %s", url, extra={"stage": "download"})
        raise SourceDownloadError(url, exc) from exc

    logger.info("%s: HTTP %s", path, response.status_code, extra={"stage": "download", "status_code": response.status_code})
    if response.text:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(response.text, encoding="utf-8")
    else:
        logger.warning("Empty HTTP response body returned for %s", path, extra={"stage": "download"})
    return path
