"""
Backfill airports that routes reference but the registry does not describe.

Every missing code is looked up through the OpenFlights airport search API and the
raw response is cached as ``<CODE>.json`` in the data directory. Lookups run one
at a time with a fixed pause before each request so the service never sees a
burst of traffic. A failed lookup leaves no cache file behind and is retried on
the next run; codes that already have a cache file are never requested again.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import pandas as pd
import requests

from route_reconcile.openflights import AIRPORT_COLUMNS, AIRPORT_FIELDS, URLS, airport_search_form

logger = logging.getLogger(__name__)


def _parse_json(body: str):
    try:
        return json.loads(body)
    except ValueError:
        return None


class AirportCache:
    """One JSON file per airport code, holding the raw search response."""

    # Files that share the data directory but are not lookup results
    RESERVED_NAMES = frozenset({".DS_Store", "airports.dat", "routes.dat"})
    SUFFIX = ".json"

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, code: str) -> Path:
        return self.directory / f"{code}{self.SUFFIX}"

    def has(self, code: str) -> bool:
        return self.path_for(code).exists()

    def store(self, code: str, body: str) -> bool:
        if not body:
            logger.warning("Empty HTTP response body returned for %s", code, extra={"airport": code})
            return False
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path_for(code).write_text(body, encoding="utf-8")
        return True

    def entries(self) -> Iterator[Tuple[str, Path]]:
        if not self.directory.exists():
            return
        for path in sorted(self.directory.iterdir()):
            if path.name in self.RESERVED_NAMES or not path.is_file():
                continue
            if path.suffix != self.SUFFIX:
                continue
            yield path.stem, path


class BackfillCursor:
    """Position within the list of codes that still need a lookup."""

    def __init__(self, codes: Sequence[str]):
        self.codes = list(codes)
        self.position = 0

    @property
    def done(self) -> bool:
        return self.position >= len(self.codes)

    def advance(self) -> str:
        if self.done:
            raise StopIteration("All airport lookups have been issued")
        code = self.codes[self.position]
        self.position += 1
        return code


@dataclass
class BackfillStats:
    requested: int = 0
    fetched: int = 0
    failed: int = 0


class AirportBackfill:
    def __init__(
        self,
        cache: AirportCache,
        session=None,
        api_url: str = URLS["api"],
        interval: float = 0.25,
        timeout: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cache = cache
        self.session = session or requests.Session()
        self.api_url = api_url
        self.interval = max(0.0, float(interval))
        self.timeout = timeout
        self.sleep = sleep

    def pending(self, gap_codes: Sequence[str]) -> List[str]:
        """Codes without a cached lookup result."""
        return [code for code in gap_codes if not self.cache.has(code)]

    def fetch(self, code: str) -> bool:
        try:
            response = self.session.post(self.api_url, data=airport_search_form(code), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Airport lookup failed for %s: %s", code, exc, extra={"airport": code})
            return False
        logger.info(
            "%s: HTTP %s",
            self.cache.path_for(code),
            response.status_code,
            extra={"airport": code, "status_code": response.status_code},
        )
        body = response.text
        if body and self._search_results(_parse_json(body)) is None:
            logger.warning("Airport lookup for %s returned no search result; not caching", code, extra={"airport": code})
            return False
        return self.cache.store(code, body)

    def run(self, gap_codes: Sequence[str]) -> BackfillStats:
        cursor = BackfillCursor(self.pending(gap_codes))
        stats = BackfillStats(requested=len(cursor.codes))
        logger.info("Need to fetch data for %i missing airports", stats.requested, extra={"stage": "backfill"})

        while not cursor.done:
            self.sleep(self.interval)
            if self.fetch(cursor.advance()):
                stats.fetched += 1
            else:
                stats.failed += 1

        logger.info("Data for %i missing airports now retrieved", stats.fetched, extra={"stage": "backfill"})
        return stats

    @staticmethod
    def _search_results(payload) -> Optional[List[dict]]:
        """The ``airports`` list of a search response, or None when the payload is not one."""
        airports = payload.get("airports") if isinstance(payload, dict) else None
        if not isinstance(airports, list) or not all(isinstance(airport, dict) for airport in airports):
            return None
        return airports

    def collect(self) -> Tuple[pd.DataFrame, List[str]]:
        """
        Read every cached lookup back.

        Returns the backfilled airports (output columns) and the codes whose lookup
        came back without a single match.
        """
        records = []
        no_data: List[str] = []
        for code, path in self.cache.entries():
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("Unreadable cache file %s: %s", path, exc, extra={"airport": code})
                continue

            airports = self._search_results(payload)
            if airports is None:
                logger.warning("Cache file %s holds no airport search result", path, extra={"airport": code})
                continue
            if not airports:
                logger.info("OpenFlights has no data for airport %s", code, extra={"airport": code})
                no_data.append(code)
                continue
            match = airports[0]
            records.append({column: match.get(query) for _, column, query in AIRPORT_FIELDS})

        return pd.DataFrame(records, columns=AIRPORT_COLUMNS, dtype=object), no_data
