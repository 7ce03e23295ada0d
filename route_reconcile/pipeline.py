"""End-to-end reconciliation run: feeds in, consistent airport and route tables out."""
from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict

import requests

from route_reconcile.backfill import AirportBackfill, AirportCache
from route_reconcile.config import Settings
from route_reconcile.errors import MissingInputError
from route_reconcile.merge import AirportIndex, merge_airports, still_unknown, to_output_airports
from route_reconcile.openflights import (
    fetch_file,
    load_airports,
    load_override_airports,
    load_override_routes,
    load_routes,
)
from route_reconcile.reconcile import gap_codes, known_codes, partition_airports, unique_route_airports
from route_reconcile.routes import DISTANCE_FUNCTIONS, append_override_routes, resolve_routes
from route_reconcile.tabular import write_table

logger = logging.getLogger(__name__)


@dataclass
class PipelineReport:
    routes: int = 0
    route_airports: int = 0
    registry_airports: int = 0
    usable_airports: int = 0
    codeless_airports: int = 0
    gap_codes: int = 0
    pending_fetches: int = 0
    fetched: int = 0
    fetch_failures: int = 0
    backfilled_airports: int = 0
    no_data_codes: int = 0
    override_airports: int = 0
    still_unknown: int = 0
    routes_dropped_unknown: int = 0
    routes_dropped_unresolved: int = 0
    computed_routes: int = 0
    override_routes: int = 0
    output_airports: int = 0
    output_routes: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def download_feeds(settings: Settings, session) -> None:
    """Fetch the airport registry, then the route list (one after the other)."""
    feeds = [("airports", settings.airports_feed), ("routes", settings.routes_feed)]
    if settings.offline:
        for _, path in feeds:
            if not path.exists():
                raise MissingInputError(path)
        logger.info("Offline run: reusing feeds in %s", settings.data_dir, extra={"stage": "download"})
        return
    for name, path in feeds:
        fetch_file(settings.urls[name], path, session=session, timeout=settings.request_timeout)


def run_pipeline(
    settings: Settings,
    session=None,
    sleep: Callable[[float], None] = time.sleep,
) -> PipelineReport:
    session = session or requests.Session()
    report = PipelineReport()
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    download_feeds(settings, session)
    registry = load_airports(settings.airports_feed)
    routes = load_routes(settings.routes_feed)

    route_codes = unique_route_airports(routes)
    report.routes = len(routes)
    report.route_airports = len(route_codes)
    report.registry_airports = len(registry)
    logger.info(
        "routes.dat describes %i routes between %i unique airports",
        report.routes,
        report.route_airports,
        extra={"stage": "reconcile"},
    )
    logger.info("airports.dat contains %i airports", report.registry_airports, extra={"stage": "reconcile"})

    usable, codeless = partition_airports(registry)
    report.usable_airports = len(usable)
    report.codeless_airports = len(codeless)
    logger.info("Only %i airports have a 3-character IATA location code", report.usable_airports, extra={"stage": "reconcile"})

    missing = gap_codes(route_codes, known_codes(usable))
    report.gap_codes = len(missing)
    logger.info(
        "%i airports are listed in routes.dat that cannot be found in airports.dat",
        report.gap_codes,
        extra={"stage": "reconcile"},
    )

    backfill = AirportBackfill(
        AirportCache(settings.data_dir),
        session=session,
        api_url=settings.urls["api"],
        interval=settings.request_interval,
        timeout=settings.request_timeout,
        sleep=sleep,
    )
    fetch_stats = backfill.run(missing)
    report.pending_fetches = fetch_stats.requested
    report.fetched = fetch_stats.fetched
    report.fetch_failures = fetch_stats.failed

    backfilled, no_data = backfill.collect()
    override_airports = load_override_airports(settings.extra_airports)
    report.backfilled_airports = len(backfilled)
    report.no_data_codes = len(no_data)
    report.override_airports = len(override_airports)
    logger.info("%i airports added by reading the OpenFlights API", report.backfilled_airports, extra={"stage": "merge"})
    logger.info(
        "%i airports added from %s",
        report.override_airports,
        settings.extra_airports.name,
        extra={"stage": "merge"},
    )

    all_airports = merge_airports(to_output_airports(usable), backfilled, override_airports)
    write_table(all_airports, settings.output_airports, has_header=True)
    report.output_airports = len(all_airports)

    unknown = still_unknown(no_data, override_airports)
    report.still_unknown = len(unknown)
    logger.info(
        "Still can't find any data for %i airport%s",
        report.still_unknown,
        "" if report.still_unknown == 1 else "s",
        extra={"stage": "routes"},
    )
    if unknown:
        logger.info("Routes to/from the following airport(s) will be removed [%s]", ",".join(unknown), extra={"stage": "routes"})

    computed, route_stats = resolve_routes(
        routes,
        AirportIndex(all_airports),
        unknown=unknown,
        distance=DISTANCE_FUNCTIONS[settings.distance_model],
    )
    report.routes_dropped_unknown = route_stats.dropped_unknown
    report.routes_dropped_unresolved = route_stats.dropped_unresolved
    report.computed_routes = route_stats.computed

    override_routes = load_override_routes(settings.extra_routes)
    report.override_routes = len(override_routes)
    logger.info("%i routes added from %s", report.override_routes, settings.extra_routes.name, extra={"stage": "routes"})

    all_routes = append_override_routes(computed, override_routes)
    write_table(all_routes, settings.output_routes, has_header=True)
    report.output_routes = len(all_routes)

    logger.info("Reconciliation complete", extra={"stage": "done", "counters": report.as_dict()})
    return report
