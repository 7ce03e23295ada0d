import argparse
import json
import logging
import sys
from pathlib import Path

from route_reconcile.config import DISTANCE_MODELS, Settings
from route_reconcile.errors import ReconcileError
from route_reconcile.logging_setup import LOG_FORMATS, setup_logging
from route_reconcile.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Build consistent airport and route CSV files from the OpenFlights feeds."
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the downloaded feeds and the per-airport lookup cache."
    )
    parser.add_argument(
        "--extra-airports",
        type=Path,
        help="CSV of manually curated airports appended after the computed ones."
    )
    parser.add_argument(
        "--extra-routes",
        type=Path,
        help="CSV of manually curated routes appended after the computed ones."
    )
    parser.add_argument(
        "--output-airports",
        type=Path,
        help="Where to write the airport table (default: airports.csv)."
    )
    parser.add_argument(
        "--output-routes",
        type=Path,
        help="Where to write the route table (default: earthroutes.csv)."
    )
    parser.add_argument(
        "--interval",
        dest="request_interval",
        type=float,
        help="Seconds to wait before each airport lookup request."
    )
    parser.add_argument(
        "--timeout",
        dest="request_timeout",
        type=float,
        help="Timeout in seconds for every HTTP request."
    )
    parser.add_argument(
        "--distance-model",
        choices=DISTANCE_MODELS,
        help="Great circle (haversine) or ellipsoidal (geodesic) route distances."
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        default=None,
        help="Reuse airports.dat and routes.dat from the data directory instead of downloading them."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Log level used when LOG_LEVEL is not set."
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default="json",
        help="JSON lines or plain console text, used when LOG_FORMAT is not set."
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_format)

    settings = Settings.from_env().with_overrides(
        data_dir=args.data_dir,
        extra_airports=args.extra_airports,
        extra_routes=args.extra_routes,
        output_airports=args.output_airports,
        output_routes=args.output_routes,
        request_interval=args.request_interval,
        request_timeout=args.request_timeout,
        distance_model=args.distance_model,
        offline=args.offline,
    )

    try:
        report = run_pipeline(settings)
    except ReconcileError as exc:
        logger.error("%s", exc)
        return 1

    print(json.dumps(report.as_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
