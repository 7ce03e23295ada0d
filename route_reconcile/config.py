"""
Runtime settings for a reconciliation run.

Defaults mirror the layout of a fresh checkout: source feeds and per-airport
cache files live in ``data/``, the override tables and the generated CSV files
sit in the working directory. Environment variables can override the defaults:

* ROUTE_DATA_DIR controls where feeds and cache files are stored.
* ROUTE_REQUEST_INTERVAL is the pause (seconds) before each airport lookup.
* ROUTE_REQUEST_TIMEOUT is the per-request timeout (seconds).
* ROUTE_DISTANCE_MODEL selects ``haversine`` or ``geodesic``.
* ROUTE_OFFLINE reuses already downloaded feeds instead of fetching them.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

from route_reconcile.openflights import URLS

DISTANCE_MODELS = ("haversine", "geodesic")
TRUTHY = {"1", "true", "yes", "y"}


def _float_from_env(name: str, default: float) -> float:
    raw_value = os.environ.get(name)
    try:
        value = float(raw_value) if raw_value else default
        if value < 0:
            raise ValueError
    except Exception:
        value = default
    return value


@dataclass
class Settings:
    data_dir: Path = Path("data")
    extra_airports: Path = Path("extra_airports.csv")
    extra_routes: Path = Path("extra_routes.csv")
    output_airports: Path = Path("airports.csv")
    output_routes: Path = Path("earthroutes.csv")
    request_interval: float = 0.25
    request_timeout: float = 30.0
    distance_model: str = "haversine"
    offline: bool = False
    urls: Dict[str, str] = field(default_factory=lambda: dict(URLS))

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.extra_airports = Path(self.extra_airports)
        self.extra_routes = Path(self.extra_routes)
        self.output_airports = Path(self.output_airports)
        self.output_routes = Path(self.output_routes)
        self.request_interval = max(0.0, float(self.request_interval))
        if self.distance_model not in DISTANCE_MODELS:
            raise ValueError(
                f"Unknown distance model {self.distance_model!r}; expected one of {', '.join(DISTANCE_MODELS)}"
            )

    @property
    def airports_feed(self) -> Path:
        return self.data_dir / "airports.dat"

    @property
    def routes_feed(self) -> Path:
        return self.data_dir / "routes.dat"

    @classmethod
    def from_env(cls) -> "Settings":
        raw_model = (os.environ.get("ROUTE_DISTANCE_MODEL") or "").strip().lower()
        return cls(
            data_dir=Path(os.environ.get("ROUTE_DATA_DIR") or cls.data_dir),
            request_interval=_float_from_env("ROUTE_REQUEST_INTERVAL", cls.request_interval),
            request_timeout=_float_from_env("ROUTE_REQUEST_TIMEOUT", cls.request_timeout),
            distance_model=raw_model if raw_model in DISTANCE_MODELS else cls.distance_model,
            offline=os.environ.get("ROUTE_OFFLINE", "").strip().lower() in TRUTHY,
        )

    def with_overrides(self, **overrides: Optional[Any]) -> "Settings":
        """Return a copy with every non-None override applied (CLI flags win over the environment)."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)
