"""Validation and conversion of raw upstream JSON into typed samples.

Every parser fails closed: rows that are malformed, carry NOAA ``-9999``
fill values or unparsable timestamps are dropped, and a payload of the
wrong shape yields an empty list or ``None`` rather than NaN.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from nzaurora.middleware.logging import log_warning
from nzaurora.models.feeds import ForecastComposite, InterplanetaryShock, Sighting
from nzaurora.models.series import MagSample, PlasmaSample, TimeSample

NOAA_FILL = -9999.0


def _to_float(val: Any) -> Optional[float]:
    """Convert value to float, return None if not possible or blank/placeholder."""
    if val is None or isinstance(val, bool):
        return None
    try:
        s = str(val).strip()
        if not s or s in {"-", "--", "nan", "NaN", "None", "null"}:
            return None
        return float(s)
    except (TypeError, ValueError):
        return None


def _noaa_float(val: Any) -> Optional[float]:
    f = _to_float(val)
    if f is None or f <= NOAA_FILL:
        return None
    return f


def parse_timestamp(value: Any) -> Optional[int]:
    """Epoch milliseconds from an ISO string, a NOAA ``YYYY-MM-DD HH:MM:SS``
    string (UTC) or a number already in milliseconds."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip().replace(" ", "T", 1)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def parse_tilde_series(raw: Any) -> List[TimeSample]:
    """Samples from a Tilde ``data`` response: ``[{"data": [{ts, val}, ...]}]``."""
    if not isinstance(raw, list) or not raw or not isinstance(raw[0], dict):
        return []
    rows = raw[0].get("data")
    if not isinstance(rows, list):
        return []
    samples = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        t = parse_timestamp(row.get("ts"))
        v = _to_float(row.get("val"))
        if t is None or v is None:
            continue
        samples.append(TimeSample(t=t, v=v))
    samples.sort(key=lambda s: s.t)
    return samples


def select_north_series_key(station_code: str, station_data: Any) -> Optional[str]:
    """Pick the north-component, one-minute series of a Tilde station.

    Series names match "north", "x" or "magnetic-field"; methods must be
    60s or 1m; aspects are tried in the order X, north, N, x, nil. If no
    preferred aspect exists the first aspect of the first qualifying
    method is used.
    """
    if not isinstance(station_data, dict):
        return None
    sensor_codes = station_data.get("sensorCodes")
    if not isinstance(sensor_codes, dict):
        return None
    aspect_priority = ["X", "north", "N", "x", "nil"]

    def name_matches(name: str) -> bool:
        lower = name.lower()
        return "north" in lower or lower == "x" or "magnetic-field" in lower

    fallbacks = []
    for sensor_code, sensor in sensor_codes.items():
        names = sensor.get("names") if isinstance(sensor, dict) else None
        if not isinstance(names, dict):
            continue
        for name, series in names.items():
            if not name_matches(name) or not isinstance(series, dict):
                continue
            methods = series.get("methods")
            if not isinstance(methods, dict):
                continue
            for method, method_data in methods.items():
                if "60s" not in method and "1m" not in method:
                    continue
                aspects = method_data.get("aspects") if isinstance(method_data, dict) else None
                if not isinstance(aspects, dict) or not aspects:
                    continue
                for aspect in aspect_priority:
                    if aspect in aspects:
                        return f"{station_code}/{name}/{sensor_code}/{method}/{aspect}"
                first = next(iter(aspects))
                fallbacks.append(f"{station_code}/{name}/{sensor_code}/{method}/{first}")
    return fallbacks[0] if fallbacks else None


def noaa_table(raw: Any) -> List[Dict[str, Any]]:
    """Rows of a NOAA "products" table (header row + data rows) as dicts."""
    if not isinstance(raw, list) or len(raw) < 2 or not isinstance(raw[0], list):
        return []
    headers = [str(h) for h in raw[0]]
    return [dict(zip(headers, row)) for row in raw[1:] if isinstance(row, list)]


def parse_plasma(raw: Any) -> List[PlasmaSample]:
    samples = []
    for row in noaa_table(raw):
        t = parse_timestamp(row.get("time_tag"))
        if t is None:
            continue
        samples.append(
            PlasmaSample(
                t=t,
                speed=_noaa_float(row.get("speed")),
                density=_noaa_float(row.get("density")),
            )
        )
    samples.sort(key=lambda s: s.t)
    return samples


def parse_mag(raw: Any) -> List[MagSample]:
    samples = []
    for row in noaa_table(raw):
        t = parse_timestamp(row.get("time_tag"))
        if t is None:
            continue
        samples.append(
            MagSample(
                t=t,
                bt=_noaa_float(row.get("bt")),
                bz=_noaa_float(row.get("bz_gsm")),
                by=_noaa_float(row.get("by_gsm")),
            )
        )
    samples.sort(key=lambda s: s.t)
    return samples


def parse_goes(raw: Any) -> List[TimeSample]:
    """Hp component from a GOES magnetometer JSON list."""
    if not isinstance(raw, list):
        return []
    samples = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        t = parse_timestamp(row.get("time_tag"))
        hp = _to_float(row.get("Hp"))
        if t is None or hp is None:
            continue
        samples.append(TimeSample(t=t, v=hp))
    samples.sort(key=lambda s: s.t)
    return samples


def parse_forecast_composite(raw: Any) -> Optional[ForecastComposite]:
    """Validate the composite worker response; history rows lacking a
    timestamp or score are dropped before validation."""
    if not isinstance(raw, dict) or not isinstance(raw.get("currentForecast"), dict):
        return None
    history = [
        row
        for row in raw.get("historicalData") or []
        if isinstance(row, dict)
        and row.get("timestamp") is not None
        and row.get("baseScore") is not None
        and row.get("finalScore") is not None
    ]
    power = [
        row
        for row in raw.get("rawHistory") or []
        if isinstance(row, dict)
        and row.get("timestamp")
        and _to_float(row.get("hemisphericPower")) is not None
    ]
    try:
        composite = ForecastComposite.model_validate(
            {
                "currentForecast": raw["currentForecast"],
                "historicalData": history,
                "rawHistory": power,
            }
        )
    except ValidationError as e:
        log_warning("forecast_composite_invalid", error=str(e))
        return None
    composite.historicalData.sort(key=lambda e: e.timestamp)
    composite.rawHistory.sort(key=lambda e: e.timestamp)
    return composite


def parse_shocks(raw: Any) -> List[InterplanetaryShock]:
    """Shock list, most recent first."""
    if not isinstance(raw, list):
        return []
    shocks = []
    for row in raw:
        try:
            shocks.append(InterplanetaryShock.model_validate(row))
        except ValidationError:
            continue
    shocks.sort(key=lambda s: s.eventTime, reverse=True)
    return shocks


def parse_sightings(raw: Any) -> List[Sighting]:
    if not isinstance(raw, list):
        return []
    sightings = []
    for row in raw:
        try:
            sightings.append(Sighting.model_validate(row))
        except ValidationError:
            continue
    sightings.sort(key=lambda s: s.timestamp, reverse=True)
    return sightings
