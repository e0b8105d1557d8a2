"""Map disturbance strength to how far north the aurora can be seen.

Each observation mode has a linear threshold curve: the disturbance
needed at a southern anchor (Oban, Stewart Island) and at a northern
anchor (Auckland). Between and beyond the anchors the requirement is
interpolated linearly. This is a calibrated heuristic tuned to New
Zealand reports, not an auroral-oval model.

Strengths are in display units (negative = disturbed). ``camera`` is
the most sensitive curve and ``eye`` the least, so at any strength the
camera reach is at least as far north as the naked-eye reach.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence

from nzaurora.models.disturbance import ReachLatitudes, Town

OBAN_LAT = -46.9
AUCKLAND_LAT = -36.85
LAT_DELTA = AUCKLAND_LAT - OBAN_LAT

SOUTH_LIMIT = -48.0
NORTH_LIMIT = -34.0
NO_REACH_LAT = -65.0

RED_MARGIN = 50.0


class ViewMode(str, Enum):
    CAMERA = "camera"
    PHONE = "phone"
    EYE = "eye"


class ReachCurve(NamedTuple):
    """Required strength at the southern (``start``) and northern
    (``end``) anchors, plus the excess below which a town is yellow."""

    start: float
    end: float
    yellow_margin: float = 150.0

    @property
    def slope(self) -> float:
        """Required strength change per degree of latitude northwards."""
        return (self.end - self.start) / LAT_DELTA

    def required_at(self, lat: float) -> float:
        return self.start + (lat - OBAN_LAT) * self.slope


CURVES: Dict[ViewMode, ReachCurve] = {
    ViewMode.CAMERA: ReachCurve(start=-300.0, end=-1000.0),
    ViewMode.PHONE: ReachCurve(start=-450.0, end=-1100.0),
    ViewMode.EYE: ReachCurve(start=-800.0, end=-1500.0, yellow_margin=100.0),
}

NZ_TOWNS: List[Town] = [
    Town(name="Oban", lat=-46.9, lon=168.12),
    Town(name="Invercargill", lat=-46.41, lon=168.35),
    Town(name="Dunedin", lat=-45.87, lon=170.5),
    Town(name="Queenstown", lat=-45.03, lon=168.66),
    Town(name="Wānaka", lat=-44.7, lon=169.12),
    Town(name="Twizel", lat=-44.26, lon=170.1),
    Town(name="Timaru", lat=-44.39, lon=171.25),
    Town(name="Christchurch", lat=-43.53, lon=172.63),
    Town(name="Kaikōura", lat=-42.4, lon=173.68),
    Town(name="Greymouth", lat=-42.45, lon=171.2),
    Town(name="Nelson", lat=-41.27, lon=173.28),
    Town(name="Wellington", lat=-41.29, lon=174.77),
    Town(name="Palmerston Nth", lat=-40.35, lon=175.6),
    Town(name="Napier", lat=-39.49, lon=176.91),
    Town(name="Taupō", lat=-38.68, lon=176.07),
    Town(name="Tauranga", lat=-37.68, lon=176.16),
    Town(name="Auckland", lat=-36.85, lon=174.76),
    Town(name="Whangārei", lat=-35.72, lon=174.32),
]


def _curve(mode: ViewMode, curves: Optional[Dict[ViewMode, ReachCurve]]) -> ReachCurve:
    return (curves or CURVES)[ViewMode(mode)]


def reach_latitude(
    strength: float,
    mode: ViewMode,
    curves: Optional[Dict[ViewMode, ReachCurve]] = None,
) -> float:
    """Northernmost latitude at which ``mode`` sees the aurora.

    Non-negative strength means no visibility anywhere and returns the
    far-south sentinel ``-65``; otherwise the result is clamped to the
    mainland band ``[-48, -34]``.
    """
    if strength >= 0:
        return NO_REACH_LAT
    curve = _curve(mode, curves)
    lat = OBAN_LAT + (strength - curve.start) / curve.slope
    return max(SOUTH_LIMIT, min(NORTH_LIMIT, lat))


def reach_latitudes(
    strength: float, curves: Optional[Dict[ViewMode, ReachCurve]] = None
) -> ReachLatitudes:
    return ReachLatitudes(
        strength=strength,
        camera=reach_latitude(strength, ViewMode.CAMERA, curves),
        phone=reach_latitude(strength, ViewMode.PHONE, curves),
        eye=reach_latitude(strength, ViewMode.EYE, curves),
    )


def town_tier(
    town_lat: float,
    strength: float,
    mode: ViewMode,
    curves: Optional[Dict[ViewMode, ReachCurve]] = None,
) -> Optional[str]:
    """Visibility tier of a town at ``town_lat``, or ``None`` if out of reach."""
    if strength >= 0:
        return None
    curve = _curve(mode, curves)
    required = curve.required_at(town_lat)
    if strength > required:
        return None
    # a town exactly on a margin belongs to the higher tier
    excess = round(abs(strength) - abs(required), 6)
    if excess < RED_MARGIN:
        return "red"
    if excess < curve.yellow_margin:
        return "yellow"
    return "green"


def classify_towns(
    strength: float,
    towns: Sequence[Town] = NZ_TOWNS,
    curves: Optional[Dict[ViewMode, ReachCurve]] = None,
) -> List[Town]:
    """Copies of ``towns`` enriched with camera, phone and eye tiers."""
    return [
        town.model_copy(
            update={
                "cam": town_tier(town.lat, strength, ViewMode.CAMERA, curves),
                "phone": town_tier(town.lat, strength, ViewMode.PHONE, curves),
                "eye": town_tier(town.lat, strength, ViewMode.EYE, curves),
            }
        )
        for town in towns
    ]
