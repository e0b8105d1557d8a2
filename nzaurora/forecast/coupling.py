"""Solar wind to magnetosphere coupling and substorm probabilities.

The coupling function is Newell et al. (2007), divided by 1000 to keep
values in a readable range. Probability coefficients are empirically
tuned, not derived, and are grouped in :class:`ProbabilityCoefficients`
so they can be recalibrated.
"""

from __future__ import annotations

import math
from typing import List, NamedTuple, Optional, Sequence

from nzaurora.models.forecast import L1Conditions, SubstormProbabilities
from nzaurora.models.series import MagSample, PlasmaSample, SolarWindSample

from .baseline import MINUTE_MS

L1_DISTANCE_KM = 1.5e6
MIN_PROPAGATION_SPEED = 200.0
DEFAULT_PROPAGATION_MS = 60 * MINUTE_MS
L1_WINDOW_MINUTES = 120

SOUTHWARD_BZ = -3.0
SUSTAINED_FRACTION = 0.8
LOCKED_IN_MINUTES = 10
LOCKED_IN_BZ = -8.0


class ProbabilityCoefficients(NamedTuple):
    mean_weight: float = 0.015
    now_weight: float = 0.01
    p30_base: float = 0.15
    p30_gain: float = 0.7
    p60_base: float = 0.25
    p60_gain: float = 0.6
    strong_bz: float = -3.0
    strong_boost: float = 0.10
    weak_bz: float = -1.0
    weak_boost: float = 0.05
    floor: float = 0.01
    ceiling: float = 0.9


def newell_coupling(speed: float, by: float, bz: float) -> float:
    """``V^(4/3) * BT^(2/3) * |sin(theta/2)|^(8/3) / 1000`` with
    ``BT = sqrt(By^2 + Bz^2)`` and clock angle ``theta = atan2(By, Bz)``."""
    bt = math.hypot(by, bz)
    theta = math.atan2(by, bz)
    s = abs(math.sin(theta / 2))
    return (speed ** (4 / 3)) * (bt ** (2 / 3)) * (s ** (8 / 3)) / 1000


def propagation_delay_ms(speed: Optional[float]) -> float:
    """L1-to-Earth transit time; one hour when speed is missing or below 200 km/s."""
    if not speed or speed < MIN_PROPAGATION_SPEED:
        return DEFAULT_PROPAGATION_MS
    return L1_DISTANCE_KM / speed * 1000


def moving_average(values: Sequence[float], n: int) -> Optional[float]:
    """Mean of the last ``n`` values (fewer if the series is shorter)."""
    if not values:
        return None
    tail = values[-min(len(values), n):]
    return sum(tail) / len(tail)


def sustained_south(bz_series: Sequence[float], minutes: int = 15) -> bool:
    """At least 80% of the trailing ``minutes`` samples are ``<= -3 nT``."""
    if not bz_series:
        return False
    tail = bz_series[-min(len(bz_series), minutes):]
    south = sum(1 for bz in tail if bz <= SOUTHWARD_BZ)
    return south / len(tail) >= SUSTAINED_FRACTION


def bz_locked_in(
    bz_series: Sequence[float],
    minutes: int = LOCKED_IN_MINUTES,
    threshold: float = LOCKED_IN_BZ,
) -> bool:
    """Trailing ``minutes`` samples all negative with mean ``<= threshold``."""
    if len(bz_series) < minutes:
        return False
    tail = bz_series[-minutes:]
    return all(bz < 0 for bz in tail) and sum(tail) / len(tail) <= threshold


def substorm_probabilities(
    dphi_now: float,
    dphi_mean15: float,
    bz_mean15: float,
    coefficients: ProbabilityCoefficients = ProbabilityCoefficients(),
) -> SubstormProbabilities:
    """Probability of substorm onset within 30 and 60 minutes."""
    c = coefficients
    base = math.tanh(c.mean_weight * (dphi_mean15 or dphi_now) + c.now_weight * dphi_now)
    if bz_mean15 < c.strong_bz:
        boost = c.strong_boost
    elif bz_mean15 < c.weak_bz:
        boost = c.weak_boost
    else:
        boost = 0.0
    p30 = min(c.ceiling, max(c.floor, c.p30_base + c.p30_gain * base + boost))
    p60 = min(c.ceiling, max(c.floor, c.p60_base + c.p60_gain * base + boost))
    return SubstormProbabilities(p30=p30, p60=p60)


def merge_solar_wind(
    plasma: Sequence[PlasmaSample], mag: Sequence[MagSample]
) -> List[SolarWindSample]:
    """Join plasma and magnetic rows on equal timestamps, in time order."""
    by_time = {p.t: p for p in plasma}
    merged = []
    for m in sorted(mag, key=lambda r: r.t):
        p = by_time.get(m.t)
        if p is None:
            continue
        merged.append(
            SolarWindSample(
                t=m.t, by=m.by, bz=m.bz, bt=m.bt, speed=p.speed, density=p.density
            )
        )
    return merged


def l1_conditions(
    samples: Sequence[SolarWindSample],
    now: int,
    window_minutes: int = L1_WINDOW_MINUTES,
) -> Optional[L1Conditions]:
    """Coupling and Bz statistics for the solar wind now reaching Earth.

    Only samples carrying speed, By and Bz are used. The window is
    anchored at ``now`` minus the propagation delay of the latest usable
    sample. Returns ``None`` when nothing usable remains.
    """
    usable = [s for s in samples if s.speed and s.by is not None and s.bz is not None]
    if not usable:
        return None
    now_at_earth = now - propagation_delay_ms(usable[-1].speed)
    window = [s for s in usable if s.t >= now_at_earth - window_minutes * MINUTE_MS]
    if not window:
        return None
    dphi = [newell_coupling(s.speed, s.by, s.bz) for s in window]
    bz = [s.bz for s in window]
    return L1Conditions(
        dPhiSeries=dphi,
        bzSeries=bz,
        dPhiNow=dphi[-1],
        dPhiMean15=moving_average(dphi, 15),
        dPhiMean60=moving_average(dphi, 60),
        bzMean15=moving_average(bz, 15),
        sustained=sustained_south(bz, 15),
        bzLockedIn=bz_locked_in(bz),
    )
