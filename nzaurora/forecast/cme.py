"""CME transit estimate under constant acceleration over 1 AU.

The Kp estimate is an ad hoc linear proxy of density, width, speed and
acceleration, illustrative only and not a validated storm model.
"""

from __future__ import annotations

import math
from datetime import timedelta

from nzaurora.models.cme import CMEForecast, CMEMilestone, CMEParameters

AU_KM = 149_597_870.0
MIN_ACCELERATION = 1e-6
MILESTONE_FRACTIONS = (0.0, 0.25, 0.5, 0.75, 1.0)


def transit_seconds(v0: float, a: float, distance_km: float = AU_KM) -> float:
    """Positive root of ``d = v0*t + a*t^2/2``.

    Falls back to constant velocity ``d / v0`` when ``a`` is negligible,
    the discriminant is negative (the CME stalls before arriving) or the
    root is not positive.
    """
    coasting = distance_km / max(v0, 1.0)
    if abs(a) < MIN_ACCELERATION:
        return coasting
    discriminant = v0 * v0 + 2 * a * distance_km
    if discriminant < 0:
        return coasting
    root = (-v0 + math.sqrt(discriminant)) / a
    return root if root > 0 else coasting


def kp_estimate(params: CMEParameters) -> int:
    raw = (
        2
        + 0.1 * params.density
        + 0.02 * params.angularWidth
        + 0.002 * params.initialSpeed
        - 900 * params.acceleration
    )
    return int(math.floor(max(1.0, min(9.0, raw)) + 0.5))


def predict_arrival(params: CMEParameters) -> CMEForecast:
    v0 = params.initialSpeed
    a = params.acceleration
    seconds = transit_seconds(v0, a)
    if abs(v0 * seconds + 0.5 * a * seconds * seconds - AU_KM) > 1.0:
        # transit fell back to constant velocity
        a = 0.0

    milestones = []
    for fraction in MILESTONE_FRACTIONS:
        t = transit_seconds(v0, a, fraction * AU_KM) if fraction > 0 else 0.0
        label = "Arrival" if fraction == 1.0 else f"{round(fraction * 100)}% distance"
        milestones.append(
            CMEMilestone(
                label=label,
                timeHours=t / 3600,
                distanceAU=fraction,
                speed=v0 + a * t,
            )
        )

    return CMEForecast(
        arrival=params.launchTime + timedelta(seconds=seconds),
        transitHours=seconds / 3600,
        finalSpeed=v0 + a * seconds,
        kpEstimate=kp_estimate(params),
        milestones=milestones,
    )
