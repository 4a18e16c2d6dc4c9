"""
Multi-Horizon Projection

Builds the four standard views of a portfolio:
- Now
- One third of the way to expiry
- Two thirds of the way to expiry
- At expiry (step-function limit)
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from projector.calibration.smile import SmilePoint
from projector.pricing.models import PricingContext
from projector.projection.curves import (
    DEFAULT_NUM_POINTS,
    ProjectionPoint,
    compute_expiry_pnl,
    compute_expiry_value,
    compute_pnl_curve,
    compute_value_curve,
)
from projector.projection.portfolio import Portfolio
from projector.utils.helpers import format_hours


@dataclass
class ProjectionCurve:
    """A labelled curve ready for plotting."""
    label: str
    points: List[ProjectionPoint] = field(default_factory=list)
    tau: float = 0.0  # 0 for the expiry curve

    @property
    def spots(self) -> np.ndarray:
        return np.array([p.spot for p in self.points])

    @property
    def values(self) -> np.ndarray:
        return np.array([p.value for p in self.points])

    def to_records(self) -> List[dict]:
        """Plain {spot, value} dicts for a charting layer."""
        return [{"spot": p.spot, "value": p.value} for p in self.points]


def horizon_taus(tau: float) -> Tuple[float, float, float]:
    """Time to expiry now, a third of the way in, and two thirds in."""
    return (tau, tau * 2 / 3, tau / 3)


def curve_labels(seconds_to_expiry: float) -> List[str]:
    """Legend labels for the four horizon curves."""
    return [
        f"Now ({format_hours(seconds_to_expiry)} to exp)",
        f"1/3 to expiry ({format_hours(seconds_to_expiry * 2 / 3)})",
        f"2/3 to expiry ({format_hours(seconds_to_expiry / 3)})",
        "At expiry",
    ]


def project_horizons(
    portfolio: Portfolio,
    lower: float,
    upper: float,
    tau: float,
    context: PricingContext,
    seconds_to_expiry: Optional[float] = None,
    num_points: int = DEFAULT_NUM_POINTS,
    smile: Optional[Sequence[SmilePoint]] = None,
    pnl: bool = True,
) -> List[ProjectionCurve]:
    """
    Project a calibrated portfolio at three horizons plus expiry.

    Args:
        portfolio: Selected strikes with calibrated vols
        lower: Lowest spot
        upper: Highest spot
        tau: Time to expiry now, in years
        context: Option type and H
        seconds_to_expiry: Used for labels; derived from tau if omitted
        num_points: Samples per curve
        smile: Optional smile for sticky-moneyness vols
        pnl: P&L curves if True, raw value curves otherwise

    Returns:
        Four curves, or an empty list when there is nothing to draw
    """
    if len(portfolio) == 0 or lower <= 0 or upper <= lower:
        return []

    if seconds_to_expiry is None:
        seconds_to_expiry = tau * 365.25 * 24 * 3600

    continuous = compute_pnl_curve if pnl else compute_value_curve
    at_expiry = compute_expiry_pnl if pnl else compute_expiry_value
    labels = curve_labels(seconds_to_expiry)

    curves = []
    for label, horizon in zip(labels, horizon_taus(tau)):
        points = continuous(
            portfolio, lower, upper, horizon,
            context.option_type, context.hurst, num_points, smile,
        )
        curves.append(ProjectionCurve(label=label, points=points, tau=horizon))

    curves.append(
        ProjectionCurve(
            label=labels[-1],
            points=at_expiry(portfolio, lower, upper, context.option_type, num_points),
            tau=0.0,
        )
    )
    return curves


def round_to_three_zeros(value: float, direction: str) -> float:
    """
    Round outward to a round number with at least three trailing zeros.

    The unit grows with the value: 85,500 rounds on 1,000s, 121,000 on
    10,000s. Values under 1,000 round on their own magnitude instead.
    """
    if value <= 0:
        return 0.0

    magnitude = 10 ** max(0, math.floor(math.log10(value)) - 1)
    if value < 1000:
        unit = magnitude
    else:
        rounded = round(magnitude / 1000) * 1000 if magnitude >= 1000 else magnitude
        unit = max(rounded, 1000)

    if direction == "down":
        return float(math.floor(value / unit) * unit)
    return float(math.ceil(value / unit) * unit)


def default_price_range(
    strike_prices: Sequence[float],
    lower_pad: float = 0.9,
    upper_pad: float = 1.1,
) -> Optional[Tuple[float, float]]:
    """
    Spot range covering all strikes with some margin.

    Returns:
        (lower, upper), or None when there are no positive strikes
    """
    strikes = [k for k in strike_prices if k > 0]
    if not strikes:
        return None

    raw_lower = min(strikes) * lower_pad
    raw_upper = max(strikes) * upper_pad

    lower = round_to_three_zeros(raw_lower, "down")
    upper = round_to_three_zeros(raw_upper, "up")

    # Sub-unit prices would round down to zero
    if lower <= 0:
        lower = raw_lower

    return lower, upper
