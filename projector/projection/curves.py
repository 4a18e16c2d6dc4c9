"""
Curve Generation

Samples a portfolio's model value across a range of hypothetical spots.

Each point sums, over all strikes, the model price of the held side:
YES contributes the YES price, NO contributes 1 - YES. The P&L variants
subtract the total entry cost from the same values.

Degenerate requests (fewer than two points, an empty, inverted or
non-positive range, an empty portfolio) produce an empty curve.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from projector.calibration.smile import SmilePoint, interpolate_smile
from projector.pricing.binary import DEFAULT_HURST
from projector.pricing.models import OptionType, price_option_yes
from projector.projection.portfolio import Portfolio, Strike

DEFAULT_NUM_POINTS = 200


@dataclass(frozen=True)
class ProjectionPoint:
    """Portfolio value (or P&L) at one hypothetical spot."""
    spot: float
    value: float


def sample_spots(lower: float, upper: float, num_points: int = DEFAULT_NUM_POINTS) -> np.ndarray:
    """Evenly spaced spots, first == lower and last == upper."""
    # Prices are log-normal, so spots must be positive
    if num_points < 2 or lower <= 0 or not upper > lower:
        return np.array([])
    return np.linspace(lower, upper, num_points)


def _resolve_vol(strike: Strike, spot: float, smile: Optional[Sequence[SmilePoint]]) -> float:
    if smile:
        iv = interpolate_smile(smile, math.log(spot / strike.strike_price))
        if iv is not None:
            return iv
    return strike.implied_vol


def compute_value_curve(
    portfolio: Portfolio,
    lower: float,
    upper: float,
    tau: float,
    option_type: OptionType,
    hurst: float = DEFAULT_HURST,
    num_points: int = DEFAULT_NUM_POINTS,
    smile: Optional[Sequence[SmilePoint]] = None,
) -> List[ProjectionPoint]:
    """
    Portfolio value ("construction cost") across a spot range.

    Args:
        portfolio: Selected strikes with calibrated vols
        lower: Lowest spot
        upper: Highest spot
        tau: Time to expiry in years at which to price
        option_type: ABOVE or HIT
        hurst: Time-scaling exponent
        num_points: Number of samples
        smile: Optional smile; vols then follow moneyness instead of strike

    Returns:
        Points in ascending spot order
    """
    if len(portfolio) == 0:
        return []

    strikes = list(portfolio)
    points = []

    for spot in sample_spots(lower, upper, num_points):
        spot = float(spot)
        value = 0.0

        for strike in strikes:
            sigma = _resolve_vol(strike, spot, smile)
            yes = price_option_yes(
                spot, strike.strike_price, sigma, tau,
                option_type, strike.is_up_barrier, hurst,
            )
            value += strike.contribution(yes)

        points.append(ProjectionPoint(spot=spot, value=value))

    return points


def compute_pnl_curve(
    portfolio: Portfolio,
    lower: float,
    upper: float,
    tau: float,
    option_type: OptionType,
    hurst: float = DEFAULT_HURST,
    num_points: int = DEFAULT_NUM_POINTS,
    smile: Optional[Sequence[SmilePoint]] = None,
) -> List[ProjectionPoint]:
    """Projected P&L: value curve minus total entry cost."""
    values = compute_value_curve(
        portfolio, lower, upper, tau, option_type, hurst, num_points, smile
    )
    return _subtract_cost(values, portfolio.total_entry_cost)


def expiry_payoff(strike: Strike, spot: float, option_type: OptionType) -> float:
    """
    YES payoff in the tau -> 0 limit.

    For "hit" this assumes the barrier was never touched before expiry,
    so only the final spot counts. It is a worst case for YES holders,
    not the full path-dependent payoff.
    """
    if option_type is OptionType.ABOVE or strike.is_up_barrier:
        return 1.0 if spot >= strike.strike_price else 0.0
    return 1.0 if spot <= strike.strike_price else 0.0


def compute_expiry_value(
    portfolio: Portfolio,
    lower: float,
    upper: float,
    option_type: OptionType,
    num_points: int = DEFAULT_NUM_POINTS,
) -> List[ProjectionPoint]:
    """Portfolio value at expiry as a step function of the final spot."""
    if len(portfolio) == 0:
        return []

    strikes = list(portfolio)
    points = []

    for spot in sample_spots(lower, upper, num_points):
        spot = float(spot)
        value = sum(s.contribution(expiry_payoff(s, spot, option_type)) for s in strikes)
        points.append(ProjectionPoint(spot=spot, value=value))

    return points


def compute_expiry_pnl(
    portfolio: Portfolio,
    lower: float,
    upper: float,
    option_type: OptionType,
    num_points: int = DEFAULT_NUM_POINTS,
) -> List[ProjectionPoint]:
    """P&L at expiry: expiry value minus total entry cost."""
    values = compute_expiry_value(portfolio, lower, upper, option_type, num_points)
    return _subtract_cost(values, portfolio.total_entry_cost)


def _subtract_cost(points: List[ProjectionPoint], cost: float) -> List[ProjectionPoint]:
    return [ProjectionPoint(spot=p.spot, value=p.value - cost) for p in points]
