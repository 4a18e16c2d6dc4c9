"""
Volatility Smile

Implied vols across all observable strikes of one expiry, keyed by
moneyness ln(S_cal / K). Interpolating by moneyness instead of pinning
each strike to its own vol lets the vol follow the spot (sticky
moneyness) when curves are projected away from the calibration spot.

A smile is rebuilt from scratch whenever the spot, tau or H change.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from projector.calibration.implied_vol import PRICE_CEILING, PRICE_FLOOR, solve_implied_vol
from projector.pricing.binary import DEFAULT_HURST
from projector.pricing.models import OptionType
from projector.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MarketQuote:
    """Strike and YES price of one market in a ladder."""
    strike_price: float
    yes_price: float


@dataclass(frozen=True)
class SmilePoint:
    """One calibrated node of the smile."""
    moneyness: float
    iv: float


def build_smile(
    spot: float,
    quotes: Iterable[MarketQuote],
    tau: float,
    option_type: OptionType,
    hurst: float = DEFAULT_HURST,
) -> List[SmilePoint]:
    """
    Calibrate every usable quote and sort by moneyness.

    Quotes priced at the extremes carry no vol information and are
    skipped, as are quotes the solver cannot calibrate.

    Args:
        spot: Calibration spot
        quotes: Market strikes with YES prices
        tau: Time to expiry in years
        option_type: ABOVE or HIT
        hurst: Time-scaling exponent

    Returns:
        Smile points in ascending moneyness
    """
    points = []

    for quote in quotes:
        if quote.strike_price <= 0:
            continue
        if not PRICE_FLOOR < quote.yes_price < PRICE_CEILING:
            continue

        iv = solve_implied_vol(
            spot,
            quote.strike_price,
            tau,
            quote.yes_price,
            option_type,
            is_up_barrier=quote.strike_price > spot,
            hurst=hurst,
        )
        if iv is None:
            continue

        points.append(SmilePoint(moneyness=math.log(spot / quote.strike_price), iv=iv))

    points.sort(key=lambda p: p.moneyness)

    logger.debug(f"Built smile with {len(points)} points (spot={spot}, tau={tau:.6f})")
    return points


def interpolate_smile(smile: Sequence[SmilePoint], moneyness: float) -> Optional[float]:
    """
    Vol at a given moneyness.

    Piecewise linear between nodes, flat beyond the first and last node,
    and exact at the nodes themselves so P&L at the calibration spot stays
    at zero.

    Returns:
        Interpolated vol, or None for an empty smile
    """
    if not smile:
        return None
    if len(smile) == 1:
        return smile[0].iv

    xs = np.array([p.moneyness for p in smile])
    ys = np.array([p.iv for p in smile])

    # np.interp clamps to the end values outside [xs[0], xs[-1]]
    return float(np.interp(moneyness, xs, ys))
