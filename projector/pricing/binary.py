"""
Binary ("above") Pricer

Prices a European digital that pays 1 if the underlying finishes at or
above the strike. With zero rates the price equals the risk-neutral
probability N(d2).

The time-scaling exponent H (hurst) replaces the square root of time:
sigma * sqrt(tau) becomes sigma * tau^H. H = 0.5 is plain Black-Scholes.
"""

import math
from typing import Tuple

from projector.pricing.normal import normal_cdf

DEFAULT_HURST = 0.5


def scaled_vol(sigma: float, tau: float, hurst: float = DEFAULT_HURST) -> Tuple[float, float]:
    """
    Time-scaled volatility terms shared by both pricers.

    Returns:
        (sigma * tau^H, sigma^2 * tau^(2H) / 2)
    """
    vol_term = sigma * tau ** hurst
    return vol_term, vol_term * vol_term / 2.0


def price_above(
    spot: float,
    strike: float,
    sigma: float,
    tau: float,
    hurst: float = DEFAULT_HURST,
) -> float:
    """
    Probability that the underlying finishes at or above the strike.

    Args:
        spot: Current (or hypothetical) underlying price
        strike: Strike price
        sigma: Annualized volatility
        tau: Time to expiry in years
        hurst: Time-scaling exponent

    Returns:
        YES price in [0, 1]
    """
    # Model limit as either term vanishes
    if tau <= 0 or sigma <= 0:
        return 1.0 if spot >= strike else 0.0

    vol_term, half_var = scaled_vol(sigma, tau, hurst)
    d2 = (math.log(spot / strike) - half_var) / vol_term

    return normal_cdf(d2)
