"""
Touch ("hit") Pricer

First-passage probability that a zero-drift (r = 0) geometric Brownian
motion touches a barrier before expiry. Up and down barriers get their
own branch, each taken directly from the reflection principle:

    up   (B > S):  N(d1) + (S/B) * N(d2)
    down (B < S):  N(e1) + (S/B) * N(e2)

The direction is a property of the contract, decided when the strike is
selected, and is never re-derived from a later spot.

These closed forms only hold for zero drift. A non-zero rate or carry
needs a new derivation.
"""

import math

from projector.pricing.binary import DEFAULT_HURST, scaled_vol
from projector.pricing.normal import normal_cdf
from projector.utils.helpers import clamp


def price_hit(
    spot: float,
    barrier: float,
    sigma: float,
    tau: float,
    is_up_barrier: bool,
    hurst: float = DEFAULT_HURST,
) -> float:
    """
    Probability that the barrier is touched before expiry.

    Args:
        spot: Current (or hypothetical) underlying price
        barrier: Barrier level
        sigma: Annualized volatility
        tau: Time to expiry in years
        is_up_barrier: True when the barrier sits above the selection spot
        hurst: Time-scaling exponent

    Returns:
        Touch probability in [0, 1]
    """
    if spot == barrier:
        return 1.0

    # Already breached
    if is_up_barrier and spot >= barrier:
        return 1.0
    if not is_up_barrier and spot <= barrier:
        return 1.0

    if tau <= 0 or sigma <= 0:
        return 0.0

    vol_term, half_var = scaled_vol(sigma, tau, hurst)
    ratio = spot / barrier

    if is_up_barrier:
        log_ratio = math.log(ratio)
        d1 = (log_ratio - half_var) / vol_term
        d2 = (log_ratio + half_var) / vol_term
        price = normal_cdf(d1) + ratio * normal_cdf(d2)
    else:
        log_ratio = math.log(barrier / spot)
        e1 = (log_ratio + half_var) / vol_term
        e2 = (log_ratio - half_var) / vol_term
        price = normal_cdf(e1) + ratio * normal_cdf(e2)

    return clamp(price, 0.0, 1.0)
