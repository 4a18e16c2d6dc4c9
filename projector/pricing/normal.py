"""
Standard Normal CDF

Abramowitz & Stegun 7.1.26 rational approximation of erf, applied at
x / sqrt(2). Maximum absolute error is about 1.5e-7, which is far below
the tick size of any prediction market.
"""

import math

A1 = 0.254829592
A2 = -0.284496736
A3 = 1.421413741
A4 = -1.453152027
A5 = 1.061405429
P = 0.3275911

# Beyond this the tails are 0/1 to double precision
TAIL_CUTOFF = 8.0


def normal_cdf(x: float) -> float:
    """
    Cumulative distribution function of the standard normal.

    Args:
        x: Point to evaluate

    Returns:
        Probability in [0, 1]
    """
    if x > TAIL_CUTOFF:
        return 1.0
    if x < -TAIL_CUTOFF:
        return 0.0

    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / math.sqrt(2.0)

    t = 1.0 / (1.0 + P * z)
    poly = t * (A1 + t * (A2 + t * (A3 + t * (A4 + t * A5))))
    erf = 1.0 - poly * math.exp(-z * z)

    return 0.5 * (1.0 + sign * erf)
