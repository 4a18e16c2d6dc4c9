"""
Implied Volatility Solver

Inverts the YES pricer against an observed market probability.

Edge policy:
- price <= 0.001: vol floor (near-zero probabilities are ill-conditioned)
- price >= 0.999: vol ceiling
- tau <= 0: no calibration possible, caller picks a fallback

Root finding uses Brent's method on [VOL_FLOOR, VOL_CEILING]. When the
endpoints do not bracket a root (deep ITM/OTM strikes, or touch prices
above the S/B ceiling of an up barrier) a coarse grid scan returns the
closest vol instead. That is an approximation, not an error.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.optimize import brentq

from projector.pricing.binary import DEFAULT_HURST
from projector.pricing.models import OptionType, price_option_yes
from projector.utils.logger import get_logger

logger = get_logger(__name__)

VOL_FLOOR = 0.01
VOL_CEILING = 10.0

PRICE_FLOOR = 0.001
PRICE_CEILING = 0.999

# Fallback scan: 0.05, 0.10, ..., 10.0
GRID_STEP = 0.05
VOL_GRID = np.linspace(GRID_STEP, VOL_CEILING, int(round(VOL_CEILING / GRID_STEP)))

DEFAULT_TOL = 1e-6
DEFAULT_MAX_ITER = 100


@dataclass(frozen=True)
class Calibration:
    """Outcome of inverting one market price."""
    vol: Optional[float]
    method: str  # "floor", "ceiling", "brent", "grid" or "expired"
    converged: bool
    iterations: int = 0
    residual: Optional[float] = None  # model price - market price at vol

    @property
    def is_calibrated(self) -> bool:
        return self.vol is not None

    def vol_or(self, fallback: float) -> float:
        """Calibrated vol, or the fallback when calibration was impossible."""
        return self.vol if self.vol is not None else fallback


def calibrate(
    spot: float,
    strike: float,
    tau: float,
    yes_price: float,
    option_type: OptionType,
    is_up_barrier: bool = True,
    hurst: float = DEFAULT_HURST,
    tol: float = DEFAULT_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
) -> Calibration:
    """
    Solve for the vol that reproduces a market YES price.

    Args:
        spot: Underlying price at calibration time
        strike: Strike (or barrier) price
        tau: Time to expiry in years
        yes_price: Observed YES price (probability)
        option_type: ABOVE or HIT
        is_up_barrier: Barrier direction, only used for HIT
        hurst: Time-scaling exponent
        tol: Price residual / vol tolerance
        max_iter: Hard cap on Brent iterations

    Returns:
        Calibration result; vol is None only for expired contracts
    """
    if yes_price <= PRICE_FLOOR:
        return Calibration(vol=VOL_FLOOR, method="floor", converged=True)
    if yes_price >= PRICE_CEILING:
        return Calibration(vol=VOL_CEILING, method="ceiling", converged=True)
    if tau <= 0:
        logger.debug(f"Cannot calibrate K={strike}: contract expired (tau={tau})")
        return Calibration(vol=None, method="expired", converged=False)

    def residual(sigma: float) -> float:
        return price_option_yes(
            spot, strike, sigma, tau, option_type, is_up_barrier, hurst
        ) - yes_price

    def objective(sigma: float) -> float:
        # Snapping small residuals to zero stops brentq as soon as the
        # price matches, not only when the bracket has collapsed
        value = residual(sigma)
        return 0.0 if abs(value) < tol else value

    f_low = residual(VOL_FLOOR)
    f_high = residual(VOL_CEILING)

    if f_low * f_high > 0:
        return _grid_search(residual, f_low, strike)

    root, result = brentq(
        objective,
        VOL_FLOOR,
        VOL_CEILING,
        xtol=tol,
        maxiter=max_iter,
        full_output=True,
        disp=False,
    )

    if not result.converged:
        logger.warning(
            f"IV solver hit max_iter={max_iter} for K={strike} "
            f"(price={yes_price:.4f}), using best estimate {root:.4f}"
        )

    return Calibration(
        vol=float(root),
        method="brent",
        converged=bool(result.converged),
        iterations=int(result.iterations),
        residual=residual(root),
    )


def _grid_search(residual, f_low: float, strike: float) -> Calibration:
    """Closest vol on the fallback grid when no root is bracketed."""
    best_sigma = VOL_FLOOR
    best_error = abs(f_low)

    errors = np.array([abs(residual(sigma)) for sigma in VOL_GRID])
    idx = int(np.argmin(errors))
    if errors[idx] < best_error:
        best_sigma = float(VOL_GRID[idx])
        best_error = float(errors[idx])

    logger.debug(
        f"No bracketed root for K={strike}, grid scan picked "
        f"sigma={best_sigma:.2f} (|error|={best_error:.4f})"
    )

    return Calibration(
        vol=best_sigma,
        method="grid",
        converged=False,
        iterations=len(VOL_GRID),
        residual=residual(best_sigma),
    )


def solve_implied_vol(
    spot: float,
    strike: float,
    tau: float,
    yes_price: float,
    option_type: OptionType,
    is_up_barrier: bool = True,
    hurst: float = DEFAULT_HURST,
    tol: float = DEFAULT_TOL,
    max_iter: int = DEFAULT_MAX_ITER,
) -> Optional[float]:
    """
    Implied volatility for a market YES price.

    Returns:
        Annualized vol in [VOL_FLOOR, VOL_CEILING], or None when tau <= 0
    """
    return calibrate(
        spot, strike, tau, yes_price, option_type,
        is_up_barrier=is_up_barrier, hurst=hurst, tol=tol, max_iter=max_iter,
    ).vol
