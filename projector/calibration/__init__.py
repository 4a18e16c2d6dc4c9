"""
Calibration Module

Turns observed market prices into model volatilities.

Components:
- implied_vol: Brent-based implied volatility solver
- smile: Moneyness-keyed volatility smile
"""

from projector.calibration.implied_vol import Calibration, calibrate, solve_implied_vol
from projector.calibration.smile import MarketQuote, SmilePoint, build_smile, interpolate_smile

__all__ = [
    "Calibration",
    "calibrate",
    "solve_implied_vol",
    "MarketQuote",
    "SmilePoint",
    "build_smile",
    "interpolate_smile",
]
