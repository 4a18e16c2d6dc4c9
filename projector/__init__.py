"""
PolyProjector - P&L projection for Polymarket crypto strike ladders

Projects the value of YES/NO positions on "above" and "hit" crypto
markets across hypothetical spot levels and time horizons.

Pipeline:
- Calibrate: implied vol per strike from the market YES price
- Smile: optional moneyness-keyed vol curve across all strikes
- Project: value / P&L curves now, at 1/3 and 2/3 of the way to
  expiry, and at expiry

See README.md for usage.
"""

__version__ = "1.0.0"
__author__ = "PolyProjector"
