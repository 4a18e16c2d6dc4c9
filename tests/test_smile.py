"""
Tests for the volatility smile.

Run with: pytest tests/
"""

import math
import sys
import os

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from projector.calibration import MarketQuote, SmilePoint, build_smile, interpolate_smile
from projector.pricing import OptionType, price_above, price_hit

SPOT = 100000
WEEK = 7 / 365.25


def flat_above_quotes(sigma=0.5, strikes=(90000, 95000, 100000, 110000, 120000)):
    return [MarketQuote(k, price_above(SPOT, k, sigma, WEEK)) for k in strikes]


class TestBuildSmile:
    """Tests for smile construction."""

    def test_flat_vol_is_recovered(self):
        smile = build_smile(SPOT, flat_above_quotes(), WEEK, OptionType.ABOVE)
        assert len(smile) == 5
        for point in smile:
            assert point.iv == pytest.approx(0.5, abs=1e-3)

    def test_sorted_by_moneyness(self):
        smile = build_smile(SPOT, flat_above_quotes(), WEEK, OptionType.ABOVE)
        moneyness = [p.moneyness for p in smile]
        assert moneyness == sorted(moneyness)
        # Highest strike has the lowest moneyness
        assert smile[0].moneyness == pytest.approx(math.log(SPOT / 120000))

    def test_unusable_quotes_are_skipped(self):
        quotes = flat_above_quotes() + [
            MarketQuote(200000, 0.0005),
            MarketQuote(50000, 0.9995),
            MarketQuote(0, 0.5),
        ]
        smile = build_smile(SPOT, quotes, WEEK, OptionType.ABOVE)
        assert len(smile) == 5

    def test_expired_gives_empty_smile(self):
        assert build_smile(SPOT, flat_above_quotes(), 0.0, OptionType.ABOVE) == []

    def test_hit_smile_uses_barrier_direction(self):
        quotes = [
            MarketQuote(k, price_hit(SPOT, k, 0.5, WEEK, k > SPOT))
            for k in (85000, 90000, 110000, 120000)
        ]
        smile = build_smile(SPOT, quotes, WEEK, OptionType.HIT)
        assert len(smile) == 4
        for point in smile:
            assert point.iv == pytest.approx(0.5, abs=1e-3)


class TestInterpolateSmile:
    """Tests for smile interpolation."""

    SMILE = [
        SmilePoint(-0.2, 0.8),
        SmilePoint(0.0, 0.5),
        SmilePoint(0.1, 0.6),
    ]

    def test_empty_smile_returns_none(self):
        assert interpolate_smile([], 0.0) is None

    def test_single_point_is_flat(self):
        assert interpolate_smile([SmilePoint(0.05, 0.42)], -1.0) == 0.42

    def test_exact_at_nodes(self):
        for point in self.SMILE:
            assert interpolate_smile(self.SMILE, point.moneyness) == point.iv

    def test_exact_at_calibrated_nodes(self):
        smile = build_smile(SPOT, flat_above_quotes(), WEEK, OptionType.ABOVE)
        for point in smile:
            assert interpolate_smile(smile, point.moneyness) == point.iv

    def test_linear_between_nodes(self):
        assert interpolate_smile(self.SMILE, -0.1) == pytest.approx(0.65)
        assert interpolate_smile(self.SMILE, 0.05) == pytest.approx(0.55)

    def test_flat_extrapolation(self):
        assert interpolate_smile(self.SMILE, -1.0) == 0.8
        assert interpolate_smile(self.SMILE, 1.0) == 0.6


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
