"""
Tests for the implied volatility solver.

Run with: pytest tests/
"""

import sys
import os

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from projector.calibration.implied_vol import (
    VOL_CEILING,
    VOL_FLOOR,
    VOL_GRID,
    calibrate,
    solve_implied_vol,
)
from projector.pricing import OptionType, price_option_yes

WEEK = 7 / 365.25
MONTH = 30 / 365.25


class TestEdgePolicy:
    """Tests for the fixed-value edge cases."""

    def test_near_zero_price_gives_floor(self):
        assert solve_implied_vol(100000, 95000, WEEK, 0.0005, OptionType.ABOVE) == VOL_FLOOR
        assert solve_implied_vol(100000, 95000, WEEK, 0.001, OptionType.ABOVE) == VOL_FLOOR

    def test_near_one_price_gives_ceiling(self):
        assert solve_implied_vol(100000, 95000, WEEK, 0.9995, OptionType.ABOVE) == VOL_CEILING
        assert solve_implied_vol(100000, 95000, WEEK, 0.999, OptionType.HIT) == VOL_CEILING

    def test_expired_returns_none(self):
        assert solve_implied_vol(100000, 95000, 0.0, 0.8, OptionType.ABOVE) is None
        assert solve_implied_vol(100000, 95000, -0.1, 0.8, OptionType.HIT) is None

    def test_expired_calibration_uses_fallback(self):
        result = calibrate(100000, 95000, 0.0, 0.8, OptionType.ABOVE)
        assert result.method == "expired"
        assert not result.is_calibrated
        assert result.vol_or(0.5) == 0.5

    def test_price_edges_checked_before_expiry(self):
        # Extreme prices still map to floor/ceiling on an expired contract
        assert solve_implied_vol(100000, 95000, 0.0, 0.0005, OptionType.ABOVE) == VOL_FLOOR


class TestRoundTrip:
    """Re-pricing at the solved vol must reproduce the market price."""

    def test_in_the_money_above_scenario(self):
        sigma = solve_implied_vol(100000, 95000, WEEK, 0.8, OptionType.ABOVE)
        assert sigma is not None
        assert price_option_yes(100000, 95000, sigma, WEEK, OptionType.ABOVE) == \
            pytest.approx(0.8, abs=1e-4)

    @pytest.mark.parametrize("price", [0.3, 0.5, 0.65, 0.8, 0.95])
    def test_above(self, price):
        sigma = solve_implied_vol(100000, 95000, WEEK, price, OptionType.ABOVE)
        repriced = price_option_yes(100000, 95000, sigma, WEEK, OptionType.ABOVE)
        assert repriced == pytest.approx(price, abs=1e-4)

    @pytest.mark.parametrize("price", [0.6, 0.8])
    def test_above_with_hurst(self, price):
        sigma = solve_implied_vol(100000, 95000, WEEK, price, OptionType.ABOVE, hurst=0.7)
        repriced = price_option_yes(100000, 95000, sigma, WEEK, OptionType.ABOVE, hurst=0.7)
        assert repriced == pytest.approx(price, abs=1e-4)

    @pytest.mark.parametrize("price", [0.1, 0.3, 0.5, 0.7])
    def test_hit_up_barrier(self, price):
        sigma = solve_implied_vol(90000, 100000, MONTH, price, OptionType.HIT, is_up_barrier=True)
        repriced = price_option_yes(90000, 100000, sigma, MONTH, OptionType.HIT, True)
        assert repriced == pytest.approx(price, abs=1e-4)

    @pytest.mark.parametrize("price", [0.1, 0.4, 0.7, 0.9])
    def test_hit_down_barrier(self, price):
        sigma = solve_implied_vol(100000, 90000, MONTH, price, OptionType.HIT, is_up_barrier=False)
        repriced = price_option_yes(100000, 90000, sigma, MONTH, OptionType.HIT, False)
        assert repriced == pytest.approx(price, abs=1e-4)

    def test_recovers_generating_vol(self):
        price = price_option_yes(100000, 92000, 0.65, MONTH, OptionType.ABOVE)
        sigma = solve_implied_vol(100000, 92000, MONTH, price, OptionType.ABOVE)
        assert sigma == pytest.approx(0.65, abs=1e-3)


class TestSolverBehaviour:
    """Tests for bracketing, fallback and iteration limits."""

    def test_brent_result_metadata(self):
        result = calibrate(100000, 95000, WEEK, 0.8, OptionType.ABOVE)
        assert result.method == "brent"
        assert result.converged
        assert abs(result.residual) < 1e-4
        assert VOL_FLOOR <= result.vol <= VOL_CEILING

    def test_unbracketed_root_falls_back_to_grid(self):
        # An OTM digital a week out can never be worth 60%
        result = calibrate(90000, 100000, WEEK, 0.6, OptionType.ABOVE)
        assert result.method == "grid"
        assert not result.converged

        best = min(
            abs(price_option_yes(90000, 100000, s, WEEK, OptionType.ABOVE) - 0.6)
            for s in VOL_GRID
        )
        assert abs(result.residual) == pytest.approx(best, abs=1e-12)

    def test_touch_price_above_ceiling_falls_back_to_grid(self):
        # An up touch can never be worth more than S/B = 0.9
        result = calibrate(90000, 100000, MONTH, 0.95, OptionType.HIT, is_up_barrier=True)
        assert result.method == "grid"
        assert result.vol is not None

    def test_max_iter_bounds_work(self):
        result = calibrate(100000, 95000, WEEK, 0.8, OptionType.ABOVE, max_iter=2)
        assert result.method == "brent"
        assert VOL_FLOOR <= result.vol <= VOL_CEILING

    def test_solve_matches_calibrate(self):
        result = calibrate(100000, 95000, WEEK, 0.7, OptionType.ABOVE)
        assert solve_implied_vol(100000, 95000, WEEK, 0.7, OptionType.ABOVE) == result.vol

    def test_grid_covers_expected_range(self):
        assert VOL_GRID[0] == pytest.approx(0.05)
        assert VOL_GRID[-1] == pytest.approx(10.0)
        assert len(VOL_GRID) == 200


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
