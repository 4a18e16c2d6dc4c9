"""
Tests for the closed-form pricers.

Run with: pytest tests/
"""

import math
import sys
import os

import numpy as np
import pytest
from scipy.stats import norm

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from projector.pricing import (
    OptionType,
    PricingContext,
    normal_cdf,
    price_above,
    price_hit,
    price_option_yes,
)

WEEK = 7 / 365.25
MONTH = 30 / 365.25


class TestNormalCDF:
    """Tests for the normal CDF approximation."""

    def test_symmetry(self):
        for x in np.linspace(-7.5, 7.5, 61):
            assert normal_cdf(x) + normal_cdf(-x) == pytest.approx(1.0, abs=1e-6)

    def test_tails_are_exact(self):
        assert normal_cdf(-8.1) == 0.0
        assert normal_cdf(8.1) == 1.0

    def test_centre(self):
        assert normal_cdf(0.0) == pytest.approx(0.5, abs=1e-8)

    def test_matches_scipy(self):
        for x in np.linspace(-6, 6, 121):
            assert normal_cdf(x) == pytest.approx(norm.cdf(x), abs=2e-7)

    def test_monotonic(self):
        values = [normal_cdf(x) for x in np.linspace(-4, 4, 801)]
        assert all(b >= a for a, b in zip(values, values[1:]))


class TestPriceAbove:
    """Tests for the "above" digital pricer."""

    def test_at_the_money_is_near_half(self):
        price = price_above(100000, 100000, 0.5, WEEK)
        assert price == pytest.approx(0.5, abs=0.02)
        # Zero-drift digital sits just under 50%
        assert price < 0.5

    def test_matches_black_scholes_digital(self):
        S, K, sigma, tau = 97000, 100000, 0.55, 10 / 365.25
        d2 = (math.log(S / K) - 0.5 * sigma ** 2 * tau) / (sigma * math.sqrt(tau))
        assert price_above(S, K, sigma, tau) == pytest.approx(norm.cdf(d2), abs=1e-6)

    def test_bounded(self):
        for S in np.linspace(50000, 150000, 41):
            for sigma in (0.05, 0.5, 3.0):
                price = price_above(S, 100000, sigma, MONTH)
                assert 0.0 <= price <= 1.0

    def test_non_decreasing_in_spot(self):
        prices = [price_above(S, 100000, 0.6, MONTH) for S in np.linspace(60000, 140000, 200)]
        assert all(b >= a for a, b in zip(prices, prices[1:]))

    def test_expired_is_step_function(self):
        assert price_above(100001, 100000, 0.5, 0.0) == 1.0
        assert price_above(100000, 100000, 0.5, 0.0) == 1.0
        assert price_above(99999, 100000, 0.5, 0.0) == 0.0
        assert price_above(99999, 100000, 0.5, -1.0) == 0.0

    def test_zero_vol_is_step_function(self):
        assert price_above(101000, 100000, 0.0, WEEK) == 1.0
        assert price_above(99000, 100000, 0.0, WEEK) == 0.0

    def test_hurst_changes_time_scaling(self):
        S, K, sigma = 90000, 100000, 0.6
        # tau < 1, so a larger H shrinks the vol term and the OTM price
        assert price_above(S, K, sigma, MONTH, hurst=0.7) < price_above(S, K, sigma, MONTH, hurst=0.5)

    def test_hurst_one_scales_linearly(self):
        S, K, sigma, tau = 95000, 100000, 0.8, 0.25
        d2 = (math.log(S / K) - 0.5 * sigma ** 2 * tau ** 2) / (sigma * tau)
        assert price_above(S, K, sigma, tau, hurst=1.0) == pytest.approx(norm.cdf(d2), abs=1e-6)


class TestPriceHit:
    """Tests for the one-touch pricer."""

    def test_touch_beats_terminal_above(self):
        touch = price_hit(90000, 100000, 0.6, MONTH, True)
        above = price_above(90000, 100000, 0.6, MONTH)
        assert touch > above

    def test_up_barrier_already_breached(self):
        for S in (100000, 100001, 150000):
            assert price_hit(S, 100000, 0.5, MONTH, True) == 1.0

    def test_down_barrier_already_breached(self):
        for S in (100000, 99999, 50000):
            assert price_hit(S, 100000, 0.5, MONTH, False) == 1.0

    def test_spot_on_barrier(self):
        assert price_hit(100000, 100000, 0.5, 0.0, True) == 1.0
        assert price_hit(100000, 100000, 0.5, 0.0, False) == 1.0

    def test_expired_or_zero_vol_not_touched(self):
        assert price_hit(90000, 100000, 0.5, 0.0, True) == 0.0
        assert price_hit(90000, 100000, 0.0, MONTH, True) == 0.0
        assert price_hit(110000, 100000, 0.5, 0.0, False) == 0.0

    def test_up_matches_reflection_principle(self):
        S, B, sigma, tau = 90000, 100000, 0.6, MONTH
        v = sigma * math.sqrt(tau)
        expected = norm.cdf((math.log(S / B) - v * v / 2) / v) \
            + (S / B) * norm.cdf((math.log(S / B) + v * v / 2) / v)
        assert price_hit(S, B, sigma, tau, True) == pytest.approx(expected, abs=1e-6)

    def test_down_matches_reflection_principle(self):
        S, B, sigma, tau = 100000, 90000, 0.6, MONTH
        v = sigma * math.sqrt(tau)
        expected = norm.cdf((math.log(B / S) + v * v / 2) / v) \
            + (S / B) * norm.cdf((math.log(B / S) - v * v / 2) / v)
        assert price_hit(S, B, sigma, tau, False) == pytest.approx(min(1.0, expected), abs=1e-6)

    def test_down_touch_beats_terminal_below(self):
        touch = price_hit(100000, 90000, 0.6, MONTH, False)
        below = 1.0 - price_above(100000, 90000, 0.6, MONTH)
        assert touch > below

    def test_up_probability_rises_towards_barrier(self):
        prices = [price_hit(S, 100000, 0.6, MONTH, True) for S in np.linspace(70000, 99900, 100)]
        assert all(b >= a for a, b in zip(prices, prices[1:]))

    def test_bounded(self):
        for S in np.linspace(50000, 150000, 41):
            for up in (True, False):
                for sigma in (0.05, 1.0, 8.0):
                    assert 0.0 <= price_hit(S, 100000, sigma, MONTH, up) <= 1.0

    def test_direction_is_not_rederived_from_spot(self):
        # Up barrier crossed by a later spot stays touched
        assert price_hit(105000, 100000, 0.5, MONTH, True) == 1.0
        # The same spot against a down barrier is an ordinary untouched price
        assert price_hit(105000, 100000, 0.5, MONTH, False) < 1.0


class TestPricingModels:
    """Tests for dispatch and the pricing context."""

    def test_dispatch(self):
        assert price_option_yes(95000, 100000, 0.5, WEEK, OptionType.ABOVE) == \
            price_above(95000, 100000, 0.5, WEEK)
        assert price_option_yes(95000, 100000, 0.5, WEEK, OptionType.HIT, True) == \
            price_hit(95000, 100000, 0.5, WEEK, True)
        assert price_option_yes(105000, 100000, 0.5, WEEK, OptionType.HIT, False, 0.6) == \
            price_hit(105000, 100000, 0.5, WEEK, False, 0.6)

    def test_option_type_parse(self):
        assert OptionType.parse("Above") is OptionType.ABOVE
        assert OptionType.parse(" hit ") is OptionType.HIT
        assert OptionType.parse(OptionType.HIT) is OptionType.HIT
        with pytest.raises(ValueError):
            OptionType.parse("range")

    def test_context_parses_string_type(self):
        context = PricingContext("hit", hurst=0.6)
        assert context.option_type is OptionType.HIT
        assert context.price_yes(90000, 100000, 0.5, MONTH) == \
            price_option_yes(90000, 100000, 0.5, MONTH, OptionType.HIT, True, 0.6)

    def test_context_rejects_bad_hurst(self):
        with pytest.raises(ValueError):
            PricingContext(OptionType.ABOVE, hurst=0.0)
        with pytest.raises(ValueError):
            PricingContext(OptionType.ABOVE, hurst=1.5)

    def test_context_is_immutable(self):
        context = PricingContext(OptionType.ABOVE)
        with pytest.raises(AttributeError):
            context.hurst = 0.7


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
