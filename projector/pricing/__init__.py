"""
Pricing Module

Closed-form probability models for binary prediction markets.

Components:
- normal: Normal CDF approximation
- binary: "above" digital pricer
- touch: "hit" one-touch barrier pricer
- models: Unified YES pricer and pricing context
"""

from projector.pricing.normal import normal_cdf
from projector.pricing.binary import price_above
from projector.pricing.touch import price_hit
from projector.pricing.models import OptionType, PricingContext, price_option_yes

__all__ = [
    "normal_cdf",
    "price_above",
    "price_hit",
    "OptionType",
    "PricingContext",
    "price_option_yes",
]
