"""
Pricing Models

Single YES-price entry point shared by calibration and curve generation,
so both always agree on the model being used.
"""

from dataclasses import dataclass
from enum import Enum

from projector.pricing.binary import DEFAULT_HURST, price_above
from projector.pricing.touch import price_hit


class OptionType(Enum):
    """Payoff structure of a market ladder."""
    ABOVE = "above"  # Terminal price at or above strike
    HIT = "hit"      # Barrier touched any time before expiry

    @classmethod
    def parse(cls, value) -> "OptionType":
        """Accept an OptionType or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown option type {value!r} (expected 'above' or 'hit')"
            ) from None

    @property
    def display_name(self) -> str:
        return "European Binary" if self is OptionType.ABOVE else "One-Touch Barrier"


def price_option_yes(
    spot: float,
    strike: float,
    sigma: float,
    tau: float,
    option_type: OptionType,
    is_up_barrier: bool = True,
    hurst: float = DEFAULT_HURST,
) -> float:
    """
    YES price of a single contract.

    Args:
        spot: Underlying price
        strike: Strike (or barrier) price
        sigma: Annualized volatility
        tau: Time to expiry in years
        option_type: ABOVE or HIT
        is_up_barrier: Barrier direction, only used for HIT
        hurst: Time-scaling exponent

    Returns:
        YES price in [0, 1]
    """
    if option_type is OptionType.ABOVE:
        return price_above(spot, strike, sigma, tau, hurst)
    return price_hit(spot, strike, sigma, tau, is_up_barrier, hurst)


@dataclass(frozen=True)
class PricingContext:
    """
    Parameters fixed for a whole calibration or curve computation.

    Passing one of these replaces threading option type and H through
    every call.
    """
    option_type: OptionType
    hurst: float = DEFAULT_HURST

    def __post_init__(self):
        object.__setattr__(self, "option_type", OptionType.parse(self.option_type))
        if not 0 < self.hurst <= 1:
            raise ValueError(f"hurst must be in (0, 1], got {self.hurst}")

    def price_yes(
        self,
        spot: float,
        strike: float,
        sigma: float,
        tau: float,
        is_up_barrier: bool = True,
    ) -> float:
        """YES price under this context."""
        return price_option_yes(
            spot, strike, sigma, tau, self.option_type, is_up_barrier, self.hurst
        )
