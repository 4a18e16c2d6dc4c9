"""
Portfolio

Tracks the selected YES/NO positions of one event ladder and keeps their
calibrated vols.

A selection is identified by (market_id, side). The same market may be
held on both sides at once; selecting an existing key replaces it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from projector.calibration.implied_vol import Calibration, calibrate
from projector.pricing.models import PricingContext
from projector.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_VOL = 0.5


class Side(Enum):
    """Outcome held."""
    YES = "YES"
    NO = "NO"

    @classmethod
    def parse(cls, value) -> "Side":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown side {value!r} (expected YES or NO)") from None


SelectionKey = Tuple[str, Side]


@dataclass
class Strike:
    """One selected position."""
    market_id: str
    strike_price: float
    side: Side
    entry_price: float  # Probability paid for the held side
    is_up_barrier: bool  # Fixed at selection: strike above the spot
    implied_vol: float = DEFAULT_VOL
    yes_price: float = 0.0  # Market YES price used for calibration
    question: str = ""
    label: str = ""

    @property
    def key(self) -> SelectionKey:
        return (self.market_id, self.side)

    def contribution(self, yes_price: float) -> float:
        """Value of the held side given a YES price."""
        return yes_price if self.side is Side.YES else 1.0 - yes_price


class Portfolio:
    """
    Set of selected strikes.

    Iteration order (strike, then side) is for display only; nothing in
    the pricing depends on it.
    """

    def __init__(self):
        self._strikes: Dict[SelectionKey, Strike] = {}

    def __len__(self) -> int:
        return len(self._strikes)

    def __iter__(self) -> Iterator[Strike]:
        return iter(
            sorted(
                self._strikes.values(),
                key=lambda s: (s.strike_price, s.side.value, s.market_id),
            )
        )

    def __contains__(self, key) -> bool:
        market_id, side = key
        return (market_id, Side.parse(side)) in self._strikes

    def get(self, market_id: str, side) -> Optional[Strike]:
        return self._strikes.get((market_id, Side.parse(side)))

    @property
    def total_entry_cost(self) -> float:
        return sum(s.entry_price for s in self._strikes.values())

    def select(
        self,
        market_id: str,
        strike_price: float,
        yes_price: float,
        side,
        spot: float,
        question: str = "",
        label: str = "",
    ) -> Strike:
        """
        Add a position.

        The barrier direction is decided here, against the selection spot,
        and never changes afterwards.

        Raises:
            ValueError: If the strike price is not positive
        """
        if strike_price <= 0:
            raise ValueError(f"Market {market_id} has no usable strike price")

        side = Side.parse(side)
        entry_price = yes_price if side is Side.YES else 1.0 - yes_price

        strike = Strike(
            market_id=market_id,
            strike_price=strike_price,
            side=side,
            entry_price=entry_price,
            is_up_barrier=strike_price > spot,
            yes_price=yes_price,
            question=question,
            label=label,
        )
        self._strikes[strike.key] = strike

        logger.debug(
            f"Selected {side.value} {market_id} K={strike_price} "
            f"entry={entry_price:.4f} up={strike.is_up_barrier}"
        )
        return strike

    def select_market(self, market, side, spot: float) -> Strike:
        """Add a position from a parsed market."""
        return self.select(
            market.id,
            market.strike_price,
            market.yes_price,
            side,
            spot,
            question=market.question,
            label=market.group_item_title,
        )

    def deselect(self, market_id: str, side) -> bool:
        """Remove a position. Returns True if it was held."""
        return self._strikes.pop((market_id, Side.parse(side)), None) is not None

    def toggle(self, market, side, spot: float) -> bool:
        """Flip a selection. Returns True if the position is now held."""
        if self.deselect(market.id, side):
            return False
        self.select_market(market, side, spot)
        return True

    def calibrate(
        self,
        spot: float,
        tau: float,
        context: PricingContext,
        default_vol: float = DEFAULT_VOL,
    ) -> Dict[SelectionKey, Calibration]:
        """
        Recalibrate every strike against its market YES price.

        All vols are recomputed together whenever spot, tau, H or the
        selection changes. Expired contracts get default_vol.

        Returns:
            Calibration per selection key
        """
        results = {}

        for key, strike in self._strikes.items():
            result = calibrate(
                spot,
                strike.strike_price,
                tau,
                strike.yes_price,
                context.option_type,
                is_up_barrier=strike.is_up_barrier,
                hurst=context.hurst,
            )
            strike.implied_vol = result.vol_or(default_vol)
            results[key] = result

            if not result.is_calibrated:
                logger.warning(
                    f"No calibration for {strike.market_id} {strike.side.value}, "
                    f"using default vol {default_vol:.2f}"
                )

        return results
