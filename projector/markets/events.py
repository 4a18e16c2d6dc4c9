"""
Event Payload Parsing

Turns a Polymarket Gamma event document (as returned by
/events/slug/<slug>) into the strikes and metadata the projector needs.

Fetching is left to the caller; this module only reads JSON that is
already on disk or in memory.
"""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from projector.calibration.smile import MarketQuote
from projector.pricing.models import OptionType
from projector.utils.logger import get_logger

logger = get_logger(__name__)

SECONDS_PER_YEAR = 365.25 * 24 * 3600

EVENT_URL_PATTERN = re.compile(
    r"^https?://(?:www\.)?polymarket\.com/event/([a-zA-Z0-9-]+)/?.*$"
)

# Checked in order; first match wins
ASSET_ALIASES = [
    ("BTC", ("bitcoin", "btc")),
    ("ETH", ("ethereum", "eth")),
    ("SOL", ("solana", "sol")),
    ("XRP", ("ripple", "xrp")),
]


@dataclass
class ParsedMarket:
    """One strike of an event ladder."""
    id: str
    question: str
    group_item_title: str
    group_item_threshold: float
    start_date: int  # Unix seconds
    end_date: int  # Unix seconds
    yes_token_id: Optional[str]
    no_token_id: Optional[str]
    yes_price: float  # YES outcome price (0-1)
    strike_price: float  # Parsed from group_item_title


@dataclass
class Event:
    """Event header plus its parsed markets."""
    id: str
    slug: str
    title: str
    start_date: int
    end_date: int
    asset: Optional[str]
    option_type: OptionType
    markets: List[ParsedMarket] = field(default_factory=list)

    def seconds_to_expiry(self, now_ts: float) -> float:
        return self.end_date - now_ts

    def tau(self, now_ts: float) -> float:
        return tau_from_expiry(self.end_date, now_ts)

    def find_market(self, market_id: str) -> Optional[ParsedMarket]:
        for market in self.markets:
            if market.id == market_id:
                return market
        return None


def parse_timestamp(value: Any) -> int:
    """ISO 8601 string (or unix number) to unix seconds; missing -> 0."""
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def parse_strike_price(title: str) -> float:
    """
    Strike price from a group item title.

    "↑$100,000" -> 100000.0, "$95,000" -> 95000.0; unparsable -> 0.0
    """
    cleaned = re.sub(r"[↑↓$,\s]", "", title or "")
    match = re.match(r"[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?", cleaned)
    return float(match.group(0)) if match else 0.0


def _decode_list(value: Any) -> List[Any]:
    """Gamma encodes some list fields as JSON strings."""
    if isinstance(value, list):
        return value
    if not value:
        return []
    decoded = json.loads(value)
    return decoded if isinstance(decoded, list) else []


def parse_market(raw: Dict[str, Any]) -> ParsedMarket:
    """Parse one raw Gamma market."""
    try:
        token_ids = _decode_list(raw.get("clobTokenIds"))
    except ValueError:
        token_ids = []

    try:
        prices = _decode_list(raw.get("outcomePrices"))
        yes_price = float(prices[0])
    except (ValueError, TypeError, IndexError):
        logger.debug(f"Market {raw.get('id')} has no usable outcome prices")
        yes_price = 0.0

    title = raw.get("groupItemTitle") or ""

    return ParsedMarket(
        id=str(raw.get("id", "")),
        question=raw.get("question") or "",
        group_item_title=title,
        group_item_threshold=float(raw.get("groupItemThreshold") or 0),
        start_date=parse_timestamp(raw.get("startDate")),
        end_date=parse_timestamp(raw.get("endDate")),
        yes_token_id=token_ids[0] if len(token_ids) > 0 else None,
        no_token_id=token_ids[1] if len(token_ids) > 1 else None,
        yes_price=yes_price,
        strike_price=parse_strike_price(title),
    )


def _market_sort_key(market: ParsedMarket):
    # Threshold first, then title, then question
    return (market.group_item_threshold, market.group_item_title, market.question)


def parse_markets(raw_markets: List[Dict[str, Any]]) -> List[ParsedMarket]:
    """Parse and order the markets of an event."""
    markets = [parse_market(raw) for raw in raw_markets]
    markets.sort(key=_market_sort_key)
    return markets


def detect_asset(event: Dict[str, Any]) -> Optional[str]:
    """
    Crypto asset an event tracks.

    Looks at series.cgAssetName, then series.seriesSlug, then the title.
    """
    series = event.get("series") or {}
    if isinstance(series, list):
        series = series[0] if series else {}

    cg_asset = (series.get("cgAssetName") or "").lower()
    for symbol, aliases in ASSET_ALIASES:
        if cg_asset in aliases:
            return symbol

    slug = (series.get("seriesSlug") or "").lower()
    for symbol, aliases in ASSET_ALIASES:
        if any(alias in slug for alias in aliases):
            return symbol

    title = (event.get("title") or "").lower()
    for symbol, aliases in ASSET_ALIASES:
        if any(alias in title for alias in aliases):
            return symbol

    return None


def detect_option_type(event: Dict[str, Any]) -> OptionType:
    """Payoff structure from series slug, then market questions. Defaults to ABOVE."""
    series = event.get("series") or {}
    if isinstance(series, list):
        series = series[0] if series else {}

    slug = (series.get("seriesSlug") or "").lower()
    if any(word in slug for word in ("hit", "reach", "dip")):
        return OptionType.HIT
    if any(word in slug for word in ("above", "strike")):
        return OptionType.ABOVE

    for market in event.get("markets") or []:
        question = (market.get("question") or "").lower()
        if any(word in question for word in ("reach", "dip", "hit")):
            return OptionType.HIT
        if "above" in question or "below" in question:
            return OptionType.ABOVE

    return OptionType.ABOVE


def extract_slug_from_url(url: str) -> Optional[str]:
    """Event slug from a polymarket.com/event/<slug> URL."""
    match = EVENT_URL_PATTERN.match(url.strip())
    return match.group(1) if match else None


def is_valid_event_url(url: str) -> bool:
    return extract_slug_from_url(url) is not None


def tau_from_expiry(end_ts: float, now_ts: float) -> float:
    """Years to expiry, floored at zero."""
    return max((end_ts - now_ts) / SECONDS_PER_YEAR, 0.0)


def parse_event(payload: Dict[str, Any]) -> Event:
    """Build an Event from a Gamma event document."""
    return Event(
        id=str(payload.get("id", "")),
        slug=payload.get("slug") or "",
        title=payload.get("title") or "",
        start_date=parse_timestamp(payload.get("startDate")),
        end_date=parse_timestamp(payload.get("endDate")),
        asset=detect_asset(payload),
        option_type=detect_option_type(payload),
        markets=parse_markets(payload.get("markets") or []),
    )


def load_event(path: str) -> Event:
    """
    Load a saved Gamma event JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object
    """
    with open(Path(path), "r", encoding="utf-8") as f:
        payload = json.load(f)

    if not isinstance(payload, dict):
        raise ValueError(f"{path}: expected a JSON object")

    event = parse_event(payload)
    logger.info(
        f"Loaded event '{event.title}' ({len(event.markets)} markets, "
        f"asset={event.asset}, type={event.option_type.value})"
    )
    return event


def quotes_from_markets(markets: List[ParsedMarket]) -> List[MarketQuote]:
    """Strike/price pairs for building a smile."""
    return [
        MarketQuote(strike_price=m.strike_price, yes_price=m.yes_price)
        for m in markets
        if m.strike_price > 0
    ]
