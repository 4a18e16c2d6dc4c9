"""
Markets Module

Parsing of Polymarket event payloads into strike ladders.
"""

from projector.markets.events import (
    Event,
    ParsedMarket,
    detect_asset,
    detect_option_type,
    extract_slug_from_url,
    load_event,
    parse_event,
    parse_strike_price,
    quotes_from_markets,
    tau_from_expiry,
)

__all__ = [
    "Event",
    "ParsedMarket",
    "detect_asset",
    "detect_option_type",
    "extract_slug_from_url",
    "load_event",
    "parse_event",
    "parse_strike_price",
    "quotes_from_markets",
    "tau_from_expiry",
]
