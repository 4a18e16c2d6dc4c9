"""
Command-line front end.

Reads a saved Polymarket event payload, selects positions, calibrates
them against the spot given on the command line and prints the four
projection curves as a table or CSV.
"""

import argparse
import csv
import sys
import time
from typing import List, Optional, Tuple

from projector.calibration.smile import build_smile
from projector.markets.events import Event, load_event, quotes_from_markets
from projector.pricing.models import OptionType, PricingContext
from projector.projection.portfolio import Portfolio, Side
from projector.projection.scenarios import ProjectionCurve, default_price_range, project_horizons
from projector.utils.helpers import (
    format_percent,
    format_time_to_expiry,
    format_usd,
    load_config,
)
from projector.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_selection(text: str) -> Tuple[str, Side]:
    """Parse "MARKET_ID[:YES|NO]" (side defaults to YES)."""
    market_id, _, side = text.partition(":")
    if not market_id:
        raise argparse.ArgumentTypeError(f"invalid selection {text!r}")
    try:
        return market_id, Side.parse(side or "YES")
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projector",
        description="Project P&L of Polymarket crypto strike positions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  projector event.json --spot 97000 --select 512345:YES --select 512346:NO
  projector event.json --spot 97000 --select 512345 --smile --csv
  projector event.json --spot 97000 --select 512345 --hurst 0.6 --type hit
        """
    )

    parser.add_argument("event", help="Path to a saved Gamma event JSON document")

    parser.add_argument(
        "--spot", type=float, required=True,
        help="Current spot price of the underlying"
    )

    parser.add_argument(
        "--select", "-s",
        action="append",
        type=parse_selection,
        default=[],
        metavar="ID[:SIDE]",
        help="Market to hold, with side YES (default) or NO; repeatable"
    )

    parser.add_argument(
        "--config", "-c",
        default="config/config.yaml",
        help="Path to configuration file (default: config/config.yaml)"
    )

    parser.add_argument("--type", choices=[t.value for t in OptionType], help="Override option type")
    parser.add_argument("--hurst", type=float, help="Time-scaling exponent H (default from config)")
    parser.add_argument("--lower", type=float, help="Lowest spot of the projection range")
    parser.add_argument("--upper", type=float, help="Highest spot of the projection range")
    parser.add_argument("--points", type=int, help="Samples per curve")
    parser.add_argument("--now", type=float, help="Unix time to price at (default: current time)")
    parser.add_argument("--smile", action="store_true", help="Use smile-interpolated vols")
    parser.add_argument("--value", action="store_true", help="Print raw value instead of P&L")
    parser.add_argument("--csv", action="store_true", help="Write curves as CSV to stdout")
    parser.add_argument("--every", type=int, default=20, help="Table row stride (default: 20)")

    return parser


def resolve_option_type(cli_value: Optional[str], config_value: Optional[str], event: Event) -> OptionType:
    """CLI flag, then config (unless "auto"), then what the event looks like."""
    if cli_value:
        return OptionType.parse(cli_value)
    if config_value and str(config_value).lower() != "auto":
        return OptionType.parse(config_value)
    return event.option_type


def build_portfolio(event: Event, selections: List[Tuple[str, Side]], spot: float) -> Portfolio:
    """
    Raises:
        ValueError: If a selection names an unknown or unpriced market
    """
    portfolio = Portfolio()
    for market_id, side in selections:
        market = event.find_market(market_id)
        if market is None:
            raise ValueError(f"Market {market_id} not found in event '{event.slug}'")
        portfolio.select_market(market, side, spot)
    return portfolio


def print_summary(event, context, spot, seconds_to_expiry, portfolio, calibrations, smile):
    print("=" * 60)
    print(event.title or event.slug)
    print("=" * 60)
    print(f"Asset: {event.asset or '?'}  Type: {context.option_type.display_name}  H: {context.hurst:.2f}")
    print(f"Spot: {format_usd(spot)}  Time to expiry: {format_time_to_expiry(seconds_to_expiry)}")
    print(f"Total entry cost: {portfolio.total_entry_cost:.4f}")
    print("-" * 60)
    print(f"{'Market':<12} {'Side':<4} {'Strike':>14} {'Entry':>7} {'IV':>9} {'Method':>8}")

    for strike in portfolio:
        result = calibrations.get(strike.key)
        method = result.method if result else "-"
        print(
            f"{strike.market_id:<12} {strike.side.value:<4} "
            f"{format_usd(strike.strike_price, decimals=0):>14} {strike.entry_price:>7.4f} "
            f"{format_percent(strike.implied_vol):>9} {method:>8}"
        )

    if smile is not None:
        print("-" * 60)
        print(f"Smile ({len(smile)} points): " + ", ".join(
            f"{p.moneyness:+.3f}:{p.iv:.3f}" for p in smile
        ))
    print("-" * 60)


def print_table(curves: List[ProjectionCurve], every: int):
    header = f"{'Spot':>14} " + " ".join(f"{c.label[:22]:>22}" for c in curves)
    print(header)

    n = len(curves[0].points)
    stride = max(1, every)
    rows = list(range(0, n, stride))
    if rows[-1] != n - 1:
        rows.append(n - 1)

    for i in rows:
        spot = curves[0].points[i].spot
        cells = " ".join(f"{c.points[i].value:>+22.4f}" for c in curves)
        print(f"{format_usd(spot, decimals=0):>14} {cells}")


def write_csv(curves: List[ProjectionCurve], stream=None):
    writer = csv.writer(stream or sys.stdout)
    writer.writerow(["spot"] + [c.label for c in curves])
    for i, point in enumerate(curves[0].points):
        writer.writerow([f"{point.spot:.6f}"] + [f"{c.points[i].value:.6f}" for c in curves])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    general = config["general"]
    pricing = config["pricing"]
    projection = config["projection"]

    setup_logging(log_level=general.get("log_level", "INFO"), log_file=general.get("log_file"))

    if args.spot <= 0:
        logger.error(f"Spot price must be positive, got {args.spot}")
        return 1

    try:
        event = load_event(args.event)
    except FileNotFoundError:
        logger.error(f"Event file not found: {args.event}")
        return 1
    except ValueError as e:
        logger.error(f"Could not parse event file: {e}")
        return 1

    try:
        context = PricingContext(
            option_type=resolve_option_type(args.type, pricing.get("option_type"), event),
            hurst=args.hurst if args.hurst is not None else float(pricing.get("hurst", 0.5)),
        )
        portfolio = build_portfolio(event, args.select, args.spot)
    except ValueError as e:
        logger.error(str(e))
        return 1

    if len(portfolio) == 0:
        logger.error("No positions selected (use --select MARKET_ID[:YES|NO])")
        return 1

    now_ts = args.now if args.now is not None else time.time()
    seconds_to_expiry = event.seconds_to_expiry(now_ts)
    tau = event.tau(now_ts)

    calibrations = portfolio.calibrate(
        args.spot, tau, context, default_vol=float(pricing.get("default_vol", 0.5))
    )

    smile = None
    if args.smile or pricing.get("use_smile"):
        smile = build_smile(
            args.spot, quotes_from_markets(event.markets), tau,
            context.option_type, context.hurst,
        )

    default_range = default_price_range(
        [m.strike_price for m in event.markets],
        lower_pad=float(projection.get("lower_pad", 0.9)),
        upper_pad=float(projection.get("upper_pad", 1.1)),
    ) or (args.spot * 0.9, args.spot * 1.1)
    lower = args.lower if args.lower is not None else default_range[0]
    upper = args.upper if args.upper is not None else default_range[1]
    num_points = args.points if args.points is not None else int(projection.get("num_points", 200))

    curves = project_horizons(
        portfolio, lower, upper, tau, context,
        seconds_to_expiry=max(seconds_to_expiry, 0.0),
        num_points=num_points,
        smile=smile,
        pnl=not args.value,
    )

    if not curves or not curves[0].points:
        logger.error(f"Nothing to project for range [{lower}, {upper}] with {num_points} points")
        return 1

    if args.csv:
        write_csv(curves)
    else:
        print_summary(event, context, args.spot, seconds_to_expiry, portfolio, calibrations, smile)
        print_table(curves, args.every)

    return 0
