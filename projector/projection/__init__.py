"""
Projection Module

Turns a calibrated portfolio into plottable value and P&L curves.

Components:
- portfolio: Selected positions and their calibration
- curves: Value / P&L sampling across spot levels
- scenarios: Now / 1/3 / 2/3 / expiry views and default ranges
"""

from projector.projection.portfolio import Portfolio, Side, Strike
from projector.projection.curves import (
    ProjectionPoint,
    compute_expiry_pnl,
    compute_expiry_value,
    compute_pnl_curve,
    compute_value_curve,
)
from projector.projection.scenarios import ProjectionCurve, default_price_range, project_horizons

__all__ = [
    "Portfolio",
    "Side",
    "Strike",
    "ProjectionPoint",
    "compute_value_curve",
    "compute_pnl_curve",
    "compute_expiry_value",
    "compute_expiry_pnl",
    "ProjectionCurve",
    "default_price_range",
    "project_horizons",
]
