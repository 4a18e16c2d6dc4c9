#!/usr/bin/env python3
"""
PolyProjector - P&L projection for Polymarket crypto strike ladders

Supports:
- "above" ladders (European binary)
- "hit" ladders (one-touch barrier)

Usage:
    python main.py event.json --spot 97000 --select 512345:YES
    python main.py event.json --spot 97000 --select 512345 --smile
    python main.py event.json --spot 97000 --select 512345 --csv
    python main.py event.json --spot 97000 --select 512345 --config path.yaml
"""

import sys
import os

# Run from a checkout without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from projector.cli import main


if __name__ == "__main__":
    sys.exit(main())
