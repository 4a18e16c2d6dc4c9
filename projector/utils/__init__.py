"""
Utility modules for the projector.

- logger: Logging setup
- helpers: Configuration and display helpers
"""

from projector.utils.logger import get_logger, setup_logging
from projector.utils.helpers import load_config, save_config

__all__ = ["get_logger", "setup_logging", "load_config", "save_config"]
