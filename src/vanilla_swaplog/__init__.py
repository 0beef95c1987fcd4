"""
Vanilla Swap Log package.

Browse the Swap event history of VanillaSwap pools on DMC.
"""

from .config import SwapLogConfig
from .models import FormattedPairOption, SwapRecord, TradingPair
from .pair_directory import PairDirectoryClient, QueryResultCache
from .swap_log_fetcher import SwapLogFetcher, fetch_swap_logs
from .view import SwapLogView

__all__ = [
    "SwapLogConfig",
    "SwapRecord",
    "TradingPair",
    "FormattedPairOption",
    "PairDirectoryClient",
    "QueryResultCache",
    "SwapLogFetcher",
    "fetch_swap_logs",
    "SwapLogView",
]
__version__ = "0.1.0"
