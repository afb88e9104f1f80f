"""
Yield-skimming vault model.

Value-debt accounting and insolvency-gated redemption for a vault whose
collateral appreciates through an external exchange rate.
"""

from .config import VaultConfig
from .rate_reader import RateReader, RateFeed
from .collateral_pool import CollateralPool
from .vault import YieldSkimmingVault

__all__ = ["VaultConfig", "RateReader", "RateFeed", "CollateralPool", "YieldSkimmingVault"]
