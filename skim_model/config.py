"""
Configuration for the yield-skimming vault model.

Protocol constants live at module level; per-vault settings are collected in
VaultConfig and handed to the vault constructor.
"""

from dataclasses import dataclass
from typing import Optional

# Precision of rates produced by the default rate feed
DECIMAL_PRECISION = 10**18
RATE_DECIMALS = 18

# Accepted range for a rate reader's reported decimals
MIN_RATE_DECIMALS = 1
MAX_RATE_DECIMALS = 36

ONE_DAY = 24 * 60 * 60

# Delay between proposing and finalizing a new yield recipient
RECIPIENT_CHANGE_COOLDOWN = 14 * ONE_DAY

EVENT_LOG_MAXLEN = 10_000

# Returned by max_deposit / max_mint when nothing limits the amount
MAX_UINT256 = 2**256 - 1


@dataclass
class VaultConfig:
    """
    Per-vault settings.

    enable_burning decides whether the beneficiary's shares act as a first-loss
    buffer. When it is off the beneficiary is never gated by insolvency.
    """
    management: str
    beneficiary: str
    keeper: Optional[str] = None
    emergency_admin: Optional[str] = None
    enable_burning: bool = True
    recipient_change_cooldown: int = RECIPIENT_CHANGE_COOLDOWN
    event_log_maxlen: int = EVENT_LOG_MAXLEN
    start_time: int = 0
