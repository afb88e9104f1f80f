"""
Rate Reader Model.

The vault never measures yield from token inflows. It reads an external,
non-rebasing exchange rate (e.g. stETH per wstETH) and values its raw collateral
through it. This module provides the reader interface and a settable feed used
in simulations, the way a price feed stands in for an oracle.
"""

import logging

from .config import RATE_DECIMALS
from .errors import InvalidRate

logger = logging.getLogger(__name__)


class RateReader:
    """Interface for an external exchange-rate source."""

    def current_rate(self):
        raise NotImplementedError

    def rate_decimals(self):
        raise NotImplementedError

    def read(self):
        """Returns (rate, decimals) in a single call."""
        return self.current_rate(), self.rate_decimals()


class RateFeed(RateReader):
    """Simple settable rate feed for simulations and tests."""

    def __init__(self, initial_rate=None, decimals=RATE_DECIMALS):
        self.decimals = decimals
        self.rate = initial_rate if initial_rate is not None else 10**decimals

    def current_rate(self):
        return self.rate

    def rate_decimals(self):
        return self.decimals

    def set_rate(self, new_rate):
        """Sets a new raw rate, scaled by 10**decimals."""
        if new_rate <= 0:
            raise InvalidRate(f"Rate must be positive, got {new_rate}")
        logger.debug("rate moved %s -> %s", self.rate, new_rate)
        self.rate = int(new_rate)

    def set_rate_from_float(self, rate):
        """Sets the rate from a human-readable float such as 1.2."""
        self.set_rate(round(rate * 10**self.decimals))

    def as_float(self):
        return self.rate / 10**self.decimals
