"""
Value Debt Ledger.

Holds the two running claims on the pool, both in value units:

* user debt: nominal principal owed to ordinary depositors
* beneficiary debt: accrued, unwithdrawn yield owed to the yield recipient

The fields are private. Only the deposit/withdrawal hooks, the reconciler and
recipient rotation call the mutators below; everything else reads through the
properties.
"""

import logging
from dataclasses import dataclass

from .errors import InvalidAmount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable copy of the ledger for reporting and tests."""
    user_debt_value: int
    beneficiary_debt_value: int
    last_snapshot_value: int
    last_report: int

    @property
    def total_debt_value(self):
        return self.user_debt_value + self.beneficiary_debt_value


def _require_non_negative(value):
    if value < 0:
        raise InvalidAmount(f"Ledger amounts cannot be negative: {value}")


class ValueDebtLedger:
    """
    Singleton ledger of the value owed to depositors and to the beneficiary.
    """

    def __init__(self, start_time=0):
        self._user_debt_value = 0
        self._beneficiary_debt_value = 0

        # user + beneficiary debt as of the last report
        self._last_snapshot_value = 0
        self._last_report = start_time

    @property
    def user_debt_value(self):
        return self._user_debt_value

    @property
    def beneficiary_debt_value(self):
        return self._beneficiary_debt_value

    @property
    def total_debt_value(self):
        return self._user_debt_value + self._beneficiary_debt_value

    @property
    def last_snapshot_value(self):
        return self._last_snapshot_value

    @property
    def last_report(self):
        return self._last_report

    def snapshot(self):
        return LedgerSnapshot(
            user_debt_value=self._user_debt_value,
            beneficiary_debt_value=self._beneficiary_debt_value,
            last_snapshot_value=self._last_snapshot_value,
            last_report=self._last_report,
        )

    # --- Deposit / withdrawal hooks ---

    def credit_user(self, value):
        """Deposit hook: adds the deposited value to user principal."""
        _require_non_negative(value)
        self._user_debt_value += value

    def debit_user(self, value):
        """
        Withdrawal hook: removes withdrawn value from user principal.

        Clamps at zero so rounding between snapshots can never underflow the
        ledger. Returns the amount actually debited.
        """
        _require_non_negative(value)
        if value > self._user_debt_value:
            logger.warning(
                "user debt debit of %s exceeds user debt %s, clamping to zero",
                value, self._user_debt_value,
            )
            value = self._user_debt_value
        self._user_debt_value -= value
        return value

    def release_beneficiary(self, value):
        """Beneficiary withdrawal hook: value paid out leaves beneficiary debt."""
        _require_non_negative(value)
        if value > self._beneficiary_debt_value:
            raise InvalidAmount(
                f"Cannot release {value}, beneficiary debt is {self._beneficiary_debt_value}"
            )
        self._beneficiary_debt_value -= value

    def reassign_to_user(self, value):
        """
        Beneficiary transfer hook: shares handed to an ordinary holder turn
        accrued yield into principal. The total claimed value is unchanged.
        """
        self.release_beneficiary(value)
        self._user_debt_value += value

    # --- Reconciler ---

    def accrue_profit(self, value):
        _require_non_negative(value)
        self._beneficiary_debt_value += value

    def absorb_loss(self, value):
        """Burns up to value of beneficiary debt; returns what was absorbed."""
        _require_non_negative(value)
        absorbed = min(value, self._beneficiary_debt_value)
        self._beneficiary_debt_value -= absorbed
        return absorbed

    def record_snapshot(self, timestamp):
        self._last_snapshot_value = self.total_debt_value
        self._last_report = timestamp
