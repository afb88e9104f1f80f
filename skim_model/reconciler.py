"""
Reconciler.

Runs once per report cycle. Compares the pool's live value against the value
claimed at the last report and books the difference against the beneficiary:

1. profit: beneficiary debt grows by delta and delta beneficiary shares are minted
2. loss with burning enabled: up to the beneficiary's debt is burned as a
   first-loss buffer; anything beyond surfaces only as insolvency
3. loss with burning disabled: nothing is burned

User debt is never touched here; it is bookkeeping of nominal principal and
only moves on deposits and withdrawals.
"""

import logging
from dataclasses import dataclass

from .errors import RotationInconsistent
from .events import Reported
from .value_converter import vault_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportOutcome:
    """Result of comparing live vault value with previously claimed value."""
    vault_value: int
    previous_claimed_value: int
    profit: int = 0
    loss: int = 0
    burn_amount: int = 0

    @property
    def delta(self):
        return self.vault_value - self.previous_claimed_value


def compute_report(raw_balance, rate, decimals, user_debt_value, beneficiary_debt_value, burning_enabled):
    """
    Pure report computation; no state is read or written.

    Args:
        raw_balance: Raw collateral controlled by the strategy
        rate: Current exchange rate
        decimals: Rate decimals
        user_debt_value: Current user debt
        beneficiary_debt_value: Current beneficiary debt
        burning_enabled: Whether beneficiary shares absorb losses

    Returns:
        ReportOutcome
    """
    current_value = vault_value(raw_balance, rate, decimals)
    previous_claimed = user_debt_value + beneficiary_debt_value
    delta = current_value - previous_claimed

    if delta > 0:
        return ReportOutcome(current_value, previous_claimed, profit=delta)

    if delta < 0:
        loss = -delta
        burn_amount = min(beneficiary_debt_value, loss) if burning_enabled else 0
        return ReportOutcome(current_value, previous_claimed, loss=loss, burn_amount=burn_amount)

    return ReportOutcome(current_value, previous_claimed)


class Reconciler:
    """
    Applies report outcomes to the value debt ledger and the share ledger.
    """

    def __init__(self, ledger, share_token, event_log):
        self.ledger = ledger
        self.share_token = share_token
        self.event_log = event_log

    def report(self, raw_balance, rate, decimals, beneficiary, burning_enabled, now, rotation_consistent=True):
        """
        Runs one report cycle.

        Args:
            raw_balance: Raw collateral balance, already read from the pool
            rate: Current exchange rate
            decimals: Rate decimals
            beneficiary: Current beneficiary address
            burning_enabled: Whether beneficiary shares absorb losses
            now: Report timestamp
            rotation_consistent: False if the pending recipient change is broken

        Returns:
            (profit, loss) tuple in value units

        Raises:
            RotationInconsistent: If a pending recipient change is inconsistent
            InvalidRate: If the rate reading is unusable
        """
        if not rotation_consistent:
            raise RotationInconsistent("Cannot report while the pending recipient change is inconsistent")

        outcome = compute_report(
            raw_balance, rate, decimals,
            self.ledger.user_debt_value, self.ledger.beneficiary_debt_value,
            burning_enabled,
        )

        # Shares and ledger are checked together; the beneficiary always holds
        # exactly its debt in shares, so the burn cannot overdraw.
        if outcome.burn_amount > 0:
            self.share_token.check_balance(beneficiary, outcome.burn_amount)

        if outcome.profit > 0:
            self.ledger.accrue_profit(outcome.profit)
            self.share_token.mint_shares(beneficiary, outcome.profit)
        elif outcome.burn_amount > 0:
            self.ledger.absorb_loss(outcome.burn_amount)
            self.share_token.burn_shares(beneficiary, outcome.burn_amount)

        self.ledger.record_snapshot(now)

        if outcome.loss > outcome.burn_amount and burning_enabled:
            logger.warning(
                "loss of %s exceeds beneficiary buffer %s; vault value %s vs user debt %s",
                outcome.loss, outcome.burn_amount, outcome.vault_value, self.ledger.user_debt_value,
            )
        logger.info(
            "report at %s: profit=%s loss=%s burned=%s vault_value=%s",
            now, outcome.profit, outcome.loss, outcome.burn_amount, outcome.vault_value,
        )

        self.event_log.emit(Reported(
            timestamp=now,
            profit=outcome.profit,
            loss=outcome.loss,
            burned=outcome.burn_amount,
            vault_value=outcome.vault_value,
            user_debt_value=self.ledger.user_debt_value,
            beneficiary_debt_value=self.ledger.beneficiary_debt_value,
        ))
        return outcome.profit, outcome.loss
