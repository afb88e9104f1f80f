"""
Redemption Gate.

Caps what the beneficiary can take out of the vault. Applied to withdraw,
redeem, transfer and transfer_from whenever the beneficiary is the source.
Ordinary holders never pass through here.

    if burning is disabled:         full beneficiary balance
    vault value <= user debt:       0 (insolvent)
    otherwise:                      min(vault value - user debt, beneficiary debt, balance)

Vault value is computed from the live raw balance and rate on every call, so a
rate move between reports tightens or loosens the ceiling immediately.
"""

import logging

from .errors import InsolvencyProtection
from .value_converter import vault_value

logger = logging.getLogger(__name__)


def value_to_shares(value):
    """One share is issued per value unit, so the conversion is exact."""
    return value


def max_redeemable_value(raw_balance, rate, decimals, user_debt_value, beneficiary_debt_value, burning_enabled, share_balance):
    """
    Maximum value the beneficiary may move out right now.

    Equality between vault value and user debt counts as insolvent, so no dust
    can leave at the boundary.
    """
    if not burning_enabled:
        return share_balance

    current_value = vault_value(raw_balance, rate, decimals)
    if current_value <= user_debt_value:
        return 0

    excess_value = current_value - user_debt_value
    return min(excess_value, beneficiary_debt_value)


def max_redeemable_shares(raw_balance, rate, decimals, user_debt_value, beneficiary_debt_value, burning_enabled, share_balance):
    redeemable_value = max_redeemable_value(
        raw_balance, rate, decimals, user_debt_value, beneficiary_debt_value, burning_enabled, share_balance
    )
    return min(value_to_shares(redeemable_value), share_balance)


class RedemptionGate:
    """
    Stateless gate bound to the ledger and share token it reads from.
    """

    def __init__(self, ledger, share_token):
        self.ledger = ledger
        self.share_token = share_token

    def max_shares(self, beneficiary, raw_balance, rate, decimals, burning_enabled):
        return max_redeemable_shares(
            raw_balance, rate, decimals,
            self.ledger.user_debt_value,
            self.ledger.beneficiary_debt_value,
            burning_enabled,
            self.share_token.balance_of(beneficiary),
        )

    def enforce(self, shares, beneficiary, raw_balance, rate, decimals, burning_enabled):
        """
        Rejects the whole operation if it would move more than the ceiling.

        Raises:
            InsolvencyProtection: If shares exceeds the beneficiary's current ceiling
        """
        allowed = self.max_shares(beneficiary, raw_balance, rate, decimals, burning_enabled)
        if shares > allowed:
            logger.warning("blocked beneficiary %s: requested %s shares, ceiling %s", beneficiary, shares, allowed)
            raise InsolvencyProtection(shares, allowed)
        return allowed
