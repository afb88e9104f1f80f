"""
Share Token Model.

Generic fungible share ledger of the vault. It knows nothing about value debt
or the beneficiary; the vault engine decides when shares are minted, burned or
moved and this ledger only keeps balances, supply and allowances.
"""

import logging

from .errors import InvalidAmount, InsufficientBalance, InsufficientAllowance

logger = logging.getLogger(__name__)


class ShareToken:
    """
    Simulates the share side of a pooled-fund vault.
    """

    def __init__(self, name="Yield Skimming Shares", symbol="ysSHARE"):
        self.name = name
        self.symbol = symbol

        # Total shares outstanding
        self.total_supply = 0

        # Mapping of addresses to share balances
        self.balances = {}

        # owner -> spender -> remaining allowance
        self.allowances = {}

    def balance_of(self, holder):
        """Returns the share balance of the given holder."""
        return self.balances.get(holder, 0)

    def allowance(self, owner, spender):
        return self.allowances.get(owner, {}).get(spender, 0)

    def approve(self, owner, spender, amount):
        """
        Sets the allowance of spender over owner's shares.

        Args:
            owner: Address granting the allowance
            spender: Address allowed to move the shares
            amount: Allowance amount (zero revokes)
        """
        if amount < 0:
            raise InvalidAmount("Allowance cannot be negative")
        self.allowances.setdefault(owner, {})[spender] = amount
        return True

    def check_allowance(self, owner, spender, amount):
        """Raises if spender may not move amount of owner's shares."""
        if owner == spender:
            return
        if self.allowance(owner, spender) < amount:
            raise InsufficientAllowance(
                f"{spender} allowance over {owner} is {self.allowance(owner, spender)}, needs {amount}"
            )

    def spend_allowance(self, owner, spender, amount):
        """Consumes allowance; owners acting for themselves spend nothing."""
        if owner == spender:
            return
        self.check_allowance(owner, spender, amount)
        self.allowances[owner][spender] -= amount

    def check_balance(self, holder, amount):
        if amount <= 0:
            raise InvalidAmount("Amount must be greater than zero")
        if self.balance_of(holder) < amount:
            raise InsufficientBalance(
                f"{holder} holds {self.balance_of(holder)} shares, needs {amount}"
            )

    def transfer_shares(self, sender, recipient, amount):
        """
        Moves shares from sender to recipient.

        Returns:
            True if successful
        """
        self.check_balance(sender, amount)

        self.balances[sender] = self.balances[sender] - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        return True

    def mint_shares(self, recipient, amount):
        """
        Mints new shares to the recipient.

        Returns:
            True if successful
        """
        if amount <= 0:
            raise InvalidAmount("Amount must be greater than zero")

        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        self.total_supply += amount
        logger.debug("minted %s shares to %s", amount, recipient)
        return True

    def burn_shares(self, from_account, amount):
        """
        Burns shares from the given holder.

        Returns:
            True if successful
        """
        self.check_balance(from_account, amount)

        self.balances[from_account] = self.balances[from_account] - amount
        self.total_supply -= amount
        logger.debug("burned %s shares from %s", amount, from_account)
        return True

    def move_all(self, old_holder, new_holder):
        """Moves an entire balance, used when the beneficiary role changes hands."""
        amount = self.balance_of(old_holder)
        if amount > 0:
            self.transfer_shares(old_holder, new_holder, amount)
        return amount
