"""
Yield Skimming Vault Model.

This module wires the value-debt engine into a pooled-fund vault whose
collateral is a non-rebasing, yield-bearing token. Depositors are owed the
value they put in; everything the exchange rate adds on top is skimmed to a
single beneficiary through periodic reports.

The vault is responsible for:
1. Deposit and withdrawal hooks that keep user debt equal to net value deposited
2. Periodic reports that mint profit to, or burn losses from, the beneficiary
3. Gating every beneficiary redemption or transfer against live solvency
4. Delayed, cancellable rotation of the beneficiary address
5. Role checks for reporting, governance toggles and shutdown

Generic share pricing is kept deliberately small: one share per value unit at
issuance, face-value conversion while the vault covers user debt and pro-rata
conversion when it does not.
"""

import logging

from .collateral_pool import CollateralPool
from .config import MAX_UINT256, VaultConfig
from .debt_ledger import ValueDebtLedger
from .errors import (
    BeneficiaryRestricted,
    InvalidAddress,
    InvalidAmount,
    Unauthorized,
    VaultInsolvent,
    VaultShutdown,
)
from .events import (
    BurningToggled,
    Deposited,
    EventLog,
    RecipientChangeCancelled,
    RecipientChangeProposed,
    RecipientChanged,
    Shutdown,
    Transferred,
    Withdrawn,
)
from .rate_reader import RateFeed
from .reconciler import Reconciler
from .redemption_gate import RedemptionGate
from .rotation import RecipientRotation
from .share_token import ShareToken
from .value_converter import Rounding, mul_div, raw_to_value, validate_rate, value_to_raw, vault_value

logger = logging.getLogger(__name__)


def _require_address(address, label):
    if not address:
        raise InvalidAddress(f"{label} cannot be empty")


def _require_positive(amount, label="Amount"):
    if amount is None or amount <= 0:
        raise InvalidAmount(f"{label} must be greater than zero")


class YieldSkimmingVault:
    """
    Value-debt accounting and insolvency-gated redemption engine.

    All public operations take the acting address as their first argument and
    either complete fully or raise before touching any state.
    """

    def __init__(self, config: VaultConfig, rate_reader=None, collateral_pool=None):
        _require_address(config.management, "Management")
        _require_address(config.beneficiary, "Beneficiary")

        self.config = config

        # Roles
        self.management = config.management
        self.keeper = config.keeper
        self.emergency_admin = config.emergency_admin

        # External collaborators
        self.rate_reader = rate_reader if rate_reader is not None else RateFeed()
        self.collateral_pool = collateral_pool if collateral_pool is not None else CollateralPool()

        # Engine state
        self.share_token = ShareToken()
        self.ledger = ValueDebtLedger(start_time=config.start_time)
        self.events = EventLog(maxlen=config.event_log_maxlen)
        self.rotation = RecipientRotation(config.beneficiary, config.recipient_change_cooldown)
        self.reconciler = Reconciler(self.ledger, self.share_token, self.events)
        self.gate = RedemptionGate(self.ledger, self.share_token)

        self.enable_burning = config.enable_burning
        self.is_shutdown = False

        # Simulation clock
        self.current_time = config.start_time

    # --- Collaborator reads ---

    @property
    def beneficiary(self):
        return self.rotation.beneficiary

    def _read_rate(self):
        rate, decimals = self.rate_reader.read()
        validate_rate(rate, decimals)
        return rate, decimals

    def _raw_balance(self):
        return self.collateral_pool.raw_collateral_balance()

    def _holds_shares(self, address):
        return self.share_token.balance_of(address) > 0

    def _require_role(self, caller, *roles):
        if caller is None or caller not in [r for r in roles if r]:
            raise Unauthorized(f"{caller} is not authorized for this operation")

    # --- Ledger views ---

    def user_debt_value(self):
        return self.ledger.user_debt_value

    def beneficiary_debt_value(self):
        return self.ledger.beneficiary_debt_value

    def total_assets(self):
        """Raw collateral controlled by the vault."""
        return self._raw_balance()

    def total_supply(self):
        return self.share_token.total_supply

    def balance_of(self, holder):
        return self.share_token.balance_of(holder)

    def current_vault_value(self):
        rate, decimals = self._read_rate()
        return vault_value(self._raw_balance(), rate, decimals)

    def is_insolvent(self):
        """True while realizable value is below depositor principal."""
        return self.current_vault_value() < self.ledger.user_debt_value

    def excess_value(self):
        return max(0, self.current_vault_value() - self.ledger.user_debt_value)

    # --- Share pricing ---

    def _covers_user_debt(self, raw_balance, rate, decimals):
        return vault_value(raw_balance, rate, decimals) >= self.ledger.user_debt_value

    def _pricing_supply(self):
        """
        Share supply the collateral is split over while insolvent. With burning
        enabled the beneficiary's shares are a first-loss buffer, so only user
        shares take part until the next report burns the beneficiary's.
        """
        supply = self.share_token.total_supply
        if self.enable_burning:
            supply -= self.share_token.balance_of(self.beneficiary)
        return supply

    def _to_shares(self, assets, rounding, raw_balance, rate, decimals):
        supply = self._pricing_supply()
        if supply <= 0 or raw_balance == 0 or self._covers_user_debt(raw_balance, rate, decimals):
            return raw_to_value(assets, rate, decimals, rounding)
        return mul_div(assets, supply, raw_balance, rounding)

    def _to_assets(self, shares, rounding, raw_balance, rate, decimals):
        supply = self._pricing_supply()
        if supply <= 0 or self._covers_user_debt(raw_balance, rate, decimals):
            return min(value_to_raw(shares, rate, decimals, rounding), raw_balance)
        return mul_div(shares, raw_balance, supply, rounding)

    def convert_to_shares(self, assets):
        rate, decimals = self._read_rate()
        return self._to_shares(assets, Rounding.FLOOR, self._raw_balance(), rate, decimals)

    def convert_to_assets(self, shares):
        rate, decimals = self._read_rate()
        return self._to_assets(shares, Rounding.FLOOR, self._raw_balance(), rate, decimals)

    def preview_deposit(self, assets):
        rate, decimals = self._read_rate()
        return raw_to_value(assets, rate, decimals, Rounding.FLOOR)

    def preview_mint(self, shares):
        rate, decimals = self._read_rate()
        return value_to_raw(shares, rate, decimals, Rounding.CEIL)

    def preview_withdraw(self, assets):
        rate, decimals = self._read_rate()
        return self._to_shares(assets, Rounding.CEIL, self._raw_balance(), rate, decimals)

    def preview_redeem(self, shares):
        rate, decimals = self._read_rate()
        return self._to_assets(shares, Rounding.FLOOR, self._raw_balance(), rate, decimals)

    # --- Limits ---

    def max_deposit(self, receiver):
        if self.is_shutdown or receiver == self.beneficiary or self.is_insolvent():
            return 0
        return MAX_UINT256

    def max_mint(self, receiver):
        return self.max_deposit(receiver)

    def max_redeem(self, owner):
        """
        Beneficiary redemptions are capped by the redemption gate; everyone
        else can redeem their whole balance.
        """
        if owner != self.beneficiary:
            return self.share_token.balance_of(owner)
        rate, decimals = self._read_rate()
        return self.gate.max_shares(owner, self._raw_balance(), rate, decimals, self.enable_burning)

    def max_withdraw(self, owner):
        shares = self.max_redeem(owner)
        if shares == 0:
            return 0
        return self.preview_redeem(shares)

    # --- Deposits ---

    def _check_can_deposit(self, receiver, raw_balance, rate, decimals):
        if self.is_shutdown:
            raise VaultShutdown("Vault is shut down, deposits are disabled")
        if receiver == self.beneficiary:
            raise BeneficiaryRestricted("Beneficiary cannot receive deposit shares")
        if vault_value(raw_balance, rate, decimals) < self.ledger.user_debt_value:
            raise VaultInsolvent("Deposits are disabled while the vault is insolvent")

    def deposit(self, caller, assets, receiver):
        """
        Deposits raw collateral and mints one share per value unit credited.

        Args:
            caller: Address supplying the collateral
            assets: Raw collateral amount
            receiver: Address receiving the shares

        Returns:
            Shares minted
        """
        _require_address(caller, "Caller")
        _require_address(receiver, "Receiver")
        _require_positive(assets, "Deposit amount")

        rate, decimals = self._read_rate()
        raw_balance = self._raw_balance()
        self._check_can_deposit(receiver, raw_balance, rate, decimals)

        # Value credited rounds down
        value = raw_to_value(assets, rate, decimals, Rounding.FLOOR)
        if value == 0:
            raise InvalidAmount(f"Deposit of {assets} is worth zero value at the current rate")

        self._credit_deposit(caller, receiver, assets, value)
        return value

    def mint(self, caller, shares, receiver):
        """
        Mints an exact number of shares, pulling the raw collateral they cost.

        Returns:
            Raw collateral pulled
        """
        _require_address(caller, "Caller")
        _require_address(receiver, "Receiver")
        _require_positive(shares, "Mint amount")

        rate, decimals = self._read_rate()
        raw_balance = self._raw_balance()
        self._check_can_deposit(receiver, raw_balance, rate, decimals)

        # Raw pulled rounds up
        assets = value_to_raw(shares, rate, decimals, Rounding.CEIL)
        self._credit_deposit(caller, receiver, assets, shares)
        return assets

    def _credit_deposit(self, caller, receiver, assets, value):
        self.collateral_pool.receive(assets)
        self.ledger.credit_user(value)
        self.share_token.mint_shares(receiver, value)

        logger.debug("deposit: %s raw -> %s shares for %s", assets, value, receiver)
        self.events.emit(Deposited(self.current_time, caller, receiver, assets, value))

    # --- Withdrawals ---

    def withdraw(self, caller, assets, receiver, owner):
        """
        Withdraws an exact amount of raw collateral, burning the shares it costs.

        Returns:
            Shares burned
        """
        _require_address(caller, "Caller")
        _require_address(receiver, "Receiver")
        _require_address(owner, "Owner")
        _require_positive(assets, "Withdraw amount")

        rate, decimals = self._read_rate()
        raw_balance = self._raw_balance()

        # Shares burned round up
        shares = self._to_shares(assets, Rounding.CEIL, raw_balance, rate, decimals)
        self._exit(caller, receiver, owner, assets, shares, raw_balance, rate, decimals)
        return shares

    def redeem(self, caller, shares, receiver, owner):
        """
        Burns an exact number of shares for the raw collateral they are worth.

        Returns:
            Raw collateral paid out
        """
        _require_address(caller, "Caller")
        _require_address(receiver, "Receiver")
        _require_address(owner, "Owner")
        _require_positive(shares, "Redeem amount")

        rate, decimals = self._read_rate()
        raw_balance = self._raw_balance()

        # Raw paid out rounds down
        assets = self._to_assets(shares, Rounding.FLOOR, raw_balance, rate, decimals)
        if assets == 0:
            raise InvalidAmount(f"Redeeming {shares} shares would return zero assets")
        self._exit(caller, receiver, owner, assets, shares, raw_balance, rate, decimals)
        return assets

    def _exit(self, caller, receiver, owner, assets, shares, raw_balance, rate, decimals):
        """
        Shared tail of withdraw and redeem: checks, then burns shares and pays out.

        User debt is debited by the shares burned, i.e. their face value. While
        solvent that equals the paid-out raw amount converted at the current
        rate (rounded up). While insolvent the converted amount is smaller than
        the shares burned; debiting the converted amount instead would leave the
        remaining holders with principal no shares stand behind, so the ledger
        keeps tracking the user share supply.
        """
        self.share_token.check_balance(owner, shares)
        self.share_token.check_allowance(owner, caller, shares)
        is_beneficiary = owner == self.beneficiary
        if is_beneficiary:
            self.gate.enforce(shares, owner, raw_balance, rate, decimals, self.enable_burning)
        self.collateral_pool.check_send(assets)

        self.share_token.spend_allowance(owner, caller, shares)
        if is_beneficiary:
            self.ledger.release_beneficiary(shares)
        else:
            self.ledger.debit_user(shares)
        self.share_token.burn_shares(owner, shares)
        self.collateral_pool.send(assets)

        logger.debug("withdraw: %s shares of %s -> %s raw to %s", shares, owner, assets, receiver)
        self.events.emit(Withdrawn(self.current_time, caller, receiver, owner, assets, shares))

    # --- Share transfers ---

    def approve(self, caller, spender, amount):
        _require_address(caller, "Owner")
        _require_address(spender, "Spender")
        return self.share_token.approve(caller, spender, amount)

    def transfer(self, caller, to, amount):
        _require_address(caller, "Sender")
        self._transfer(caller, to, amount)
        return True

    def transfer_from(self, caller, from_, to, amount):
        _require_address(caller, "Caller")
        _require_address(from_, "Sender")
        self.share_token.check_allowance(from_, caller, amount)
        self._transfer(from_, to, amount)
        self.share_token.spend_allowance(from_, caller, amount)
        return True

    def _transfer(self, sender, recipient, amount):
        """
        Moves shares between holders. Shares leaving the beneficiary are gated
        and their value is reassigned from beneficiary debt to user debt.
        """
        _require_address(recipient, "Recipient")
        _require_positive(amount)
        if recipient == self.beneficiary:
            raise BeneficiaryRestricted("Shares cannot be transferred to the beneficiary")
        self.share_token.check_balance(sender, amount)

        if sender == self.beneficiary:
            rate, decimals = self._read_rate()
            self.gate.enforce(amount, sender, self._raw_balance(), rate, decimals, self.enable_burning)
            self.ledger.reassign_to_user(amount)

        self.share_token.transfer_shares(sender, recipient, amount)
        self.events.emit(Transferred(self.current_time, sender, recipient, amount))

    # --- Reporting ---

    def report(self, caller):
        """
        Books profit or loss since the last report against the beneficiary.

        Returns:
            (profit, loss) in value units

        Raises:
            Unauthorized: If caller is neither keeper nor management
            CollateralUnavailable: If the raw balance cannot be read
            RotationInconsistent: If a pending recipient change is broken
        """
        self._require_role(caller, self.keeper, self.management)

        raw_balance = self._raw_balance()
        rate, decimals = self._read_rate()
        return self.reconciler.report(
            raw_balance, rate, decimals,
            beneficiary=self.beneficiary,
            burning_enabled=self.enable_burning,
            now=self.current_time,
            rotation_consistent=self.rotation.is_consistent(self._holds_shares),
        )

    # --- Recipient rotation ---

    def propose_recipient_change(self, caller, new_recipient):
        self._require_role(caller, self.management)
        self.rotation.propose(new_recipient, self.current_time, self._holds_shares)
        self.events.emit(RecipientChangeProposed(
            self.current_time, self.beneficiary, new_recipient, self.rotation.ready_at()
        ))

    def cancel_recipient_change(self, caller):
        self._require_role(caller, self.management)
        cancelled = self.rotation.cancel()
        self.events.emit(RecipientChangeCancelled(self.current_time, cancelled))

    def finalize_recipient_change(self, caller=None):
        """
        Hands the beneficiary role, its shares and its accrued debt to the
        pending recipient. Callable by anyone once the cooldown has elapsed;
        the caller is recorded on the RecipientChanged event.
        """
        previous, current = self.rotation.finalize(self.current_time, self._holds_shares)
        moved = self.share_token.move_all(previous, current)
        self.events.emit(RecipientChanged(self.current_time, previous, current, moved, caller))
        return current

    # --- Governance ---

    def set_enable_burning(self, caller, enabled):
        self._require_role(caller, self.management)
        self.enable_burning = bool(enabled)
        logger.info("burning %s", "enabled" if self.enable_burning else "disabled")
        self.events.emit(BurningToggled(self.current_time, self.enable_burning))

    def set_keeper(self, caller, keeper):
        self._require_role(caller, self.management)
        _require_address(keeper, "Keeper")
        self.keeper = keeper

    def shutdown(self, caller):
        """Stops new deposits. Withdrawals and reports keep working."""
        self._require_role(caller, self.management, self.emergency_admin)
        if not self.is_shutdown:
            self.is_shutdown = True
            logger.info("vault shut down by %s", caller)
            self.events.emit(Shutdown(self.current_time, caller))

    # --- Simulation ---

    def advance_time(self, seconds):
        if seconds < 0:
            raise InvalidAmount("Time cannot move backwards")
        self.current_time += seconds

    def get_vault_state(self):
        """
        Returns the current state of the vault.

        Returns:
            Dictionary with vault state
        """
        rate, decimals = self._read_rate()
        raw_balance = self._raw_balance()
        current_value = vault_value(raw_balance, rate, decimals)
        return {
            'rate': rate,
            'rate_decimals': decimals,
            'raw_balance': raw_balance,
            'vault_value': current_value,
            'user_debt_value': self.ledger.user_debt_value,
            'beneficiary_debt_value': self.ledger.beneficiary_debt_value,
            'excess_value': max(0, current_value - self.ledger.user_debt_value),
            'total_supply': self.share_token.total_supply,
            'beneficiary_shares': self.share_token.balance_of(self.beneficiary),
            'beneficiary_max_redeem': self.gate.max_shares(
                self.beneficiary, raw_balance, rate, decimals, self.enable_burning
            ),
            'insolvent': current_value < self.ledger.user_debt_value,
            'enable_burning': self.enable_burning,
            'shutdown': self.is_shutdown,
        }
