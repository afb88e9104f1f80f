"""
Economic Model for the Yield Skimming Vault.

Combines the vault, a settable rate feed and a collateral pool into one model
that can be driven through scenarios: deposits, withdrawals, random rate walks,
periodic reports and beneficiary redemptions. History series are kept for
plotting and analysis.
"""

import logging

import matplotlib.pyplot as plt
import numpy as np

from .collateral_pool import CollateralPool
from .config import ONE_DAY, RATE_DECIMALS, VaultConfig
from .errors import VaultError
from .rate_reader import RateFeed
from .vault import YieldSkimmingVault

logger = logging.getLogger(__name__)

MANAGEMENT = "management"
KEEPER = "keeper"
BENEFICIARY = "beneficiary"


class YieldSkimmingEconomicModel:
    """
    Complete model of a yield-skimming vault.
    Combines all components and provides simulation capabilities.
    """

    def __init__(self, initial_rate=1.0, enable_burning=True, asset_decimals=18, rate_decimals=RATE_DECIMALS):
        self.asset_decimals = asset_decimals
        self.unit = 10**asset_decimals

        # Set up external collaborators
        self.rate_feed = RateFeed(decimals=rate_decimals)
        self.rate_feed.set_rate_from_float(initial_rate)
        self.collateral_pool = CollateralPool()

        self.vault = YieldSkimmingVault(
            VaultConfig(
                management=MANAGEMENT,
                keeper=KEEPER,
                beneficiary=BENEFICIARY,
                enable_burning=enable_burning,
            ),
            rate_reader=self.rate_feed,
            collateral_pool=self.collateral_pool,
        )

        # History tracking for simulations
        self.time_history = []
        self.rate_history = []
        self.vault_value_history = []
        self.user_debt_history = []
        self.beneficiary_debt_history = []
        self.beneficiary_max_redeem_history = []
        self.insolvent_history = []
        self.beneficiary_redeemed = 0
        self._update_history()

    # --- Conversions between token units and floats ---

    def to_units(self, amount):
        return int(round(amount * self.unit))

    def from_units(self, amount):
        return amount / self.unit

    # --- Actions ---

    def deposit(self, depositor, amount):
        """
        Deposits a human-readable amount of raw collateral.

        Returns:
            Shares minted
        """
        shares = self.vault.deposit(depositor, self.to_units(amount), depositor)
        self._update_history()
        return shares

    def redeem_all(self, holder):
        """Redeems every share the holder is currently allowed to redeem."""
        shares = self.vault.max_redeem(holder)
        if shares == 0:
            return 0
        assets = self.vault.redeem(holder, shares, holder, holder)
        if holder == self.vault.beneficiary:
            self.beneficiary_redeemed += shares
        self._update_history()
        return assets

    def update_rate(self, new_rate):
        """Moves the exchange rate to a human-readable value such as 1.05."""
        self.rate_feed.set_rate_from_float(new_rate)
        self._update_history()

    def report(self):
        profit, loss = self.vault.report(KEEPER)
        self._update_history()
        return profit, loss

    def update_time(self, seconds):
        self.vault.advance_time(seconds)

    def get_system_state(self):
        """
        Returns the current state of the vault in human-readable units.
        """
        state = self.vault.get_vault_state()
        return {
            'time': self.vault.current_time,
            'rate': state['rate'] / 10**state['rate_decimals'],
            'vault_value': self.from_units(state['vault_value']),
            'user_debt': self.from_units(state['user_debt_value']),
            'beneficiary_debt': self.from_units(state['beneficiary_debt_value']),
            'excess_value': self.from_units(state['excess_value']),
            'beneficiary_max_redeem': self.from_units(state['beneficiary_max_redeem']),
            'insolvent': state['insolvent'],
        }

    def _update_history(self):
        """Updates history tracking for simulations."""
        state = self.get_system_state()

        self.time_history.append(state['time'] / ONE_DAY)
        self.rate_history.append(state['rate'])
        self.vault_value_history.append(state['vault_value'])
        self.user_debt_history.append(state['user_debt'])
        self.beneficiary_debt_history.append(state['beneficiary_debt'])
        self.beneficiary_max_redeem_history.append(state['beneficiary_max_redeem'])
        self.insolvent_history.append(state['insolvent'])

    def simulate_rate_scenario(self, days, rate_drift=0.0, rate_volatility=0.01,
                               report_interval_hours=24, beneficiary_redeems=False,
                               plot_results=True, seed=None):
        """
        Runs a simulation with random exchange-rate movements.

        Args:
            days: Number of days to simulate
            rate_drift: Daily drift of log returns (staking yield is positive)
            rate_volatility: Daily standard deviation of log returns
            report_interval_hours: Hours between keeper reports
            beneficiary_redeems: Whether the beneficiary redeems after each report
            plot_results: Whether to plot the results
            seed: Seed for the random generator

        Returns:
            Dictionary with simulation results
        """
        if days <= 0:
            raise ValueError("Days must be greater than zero")
        if report_interval_hours <= 0:
            raise ValueError("Report interval must be greater than zero")

        rng = np.random.default_rng(seed)
        steps = days * 24  # hourly steps
        step_size = ONE_DAY // 24

        hourly_drift = rate_drift / 24
        hourly_volatility = rate_volatility / np.sqrt(24)  # Scale to hourly
        log_returns = rng.normal(hourly_drift, hourly_volatility, steps)

        rate = self.rate_feed.as_float()
        reports = 0
        skipped = 0
        max_excess_seen = 0.0

        for i in range(steps):
            rate *= float(np.exp(log_returns[i]))
            self.update_time(step_size)
            self.update_rate(rate)
            max_excess_seen = max(max_excess_seen, self.get_system_state()['excess_value'])

            if (i + 1) % report_interval_hours == 0:
                self.report()
                reports += 1
                if beneficiary_redeems:
                    try:
                        if self.redeem_all(self.vault.beneficiary) == 0:
                            skipped += 1
                    except VaultError as e:
                        logger.warning("beneficiary redemption failed: %s", e)
                        skipped += 1

        if plot_results:
            self.plot_history()

        final_state = self.get_system_state()
        logger.info("simulation finished after %s days, %s reports", days, reports)

        return {
            'final_rate': final_state['rate'],
            'final_vault_value': final_state['vault_value'],
            'final_user_debt': final_state['user_debt'],
            'final_beneficiary_debt': final_state['beneficiary_debt'],
            'beneficiary_redeemed': self.from_units(self.beneficiary_redeemed),
            'max_excess_seen': max_excess_seen,
            'reports': reports,
            'skipped_redemptions': skipped,
            'insolvent_fraction': float(np.mean(self.insolvent_history)),
        }

    def plot_history(self):
        fig, axs = plt.subplots(4, 1, figsize=(12, 16), sharex=True)

        axs[0].plot(self.time_history, self.rate_history)
        axs[0].set_title('Exchange Rate')
        axs[0].set_ylabel('Rate')

        axs[1].plot(self.time_history, self.vault_value_history, label='Vault value')
        axs[1].plot(self.time_history, self.user_debt_history, label='User debt')
        axs[1].set_title('Vault Value vs User Debt')
        axs[1].set_ylabel('Value')
        axs[1].legend()

        axs[2].plot(self.time_history, self.beneficiary_debt_history, label='Beneficiary debt')
        axs[2].plot(self.time_history, self.beneficiary_max_redeem_history, label='Max redeemable')
        axs[2].set_title('Beneficiary Claim')
        axs[2].set_ylabel('Value')
        axs[2].legend()

        axs[3].plot(self.time_history, np.asarray(self.insolvent_history, dtype=float))
        axs[3].set_title('Insolvent')
        axs[3].set_ylabel('Flag')
        axs[3].set_xlabel('Days')

        plt.tight_layout()
        plt.show()
        return fig
