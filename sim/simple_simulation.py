"""
Simple simulation for the Yield Skimming Vault model.

Walks through a deposit, a rate rise, a partial pullback and a full drawdown,
printing how the beneficiary's redeemable ceiling follows vault solvency.
"""

import logging

from skim_model.economic_model import YieldSkimmingEconomicModel


def print_state(model, label):
    state = model.get_system_state()
    print(f"\n{label}")
    print(f"  Rate: {state['rate']:.4f}")
    print(f"  Vault value: {state['vault_value']:.4f}")
    print(f"  User debt: {state['user_debt']:.4f}")
    print(f"  Beneficiary debt: {state['beneficiary_debt']:.4f}")
    print(f"  Beneficiary max redeemable: {state['beneficiary_max_redeem']:.4f}")
    print(f"  Insolvent: {state['insolvent']}")


def run_basic_simulation(enable_burning=True):
    model = YieldSkimmingEconomicModel(initial_rate=1.0, enable_burning=enable_burning)

    print(f"=== Burning {'enabled' if enable_burning else 'disabled'} ===")
    model.deposit("alice", 60.0)
    model.deposit("bob", 40.0)
    print_state(model, "After deposits of 100 at rate 1.0")

    model.update_rate(1.2)
    profit, loss = model.report()
    print_state(model, f"Rate 1.2, report: profit={model.from_units(profit):.4f}")

    model.update_rate(1.15)
    print_state(model, "Rate 1.15, no report yet")

    model.update_rate(0.95)
    print_state(model, "Rate 0.95, vault below user debt")

    beneficiary = model.vault.beneficiary
    try:
        model.vault.redeem(beneficiary, model.to_units(1.0), beneficiary, beneficiary)
        print("\nBeneficiary redeemed 1 share")
    except ValueError as e:
        print(f"\nBeneficiary redemption rejected: {e}")

    assets = model.redeem_all("alice")
    print(f"Alice redeemed for {model.from_units(assets):.4f} raw collateral")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run_basic_simulation(enable_burning=True)
    print()
    run_basic_simulation(enable_burning=False)
