"""
Visualization simulation for the Yield Skimming Vault model.

Runs a random exchange-rate walk with daily reports and plots vault value,
user debt and the beneficiary's claim against its redeemable ceiling.
"""

import logging

import numpy as np

from skim_model.economic_model import YieldSkimmingEconomicModel


def run_visualization_simulation(seed=7):
    model = YieldSkimmingEconomicModel(initial_rate=1.0, enable_burning=True)
    rng = np.random.default_rng(seed)

    print("Creating initial deposits...")
    for i in range(10):
        amount = float(rng.uniform(5.0, 50.0))
        model.deposit(f"user{i}", amount)
        print(f"user{i}: {amount:.2f}")

    print("\nRunning simulation with visualizations...")
    results = model.simulate_rate_scenario(
        90,
        rate_drift=0.0001,
        rate_volatility=0.01,
        report_interval_hours=24,
        beneficiary_redeems=True,
        plot_results=True,
        seed=seed,
    )

    print("\nSimulation Results:")
    for key, value in results.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    run_visualization_simulation()
