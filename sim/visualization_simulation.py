"""
Visualization simulation for SimVault.

This script runs a month of hourly stable price moves and plots the stable
price, collateral ratio, supply and vault collateral.
"""

import sys
import os

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from simvault.economic_model import VaultEconomicModel
from simvault.log import setup_logger


def run_visualization_simulation():
    setup_logger()

    model = VaultEconomicModel(initial_stable_price=1.0, initial_gov_price=2.0)

    print("\nRunning simulation with visualizations...")
    results = model.simulate_market_scenario(30, price_volatility=0.03, seed=7, plot_results=True)

    print("\nSimulation Results:")
    for key, value in results.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    run_visualization_simulation()
