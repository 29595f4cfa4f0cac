"""
Simulation Example for SimVault.

This script compares how the collateral ratio controller reacts to calm,
volatile and depegged markets, and repeats the calm run with a 6-decimal
collateral token.
"""

import sys
import os

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from simvault.economic_model import VaultEconomicModel
from simvault.log import setup_logger

SCENARIOS = [
    # name, initial stable price, daily volatility, collateral decimals
    ("calm", 1.0, 0.005, 18),
    ("volatile", 1.0, 0.05, 18),
    ("depegged low", 0.9, 0.01, 18),
    ("depegged high", 1.1, 0.01, 18),
    ("calm, 6-decimal collateral", 1.0, 0.005, 6),
]


def run_scenarios(days=14, seed=42):
    logger = setup_logger("simvault.sim")

    results = {}
    for name, price, volatility, decimals in SCENARIOS:
        model = VaultEconomicModel(initial_stable_price=price, collateral_decimals=decimals)
        results[name] = model.simulate_market_scenario(days, price_volatility=volatility,
                                                       seed=seed, plot_results=False)
        logger.info("Finished scenario '%s'", name)

    print(f"\n{'Scenario':<28}{'Price':>8}{'CR':>8}{'CR min':>8}{'CR max':>8}{'Buybacks':>10}{'ReColl':>8}")
    for name, r in results.items():
        print(f"{name:<28}{r['final_stable_price']:>8.4f}{r['final_collateral_ratio']:>8}"
              f"{r['min_collateral_ratio_seen']:>8}{r['max_collateral_ratio_seen']:>8}"
              f"{r['buybacks']:>10}{r['recollateralizations']:>8}")
    return results


if __name__ == "__main__":
    run_scenarios()
