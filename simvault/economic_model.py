"""
Economic Model for SimVault.

This module wires a full deployment together with a few actors and drives it
through simulated market conditions. The stable pool price follows a
log-normal random walk; after every move the owner runs the collateral ratio
feedback and an arbitrageur buys back SimGov or re-collateralizes the vault
whenever the ratio allows it.
"""

import logging

import matplotlib.pyplot as plt
import numpy as np

from .deploy import deploy_system
from .errors import VaultError
from .fixed_point import CR_SCALE, WAD

logger = logging.getLogger(__name__)

MINTER = "minter"
HOLDER = "holder"
ARBITRAGEUR = "arbitrageur"

# Float prices are rounded to 9 decimals before entering integer reserves
PRICE_PRECISION = 10 ** 9


class VaultEconomicModel:
    """
    Complete economic model of the SimVault system.
    Combines all components and provides simulation capabilities.
    """

    def __init__(self, initial_stable_price=1.0, initial_gov_price=2.0, pool_depth=1_000_000,
                 initial_mint=100_000, settings=None, collateral_decimals=None, owner="deployer"):
        self.deployment = deploy_system(owner, settings, collateral_decimals)
        self.owner = owner

        self.vault = self.deployment.vault
        self.sim_stable = self.deployment.sim_stable
        self.sim_gov = self.deployment.sim_gov
        self.collateral_token = self.deployment.collateral_token

        # One whole token in each ledger's units
        self.stable_unit = 10 ** self.sim_stable.decimals
        self.gov_unit = 10 ** self.sim_gov.decimals
        self.collateral_unit = 10 ** self.collateral_token.decimals

        self.current_time = 0

        # Pool depth in stable (and gov) tokens; the collateral side follows the price
        self.pool_depth = pool_depth
        self.set_gov_price(initial_gov_price)
        self.set_stable_price(initial_stable_price)

        self.buybacks = 0
        self.recollateralizations = 0

        self._seed_actors(initial_mint)

        # History tracking for simulations
        self.price_history = []
        self.collateral_ratio_history = []
        self.stable_supply_history = []
        self.vault_collateral_history = []
        self._update_history()

    # --- Actors ---

    def fund(self, account, collateral=0, gov=0):
        """
        Gives an account whole tokens of collateral (from the faucet) and
        SimGov (a genesis allocation, issued as the vault).
        """
        if collateral > 0:
            self.collateral_token.mint(self.owner, account, collateral * self.collateral_unit)
        if gov > 0:
            self.sim_gov.mint(self.vault.address, account, gov * self.gov_unit)

    def _seed_actors(self, initial_mint):
        self.fund(MINTER, collateral=initial_mint, gov=initial_mint)
        self.fund(ARBITRAGEUR, collateral=initial_mint, gov=initial_mint)

        collateral_amount = initial_mint * self.collateral_unit
        self.collateral_token.approve(MINTER, self.vault.address, collateral_amount)
        self.vault.mint_stable(MINTER, collateral_amount, self.gov_unit)

    # --- Market ---

    def set_stable_price(self, price):
        """Re-balances the stable pool so one stable costs `price` collateral."""
        stable_reserve = self.pool_depth * self.stable_unit
        collateral_reserve = self.pool_depth * self.collateral_unit * round(price * PRICE_PRECISION) // PRICE_PRECISION
        self.deployment.sim_stable_pair.set_reserves(stable_reserve, collateral_reserve, self.current_time)

    def set_gov_price(self, price):
        """Re-balances the gov pool so one SimGov costs `price` collateral."""
        collateral_reserve = self.pool_depth * self.collateral_unit * round(price * PRICE_PRECISION) // PRICE_PRECISION
        gov_reserve = self.pool_depth * self.gov_unit
        self.deployment.sim_gov_pair.set_reserves(collateral_reserve, gov_reserve, self.current_time)

    def update_time(self, seconds):
        self.current_time += seconds

    def _arbitrage(self):
        """Takes whichever of buyback or re-collateralization the ratio allows."""
        vault = self.vault
        try:
            if vault.collateral_ratio > vault.target_collateral_ratio:
                gov_amount = min(self.sim_gov.balance_of(ARBITRAGEUR), 100 * self.gov_unit)
                if gov_amount > 0:
                    vault.buyback_sim_gov(ARBITRAGEUR, gov_amount)
                    self.buybacks += 1
            elif vault.collateral_ratio < vault.target_collateral_ratio:
                shortfall = vault.get_shortfall() * self.collateral_unit // WAD
                amount = min(shortfall, self.collateral_token.balance_of(ARBITRAGEUR),
                             1000 * self.collateral_unit)
                if amount > 0:
                    self.collateral_token.approve(ARBITRAGEUR, vault.address, amount)
                    vault.re_collateralize(ARBITRAGEUR, amount)
                    self.recollateralizations += 1
        except VaultError as e:
            logger.debug("Arbitrage skipped: %s", e.reason)

    # --- State ---

    def get_system_state(self):
        """
        Returns the current state of the system.

        Returns:
            Dictionary with system state
        """
        stable_price = self.vault.get_token_price(self.deployment.sim_stable_pair, self.sim_stable.address)
        return {
            'stable_price': stable_price / WAD,
            'collateral_ratio': self.vault.collateral_ratio,
            'total_stable_supply': self.sim_stable.total_supply / self.stable_unit,
            'vault_collateral': self.vault.vault_collateral_balance() / self.collateral_unit,
            'shortfall': self.vault.get_shortfall() / WAD,
        }

    def _update_history(self):
        """Updates history tracking for simulations."""
        state = self.get_system_state()
        self.price_history.append(state['stable_price'])
        self.collateral_ratio_history.append(state['collateral_ratio'])
        self.stable_supply_history.append(state['total_stable_supply'])
        self.vault_collateral_history.append(state['vault_collateral'])

    def simulate_market_scenario(self, days, price_volatility=0.01, seed=None, plot_results=True):
        """
        Runs a simulation with random stable price movements.

        Args:
            days: Number of days to simulate
            price_volatility: Daily volatility of the stable price (std of log returns)
            seed: Seed for numpy's random generator
            plot_results: Whether to plot the results

        Returns:
            Dictionary with simulation results
        """
        steps = days * 24  # hourly steps
        hourly_volatility = price_volatility / np.sqrt(24)

        if seed is not None:
            np.random.seed(seed)
        log_returns = np.random.normal(0, hourly_volatility, steps)
        time_points = np.zeros(steps)

        price = self.price_history[-1]
        for i in range(steps):
            price *= np.exp(log_returns[i])
            self.set_stable_price(float(price))

            self.vault.adjust_collateral_ratio(self.owner)
            self._arbitrage()

            # Daily transfer between holders; the transfer hook re-prices the ratio too
            if i % 24 == 23:
                amount = self.sim_stable.balance_of(MINTER) // 100
                if amount > 0:
                    self.sim_stable.transfer(MINTER, HOLDER, amount)

            self.update_time(3600)
            self._update_history()
            time_points[i] = self.current_time / (24 * 60 * 60)

        if plot_results:
            fig, axs = plt.subplots(4, 1, figsize=(12, 16), sharex=True)

            axs[0].plot(time_points, self.price_history[-steps:])
            axs[0].axhline(1.0, color='grey', linestyle='--')
            axs[0].set_title('SimStable Price')
            axs[0].set_ylabel('Collateral')

            axs[1].plot(time_points, np.array(self.collateral_ratio_history[-steps:]) / CR_SCALE)
            axs[1].axhline(self.vault.target_collateral_ratio / CR_SCALE, color='grey', linestyle='--')
            axs[1].set_title('Collateral Ratio')
            axs[1].set_ylabel('Ratio')

            axs[2].plot(time_points, self.stable_supply_history[-steps:])
            axs[2].set_title('SimStable Supply')
            axs[2].set_ylabel('SIMS')

            axs[3].plot(time_points, self.vault_collateral_history[-steps:])
            axs[3].set_title('Vault Collateral')
            axs[3].set_ylabel('COLL')
            axs[3].set_xlabel('Days')

            plt.tight_layout()
            plt.show()

        final_state = self.get_system_state()
        ratios = self.collateral_ratio_history[-steps:] if steps else self.collateral_ratio_history

        return {
            'final_stable_price': final_state['stable_price'],
            'final_collateral_ratio': final_state['collateral_ratio'],
            'min_collateral_ratio_seen': min(ratios),
            'max_collateral_ratio_seen': max(ratios),
            'total_stable_supply': final_state['total_stable_supply'],
            'vault_collateral': final_state['vault_collateral'],
            'buybacks': self.buybacks,
            'recollateralizations': self.recollateralizations,
        }
