"""
Simple simulation for SimVault.

This script walks a freshly deployed system through each vault operation
and prints the state after every step.
"""

import sys
import os

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from simvault import deploy_system, VaultError, WAD


def print_state(deployment, account):
    vault = deployment.vault
    print(f"  Collateral ratio: {vault.collateral_ratio / 100:.2f}%")
    print(f"  Stable supply: {deployment.sim_stable.total_supply / WAD:.4f} SIMS")
    print(f"  Vault collateral: {vault.vault_collateral_balance() / WAD:.4f} COLL")
    print(f"  {account}: {deployment.sim_stable.balance_of(account) / WAD:.4f} SIMS, "
          f"{deployment.sim_gov.balance_of(account) / WAD:.4f} SIMG, "
          f"{deployment.collateral_token.balance_of(account) / WAD:.4f} COLL")


def run_basic_simulation():
    owner = "deployer"
    user = "user1"
    d = deploy_system(owner)
    vault = d.vault

    print("Seeding pools: 1 SIMS = 1 COLL, 1 SIMG = 2 COLL")
    d.sim_stable_pair.set_reserves(1_000_000 * WAD, 1_000_000 * WAD)
    d.sim_gov_pair.set_reserves(2_000_000 * WAD, 1_000_000 * WAD)

    print("\nFunding user with 10000 COLL and 1000 SIMG...")
    d.collateral_token.mint(owner, user, 10_000 * WAD)
    d.sim_gov.mint(vault.address, user, 1_000 * WAD)  # genesis allocation
    print_state(d, user)

    print("\nMinting with 3000 COLL and 10 SIMG...")
    d.collateral_token.approve(user, vault.address, 3_000 * WAD)
    minted = vault.mint_stable(user, 3_000 * WAD, 10 * WAD)
    print(f"Minted {minted / WAD:.4f} SIMS")
    print_state(d, user)

    print("\nStable drops to 0.8 COLL; adjusting collateral ratio...")
    d.sim_stable_pair.set_reserves(1_000_000 * WAD, 800_000 * WAD)
    vault.adjust_collateral_ratio(owner)
    print_state(d, user)

    print("\nOverriding collateral ratio to 160% and buying back 50 SIMG...")
    vault.set_collateral_ratio(owner, 16_000)
    paid = vault.buyback_sim_gov(user, 50 * WAD)
    print(f"Buyback paid {paid / WAD:.4f} COLL")
    print_state(d, user)

    print("\nOverriding collateral ratio to 120% and re-collateralizing...")
    vault.set_collateral_ratio(owner, 12_000)
    shortfall = vault.get_shortfall()
    print(f"Shortfall: {shortfall / WAD:.4f} COLL")
    if shortfall > 0:
        amount = min(shortfall, 500 * WAD)
        d.collateral_token.approve(user, vault.address, amount)
        gov = vault.re_collateralize(user, amount)
        print(f"Re-collateralized {amount / WAD:.4f} COLL for {gov / WAD:.4f} SIMG")
    else:
        print("Vault already holds its target collateral")

    print("\nRedeeming half of the stable...")
    try:
        coll, gov = vault.redeem_stable(user, minted // 2)
        print(f"Redeemed for {coll / WAD:.4f} COLL and {gov / WAD:.4f} SIMG")
    except VaultError as e:
        print(f"Redemption failed: {e.reason}")
    print_state(d, user)

    print(f"\nVault emitted {len(vault.events)} events:")
    for event in vault.events:
        print(f"  {event.name}{event.args}")


if __name__ == "__main__":
    run_basic_simulation()
