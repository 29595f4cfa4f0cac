"""
Deployment wiring for SimVault.

Creates the three ledgers, the two reserve pairs and the vault, then binds
the vault on SimStable and SimGov. The stable token gets the vault's
collateral ratio adjustment as its transfer hook.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .central_vault import CentralVault
from .config import VaultSettings, settings as default_settings
from .erc20 import CollateralToken
from .reserve_pair import ReservePair
from .sim_token import SimGov, SimStable

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """Handles to every contract of one deployed system."""
    owner: str
    sim_stable: SimStable
    sim_gov: SimGov
    collateral_token: CollateralToken
    sim_stable_pair: ReservePair
    sim_gov_pair: ReservePair
    vault: CentralVault


def deploy_system(owner: str = "deployer", settings: Optional[VaultSettings] = None,
                  collateral_decimals: Optional[int] = None) -> Deployment:
    """
    Deploys and wires a complete system.

    Args:
        owner: Deployer; owns the tokens, the collateral faucet and the vault
        settings: Vault parameters, defaults to the process settings
        collateral_decimals: Overrides settings.collateral_decimals

    Returns:
        Deployment with every contract
    """
    settings = settings or default_settings
    if collateral_decimals is None:
        collateral_decimals = settings.collateral_decimals

    sim_stable = SimStable(owner=owner)
    sim_gov = SimGov(owner=owner)
    collateral_token = CollateralToken(decimals=collateral_decimals, owner=owner)

    sim_stable_pair = ReservePair("sim_stable_pair", sim_stable.address, collateral_token.address)
    sim_gov_pair = ReservePair("sim_gov_pair", collateral_token.address, sim_gov.address)

    vault = CentralVault(
        sim_stable, sim_gov, collateral_token, sim_stable_pair, sim_gov_pair,
        owner=owner, settings=settings,
    )

    sim_stable.set_vault(owner, vault.address, transfer_hook=vault.on_stable_transfer)
    sim_gov.set_vault(owner, vault.address)

    logger.info("Deployed %s, %s and %s (collateral decimals %d)",
                sim_stable.symbol, sim_gov.symbol, vault.address, collateral_decimals)

    return Deployment(owner, sim_stable, sim_gov, collateral_token,
                      sim_stable_pair, sim_gov_pair, vault)
