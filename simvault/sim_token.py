"""
SimStable and SimGov Token Models for SimVault.

This module simulates the two protocol tokens. Both are ERC20 ledgers whose
supply can only be changed by the vault. The vault is bound exactly once,
after deployment, by the token's owner; from then on mint and burn are
restricted to it.

The stable token additionally runs a transfer hook supplied at binding time.
The vault hands in its collateral-ratio adjustment, so every stable transfer
re-prices the collateral ratio inside the same atomic step.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .erc20 import ERC20
from .errors import AuthorizationError, InputValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultUnset:
    """Binding state before set_vault: nobody may mint or burn."""


@dataclass(frozen=True)
class VaultSet:
    """Binding state after set_vault. Never replaced."""
    address: str
    transfer_hook: Optional[Callable] = None


class SimToken(ERC20):
    """
    Simulates a vault-controlled token: supply changes only through the vault.
    """

    def __init__(self, address, name, symbol, owner=None):
        super().__init__(address, name, symbol, owner=owner)

        # Unset until the owner binds the vault
        self.binding = VaultUnset()

    @property
    def vault(self):
        """Address of the bound vault, None while unset."""
        if isinstance(self.binding, VaultSet):
            return self.binding.address
        return None

    def set_vault(self, caller, vault, transfer_hook=None):
        """
        Binds the vault. One-shot: a second call fails.

        Args:
            caller: Must be the token owner
            vault: Address of the vault contract
            transfer_hook: Optional callable(sender, recipient, amount) run on
                every transfer, before balances change

        Returns:
            True if successful
        """
        if caller != self.owner:
            raise AuthorizationError("OnlyOwner", "Only the owner can set the vault")
        if isinstance(self.binding, VaultSet):
            raise AuthorizationError("VaultAlreadySet", "Vault already set")
        if not vault:
            raise InputValidationError("InvalidAddress", "Vault address must be set")

        self.binding = VaultSet(vault, transfer_hook)
        self.emit("VaultSet", vault)
        logger.info("%s bound to vault %s", self.symbol, vault)
        return True

    def mint(self, caller, recipient, amount):
        """
        Mints new tokens to the recipient account.
        Only callable by the vault.

        Args:
            caller: Address invoking the mint (must be the vault)
            recipient: Address receiving the minted tokens
            amount: Amount of tokens to mint

        Returns:
            True if successful
        """
        self._require_vault(caller, "Only the vault can mint")
        self._require_amount(amount)

        self._mint(recipient, amount)
        self.emit("TokensMinted", recipient, amount)
        return True

    def burn(self, caller, from_account, amount):
        """
        Burns tokens from the given account.
        Only callable by the vault.

        Args:
            caller: Address invoking the burn (must be the vault)
            from_account: Address to burn tokens from
            amount: Amount of tokens to burn

        Returns:
            True if successful
        """
        self._require_vault(caller, "Only the vault can burn")
        self._require_amount(amount)
        self.ensure_balance(from_account, amount)

        self._burn(from_account, amount)
        self.emit("TokensBurned", from_account, amount)
        return True

    def _require_vault(self, caller, message):
        if caller is None or caller != self.vault:
            raise AuthorizationError("OnlyVault", message)

    def _before_balance_update(self, sender, recipient, amount):
        if isinstance(self.binding, VaultSet) and self.binding.transfer_hook is not None:
            self.binding.transfer_hook(sender, recipient, amount)


class SimStable(SimToken):
    """The stablecoin, pegged to one unit of collateral."""

    def __init__(self, address="sim_stable", owner=None):
        super().__init__(address, "SimStable", "SIMS", owner=owner)


class SimGov(SimToken):
    """The governance token absorbing the non-collateral share of backing."""

    def __init__(self, address="sim_gov", owner=None):
        super().__init__(address, "SimGov", "SIMG", owner=owner)
