"""
Central Vault Model for SimVault.

This module simulates the CentralVault contract, the coordinator of the
system. It is the only account allowed to mint and burn SimStable and
SimGov, and it custodies the collateral backing the stable supply.

Prices come from two reserve pairs: SimStable/collateral and collateral/
SimGov. The collateral token is the unit of account, so every price is
"collateral per token" scaled by 1e18, and the peg is 1e18.

The vault supports four economic operations, all gated on the collateral
ratio kept by the CollateralRatioController:

1. mint_stable: deposit collateral and burn SimGov to mint SimStable
2. redeem_stable: burn SimStable for collateral (face value) plus freshly
   minted SimGov (the over-collateralized part)
3. buyback_sim_gov: while over-collateralized, burn SimGov for collateral
4. re_collateralize: while under-collateralized, deposit collateral for SimGov

Each operation checks every precondition, including the caller's balances
and allowances on the external ledgers, before mutating anything, so a
failure leaves every ledger and event log exactly as it was.
"""

import functools
import logging

from .collateral_ratio import CollateralRatioController
from .config import settings as default_settings
from .errors import (
    AuthorizationError,
    EconomicPreconditionError,
    InputValidationError,
    InsufficientFundsError,
)
from .events import EventEmitter
from .fixed_point import CR_SCALE, WAD, from_wad, is_positive_amount, to_wad
from .oracle import PriceOracle

logger = logging.getLogger(__name__)


def nonreentrant(method):
    """Rejects a call made while another guarded call on the same vault is running."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._entered:
            raise AuthorizationError("ReentrantCall", f"Re-entered {method.__name__}")
        self._entered = True
        try:
            return method(self, *args, **kwargs)
        finally:
            self._entered = False

    return wrapper


class CentralVault(EventEmitter):
    """
    Simulates the CentralVault contract.
    """

    def __init__(self, sim_stable, sim_gov, collateral_token, sim_stable_pair, sim_gov_pair,
                 owner=None, address="central_vault", settings=None, oracle=None):
        super().__init__()
        settings = settings or default_settings

        self.address = address
        self.owner = owner

        # Immutable references
        self.sim_stable = sim_stable
        self.sim_gov = sim_gov
        self.collateral_token = collateral_token
        self.sim_stable_pair = sim_stable_pair
        self.sim_gov_pair = sim_gov_pair

        self._require_in_pair(sim_stable_pair, sim_stable.address, collateral_token.address)
        self._require_in_pair(sim_gov_pair, sim_gov.address, collateral_token.address)

        self.oracle = oracle or PriceOracle()
        for token in (sim_stable, sim_gov, collateral_token):
            self.oracle.register_token(token.address, token.decimals)

        self.controller = CollateralRatioController(
            collateral_ratio=settings.collateral_ratio,
            target_collateral_ratio=settings.target_collateral_ratio,
            min_collateral_ratio=settings.min_collateral_ratio,
            max_collateral_ratio=settings.max_collateral_ratio,
            adjustment_coefficient=settings.adjustment_coefficient,
        )

        # Last prices published by update_prices
        self.sim_stable_price = 0
        self.sim_gov_price = 0

        self._entered = False

    # --- Read-only accessors ---

    @property
    def collateral_ratio(self):
        return self.controller.collateral_ratio

    @property
    def target_collateral_ratio(self):
        return self.controller.target_collateral_ratio

    @property
    def min_collateral_ratio(self):
        return self.controller.min_collateral_ratio

    @property
    def max_collateral_ratio(self):
        return self.controller.max_collateral_ratio

    @property
    def adjustment_coefficient(self):
        return self.controller.adjustment_coefficient

    def total_stable_supply(self):
        return self.sim_stable.total_supply

    def vault_collateral_balance(self):
        """Collateral held by the vault, in the collateral token's own units."""
        return self.collateral_token.balance_of(self.address)

    def get_shortfall(self):
        """
        Collateral deficit against the target ratio, in 18-decimal units.

        The target backing is the stable supply (valued at peg) times the
        target ratio. Zero when the vault holds at least that much.
        """
        target_collateral = self.total_stable_supply() * self.target_collateral_ratio // CR_SCALE
        current_collateral = self._collateral_to_wad(self.vault_collateral_balance())
        return max(0, target_collateral - current_collateral)

    def get_token_price(self, pair, token):
        """Price of `token` from `pair`'s reserves, scaled by 1e18."""
        return self.oracle.get_token_price(pair, token)

    # --- Prices and collateral ratio ---

    @nonreentrant
    def update_prices(self, caller):
        """
        Reads both pool prices, stores them and emits PricesUpdated.

        Returns:
            Tuple of (sim_stable_price, sim_gov_price)
        """
        stable_price = self.oracle.get_token_price(self.sim_stable_pair, self.sim_stable.address)
        gov_price = self.oracle.get_token_price(self.sim_gov_pair, self.sim_gov.address)

        self.sim_stable_price = stable_price
        self.sim_gov_price = gov_price
        self.emit("PricesUpdated", stable_price, gov_price)
        logger.debug("Prices updated by %s: stable=%d gov=%d", caller, stable_price, gov_price)
        return stable_price, gov_price

    @nonreentrant
    def adjust_collateral_ratio(self, caller):
        """
        Runs one collateral ratio feedback step from the stable pool price.
        Only callable by the owner; stable transfers run it implicitly.

        Returns:
            The new collateral ratio
        """
        self._require_owner(caller)
        return self._adjust_collateral_ratio()

    @nonreentrant
    def on_stable_transfer(self, sender, recipient, amount):
        """
        Transfer hook bound on SimStable: every transfer re-prices the ratio.

        Runs after the transfer's checks and before its balance update, so a
        failure here aborts the transfer with balances untouched.
        """
        return self._adjust_collateral_ratio()

    def _adjust_collateral_ratio(self):
        price = self.oracle.get_token_price(self.sim_stable_pair, self.sim_stable.address)
        old_ratio = self.controller.collateral_ratio
        new_ratio = self.controller.adjust(price)
        if new_ratio != old_ratio:
            self.emit("CollateralRatioUpdated", old_ratio, new_ratio)
        return new_ratio

    # --- Admin ---

    @nonreentrant
    def set_collateral_ratio(self, caller, value):
        """
        Owner override of the collateral ratio.

        Raises:
            EconomicPreconditionError: CollateralRatioOutOfBounds if the value
                is outside [min_collateral_ratio, max_collateral_ratio]
        """
        self._require_owner(caller)
        old_ratio = self.controller.collateral_ratio
        self.controller.set_collateral_ratio(value)
        if value != old_ratio:
            self.emit("CollateralRatioUpdated", old_ratio, value)
        logger.info("Collateral ratio set to %d by %s", value, caller)
        return value

    @nonreentrant
    def set_collateral_ratio_bounds(self, caller, min_collateral_ratio, max_collateral_ratio):
        """Owner override of the bounds; the current ratio is clamped into them."""
        self._require_owner(caller)
        old_ratio = self.controller.collateral_ratio
        new_ratio = self.controller.set_bounds(min_collateral_ratio, max_collateral_ratio)
        if new_ratio != old_ratio:
            self.emit("CollateralRatioUpdated", old_ratio, new_ratio)
        logger.info("Collateral ratio bounds set to [%d, %d] by %s",
                    min_collateral_ratio, max_collateral_ratio, caller)
        return new_ratio

    @nonreentrant
    def set_target_collateral_ratio(self, caller, value):
        self._require_owner(caller)
        self.controller.set_target(value)
        logger.info("Target collateral ratio set to %d by %s", value, caller)

    @nonreentrant
    def set_adjustment_coefficient(self, caller, value):
        self._require_owner(caller)
        self.controller.set_adjustment_coefficient(value)
        logger.info("Adjustment coefficient set to %d by %s", value, caller)

    # --- Economic operations ---

    @nonreentrant
    def mint_stable(self, caller, collateral_amount, gov_amount):
        """
        Mints SimStable against deposited collateral, burning SimGov.

        The backing is the collateral plus the SimGov deposit valued at the
        gov pool price. It is converted to stable terms at the stable pool
        price and divided by the collateral ratio. The SimGov is burned.

        Args:
            caller: Account depositing and receiving
            collateral_amount: Collateral to pull (needs an allowance to the vault)
            gov_amount: SimGov to burn

        Returns:
            Amount of SimStable minted to the caller
        """
        if not is_positive_amount(collateral_amount):
            raise InputValidationError("InvalidCollateralAmount", f"Invalid collateral amount: {collateral_amount}")
        if not is_positive_amount(gov_amount):
            raise InputValidationError("InvalidGovAmount", f"Invalid gov amount: {gov_amount}")

        self._require_bound()
        stable_price, gov_price = self._read_prices()

        backing = self._collateral_to_wad(collateral_amount) + gov_amount * gov_price // WAD
        stable_amount = backing * WAD // stable_price * CR_SCALE // self.collateral_ratio
        if stable_amount == 0:
            raise InputValidationError("InvalidStableAmount", "Deposit too small to mint any stable")

        # Checks on every ledger before the first mutation
        self.collateral_token.ensure_transfer_from(self.address, caller, collateral_amount)
        self.sim_gov.ensure_balance(caller, gov_amount)

        self.collateral_token.transfer_from(self.address, caller, self.address, collateral_amount)
        self.sim_gov.burn(self.address, caller, gov_amount)
        self.sim_stable.mint(self.address, caller, stable_amount)

        self.emit("Minted", caller, collateral_amount, gov_amount, stable_amount)
        logger.info("%s minted %d stable for %d collateral and %d gov",
                    caller, stable_amount, collateral_amount, gov_amount)
        return stable_amount

    @nonreentrant
    def redeem_stable(self, caller, stable_amount):
        """
        Burns SimStable and pays out its backing.

        The stable is valued at the stable pool price and grossed up by the
        collateral ratio. Up to face value is paid in collateral; whatever
        the ratio adds on top, plus any collateral precision the token cannot
        hold, is paid by minting SimGov at the gov price.

        Args:
            caller: Account redeeming
            stable_amount: SimStable to burn

        Returns:
            Tuple of (collateral_returned, gov_minted)
        """
        if not is_positive_amount(stable_amount):
            raise InputValidationError("InvalidStableAmount", f"Invalid stable amount: {stable_amount}")
        if self.total_stable_supply() == 0:
            raise EconomicPreconditionError("NoStableInCirculation", "No stable in circulation")

        self._require_bound()
        stable_price, gov_price = self._read_prices()

        stable_value = stable_amount * stable_price // WAD
        redemption_value = stable_value * self.collateral_ratio // CR_SCALE

        collateral_returned = self._wad_to_collateral(min(stable_value, redemption_value))
        gov_value = redemption_value - self._collateral_to_wad(collateral_returned)
        gov_minted = gov_value * WAD // gov_price
        if collateral_returned == 0 and gov_minted == 0:
            raise InputValidationError("InvalidStableAmount", "Stable amount too small to redeem for anything")

        self.sim_stable.ensure_balance(caller, stable_amount)
        if collateral_returned > self.vault_collateral_balance():
            raise InsufficientFundsError(
                "InsufficientCollateral",
                f"Vault holds {self.vault_collateral_balance()} collateral, owes {collateral_returned}",
            )

        self.sim_stable.burn(self.address, caller, stable_amount)
        if collateral_returned > 0:
            self.collateral_token.transfer(self.address, caller, collateral_returned)
        if gov_minted > 0:
            self.sim_gov.mint(self.address, caller, gov_minted)

        self.emit("Redeemed", caller, stable_amount, collateral_returned, gov_minted)
        logger.info("%s redeemed %d stable for %d collateral and %d gov",
                    caller, stable_amount, collateral_returned, gov_minted)
        return collateral_returned, gov_minted

    @nonreentrant
    def buyback_sim_gov(self, caller, gov_amount):
        """
        Burns SimGov for excess collateral. Only while the collateral ratio
        is above target.

        Args:
            caller: Account selling SimGov
            gov_amount: SimGov to burn

        Returns:
            Collateral paid to the caller
        """
        if self.collateral_ratio <= self.target_collateral_ratio:
            raise EconomicPreconditionError(
                "BuybackNotAllowed",
                f"Collateral ratio {self.collateral_ratio} not above target {self.target_collateral_ratio}",
            )
        if not is_positive_amount(gov_amount):
            raise InputValidationError("InvalidGovAmount", f"Invalid gov amount: {gov_amount}")

        self._require_bound()
        _, gov_price = self._read_prices()

        collateral_paid = self._wad_to_collateral(gov_amount * gov_price // WAD)
        if collateral_paid == 0 or collateral_paid > self.vault_collateral_balance():
            raise EconomicPreconditionError(
                "InvalidBuybackAmount",
                f"Buyback pays {collateral_paid}, vault holds {self.vault_collateral_balance()}",
            )

        self.sim_gov.ensure_balance(caller, gov_amount)

        self.sim_gov.burn(self.address, caller, gov_amount)
        self.collateral_token.transfer(self.address, caller, collateral_paid)

        self.emit("BuybackExecuted", caller, gov_amount, collateral_paid)
        logger.info("%s sold %d gov back for %d collateral", caller, gov_amount, collateral_paid)
        return collateral_paid

    @nonreentrant
    def re_collateralize(self, caller, collateral_amount):
        """
        Takes collateral toward the target backing and mints SimGov 1:1
        (in 18-decimal units). Only while the collateral ratio is below
        target, and never more than the current shortfall.

        Args:
            caller: Account depositing
            collateral_amount: Collateral to pull (needs an allowance to the vault)

        Returns:
            Amount of SimGov minted to the caller
        """
        if self.collateral_ratio >= self.target_collateral_ratio:
            raise EconomicPreconditionError(
                "ReCollateralizationNotRequired",
                f"Collateral ratio {self.collateral_ratio} not below target {self.target_collateral_ratio}",
            )
        if not is_positive_amount(collateral_amount):
            raise InputValidationError("InvalidCollateralAmount", f"Invalid collateral amount: {collateral_amount}")

        self._require_bound()
        shortfall = self.get_shortfall()
        if shortfall == 0:
            raise EconomicPreconditionError("ReCollateralizationNotRequired", "Vault holds its target collateral")

        collateral_value = self._collateral_to_wad(collateral_amount)
        if collateral_value > shortfall:
            raise EconomicPreconditionError(
                "CollateralExceedsShortfall",
                f"Deposit {collateral_value} exceeds shortfall {shortfall}",
            )

        gov_minted = collateral_value
        self.collateral_token.ensure_transfer_from(self.address, caller, collateral_amount)

        self.collateral_token.transfer_from(self.address, caller, self.address, collateral_amount)
        self.sim_gov.mint(self.address, caller, gov_minted)

        self.emit("ReCollateralized", caller, collateral_amount, gov_minted)
        logger.info("%s re-collateralized %d for %d gov", caller, collateral_amount, gov_minted)
        return gov_minted

    # --- Internal helpers ---

    def _read_prices(self):
        stable_price = self.oracle.get_token_price(self.sim_stable_pair, self.sim_stable.address)
        gov_price = self.oracle.get_token_price(self.sim_gov_pair, self.sim_gov.address)
        if stable_price == 0 or gov_price == 0:
            raise EconomicPreconditionError(
                "ZeroReserves", f"Zero price (stable={stable_price}, gov={gov_price})"
            )
        return stable_price, gov_price

    def _collateral_to_wad(self, amount):
        return to_wad(amount, self.collateral_token.decimals)

    def _wad_to_collateral(self, value):
        return from_wad(value, self.collateral_token.decimals)

    def _require_bound(self):
        """Both protocol tokens must have bound this vault before it moves funds."""
        for token in (self.sim_stable, self.sim_gov):
            if token.vault != self.address:
                raise AuthorizationError("VaultNotSet", f"{token.symbol} is not bound to {self.address}")

    def _require_owner(self, caller):
        if caller is None or caller != self.owner:
            raise AuthorizationError("OnlyOwner", "Only the owner can call this")

    @staticmethod
    def _require_in_pair(pair, token, collateral):
        if {pair.token0, pair.token1} != {token, collateral}:
            raise InputValidationError("InvalidToken", f"Pair {pair.address} is not {token}/{collateral}")
