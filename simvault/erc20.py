"""
ERC20 Ledger Model for SimVault.

This module simulates a plain fungible-token ledger: balances, allowances and
transfers. It is the base of the SimStable and SimGov ledgers and, as
CollateralToken, stands in for the externally owned collateral asset.
"""

import logging

from .errors import AuthorizationError, InputValidationError, InsufficientFundsError
from .events import EventEmitter
from .fixed_point import WAD_DECIMALS, is_positive_amount

logger = logging.getLogger(__name__)


class ERC20(EventEmitter):
    """
    Simulates an ERC20 token contract.
    """

    def __init__(self, address, name, symbol, decimals=WAD_DECIMALS, owner=None):
        super().__init__()
        self.address = address
        self.name = name
        self.symbol = symbol
        self.decimals = decimals

        # Owner of the contract (deployer)
        self.owner = owner

        # Total token supply
        self.total_supply = 0

        # Mapping of addresses to token balances
        self.balances = {}

        # owner -> {spender -> amount}
        self.allowances = {}

    def balance_of(self, account):
        """Returns the token balance of the given account."""
        return self.balances.get(account, 0)

    def allowance(self, holder, spender):
        """Returns how much `spender` may still move on behalf of `holder`."""
        return self.allowances.get(holder, {}).get(spender, 0)

    def ensure_balance(self, account, amount):
        """
        Raises unless `account` holds at least `amount`.

        Lets callers check every leg of a multi-ledger operation before
        mutating any of them.
        """
        if self.balance_of(account) < amount:
            raise InsufficientFundsError(
                "InsufficientBalance",
                f"{self.symbol}: {account} holds {self.balance_of(account)}, needs {amount}",
            )

    def ensure_allowance(self, holder, spender, amount):
        """Raises unless `spender` is approved for at least `amount` of `holder`'s tokens."""
        if self.allowance(holder, spender) < amount:
            raise InsufficientFundsError(
                "InsufficientAllowance",
                f"{self.symbol}: {spender} is approved for {self.allowance(holder, spender)}, needs {amount}",
            )

    def ensure_transfer_from(self, spender, sender, amount):
        """Pre-flight check for transfer_from: positive amount, balance and allowance."""
        self._require_amount(amount)
        self.ensure_balance(sender, amount)
        self.ensure_allowance(sender, spender, amount)

    def approve(self, holder, spender, amount):
        """
        Sets the allowance of `spender` over `holder`'s tokens.

        Args:
            holder: Address granting the allowance
            spender: Address allowed to move the tokens
            amount: New allowance (replaces the old one)

        Returns:
            True if successful
        """
        if not isinstance(amount, int) or amount < 0:
            raise InputValidationError("InvalidAmount", f"Invalid allowance: {amount}")

        self.allowances.setdefault(holder, {})[spender] = amount
        self.emit("Approval", holder, spender, amount)
        return True

    def transfer(self, sender, recipient, amount):
        """
        Transfers tokens from sender to recipient.

        Args:
            sender: Address sending the tokens
            recipient: Address receiving the tokens
            amount: Amount of tokens to transfer

        Returns:
            True if successful
        """
        self._require_amount(amount)
        self.ensure_balance(sender, amount)

        self._before_balance_update(sender, recipient, amount)
        self._move(sender, recipient, amount)
        return True

    def transfer_from(self, spender, sender, recipient, amount):
        """
        Moves tokens on behalf of `sender`, spending `spender`'s allowance.

        Args:
            spender: Address using the allowance
            sender: Address whose tokens are moved
            recipient: Address receiving the tokens
            amount: Amount of tokens to transfer

        Returns:
            True if successful
        """
        self.ensure_transfer_from(spender, sender, amount)

        self._before_balance_update(sender, recipient, amount)

        # Spend allowance, then update balances
        self.allowances[sender][spender] -= amount
        self._move(sender, recipient, amount)
        return True

    def _before_balance_update(self, sender, recipient, amount):
        """Runs after a transfer's checks pass and before balances change."""

    def _move(self, sender, recipient, amount):
        self.balances[sender] = self.balances.get(sender, 0) - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        self.emit("Transfer", sender, recipient, amount)

    def _mint(self, recipient, amount):
        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        self.total_supply += amount
        self.emit("Transfer", None, recipient, amount)

    def _burn(self, from_account, amount):
        self.balances[from_account] = self.balances.get(from_account, 0) - amount
        self.total_supply -= amount
        self.emit("Transfer", from_account, None, amount)

    @staticmethod
    def _require_amount(amount):
        if not is_positive_amount(amount):
            raise InputValidationError("ZeroAmount", f"Amount must be greater than zero: {amount}")


class CollateralToken(ERC20):
    """
    The collateral asset. Supply is issued by its owner (a faucet in
    simulations); the vault only ever holds it like any other account.
    """

    def __init__(self, address="collateral_token", name="CollateralToken", symbol="COLL",
                 decimals=WAD_DECIMALS, owner=None):
        super().__init__(address, name, symbol, decimals, owner)

    def mint(self, caller, recipient, amount):
        """Issues new collateral. Only callable by the owner."""
        if caller != self.owner:
            raise AuthorizationError("OnlyOwner", "Only the owner can mint collateral")
        self._require_amount(amount)

        self._mint(recipient, amount)
        logger.debug("%s minted %d to %s", self.symbol, amount, recipient)
        return True
