"""
Error taxonomy for the vault and its ledgers.

Every failure carries a stable `reason` code that callers and tests match on.
The classes split failures by kind; all of them are ValueErrors so a rejected
ledger operation reads the same as elsewhere in the models.
"""


class VaultError(ValueError):
    """Base class for every rejected operation."""

    def __init__(self, reason, message=None):
        self.reason = reason
        super().__init__(message or reason)


class InputValidationError(VaultError):
    """Zero or malformed amounts, tokens that do not belong to a pair."""


class EconomicPreconditionError(VaultError):
    """The collateral ratio, supply or reserves do not permit the operation."""


class AuthorizationError(VaultError):
    """The caller is not the vault, not the owner, or re-entered the vault."""


class InsufficientFundsError(VaultError):
    """Not enough balance, allowance or vault collateral."""
