"""
Event records emitted by the vault and the token ledgers.

Events are appended to the emitting contract's `events` list only after all
of an operation's checks have passed, so a failed call leaves no trace.
"""

from dataclasses import dataclass
from typing import Tuple

EVENT_SIGNATURES = {
    # Vault
    "Minted": "Minted(address,uint256,uint256,uint256)",
    "Redeemed": "Redeemed(address,uint256,uint256,uint256)",
    "BuybackExecuted": "BuybackExecuted(address,uint256,uint256)",
    "ReCollateralized": "ReCollateralized(address,uint256,uint256)",
    "PricesUpdated": "PricesUpdated(uint256,uint256)",
    "CollateralRatioUpdated": "CollateralRatioUpdated(uint256,uint256)",
    # Ledgers
    "Transfer": "Transfer(address,address,uint256)",
    "Approval": "Approval(address,address,uint256)",
    "TokensMinted": "TokensMinted(address,uint256)",
    "TokensBurned": "TokensBurned(address,uint256)",
    "VaultSet": "VaultSet(address)",
}


def _arity(signature: str) -> int:
    params = signature[signature.index("(") + 1:-1]
    return len(params.split(",")) if params else 0


@dataclass(frozen=True)
class Event:
    """A single emitted event: its name and positional arguments."""
    name: str
    args: Tuple

    @property
    def signature(self) -> str:
        return EVENT_SIGNATURES[self.name]


class EventEmitter:
    """Mixin giving a contract an ordered event log."""

    def __init__(self):
        self.events = []

    def emit(self, name, *args):
        if name not in EVENT_SIGNATURES:
            raise KeyError(f"Unknown event: {name}")
        if len(args) != _arity(EVENT_SIGNATURES[name]):
            raise TypeError(f"{name} expects {_arity(EVENT_SIGNATURES[name])} arguments, got {len(args)}")
        event = Event(name, tuple(args))
        self.events.append(event)
        return event

    def events_named(self, name):
        """Returns the emitted events with the given name, oldest first."""
        return [event for event in self.events if event.name == name]
