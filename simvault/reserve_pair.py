"""
Reserve Pair Model for SimVault.

This module simulates a two-asset liquidity pool as far as the vault needs
it: two fixed token addresses and a pair of reserves that the simulation (or
a test) sets directly. There is no swap curve; prices are read from the
reserves by the oracle adapter.
"""

import time

from .errors import InputValidationError
from .fixed_point import UINT112_MAX


class ReservePair:
    """
    Simulates a Uniswap V2 style pair exposing get_reserves().
    """

    def __init__(self, address, token0, token1, reserve0=0, reserve1=0):
        if token0 == token1:
            raise InputValidationError("InvalidToken", "Pair tokens must differ")

        self.address = address
        self._token0 = token0
        self._token1 = token1

        self.reserve0 = 0
        self.reserve1 = 0
        self.block_timestamp_last = 0

        if reserve0 or reserve1:
            self.set_reserves(reserve0, reserve1)

    @property
    def token0(self):
        return self._token0

    @property
    def token1(self):
        return self._token1

    def get_reserves(self):
        """Returns (reserve0, reserve1, block_timestamp_last)."""
        return self.reserve0, self.reserve1, self.block_timestamp_last

    def set_reserves(self, reserve0, reserve1, timestamp=None):
        """
        Overwrites both reserves.

        Args:
            reserve0: New reserve of token0
            reserve1: New reserve of token1
            timestamp: Block timestamp to record, defaults to now (uint32)
        """
        for reserve in (reserve0, reserve1):
            if not isinstance(reserve, int) or reserve < 0:
                raise InputValidationError("InvalidReserves", f"Invalid reserve: {reserve}")
            if reserve > UINT112_MAX:
                raise InputValidationError("ReserveOverflow", f"Reserve exceeds uint112: {reserve}")

        self.reserve0 = reserve0
        self.reserve1 = reserve1
        if timestamp is None:
            timestamp = int(time.time())
        self.block_timestamp_last = timestamp % 2 ** 32
