"""
Price Oracle Adapter for SimVault.

Prices are read straight from pair reserves: the price of one side is the
other side's reserve divided by its own, scaled to 18 decimals. Reserves are
first normalized to 18-decimal units from each token's registered decimals,
so a 6-decimal collateral prices the same as its 18-decimal equivalent.
Tokens that were never registered are taken to have 18 decimals.
"""

from typing import Dict, Optional

from .errors import EconomicPreconditionError, InputValidationError
from .fixed_point import WAD, WAD_DECIMALS, to_wad


class PriceOracle:
    """Reads fixed-point token prices out of ReservePair reserves."""

    def __init__(self, decimals: Optional[Dict[str, int]] = None):
        # token address -> decimals
        self._decimals = dict(decimals or {})

    def register_token(self, address: str, decimals: int) -> None:
        if not isinstance(decimals, int) or decimals < 0:
            raise InputValidationError("InvalidDecimals", f"Invalid decimals: {decimals}")
        self._decimals[address] = decimals

    def decimals_of(self, address: str) -> int:
        return self._decimals.get(address, WAD_DECIMALS)

    def get_token_price(self, pair, token: str) -> int:
        """
        Price of `token` in units of the pair's other token, scaled by 1e18.

        Args:
            pair: Object with token0, token1 and get_reserves()
            token: Address of token0 or token1

        Returns:
            other_reserve * 1e18 // token_reserve, truncated, both reserves
            normalized to 18 decimals

        Raises:
            InputValidationError: InvalidToken if the token is not in the pair
            EconomicPreconditionError: ZeroReserves if the token's reserve is zero
        """
        reserve0, reserve1, _ = pair.get_reserves()

        if token == pair.token0:
            base, quote = (reserve0, pair.token0), (reserve1, pair.token1)
        elif token == pair.token1:
            base, quote = (reserve1, pair.token1), (reserve0, pair.token0)
        else:
            raise InputValidationError("InvalidToken", "Token not in pair")

        base_reserve = to_wad(base[0], self.decimals_of(base[1]))
        quote_reserve = to_wad(quote[0], self.decimals_of(quote[1]))

        if base_reserve == 0:
            raise EconomicPreconditionError("ZeroReserves", f"Pair {pair.address} has no {token} reserve")

        return quote_reserve * WAD // base_reserve
