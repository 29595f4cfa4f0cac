"""
Fixed-point helpers shared by the vault, the oracle adapter and the ledgers.

Ratios are scaled by CR_SCALE (1e4, so 15000 is 150%). Prices and normalized
amounts are scaled by WAD (1e18). Everything is a Python int.
"""

WAD = 10 ** 18
CR_SCALE = 10 ** 4
PEG = WAD  # 1.0 collateral per stable
WAD_DECIMALS = 18
UINT112_MAX = 2 ** 112 - 1


def to_wad(amount: int, decimals: int) -> int:
    """Scales a token amount with `decimals` decimals to 18-decimal units."""
    if decimals <= WAD_DECIMALS:
        return amount * 10 ** (WAD_DECIMALS - decimals)
    return amount // 10 ** (decimals - WAD_DECIMALS)


def from_wad(amount: int, decimals: int) -> int:
    """Inverse of to_wad, truncating any precision the token cannot hold."""
    if decimals <= WAD_DECIMALS:
        return amount // 10 ** (WAD_DECIMALS - decimals)
    return amount * 10 ** (decimals - WAD_DECIMALS)


def div_trunc(numerator: int, denominator: int) -> int:
    """
    Integer division rounding toward zero.

    Python's // floors, so -1 // 10 is -1; ledger arithmetic gives 0.
    """
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


def is_positive_amount(value) -> bool:
    """True for a strictly positive int (bools are not amounts)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
