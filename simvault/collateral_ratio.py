"""
Collateral Ratio Controller for SimVault.

Holds the vault's collateral ratio and steers it toward keeping the stable
token on its peg. When the stable trades below peg the ratio rises (more
backing per unit issued); above peg it falls. The step size is the peg
deviation times the adjustment coefficient, and the result always saturates
inside [min_collateral_ratio, max_collateral_ratio].

All ratios are scaled by 1e4 (15000 = 150%).
"""

import logging

from .errors import EconomicPreconditionError, InputValidationError
from .fixed_point import PEG, WAD, clamp, div_trunc

logger = logging.getLogger(__name__)


class CollateralRatioController:
    """
    Owns the collateral ratio, its bounds and the feedback coefficient.
    """

    def __init__(self, collateral_ratio=15000, target_collateral_ratio=15000,
                 min_collateral_ratio=11000, max_collateral_ratio=20000,
                 adjustment_coefficient=100):
        self._validate_bounds(min_collateral_ratio, max_collateral_ratio)
        if not min_collateral_ratio <= collateral_ratio <= max_collateral_ratio:
            raise EconomicPreconditionError(
                "CollateralRatioOutOfBounds",
                f"Initial collateral ratio {collateral_ratio} outside "
                f"[{min_collateral_ratio}, {max_collateral_ratio}]",
            )
        self._validate_target(target_collateral_ratio)
        self._validate_coefficient(adjustment_coefficient)

        self.collateral_ratio = collateral_ratio
        self.target_collateral_ratio = target_collateral_ratio
        self.min_collateral_ratio = min_collateral_ratio
        self.max_collateral_ratio = max_collateral_ratio
        self.adjustment_coefficient = adjustment_coefficient

    def compute_delta(self, price):
        """
        Signed ratio change for a stable price (1e18 = peg).

        Truncates toward zero, so a deviation too small to move the ratio by
        one unit gives 0 in either direction.
        """
        deviation = PEG - price
        return div_trunc(self.adjustment_coefficient * deviation, WAD)

    def adjust(self, price):
        """
        Applies one feedback step for the observed stable price.

        Args:
            price: Stable token price in collateral, scaled by 1e18

        Returns:
            The new collateral ratio
        """
        delta = self.compute_delta(price)
        new_ratio = clamp(self.collateral_ratio + delta,
                          self.min_collateral_ratio, self.max_collateral_ratio)

        if new_ratio != self.collateral_ratio:
            logger.debug("Collateral ratio %d -> %d (price %d, delta %d)",
                         self.collateral_ratio, new_ratio, price, delta)
        self.collateral_ratio = new_ratio
        return new_ratio

    # --- Admin overrides ---

    def set_collateral_ratio(self, value):
        """Overrides the ratio. Values outside the bounds are rejected, not clamped."""
        if not isinstance(value, int) or not self.min_collateral_ratio <= value <= self.max_collateral_ratio:
            raise EconomicPreconditionError(
                "CollateralRatioOutOfBounds",
                f"Collateral ratio {value} outside [{self.min_collateral_ratio}, {self.max_collateral_ratio}]",
            )
        self.collateral_ratio = value
        return value

    def set_bounds(self, min_collateral_ratio, max_collateral_ratio):
        """Moves the bounds and clamps the current ratio into them."""
        self._validate_bounds(min_collateral_ratio, max_collateral_ratio)

        self.min_collateral_ratio = min_collateral_ratio
        self.max_collateral_ratio = max_collateral_ratio
        self.collateral_ratio = clamp(self.collateral_ratio, min_collateral_ratio, max_collateral_ratio)
        return self.collateral_ratio

    def set_target(self, value):
        self._validate_target(value)
        self.target_collateral_ratio = value

    def set_adjustment_coefficient(self, value):
        self._validate_coefficient(value)
        self.adjustment_coefficient = value

    @staticmethod
    def _validate_bounds(min_collateral_ratio, max_collateral_ratio):
        if (not isinstance(min_collateral_ratio, int) or not isinstance(max_collateral_ratio, int)
                or not 0 < min_collateral_ratio <= max_collateral_ratio):
            raise InputValidationError(
                "InvalidCollateralRatioBounds",
                f"Invalid bounds [{min_collateral_ratio}, {max_collateral_ratio}]",
            )

    @staticmethod
    def _validate_target(value):
        if not isinstance(value, int) or value <= 0:
            raise InputValidationError("InvalidTargetCollateralRatio", f"Invalid target: {value}")

    @staticmethod
    def _validate_coefficient(value):
        if not isinstance(value, int) or value < 0:
            raise InputValidationError("InvalidAdjustmentCoefficient", f"Invalid coefficient: {value}")
