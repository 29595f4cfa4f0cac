"""
SimVault: an integer fixed-point model of a collateralized stablecoin vault.

The vault mints SimStable against collateral and SimGov, redeems it, buys
SimGov back when over-collateralized and takes new collateral when
under-collateralized, all gated on a collateral ratio that follows the
stable token's pool price.
"""

from .central_vault import CentralVault
from .collateral_ratio import CollateralRatioController
from .config import VaultSettings, settings
from .deploy import Deployment, deploy_system
from .erc20 import ERC20, CollateralToken
from .errors import (
    AuthorizationError,
    EconomicPreconditionError,
    InputValidationError,
    InsufficientFundsError,
    VaultError,
)
from .events import EVENT_SIGNATURES, Event
from .fixed_point import CR_SCALE, PEG, WAD
from .oracle import PriceOracle
from .reserve_pair import ReservePair
from .sim_token import SimGov, SimStable, SimToken, VaultSet, VaultUnset

__version__ = "0.1.0"
