"""Sale — экземпляр продажи по кривой и его коллабораторы.

- CurveSale: фасад (покупка, governance, запросы)
- PurchaseOrchestrator / GovernanceController
- Ownable2Step, PauseGuard, AssetLedger — внешние коллабораторы
"""

from .access_control import Ownable2Step
from .asset_ledger import NATIVE_ASSET, AssetLedger, InMemoryAssetLedger
from .config import SaleConfig, load_sale_config
from .engine import CurveSale
from .errors import (
    ArithmeticFailure,
    ExternalTransferFailure,
    InvalidConfiguration,
    OperationRejected,
    SaleError,
    Unauthorized,
)
from .governance import GovernanceController
from .guard import PauseGuard
from .purchase import PurchaseOrchestrator
from .state import SaleState

__all__ = [
    "CurveSale",
    "SaleConfig",
    "load_sale_config",
    "SaleState",
    "PurchaseOrchestrator",
    "GovernanceController",
    "Ownable2Step",
    "PauseGuard",
    "NATIVE_ASSET",
    "AssetLedger",
    "InMemoryAssetLedger",
    "SaleError",
    "InvalidConfiguration",
    "OperationRejected",
    "Unauthorized",
    "ArithmeticFailure",
    "ExternalTransferFailure",
]
