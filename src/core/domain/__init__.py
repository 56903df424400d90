"""
Domain models and value objects.

Contains the sale's domain entities: CurveParameters, RevenueRails,
purchase request/quote/result and audit events.
"""

from src.core.domain.curve import CurveParameters
from src.core.domain.events import (
    AssetRecovered,
    CurveUpdated,
    EventLog,
    OwnershipTransferred,
    OwnershipTransferStarted,
    ParamsLocked,
    Paused,
    PurchaseCompleted,
    RailsUpdated,
    SaleEvent,
    Unpaused,
)
from src.core.domain.identity import ZERO_ADDRESS, is_null_identity, validate_identity
from src.core.domain.purchase import PurchaseQuote, PurchaseRequest, PurchaseResult
from src.core.domain.rails import MAX_BPS_TOTAL, RevenueRails

__all__ = [
    # Identity
    "ZERO_ADDRESS",
    "is_null_identity",
    "validate_identity",
    # Curve
    "CurveParameters",
    # Rails
    "MAX_BPS_TOTAL",
    "RevenueRails",
    # Purchase
    "PurchaseRequest",
    "PurchaseQuote",
    "PurchaseResult",
    # Events
    "SaleEvent",
    "PurchaseCompleted",
    "CurveUpdated",
    "ParamsLocked",
    "RailsUpdated",
    "Paused",
    "Unpaused",
    "AssetRecovered",
    "OwnershipTransferStarted",
    "OwnershipTransferred",
    "EventLog",
]
