"""
Carbon credit, retirement and payout models.
"""

from pydantic import Field
from typing import Optional, Dict, Any
from datetime import datetime

from samudra.models.base import CamelModel


class CarbonCredit(CamelModel):
    """
    A mintable, ownable, retireable unit of verified carbon.

    ``owner_id`` absent means the credit is available for purchase;
    ``is_retired`` is terminal once set.
    """
    id: str
    project_id: str
    amount: float = Field(..., description="Credit size in tCO2e", ge=0)
    owner_id: Optional[str] = None
    is_retired: bool = False
    retired_by: Optional[str] = None
    retired_at: Optional[datetime] = None
    retirement_reason: Optional[str] = None
    health_score: float
    evidence_cid: Optional[str] = None
    verified_at: datetime
    mrv_id: str
    on_chain_tx_hash: Optional[str] = None
    purchased_at: Optional[datetime] = None
    payment_id: Optional[str] = None


class Retirement(CamelModel):
    """Immutable record of a credit's retirement."""
    id: str
    credit_id: str
    buyer_id: str
    amount: float
    reason: str
    retired_at: datetime
    on_chain_tx_hash: Optional[str] = None


class Payout(CamelModel):
    """Seller payout owed to a project manager after a purchase."""
    id: str
    credit_id: str
    project_id: str
    manager_id: str
    buyer_id: str
    payment_id: Optional[str] = None
    total_amount: int
    platform_fee: int
    seller_payout: int
    currency: str = "INR"
    status: str = "pending_transfer"
    created_at: datetime


class PurchaseRequest(CamelModel):
    credit_id: Optional[str] = None
    amount: Optional[float] = None
    payment_data: Optional[Dict[str, Any]] = None


class RetireRequest(CamelModel):
    credit_id: Optional[str] = None
    reason: Optional[str] = None
