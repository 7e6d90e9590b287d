"""
Payment provider interface and payout arithmetic.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from samudra.models.base import CamelModel

logger = logging.getLogger(__name__)


class PaymentVerification(CamelModel):
    is_valid: bool
    payment_id: Optional[str] = None
    amount: Optional[float] = None
    currency: str = "INR"
    status: str
    error: Optional[str] = None


class PaymentProvider(ABC):

    @abstractmethod
    async def verify_payment(self, payment_data: Dict[str, Any]) -> PaymentVerification:
        """Confirm with the gateway that a payment went through."""


class MockPaymentProvider(PaymentProvider):
    """Accepts any payment the client reports as succeeded."""

    async def verify_payment(self, payment_data: Dict[str, Any]) -> PaymentVerification:
        payment_id = payment_data.get("paymentId")
        status = payment_data.get("status", "unknown")
        logger.info("Verifying payment %s", payment_id)

        return PaymentVerification(
            is_valid=status == "succeeded",
            payment_id=payment_id,
            amount=payment_data.get("amount"),
            currency=payment_data.get("currency", "INR"),
            status=status,
            error=None if status == "succeeded" else f"Payment status is {status}"
        )


def calculate_payout(
    credit_amount: float,
    price_usd: float,
    usd_inr_rate: float,
    fee_percent: float
) -> Tuple[int, int, int]:
    """
    Split a purchase between the platform and the project manager.

    Formula: total = round(credits * price_usd * usd_inr_rate) INR,
    fee = round(total * fee_percent), seller payout = total - fee

    Returns:
        (total_amount, platform_fee, seller_payout) in whole rupees
    """
    total_amount = _round_half_up(credit_amount * price_usd * usd_inr_rate)
    platform_fee = _round_half_up(total_amount * fee_percent)
    return total_amount, platform_fee, total_amount - platform_fee


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
