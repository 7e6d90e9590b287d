"""
Carbon credit lifecycle handler: listing, purchase, retirement and payouts.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.config import Settings
from samudra.core.constants import PAYOUT_PREFIX, RETIREMENT_PREFIX
from samudra.core.errors import (
    AuthorizationError,
    NotFoundError,
    PaymentError,
    StateConflictError,
    ValidationError,
)
from samudra.db import repository
from samudra.handlers.chain import TX_CREDIT_RETIREMENT, ChainClient, ChainError
from samudra.handlers.payments import PaymentProvider, calculate_payout
from samudra.models.credit import CarbonCredit, Payout, PurchaseRequest, RetireRequest, Retirement
from samudra.utils.hashing import generate_id
from samudra.utils.time import utc_now

logger = logging.getLogger(__name__)


async def get_available_credits(session: AsyncSession) -> List[CarbonCredit]:
    return await repository.get_available_credits(session)


async def get_owned_credits(session: AsyncSession, buyer_id: str) -> List[CarbonCredit]:
    return await repository.get_buyer_credits(session, buyer_id)


async def purchase_credit(
    session: AsyncSession,
    request: PurchaseRequest,
    buyer_id: str,
    payments: PaymentProvider,
    settings: Settings
) -> Dict[str, Any]:
    """
    Transfer an available credit to the buyer.

    The whole credit changes hands; ``amount`` only prices the payout.
    Ownership is written with compare-and-set so two buyers can never
    both succeed.
    """
    if not request.credit_id or not request.amount or not request.payment_data:
        raise ValidationError("Credit ID, amount, and payment data are required")

    verification = await payments.verify_payment(request.payment_data)
    if not verification.is_valid:
        raise PaymentError("Payment verification failed")

    found = await repository.get_credit_versioned(session, request.credit_id)
    if found is None:
        raise NotFoundError("Credit not found")
    credit, version = found

    if credit.owner_id:
        raise StateConflictError("Credit has already been purchased")
    if credit.is_retired:
        raise StateConflictError("Credit has been retired and is no longer available")

    credit.owner_id = buyer_id
    credit.purchased_at = utc_now()
    credit.payment_id = verification.payment_id

    if not await repository.compare_and_set_credit(session, credit, version):
        await session.rollback()
        raise StateConflictError("Credit has already been purchased")
    await session.commit()

    logger.info("Credit %s purchased by %s (payment %s)", credit.id, buyer_id, verification.payment_id)

    await record_seller_payout(session, credit, buyer_id, verification.payment_id, request.amount, settings)

    return {
        "success": True,
        "message": "Credit purchased and payment processed successfully",
        "creditId": credit.id,
        "paymentId": verification.payment_id,
    }


async def record_seller_payout(
    session: AsyncSession,
    credit: CarbonCredit,
    buyer_id: str,
    payment_id: Optional[str],
    amount: float,
    settings: Settings
) -> Optional[Payout]:
    """
    Record the manager's share of a purchase.

    Runs after the purchase has committed; failures are logged and do not
    undo the purchase.
    """
    try:
        project = await repository.get_project(session, credit.project_id)
        if project is None:
            logger.warning("No project %s for credit %s, payout not recorded", credit.project_id, credit.id)
            return None

        total, fee, seller_payout = calculate_payout(
            amount,
            settings.credit_price_usd,
            settings.usd_inr_rate,
            settings.platform_fee_percent
        )
        payout = Payout(
            id=generate_id(PAYOUT_PREFIX),
            credit_id=credit.id,
            project_id=credit.project_id,
            manager_id=project.manager_id,
            buyer_id=buyer_id,
            payment_id=payment_id,
            total_amount=total,
            platform_fee=fee,
            seller_payout=seller_payout,
            currency="INR",
            created_at=utc_now()
        )
        await repository.save_payout(session, payout)
        await session.commit()
    except Exception:
        logger.exception("Error recording seller payout for credit %s", credit.id)
        await session.rollback()
        return None

    logger.info("Payout recorded for manager %s: INR %s", project.manager_id, seller_payout)
    return payout


async def retire_credit(
    session: AsyncSession,
    request: RetireRequest,
    buyer_id: str,
    chain: ChainClient
) -> Retirement:
    """
    Permanently retire an owned credit.

    The credit flag, retirement record and retired-credits counter are
    committed together.
    """
    if not request.credit_id or not request.reason:
        raise ValidationError("Credit ID and reason are required")

    found = await repository.get_credit_versioned(session, request.credit_id)
    if found is None:
        raise NotFoundError("Credit not found")
    credit, version = found

    if credit.owner_id != buyer_id:
        raise AuthorizationError("Access denied: You can only retire credits you own")
    if credit.is_retired:
        raise StateConflictError("Credit has already been retired")

    retired_at = utc_now()
    credit.is_retired = True
    credit.retired_by = buyer_id
    credit.retired_at = retired_at
    credit.retirement_reason = request.reason

    retirement = Retirement(
        id=generate_id(RETIREMENT_PREFIX),
        credit_id=credit.id,
        buyer_id=buyer_id,
        amount=credit.amount,
        reason=request.reason,
        retired_at=retired_at
    )
    try:
        tx = await chain.submit(TX_CREDIT_RETIREMENT, {
            "creditId": credit.id,
            "buyerId": buyer_id,
            "amount": credit.amount,
            "reason": request.reason,
        })
        retirement.on_chain_tx_hash = tx.tx_hash
    except ChainError as e:
        logger.warning("Retiring credit %s without chain transaction: %s", credit.id, e)

    if not await repository.compare_and_set_credit(session, credit, version):
        await session.rollback()
        raise StateConflictError("Credit has already been retired")
    await repository.save_retirement(session, retirement)
    await repository.increment_credits_retired(session, credit.amount)
    await session.commit()

    logger.info("Credit %s retired by %s: %s", credit.id, buyer_id, request.reason)
    return retirement


async def get_retirements(session: AsyncSession, buyer_id: str) -> List[Retirement]:
    return await repository.get_retirements_by_buyer(session, buyer_id)


async def get_manager_payouts(session: AsyncSession, manager_id: str) -> Dict[str, Any]:
    payouts = await repository.get_payouts_by_manager(session, manager_id)
    return {
        "payouts": payouts,
        "totalPayout": sum(p.seller_payout for p in payouts),
        "currency": "INR",
    }
