"""
Carbon credit endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.config import get_settings
from samudra.core.constants import ROLE_BUYER
from samudra.core.database import get_session
from samudra.handlers.chain import ChainClient
from samudra.handlers.credits import (
    get_available_credits,
    get_owned_credits,
    get_retirements,
    purchase_credit,
    retire_credit,
)
from samudra.handlers.payments import PaymentProvider
from samudra.models.credit import PurchaseRequest, RetireRequest
from samudra.models.user import AuthUser
from samudra.routes.deps import get_chain_client, get_payment_provider, require_role

router = APIRouter(prefix="/credits", tags=["credits"])


@router.get("/available")
async def available_credits_endpoint(
    user: AuthUser = Depends(require_role(ROLE_BUYER)),
    session: AsyncSession = Depends(get_session)
):
    """Credits nobody owns yet."""
    return {"availableCredits": await get_available_credits(session)}


@router.get("/owned")
async def owned_credits_endpoint(
    user: AuthUser = Depends(require_role(ROLE_BUYER)),
    session: AsyncSession = Depends(get_session)
):
    """The caller's unretired credits."""
    return {"ownedCredits": await get_owned_credits(session, user.id)}


@router.get("/retirements")
async def retirements_endpoint(
    user: AuthUser = Depends(require_role(ROLE_BUYER)),
    session: AsyncSession = Depends(get_session)
):
    """The caller's retirement history, newest first."""
    return {"retirements": await get_retirements(session, user.id)}


@router.post("/purchase")
async def purchase_credit_endpoint(
    request: PurchaseRequest,
    user: AuthUser = Depends(require_role(ROLE_BUYER)),
    session: AsyncSession = Depends(get_session),
    payments: PaymentProvider = Depends(get_payment_provider)
):
    """
    Buy an available credit.

    Payment is verified first; the credit then transfers whole to the
    caller and a seller payout is recorded for the project manager.
    """
    return await purchase_credit(session, request, user.id, payments, get_settings())


@router.post("/retire")
async def retire_credit_endpoint(
    request: RetireRequest,
    user: AuthUser = Depends(require_role(ROLE_BUYER)),
    session: AsyncSession = Depends(get_session),
    chain: ChainClient = Depends(get_chain_client)
):
    """Permanently retire an owned credit."""
    retirement = await retire_credit(session, request, user.id, chain)
    return {
        "success": True,
        "message": "Credit retired successfully",
        "retirement": retirement
    }
