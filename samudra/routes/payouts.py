"""
Seller payout endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import ROLE_PROJECT_MANAGER
from samudra.core.database import get_session
from samudra.handlers.credits import get_manager_payouts
from samudra.models.user import AuthUser
from samudra.routes.deps import require_role

router = APIRouter(prefix="/payouts", tags=["payouts"])


@router.get("/manager")
async def manager_payouts_endpoint(
    user: AuthUser = Depends(require_role(ROLE_PROJECT_MANAGER)),
    session: AsyncSession = Depends(get_session)
):
    """Payouts owed to the calling project manager from credit sales."""
    return await get_manager_payouts(session, user.id)
