"""
Project verification scoring endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import ROLE_NCCR_VERIFIER
from samudra.core.database import get_session
from samudra.handlers.scoring import get_verification, verify_project
from samudra.models.user import AuthUser
from samudra.models.verification import VerifyProjectRequest
from samudra.routes.deps import require_role

router = APIRouter(prefix="/ml", tags=["ml"])


@router.post("/verify-project")
async def verify_project_endpoint(
    request: VerifyProjectRequest,
    user: AuthUser = Depends(require_role(ROLE_NCCR_VERIFIER)),
    session: AsyncSession = Depends(get_session)
):
    """
    Score a project and store the result.

    Scoring weighs ecosystem type, area, coastal location, description
    keywords and project name; re-running replaces the stored result.
    """
    verification = await verify_project(session, request.project_id, request.project_data, user.id)
    return {"success": True, "verification": verification}


@router.get("/verification/{project_id}")
async def get_verification_endpoint(
    project_id: str,
    user: AuthUser = Depends(require_role(ROLE_NCCR_VERIFIER)),
    session: AsyncSession = Depends(get_session)
):
    """Stored scoring result for a project."""
    return {"verification": await get_verification(session, project_id)}
