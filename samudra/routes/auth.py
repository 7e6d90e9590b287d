"""
Signup, login and verifier eligibility endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.config import get_settings
from samudra.core.database import get_session
from samudra.handlers.auth import AuthProvider, check_nccr_eligibility, login, signup
from samudra.models.user import EligibilityRequest, LoginRequest, SignupRequest
from samudra.routes.deps import get_auth_provider

router = APIRouter(tags=["auth"])


@router.post("/signup")
async def signup_endpoint(
    request: SignupRequest,
    session: AsyncSession = Depends(get_session),
    auth: AuthProvider = Depends(get_auth_provider)
):
    """
    Register a user.

    The nccr_verifier role is only granted to allow-listed emails.
    """
    return await signup(session, auth, request, get_settings().nccr_verifier_allowlist)


@router.post("/login")
async def login_endpoint(
    request: LoginRequest,
    session: AsyncSession = Depends(get_session),
    auth: AuthProvider = Depends(get_auth_provider)
):
    """Exchange email and password for a bearer token."""
    return await login(session, auth, request.email, request.password)


@router.post("/check-nccr-eligibility")
async def check_nccr_eligibility_endpoint(request: EligibilityRequest):
    """Whether an email may register as an NCCR verifier."""
    return check_nccr_eligibility(request.email, get_settings().nccr_verifier_allowlist)
