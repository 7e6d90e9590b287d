"""
Shared route dependencies: collaborators, authentication and role guards.
"""

from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.config import get_settings
from samudra.core.database import get_session
from samudra.core.errors import AuthorizationError
from samudra.core.security import check_permission
from samudra.handlers.auth import AuthProvider, LocalAuthProvider, SupabaseAuthProvider, parse_bearer_token
from samudra.handlers.chain import ChainClient, SimulatedChainClient
from samudra.handlers.payments import MockPaymentProvider, PaymentProvider
from samudra.handlers.storage import FileStore, LocalFileStore
from samudra.models.user import AuthUser


@lru_cache()
def get_auth_provider() -> AuthProvider:
    settings = get_settings()
    if settings.auth_provider == "supabase":
        return SupabaseAuthProvider(settings.supabase_url, settings.supabase_service_role_key)
    return LocalAuthProvider()


@lru_cache()
def get_chain_client() -> ChainClient:
    return SimulatedChainClient()


@lru_cache()
def get_payment_provider() -> PaymentProvider:
    return MockPaymentProvider()


@lru_cache()
def get_file_store() -> FileStore:
    return LocalFileStore(get_settings().upload_dir)


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session),
    auth: AuthProvider = Depends(get_auth_provider)
) -> AuthUser:
    """Resolve the bearer token on the request to a user."""
    token = parse_bearer_token(authorization)
    return await auth.authenticate(session, token)


def require_role(role: str) -> Callable:
    """Dependency factory: authenticated user holding ``role``."""

    async def _require_role(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        result = check_permission(user.role, role)
        if not result.allowed:
            raise AuthorizationError(result.message)
        return user

    return _require_role
