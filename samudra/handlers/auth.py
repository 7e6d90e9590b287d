"""
Authentication handler: auth providers, signup and verifier eligibility.

Two providers are available. ``LocalAuthProvider`` keeps users and session
tokens in the key-value store; ``SupabaseAuthProvider`` delegates to a hosted
GoTrue auth API over HTTP.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from samudra.core.constants import ROLE_NCCR_VERIFIER, USER_ROLES
from samudra.core.errors import (
    AuthenticationError,
    AuthorizationError,
    UpstreamError,
    ValidationError,
)
from samudra.core.security import hash_password, verify_password
from samudra.db import kv_store
from samudra.models.user import AuthUser, SignupRequest
from samudra.utils.hashing import generate_id
from samudra.utils.time import utc_now

logger = logging.getLogger(__name__)

VERIFIER_RESTRICTED_MESSAGE = (
    "NCCR Verifier registration is restricted. "
    "Please contact the administrator for access approval."
)


class AuthProvider(ABC):
    """Resolves bearer tokens to users and manages accounts."""

    @abstractmethod
    async def authenticate(self, session: AsyncSession, token: str) -> AuthUser:
        """Raise AuthenticationError for an unknown or expired token."""

    @abstractmethod
    async def create_user(
        self,
        session: AsyncSession,
        email: str,
        password: str,
        name: str,
        role: str
    ) -> AuthUser:
        ...

    @abstractmethod
    async def sign_in(self, session: AsyncSession, email: str, password: str) -> str:
        """Exchange credentials for an access token."""

    @abstractmethod
    async def get_user(self, session: AsyncSession, user_id: str) -> Optional[AuthUser]:
        ...


class LocalAuthProvider(AuthProvider):
    """Users and sessions stored as ``user_*`` / ``session_*`` keys."""

    @staticmethod
    def _user_key(user_id: str) -> str:
        return user_id if user_id.startswith("user_") else f"user_{user_id}"

    @staticmethod
    def _email_key(email: str) -> str:
        return f"user_email_{email.lower()}"

    @staticmethod
    def _session_key(token: str) -> str:
        return f"session_{token}"

    async def authenticate(self, session: AsyncSession, token: str) -> AuthUser:
        stored = await kv_store.get_value(session, self._session_key(token))
        if not stored:
            raise AuthenticationError("Invalid access token")

        user = await self.get_user(session, stored["userId"])
        if user is None:
            raise AuthenticationError("User not found")
        return user

    async def create_user(
        self,
        session: AsyncSession,
        email: str,
        password: str,
        name: str,
        role: str
    ) -> AuthUser:
        if await kv_store.get_value(session, self._email_key(email)):
            raise ValidationError("A user with this email address has already been registered")

        user_id = generate_id("user")
        password_hash = hash_password(password)
        user = AuthUser(id=user_id, email=email.lower(), name=name, role=role)

        record = user.to_store()
        record.update({"passwordHash": password_hash, "createdAt": utc_now().isoformat()})
        await kv_store.set_value(session, self._user_key(user_id), record)
        await kv_store.set_value(session, self._email_key(email), user_id)
        return user

    async def sign_in(self, session: AsyncSession, email: str, password: str) -> str:
        user_id = await kv_store.get_value(session, self._email_key(email))
        record = await kv_store.get_value(session, self._user_key(user_id)) if user_id else None
        if not record or not verify_password(password, record["passwordHash"]):
            raise AuthenticationError("Invalid login credentials")

        token = secrets.token_urlsafe(32)
        await kv_store.set_value(
            session,
            self._session_key(token),
            {"userId": user_id, "createdAt": utc_now().isoformat()}
        )
        return token

    async def get_user(self, session: AsyncSession, user_id: str) -> Optional[AuthUser]:
        record = await kv_store.get_value(session, self._user_key(user_id))
        if not record:
            return None
        return AuthUser(id=record["id"], email=record["email"], name=record.get("name"), role=record["role"])


class SupabaseAuthProvider(AuthProvider):
    """Hosted GoTrue auth API (Supabase) accessed with the service-role key."""

    def __init__(self, base_url: str, service_role_key: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout

    def _headers(self, bearer: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {bearer or self.service_role_key}",
        }

    @staticmethod
    def _to_user(data: Dict[str, Any]) -> AuthUser:
        metadata = data.get("user_metadata") or {}
        return AuthUser(
            id=data["id"],
            email=data.get("email") or "",
            name=metadata.get("name"),
            role=metadata.get("role") or "buyer"
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as e:
            logger.error("Auth service request %s %s failed: %s", method, path, e)
            raise UpstreamError(f"Auth service unavailable: {e}")

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        return body.get("msg") or body.get("message") or body.get("error_description") or str(body)

    async def authenticate(self, session: AsyncSession, token: str) -> AuthUser:
        response = await self._request("GET", "/auth/v1/user", headers=self._headers(token))
        if response.status_code in (401, 403):
            raise AuthenticationError("Invalid access token")
        if response.status_code >= 400:
            raise UpstreamError(self._error_message(response))
        return self._to_user(response.json())

    async def create_user(
        self,
        session: AsyncSession,
        email: str,
        password: str,
        name: str,
        role: str
    ) -> AuthUser:
        response = await self._request(
            "POST",
            "/auth/v1/admin/users",
            headers=self._headers(),
            json={
                "email": email,
                "password": password,
                "user_metadata": {"name": name, "role": role},
                # No mail server is configured, so confirm on creation
                "email_confirm": True,
            }
        )
        if response.status_code >= 500:
            raise UpstreamError(self._error_message(response))
        if response.status_code >= 400:
            raise ValidationError(self._error_message(response))
        return self._to_user(response.json())

    async def sign_in(self, session: AsyncSession, email: str, password: str) -> str:
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            headers={"apikey": self.service_role_key},
            json={"email": email, "password": password}
        )
        if response.status_code >= 400:
            raise AuthenticationError("Invalid login credentials")
        return response.json()["access_token"]

    async def get_user(self, session: AsyncSession, user_id: str) -> Optional[AuthUser]:
        response = await self._request("GET", f"/auth/v1/admin/users/{user_id}", headers=self._headers())
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise UpstreamError(self._error_message(response))
        return self._to_user(response.json())


def parse_bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    parts = (authorization or "").split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise AuthenticationError("No access token provided")
    return token


def is_verifier_email_allowed(email: Optional[str], allowlist: List[str]) -> bool:
    allowed = {entry.lower() for entry in allowlist}
    return bool(email) and email.lower() in allowed


def check_nccr_eligibility(email: Optional[str], allowlist: List[str]) -> Dict[str, Any]:
    is_allowed = is_verifier_email_allowed(email, allowlist)
    return {
        "isAllowed": is_allowed,
        "message": (
            "Email is authorized for NCCR Verifier role"
            if is_allowed
            else "Email is not authorized for NCCR Verifier role. Please contact the administrator."
        ),
    }


async def signup(
    session: AsyncSession,
    provider: AuthProvider,
    request: SignupRequest,
    allowlist: List[str]
) -> Dict[str, Any]:
    """Register a user with a fixed role."""
    if not request.email or not request.password or not request.name:
        raise ValidationError("Email, password and name are required")
    if request.role not in USER_ROLES:
        raise ValidationError(f"Invalid role: {request.role}")
    if request.role == ROLE_NCCR_VERIFIER and not is_verifier_email_allowed(request.email, allowlist):
        raise AuthorizationError(VERIFIER_RESTRICTED_MESSAGE)

    user = await provider.create_user(session, request.email, request.password, request.name, request.role)
    await session.commit()

    logger.info("Registered %s user %s", request.role, user.id)
    return {"user": user, "role": request.role}


async def login(session: AsyncSession, provider: AuthProvider, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    if not email or not password:
        raise ValidationError("Email and password are required")

    token = await provider.sign_in(session, email, password)
    await session.commit()
    user = await provider.authenticate(session, token)
    return {"accessToken": token, "user": user}
