"""
User and authentication schemas.
"""

from typing import Optional
from enum import Enum

from samudra.models.base import CamelModel


class UserRole(str, Enum):
    PROJECT_MANAGER = "project_manager"
    NCCR_VERIFIER = "nccr_verifier"
    BUYER = "buyer"


class AuthUser(CamelModel):
    """An authenticated actor as resolved by the auth provider."""
    id: str
    email: str
    name: Optional[str] = None
    role: str = UserRole.BUYER.value


class AuthorizationResult(CamelModel):
    allowed: bool
    message: Optional[str] = None


class SignupRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: str = UserRole.BUYER.value


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class EligibilityRequest(CamelModel):
    email: Optional[str] = None

