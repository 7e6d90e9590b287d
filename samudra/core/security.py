"""
Role-based permission checks and password hashing.
"""

from passlib.context import CryptContext

from samudra.models.user import AuthorizationResult

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def role_label(role: str) -> str:
    """Human form of a role, e.g. ``project_manager`` -> ``project manager``."""
    return role.replace("_", " ", 1)


def check_permission(caller_role: str, required_role: str) -> AuthorizationResult:
    """Decide whether ``caller_role`` may use an endpoint requiring ``required_role``."""
    if caller_role == required_role:
        return AuthorizationResult(allowed=True)
    return AuthorizationResult(
        allowed=False,
        message=f"Access denied. {role_label(required_role)} role required."
    )


def hash_password(password: str) -> str:
    """Salted bcrypt hash; the salt is embedded in the returned string."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
