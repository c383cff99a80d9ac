import uuid

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import HashingException, UnauthorizedException

MAX_PASSWORD_BYTES = 72


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user id), 'roles', 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        user_id: str = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Token missing user identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def extract_identity(token: str) -> tuple[uuid.UUID, frozenset[str]]:
    """Extract the user id and role claims from a JWT token"""
    payload = decode_jwt(token)
    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise UnauthorizedException("Token user identifier is malformed")

    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return user_id, frozenset(str(role) for role in roles)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Raises:
        HashingException: If the input is over bcrypt's 72-byte limit or
            bcrypt rejects it
    """
    password_bytes = password.encode("utf-8")
    # Refuse rather than silently truncate
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        raise HashingException(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")
    try:
        return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")
    except ValueError as e:
        raise HashingException(f"Failed to hash password: {e}") from e


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash in constant time."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or oversized input
        return False
