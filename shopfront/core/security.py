"""
Security utilities for authentication and authorization
Resolves the caller identity from JWT bearer tokens
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import uuid
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings
from .exceptions import ForbiddenException, UnauthorizedException

# Security scheme
security = HTTPBearer(auto_error=False)

ADMIN_ROLE = "admin"

class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token"""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """Decode and validate JWT token"""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise UnauthorizedException("Invalid authentication credentials")

def create_user_token(user_id: str, role: str, email: Optional[str] = None) -> str:
    """Issue an access token for a user identity"""
    return SecurityUtils.create_access_token({"sub": str(user_id), "role": role, "email": email})

# Dependency to get current user from token
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Dict[str, Any]:
    """Extract and validate user from JWT token"""
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = SecurityUtils.decode_token(credentials.credentials)

    if payload.get("type") != "access" or not payload.get("sub"):
        raise UnauthorizedException("Invalid token type")

    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        raise UnauthorizedException("Invalid token subject")

    return {
        "id": user_id,
        "role": payload.get("role"),
        "email": payload.get("email"),
    }

def is_admin(role: Optional[str]) -> bool:
    return role == ADMIN_ROLE

# Role-based access control
def require_role(allowed_roles: list[str]):
    """Dependency factory checking the caller's role"""
    async def role_checker(current_user: dict = Depends(get_current_user)):
        if current_user.get("role") not in allowed_roles:
            raise ForbiddenException("Insufficient permissions")
        return current_user
    return role_checker

require_admin = require_role([ADMIN_ROLE])
