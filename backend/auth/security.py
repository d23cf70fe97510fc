from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from quart import g, request

from ..common.enums import Role
from ..common.errors import Forbidden, Unauthorized

password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return password_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return password_context.verify(plain, hashed)


class TokenService:
    """Issues and checks the HS256 access tokens handed out at sign-in."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue(self, user_id: str, role: Role, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expires_minutes))
        payload = {"sub": user_id, "role": role.value, "exp": expire}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise Unauthorized("Token expired")
        except JWTError:
            raise Unauthorized("Invalid token")
        if payload.get("sub") is None:
            raise Unauthorized("Invalid token")
        return payload


def require_roles(tokens: TokenService, *roles: Role):
    """Route decorator: a valid bearer token, and one of ``roles`` when given.

    The decoded claims are stored on ``g.auth``.
    """

    def decorator(view):
        @wraps(view)
        async def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not token:
                raise Unauthorized("Bearer token not found")
            claims = tokens.decode(token)
            try:
                role = Role(claims.get("role", Role.USER.value))
            except ValueError:
                raise Unauthorized("Invalid token")
            if roles and role not in roles:
                raise Forbidden("You do not have permission to access this route")
            g.auth = {"user_id": claims["sub"], "role": role}
            return await view(*args, **kwargs)

        return wrapper

    return decorator
