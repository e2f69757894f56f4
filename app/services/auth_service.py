"""Login e verifica del bearer token (HS256, validita' fissa dall'emissione)."""
import logging
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.clock import Clock
from app.core.config import settings
from app.core.deps import get_clock
from app.database.user_repo import UserRepo
from app.schemas.context import Role, UserContext

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthService:

    @staticmethod
    def create_token(username: str, role: Role, issued_at: int) -> str:
        """issued_at in millisecondi; nel claim iat va in secondi."""
        payload = {"sub": username, "role": role.value, "iat": issued_at // 1000}
        return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    @staticmethod
    def decode_token(token: str, now: int) -> UserContext:
        try:
            payload = jwt.decode(
                token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
            )
        except JWTError:
            raise _unauthorized("Invalid jwt token")

        username = payload.get("sub")
        issued_at = payload.get("iat")
        try:
            role = Role(payload.get("role"))
        except ValueError:
            raise _unauthorized("Invalid jwt token")
        if not username or not isinstance(issued_at, int):
            raise _unauthorized("Invalid jwt token")

        ttl_ms = settings.token_ttl_hours * 3600 * 1000
        if issued_at * 1000 + ttl_ms < now:
            raise _unauthorized("Expired jwt token")
        return UserContext(user_id=username, role=role)

    @staticmethod
    async def login(username: str, password: str, users: UserRepo, now: int) -> str:
        if not username or not username.strip():
            raise ValueError("Username invalid")
        if not password or not password.strip():
            raise ValueError("Password invalid")

        user = await users.find_by_username(username)
        if user is None:
            raise _unauthorized("User does not exist")
        if not verify_password(password, user.passwordHash):
            logger.info("Password errata per %s", username)
            raise _unauthorized("Incorrect password")
        return AuthService.create_token(user.username, user.role, now)

    @staticmethod
    def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        clock: Clock = Depends(get_clock),
    ) -> UserContext:
        if credentials is None or not credentials.credentials:
            raise _unauthorized("No jwt token provided")
        return AuthService.decode_token(credentials.credentials, clock())
