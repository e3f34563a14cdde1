import datetime
import logging
from typing import Optional

import bcrypt
import jwt
from starlette.concurrency import run_in_threadpool

from util.errors import InvalidTokenError

logger = logging.getLogger(__name__)

# bcrypt accepts at most 72 bytes of secret
MAX_SECRET_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored digest is not a bcrypt hash
        return False


async def hash_password_async(password: str, rounds: int = 10) -> str:
    return await run_in_threadpool(hash_password, password, rounds)


async def check_password_async(password: str, hashed: str) -> bool:
    return await run_in_threadpool(check_password, password, hashed)


class TokenService:
    """
    Issues and verifies the HS256 bearer tokens handed out at login.

    Tokens carry ``userId``, ``iat`` and ``exp``. Nothing is stored
    server-side, so a token stays valid until it expires.
    """

    def __init__(
        self,
        secret: str,
        users,
        expires_in: datetime.timedelta = datetime.timedelta(days=7),
        algorithm: str = "HS256",
    ):
        if not secret:
            raise ValueError("JWT secret is not configured")
        self._secret = secret
        self._users = users
        self._expires_in = expires_in
        self._algorithm = algorithm

    def issue(self, user_id: str) -> str:
        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {
            "userId": str(user_id),
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Return the user id inside token, raise InvalidTokenError otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token expired")
        except jwt.PyJWTError:
            raise InvalidTokenError("Invalid token")

        user_id = payload.get("userId")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Invalid token payload")
        return user_id

    async def resolve_user(self, token: Optional[str]) -> Optional[dict]:
        """
        Soft authentication: the user behind token, or None when the token is
        missing, does not verify, or names a user that no longer exists.
        """
        if not token:
            return None
        try:
            user_id = self.verify(token)
        except InvalidTokenError as exc:
            logger.info("Rejected bearer token: %s", exc.message)
            return None
        user = await self._users.find_by_id(user_id)
        if user is None:
            logger.info("Token refers to missing user %s", user_id)
        return user
