"""
Composition root: one instance of every stateful component per process.

Built by the FastAPI startup handler (or directly by tests) and handed to
resolvers through the GraphQL context.
"""

import datetime
from typing import Optional

import settings
from models.employee import EmployeeQueryEngine
from models.user import CredentialStore
from util.cache import ResultCache
from util.cert import TokenService
from util.rate_limit import RateLimiter


class Container:
    def __init__(
        self,
        database,
        *,
        secret: Optional[str] = None,
        cache: Optional[ResultCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        bcrypt_rounds: int = settings.BCRYPT_ROUNDS,
        token_expires_in: datetime.timedelta = datetime.timedelta(days=settings.TOKEN_EXPIRE_DAYS),
    ):
        self.db = database
        self.cache = cache if cache is not None else ResultCache(
            ttl_seconds=settings.CACHE_TTL_SECONDS,
            max_size=settings.CACHE_MAX_ENTRIES,
        )
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter(
            limit=settings.RATE_LIMIT_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            max_clients=settings.RATE_LIMIT_MAX_CLIENTS,
        )
        self.users = CredentialStore(database["users"], rounds=bcrypt_rounds)
        self.tokens = TokenService(
            secret if secret is not None else settings.JWT_SECRET,
            self.users,
            expires_in=token_expires_in,
            algorithm=settings.JWT_ALGORITHM,
        )
        self.employees = EmployeeQueryEngine(database["employees"], self.cache)

    def close(self) -> None:
        self.cache.invalidate_all()
        self.rate_limiter.reset()
