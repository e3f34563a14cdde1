import logging
import time
from inspect import isawaitable

from util.errors import RateLimitError

logger = logging.getLogger(__name__)

ROOT_TYPES = ("Query", "Mutation")


def client_address(request) -> str:
    if request is None or request.client is None:
        return "127.0.0.1"
    return request.client.host


async def timing_middleware(resolve, obj, info, **args):
    """
    Log how long each root field took to resolve
    """
    start = time.perf_counter()
    result = resolve(obj, info, **args)
    if isawaitable(result):
        result = await result
    if info.parent_type.name in ROOT_TYPES:
        duration = (time.perf_counter() - start) * 1000
        logger.debug("%s.%s took %.1fms", info.parent_type.name, info.field_name, duration)
    return result


async def rate_limit_middleware(resolve, obj, info, **args):
    """
    Count root fields against the caller's rate limit window
    """
    if info.parent_type.name in ROOT_TYPES:
        address = client_address(info.context.get("request"))
        if info.context["container"].rate_limiter.hit(address):
            logger.warning("Rate limit exceeded for %s", address)
            raise RateLimitError("Rate limit exceeded. Please try again later.")
    result = resolve(obj, info, **args)
    if isawaitable(result):
        result = await result
    return result


MIDDLEWARE = [timing_middleware, rate_limit_middleware]
