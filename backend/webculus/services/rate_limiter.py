"""Redis-backed leaky-bucket rate limiter for the public API.

Algorithm
---------
Each bucket is a Redis key that stores the number of *tokens* (remaining
requests) and the timestamp of the last refill.  Tokens leak (refill) at a
constant rate of ``MAX / WINDOW`` tokens per second up to a maximum of
``MAX``.  A request is allowed only when at least one token is available;
otherwise a 429 response is returned.

Two buckets exist: ``api`` covers every ``/api`` route, ``auth`` is the much
tighter limit on signin / signup.

Usage as a FastAPI dependency
-----------------------------
```python
from webculus.services.rate_limiter import require_auth_rate_limit

@router.post("/signin", dependencies=[Depends(require_auth_rate_limit)])
def signin(...):
    ...
```
"""

import logging
import time

import redis
from fastapi import HTTPException, Request, status

from webculus.config import settings
from webculus.core.security import decode_access_token

logger = logging.getLogger(__name__)

_pool: redis.ConnectionPool | None = None

# Lua script executed atomically inside Redis.
# KEYS[1] = bucket key
# ARGV[1] = max tokens (burst)
# ARGV[2] = refill rate (tokens per second)
# ARGV[3] = current timestamp (float seconds)
# ARGV[4] = idle expiry (seconds)
# Returns  1 if request allowed, 0 if rejected.
_LUA_SCRIPT = """
local key         = KEYS[1]
local max_tokens  = tonumber(ARGV[1])
local refill_rate = tonumber(ARGV[2])
local now         = tonumber(ARGV[3])
local ttl         = tonumber(ARGV[4])

local bucket = redis.call('HMGET', key, 'tokens', 'last_refill')
local tokens      = tonumber(bucket[1])
local last_refill = tonumber(bucket[2])

if tokens == nil then
    -- first request: initialise full bucket
    tokens = max_tokens
    last_refill = now
end

-- refill tokens since last check
local elapsed = math.max(0, now - last_refill)
tokens = math.min(max_tokens, tokens + elapsed * refill_rate)

local allowed = 0
if tokens >= 1 then
    tokens = tokens - 1
    allowed = 1
end

redis.call('HSET', key, 'tokens', tokens, 'last_refill', now)
redis.call('EXPIRE', key, ttl)
return allowed
"""


def _get_redis() -> redis.Redis:
    global _pool
    if _pool is None:
        _pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            max_connections=10,
        )
    return redis.Redis(connection_pool=_pool)


def _token_subject(request: Request) -> str | None:
    """User id from a valid bearer token, if the request carries one."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    payload = decode_access_token(token.strip())
    return payload.get("sub") if payload else None


def _client_key(bucket: str, request: Request) -> str:
    """Derive a per-client bucket key from the authenticated user or the IP."""
    # router-level dependencies run before get_current_user, so the token
    # is read here rather than waiting for request.state
    user_id = getattr(getattr(request, "state", None), "user_id", None) or _token_subject(request)
    if user_id:
        return f"rl:{bucket}:u:{user_id}"
    forwarded = request.headers.get("x-forwarded-for")
    ip = forwarded.split(",")[0].strip() if forwarded else (request.client.host if request.client else "unknown")
    return f"rl:{bucket}:ip:{ip}"


def _check(bucket_key: str, max_requests: int, window_seconds: int) -> bool:
    """Return True if the request should be allowed."""
    if not settings.RATE_LIMIT_ENABLED or max_requests <= 0 or window_seconds <= 0:
        return True

    refill_rate = max_requests / float(window_seconds)
    try:
        r = _get_redis()
        allowed = r.eval(
            _LUA_SCRIPT, 1, bucket_key, max_requests, refill_rate, time.time(), window_seconds
        )
        return bool(allowed)
    except redis.RedisError as e:
        logger.warning("Rate-limiter Redis error (allowing request): %s", e)
        return True  # fail-open: don't block users if Redis is down


def _enforce(bucket: str, request: Request, max_requests: int, window_seconds: int, message: str) -> None:
    key = _client_key(bucket, request)
    if not _check(key, max_requests, window_seconds):
        logger.info("Rate-limited: %s", key)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=message,
            headers={"Retry-After": str(window_seconds)},
        )


async def require_api_rate_limit(request: Request) -> None:
    """FastAPI dependency: raises 429 if the caller exceeds the API limit."""
    _enforce(
        "api",
        request,
        settings.RATE_LIMIT_API_MAX,
        settings.RATE_LIMIT_API_WINDOW_SECONDS,
        "Too many requests from this IP, please try again later.",
    )


async def require_auth_rate_limit(request: Request) -> None:
    """FastAPI dependency, tighter limit for credential endpoints."""
    _enforce(
        "auth",
        request,
        settings.RATE_LIMIT_AUTH_MAX,
        settings.RATE_LIMIT_AUTH_WINDOW_SECONDS,
        "Too many authentication attempts, please try again later.",
    )
