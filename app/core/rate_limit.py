"""Request rate limits (slowapi), keyed by client address.

Limits are expressed per route; anything without its own limit falls back
to the default applied by SlowAPIMiddleware.

Login and registration are different: only failed attempts count against
AUTH_LIMIT, so a client that keeps signing in successfully is never locked
out. slowapi has no hook for counting by response, so those routes use
`check_auth_attempts` / `record_auth_failure` against the limiter's own
storage.
"""
from fastapi import HTTPException, Request
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

DEFAULT_LIMIT = "100/15 minutes"

# failed login / register attempts
AUTH_LIMIT = "5/15 minutes"

SEARCH_LIMIT = "30/minute"

# Gemini calls cost money
AI_LIMIT = "5/minute"

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[DEFAULT_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)

_AUTH_FAILURES = parse(AUTH_LIMIT)
_AUTH_SCOPE = "auth-failures"


def check_auth_attempts(request: Request) -> None:
    """Dependency: 429 once this client has used up its failed auth attempts."""
    if not limiter.enabled:
        return
    if not limiter.limiter.test(_AUTH_FAILURES, get_remote_address(request), _AUTH_SCOPE):
        raise HTTPException(
            status_code=429,
            detail="Too many authentication attempts, please try again later",
        )


def record_auth_failure(request: Request) -> None:
    if limiter.enabled:
        limiter.limiter.hit(_AUTH_FAILURES, get_remote_address(request), _AUTH_SCOPE)
