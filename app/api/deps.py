"""
Request dependencies: who is calling, and are they allowed to.

Clients send the Firebase ID token obtained from /api/auth/login or
/api/auth/register:
    Authorization: Bearer <id_token>

The decoded token carries the `role` custom claim ("patient" or "doctor")
stamped at registration (or by set_role.py).
"""
import logging
from typing import Callable, Dict, Iterable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict:
    """Decoded ID token claims (uid, email, role, ...)."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        return auth.verify_id_token(credentials.credentials)
    except auth.ExpiredIdTokenError as exc:
        raise HTTPException(status_code=401, detail="Token expired") from exc
    except Exception as exc:
        logger.info("Rejected ID token: %s", exc)
        raise HTTPException(status_code=401, detail="Invalid ID token") from exc


def require_role(allowed: Iterable[str]) -> Callable:
    """Dependency factory: 403 unless the caller's role claim is in `allowed`."""
    allowed = frozenset(allowed)

    def _checker(user: Dict = Depends(get_current_user)) -> Dict:
        if user.get("role") not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return _checker
