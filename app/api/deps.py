import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

admin_key_scheme = APIKeyHeader(name="X-Admin-Key", auto_error=False)


def require_admin(
    request: Request,
    admin_key: Optional[str] = Depends(admin_key_scheme),
) -> None:
    """
    Gate for the administration endpoints: property writes, the company
    profile, employees and feedback.
    Real identity lives in the upstream auth layer; this checks the shared
    admin key that layer forwards.
    """
    expected = request.app.state.settings.ADMIN_API_KEY
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access is not configured",
        )
    if not admin_key or not secrets.compare_digest(admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin key",
            headers={"WWW-Authenticate": "X-Admin-Key"},
        )
