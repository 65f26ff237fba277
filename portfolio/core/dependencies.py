"""
Core dependencies for request context and admin route protection
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slowapi import Limiter
from slowapi.util import get_remote_address
from typing import Dict, Optional
import logging

from portfolio.config import settings
from portfolio.core.context import AppContext
from portfolio.core.notifications import Notifier
from portfolio.modules.auth.service import AuthService
from portfolio.modules.auth.session_gate import SessionGate

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

# Bearer token is optional: browsers send the session cookie instead
security = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_notifier(request: Request) -> Notifier:
    """Request-scoped notifier; exception handlers read it back from request.state."""
    if not hasattr(request.state, "notifier"):
        request.state.notifier = Notifier()
    return request.state.notifier


def get_auth_service(context: AppContext = Depends(get_context)) -> AuthService:
    return AuthService(context.supabase)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    context: AppContext = Depends(get_context),
) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(context.settings.session_cookie_name)


def get_session_gate(
    token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service),
    notifier: Notifier = Depends(get_notifier),
) -> SessionGate:
    gate = SessionGate(auth_service, notifier)
    gate.check(token)
    return gate


def require_admin_session(gate: SessionGate = Depends(get_session_gate)) -> SessionGate:
    """Dependency for admin API routes: 401 instead of the login redirect pages use"""
    if not gate.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return gate


def require_admin(gate: SessionGate = Depends(require_admin_session)) -> Dict:
    return gate.user
