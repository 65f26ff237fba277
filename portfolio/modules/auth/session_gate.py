from enum import Enum
from typing import Any, Dict, Optional
import logging

from portfolio.core.errors import RemoteError
from portfolio.core.notifications import Notifier
from portfolio.modules.auth.schemas import LoginRequest, TokenResponse
from portfolio.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

ADMIN_ROOT = "/admin"
LOGIN_ROUTE = "/admin/login"


class SessionState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionGate:
    """Decides whether the admin area is reachable for the current session."""

    def __init__(self, auth_service: AuthService, notifier: Notifier):
        self.auth_service = auth_service
        self.notifier = notifier
        self.state = SessionState.UNKNOWN
        self.user: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None
        self.error: Optional[RemoteError] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    def check(self, token: Optional[str]) -> SessionState:
        if not token:
            return self._unauthenticated()
        try:
            self.user = self.auth_service.get_current_user(token)
        except RemoteError as e:
            logger.info(f"Session check failed: {e}")
            return self._unauthenticated()
        self.token = token
        self.state = SessionState.AUTHENTICATED
        return self.state

    def sign_in(self, email: str, password: str) -> Optional[TokenResponse]:
        """Returns the token on success; on rejection stays unauthenticated and returns None."""
        self.error = None
        try:
            token = self.auth_service.login(LoginRequest(email=email, password=password))
        except RemoteError as e:
            logger.info(f"Admin sign in rejected for {email}: {e}")
            self._unauthenticated()
            self.notifier.error("Invalid credentials" if e.status_code == 401 else "Error signing in")
            self.error = e
            return None
        self.token = token.access_token
        self.user = {"id": token.user_id, "email": token.email}
        self.state = SessionState.AUTHENTICATED
        self.notifier.success("Welcome to the admin panel!")
        token.redirect_to = ADMIN_ROOT
        return token

    def sign_out(self) -> None:
        self.auth_service.logout(self.token)
        self._unauthenticated()

    def resolve(self, path: str) -> Optional[str]:
        """Redirect target for `path` given the session state, or None to render it."""
        path = path.rstrip("/") or "/"
        if path == LOGIN_ROUTE:
            return ADMIN_ROOT if self.is_authenticated else None
        if path == ADMIN_ROOT or path.startswith(ADMIN_ROOT + "/"):
            return None if self.is_authenticated else LOGIN_ROUTE
        return None

    def _unauthenticated(self) -> SessionState:
        self.state = SessionState.UNAUTHENTICATED
        self.user = None
        self.token = None
        return self.state
