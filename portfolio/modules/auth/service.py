import hashlib
import time
import logging
from supabase import Client
from portfolio.modules.auth.schemas import LoginRequest, TokenResponse
from portfolio.core.errors import RemoteError
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (every admin request checks the token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate the admin using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise RemoteError("Invalid email or password", operation="sign_in", status_code=401) from e
            raise RemoteError(f"Login failed: {error_message}", operation="sign_in") from e

        if not auth_response.user or not auth_response.session:
            raise RemoteError("Invalid email or password", operation="sign_in", status_code=401)

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            user_data, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return user_data
            del _AUTH_USER_CACHE[cache_key]
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise RemoteError("Invalid or expired token", operation="get_user", status_code=401) from e
            raise RemoteError("Authentication failed", operation="get_user", status_code=401) from e
        if not user_response or not user_response.user:
            raise RemoteError("Invalid or expired token", operation="get_user", status_code=401)
        user = user_response.user
        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "app_metadata": user.app_metadata or {},
            "created_at": user.created_at,
            "updated_at": user.updated_at
        }
        if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
            _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
        return user_data

    def logout(self, token: Optional[str] = None) -> bool:
        """Forget a request's token. The shared client keeps its session until application shutdown."""
        # Supabase Auth tokens are stateless JWTs, so logout is mainly client-side
        # The token will naturally expire based on its expiration time
        if not token:
            return False
        return _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None) is not None
