from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from portfolio.config import settings
from portfolio.config.resources_config import get_dashboard_tabs
from portfolio.core.context import AppContext
from portfolio.core.dependencies import (
    get_context, get_session_gate, limiter, require_admin, require_admin_session,
)
from portfolio.modules.auth.schemas import LoginRequest, TokenResponse
from portfolio.modules.auth.session_gate import SessionGate, LOGIN_ROUTE, ADMIN_ROOT
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])

# Navigable admin routes, mounted without the API prefix
pages_router = APIRouter(tags=["pages"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    gate: SessionGate = Depends(get_session_gate),
    context: AppContext = Depends(get_context),
):
    """Login and get access token; the token is also set as the session cookie"""
    token = gate.sign_in(login_data.email, login_data.password)
    if token is None:
        raise gate.error
    response.set_cookie(
        key=context.settings.session_cookie_name,
        value=token.access_token,
        httponly=True,
        samesite="lax",
        secure=context.settings.is_production,
    )
    return token


@router.post("/logout", status_code=200)
async def logout(
    response: Response,
    gate: SessionGate = Depends(require_admin_session),
    context: AppContext = Depends(get_context),
):
    """Logout: forget this request's token and clear the session cookie"""
    gate.sign_out()
    response.delete_cookie(context.settings.session_cookie_name)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(current_user: Dict = Depends(require_admin)):
    """Get the authenticated admin"""
    return current_user


@pages_router.get(LOGIN_ROUTE)
async def login_page(gate: SessionGate = Depends(get_session_gate)):
    """Login form; an authenticated session goes straight to the dashboard"""
    target = gate.resolve(LOGIN_ROUTE)
    if target:
        return RedirectResponse(url=target, status_code=303)
    return {
        "view": "login",
        "session": gate.state.value,
        "fields": ["email", "password"],
        "submit": "/api/v1/auth/login",
        "back": "/",
    }


@pages_router.get(ADMIN_ROOT)
async def dashboard_page(
    tab: Optional[str] = None,
    gate: SessionGate = Depends(get_session_gate),
):
    """Admin dashboard; unauthenticated visitors are redirected to the login form"""
    target = gate.resolve(ADMIN_ROOT)
    if target:
        return RedirectResponse(url=target, status_code=303)
    tabs = get_dashboard_tabs()
    tab_ids = [t["id"] for t in tabs]
    return {
        "view": "dashboard",
        "user": gate.user,
        "tabs": tabs,
        "active_tab": tab if tab in tab_ids else tab_ids[0],
        "logout": "/api/v1/auth/logout",
    }
