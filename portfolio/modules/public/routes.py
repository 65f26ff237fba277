from fastapi import APIRouter, Depends, Request, Response
from portfolio.core.context import AppContext
from portfolio.core.dependencies import get_context
from portfolio.modules.public.service import PublicSiteService
from typing import Optional
import uuid

router = APIRouter(prefix="/public", tags=["public"])

# The public page itself, mounted at the site root
pages_router = APIRouter(tags=["pages"])

VISITOR_COOKIE = "portfolio_visitor"


def get_public_service(context: AppContext = Depends(get_context)) -> PublicSiteService:
    return PublicSiteService(context.supabase)


@pages_router.get("/")
async def home(service: PublicSiteService = Depends(get_public_service)):
    """All public sections: profile, projects, certificates and experience"""
    return service.get_sections()


@router.get("/projects")
async def list_projects(
    category: Optional[str] = None,
    service: PublicSiteService = Depends(get_public_service),
):
    """Projects, newest first, optionally filtered by category ("all" for no filter)"""
    return service.get_projects(category)


@router.post("/reveal")
async def footer_click(
    request: Request,
    response: Response,
    context: AppContext = Depends(get_context),
):
    """Footer copyright click; the third quick click reveals the admin login route"""
    visitor_id = request.cookies.get(VISITOR_COOKIE)
    if not visitor_id:
        visitor_id = str(uuid.uuid4())
        response.set_cookie(key=VISITOR_COOKIE, value=visitor_id, httponly=True, samesite="lax")
    navigate_to = context.reveal_tracker.click(visitor_id)
    return {
        "navigate_to": navigate_to,
        "count": context.reveal_tracker.count_for(visitor_id),
    }
