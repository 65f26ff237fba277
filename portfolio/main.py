import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from supabase import Client
from typing import Callable, Optional

from portfolio.config import settings as default_settings
from portfolio.config.settings import Settings
from portfolio.core.context import AppContext
from portfolio.core.dependencies import limiter
from portfolio.core.errors import PortfolioError, ValidationError
from portfolio.modules.auth import routes as auth_routes
from portfolio.modules.public import routes as public_routes
from portfolio.modules.resources.routes import build_admin_routers

logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


def create_app(
    settings: Optional[Settings] = None,
    supabase: Optional[Client] = None,
    session_client_factory: Optional[Callable[[str], Client]] = None,
) -> FastAPI:
    """Build the application. Raises ConfigurationError when Supabase is not configured.

    `session_client_factory` builds the client admin routes use for a given access token.
    """
    settings = settings or default_settings
    context = AppContext(settings, supabase, session_client_factory)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        redirect_slashes=False,
    )
    app.state.context = context
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(PortfolioError)
    async def portfolio_error_handler(request: Request, exc: PortfolioError):
        content = {"detail": exc.message}
        if isinstance(exc, ValidationError):
            content["errors"] = exc.errors
        notifier = getattr(request.state, "notifier", None)
        if notifier is not None:
            content["notifications"] = jsonable_encoder(notifier.items)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        if settings.is_production:
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Navigable pages
    app.include_router(public_routes.pages_router)
    app.include_router(auth_routes.pages_router)

    # API routes
    app.include_router(auth_routes.router, prefix="/api/v1")
    app.include_router(public_routes.router, prefix="/api/v1")
    for admin_router in build_admin_routers(context.resources):
        app.include_router(admin_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event():
        logger.info("Application startup")
        context.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Application shutdown")
        context.close()

    @app.get("/health")
    @limiter.exempt
    async def health():
        return {"status": "healthy"}

    @app.get("/ready")
    @limiter.exempt
    async def ready():
        """Readiness probe: the Supabase client can be created."""
        client = context.supabase
        return {"status": "ready" if client is not None else "unavailable"}

    return app


app = create_app()
