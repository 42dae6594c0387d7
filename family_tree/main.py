import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from family_tree.config import settings
from family_tree.core.exceptions import BackendError, DeletionConstraintError
from family_tree.modules.auth import routes as auth_routes
from family_tree.modules.tree import routes as tree_routes
from family_tree.modules.members import routes as members_routes
from family_tree.modules.women import routes as women_routes
from family_tree.modules.branches import routes as branches_routes
from family_tree.modules.notables import routes as notables_routes
from family_tree.modules.search import routes as search_routes
from family_tree.modules.statistics import routes as statistics_routes
from family_tree.modules.admin import routes as admin_routes
from family_tree.modules.notifications import routes as notifications_routes
from family_tree.modules.events import routes as events_routes
from family_tree.modules.news import routes as news_routes
from family_tree.modules.archive import routes as archive_routes
from family_tree.modules.spreadsheet import routes as spreadsheet_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(BackendError)
async def backend_exception_handler(request: Request, exc: BackendError):
    logger.error("Backend failure on %s %s: %s", request.method, request.url.path, exc)
    if settings.is_production:
        return JSONResponse(status_code=502, content={"detail": "Backend service unavailable"})
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(DeletionConstraintError)
async def deletion_constraint_handler(request: Request, exc: DeletionConstraintError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "children": exc.children})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


SECURITY_HEADERS = [
    (b"X-Content-Type-Options", b"nosniff"),
    (b"X-Frame-Options", b"DENY"),
    (b"X-XSS-Protection", b"1; mode=block"),
    (b"Referrer-Policy", b"same-origin"),
]


class SecurityHeadersMiddleware:
    """Pure ASGI middleware appending SECURITY_HEADERS to every HTTP response."""

    def __init__(self, app, headers=None):
        self.app = app
        self.headers = list(headers or SECURITY_HEADERS)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                message["headers"] = list(message.get("headers", [])) + self.headers
            await send(message)

        await self.app(scope, receive, send_wrapper)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(tree_routes.router, prefix="/api/v1")
app.include_router(members_routes.router, prefix="/api/v1")
app.include_router(women_routes.router, prefix="/api/v1")
app.include_router(branches_routes.router, prefix="/api/v1")
app.include_router(branches_routes.locations_router, prefix="/api/v1")
app.include_router(notables_routes.router, prefix="/api/v1")
app.include_router(search_routes.router, prefix="/api/v1")
app.include_router(statistics_routes.router, prefix="/api/v1")
app.include_router(admin_routes.router, prefix="/api/v1")
app.include_router(notifications_routes.router, prefix="/api/v1")
app.include_router(events_routes.router, prefix="/api/v1")
app.include_router(news_routes.router, prefix="/api/v1")
app.include_router(archive_routes.audio_router, prefix="/api/v1")
app.include_router(archive_routes.documents_router, prefix="/api/v1")
app.include_router(spreadsheet_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info(f"Application startup ({settings.environment})")
    if not settings.supabase_service_role_key:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY not set; deleting users will keep their auth accounts")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe"""
    return {"status": "ready"}
