"""
Sales Curiosity - FastAPI Application

Backend for the Sales Curiosity browser extension and web app: AI analysis
and email drafting for LinkedIn profiles, accounts and organizations.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import use_mock_ai
from .routers import auth, export, organization, prospects, user
from .routers.deps import allowed_origin_regex, is_rejected_origin

app = FastAPI(
    title="Sales Curiosity API",
    description="AI sales intelligence and outreach drafting for LinkedIn profiles",
    version="1.0.0"
)

# CORS headers for the extension and the web app; origin_gate rejects
# everything else with 403.
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=allowed_origin_regex(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def origin_gate(request: Request, call_next):
    """403 for foreign origins on /api, before auth and body parsing."""
    if request.url.path.startswith("/api/") and is_rejected_origin(request):
        return JSONResponse(status_code=403, content={"ok": False, "error": "Forbidden"})
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render errors as {ok: false, error} so clients can check one field."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"ok": False, "error": "Invalid request body", "details": str(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    print(f"[API] Unhandled error on {request.url.path}: {exc}", flush=True)
    return JSONResponse(status_code=500, content={"ok": False, "error": "Internal Server Error"})


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Sales Curiosity API",
        "version": "1.0.0",
        "mock_ai": use_mock_ai(),
    }


@app.get("/health")
async def health_check():
    """Health check with database connection test."""
    from .services.db.supabase_client import test_connection

    db_ok = test_connection()

    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected"
    }


# Include routers
app.include_router(prospects.router, prefix="/api/prospects", tags=["Prospects"])
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(user.router, prefix="/api/user", tags=["User"])
app.include_router(organization.router, prefix="/api/organization", tags=["Organization"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])
