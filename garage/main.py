# garage/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, error handlers that map domain errors to
`{"error": message}` bodies, and all routers under /api.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from garage.routers import auth, vehicles, maintenance, forecast, health
from garage.database import create_tables
from garage.config import settings
from garage.errors import GarageError
from garage.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Garage API",
    description="Vehicles, maintenance history, and sharing between users.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers ───────────────────────────────────────────────────────────
def _describe_validation_error(err: dict) -> str:
    field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query"))
    message = err.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


@app.exception_handler(GarageError)
async def garage_error_handler(request: Request, exc: GarageError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = [_describe_validation_error(err) for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": " ".join(messages) or "Invalid data"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)},
                        headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,        prefix="/api", tags=["Auth"])
app.include_router(vehicles.router,    prefix="/api", tags=["Vehicles"])
app.include_router(maintenance.router, prefix="/api", tags=["Maintenance"])
app.include_router(forecast.router,    prefix="/api", tags=["Forecast"])
app.include_router(health.router,      prefix="/api", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Garage API starting up...")
    create_tables()
    logger.info("Database tables ready")
    if settings.uses_default_secret:
        logger.warning("JWT_SECRET is not set; using the built-in development secret")
    if not settings.OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY is not set; /api/previsao will return 500")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Garage API shutting down...")
