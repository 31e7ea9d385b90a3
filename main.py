from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from database.connection import create_tables
from routers import auth, order, product, realtime, vendor
from core.config import settings
from core.messages import get_message
from core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from core.exceptions import BaseCustomException, InternalError
from core.response import error_response

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Marketplace Backend API",
    description="Multi-vendor marketplace: catalog, orders and account administration",
    version="1.0.0",
    debug=settings.DEBUG
)

def _envelope(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    level = logging.ERROR if status_code >= 500 else logging.WARNING
    logger.log(level, f"{error_code} [{request_id}] on {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status_code,
        content=error_response(message=message, error_code=error_code, details=details),
        headers=headers
    )

@app.exception_handler(BaseCustomException)
async def custom_exception_handler(request: Request, exc: BaseCustomException):
    return _envelope(request, exc.status_code, exc.message, exc.__class__.__name__, exc.details)

# Malformed bodies and parameters are client errors, reported per field
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": '.'.join(str(x) for x in error['loc']), "message": error['msg'], "type": error['type']}
        for error in exc.errors()
    ]
    return _envelope(request, 400, get_message("validation.failed"), "VALIDATION_ERROR", {"errors": errors})

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error occurred"
    return _envelope(
        request,
        exc.status_code,
        message,
        "HTTP_ERROR",
        {"status_code": exc.status_code, "detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Unexpected failures surface as InternalError carrying the underlying message."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError(
        get_message("internal.error", error=str(exc)),
        details={"request_id": getattr(request.state, 'request_id', 'unknown')}
    )
    return _envelope(request, error.status_code, error.message, error.__class__.__name__, error.details)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
)

# Add custom middleware (order matters - first added is executed last)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(product.router, prefix="/api/products", tags=["Products"])
app.include_router(vendor.router, prefix="/api/vendors", tags=["Vendors"])
app.include_router(order.router, prefix="/api/orders", tags=["Orders"])
app.include_router(realtime.router, tags=["Order Messages"])

# Uploaded media is served as-is
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting Marketplace Backend API ({settings.ENVIRONMENT})")
    create_tables()
    logger.info("Database tables ready")

@app.get("/")
def root():
    return {"message": "Marketplace Backend API", "status": "healthy", "version": "1.0.0"}

@app.get("/api/health")
def health_check():
    return {"status": "ok", "message": "Backend is running"}
