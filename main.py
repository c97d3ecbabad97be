from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.exceptions import (
    RouteOptimizationError,
    TokenExchangeError,
    UpstreamOptimizationError,
    ValidationError,
)
from app.core.logging_config import logger
from app.routers import geocoding, optimization

app = FastAPI(
    title="Delivery Route Optimization API",
    version="1.0.0",
    redirect_slashes=False  # Disable automatic redirects to prevent POST data loss
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(optimization.router, prefix="/api", tags=["Optimization"])
app.include_router(geocoding.router, prefix="/api", tags=["Geocoding"])


def error_status_code(exc: RouteOptimizationError) -> int:
    """HTTP status for a routing core error."""
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, TokenExchangeError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, UpstreamOptimizationError):
        if exc.status_code and exc.status_code >= 400:
            return exc.status_code
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(RouteOptimizationError)
async def route_optimization_error_handler(request: Request, exc: RouteOptimizationError):
    status_code = error_status_code(exc)
    if status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.kind}: {exc.message}")
    else:
        logger.warning(f"{request.url.path} rejected: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
