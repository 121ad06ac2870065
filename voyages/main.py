from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import time
from typing import Callable

from voyages.db.base import Base
from voyages.db.session import engine, SessionLocal
from voyages.db.init_db import init_db
from voyages.core.errors import VoyagesError
from voyages.routers import forms, sprints
from voyages.core.config.settings import get_settings
from voyages.core.config.logging_config import setup_logging

# Setup logging
logger = setup_logging()

# Initialize FastAPI app
app = FastAPI(
    title=get_settings().PROJECT_NAME,
    debug=get_settings().DEBUG,
    openapi_url=f"{get_settings().API_V1_PREFIX}/openapi.json",
    docs_url=f"{get_settings().API_V1_PREFIX}/docs",
    redoc_url=f"{get_settings().API_V1_PREFIX}/redoc",
)

@app.on_event("startup")
def startup_event():
    # Initialize database
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        init_db(db)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise
    finally:
        db.close()

# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next: Callable):
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.info(
        f"Method: {request.method} Path: {request.url.path} "
        f"Status: {response.status_code} Duration: {duration:.2f}s"
    )
    return response

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Include routers with prefix
api_prefix = get_settings().API_V1_PREFIX
app.include_router(forms.router, prefix=api_prefix)
app.include_router(sprints.router, prefix=api_prefix)

# Exception handlers
@app.exception_handler(VoyagesError)
async def voyages_exception_handler(request: Request, exc: VoyagesError):
    logger.warning(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logger.error(f"HTTP Exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled Exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )

# Health check endpoint
@app.get("/health")
def health_check():
    status_info = {
        "status": "healthy",
        "timestamp": time.time(),
        "database": "connected",
    }

    # Check database connection
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        status_info["database"] = "disconnected"
        status_info["status"] = "unhealthy"
        logger.error(f"Database health check failed: {str(e)}")
    finally:
        db.close()

    return status_info


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=get_settings().HOST, port=get_settings().PORT)
