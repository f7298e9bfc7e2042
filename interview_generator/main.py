import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from interview_generator.api.v1.checkout import checkout_router
from interview_generator.api.v1.tables import tables_router
from interview_generator.core.config import settings
from interview_generator.core.exceptions import (
    AppError,
    app_error_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from interview_generator.core.logger import setup_logger

# Setup logger with fresh log file on startup
setup_logger(log_level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO, clear_log=True)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup: AI Interview Generator")
    if not settings.STRIPE_SECRET_KEY or not settings.STRIPE_PRICE_ID:
        logger.warning("Stripe is not configured; checkout requests will fail")
    yield
    logger.info("Application shutdown")

app = FastAPI(
    title="AI Interview Generator",
    description="Paid generation and export of ideal-customer interview questions.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for simplicity in development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# Include routers
app.include_router(checkout_router, prefix="/api", tags=["checkout"])
app.include_router(tables_router, prefix="/api", tags=["export"])

@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}
