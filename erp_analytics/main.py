from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import logging

# Import database components
from erp_analytics.database.database import sync_engine, Base

# Import routers
from erp_analytics.modules.reports.routers import (
    sales_router as sales_reports_router,
    purchases_router as purchases_reports_router,
    inventory_router as inventory_reports_router,
    financial_router as financial_reports_router
)
from erp_analytics.modules.reports.exceptions import ReportGenerationError

# Import models for table creation
import erp_analytics.modules.customers.models
import erp_analytics.modules.suppliers.models
import erp_analytics.modules.products.models
import erp_analytics.modules.invoices.models

from erp_analytics.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="ERP Analytics API",
    description="Read-only report aggregation over ERP sales, purchasing, inventory and invoices",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReportGenerationError)
async def report_generation_error_handler(request: Request, exc: ReportGenerationError):
    return JSONResponse(status_code=500, content={"error": exc.message})


# Include routers
app.include_router(sales_reports_router, prefix="/api")
app.include_router(purchases_reports_router, prefix="/api")
app.include_router(inventory_reports_router, prefix="/api")
app.include_router(financial_reports_router, prefix="/api")

# Create database tables (only for development)
if settings.ENVIRONMENT == "development":
    Base.metadata.create_all(bind=sync_engine)

@app.get("/")
async def read_root():
    return {
        "message": "ERP Analytics API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

@app.on_event("startup")
async def startup_event():
    logger.info("ERP Analytics API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("ERP Analytics API shutting down...")
