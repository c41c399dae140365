"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dealership.config import get_settings
from dealership.database import db, init_db
from dealership.exception_handlers import setup_exception_handlers
from dealership.migrations import run_migrations
from dealership.routers import contract_files, contracts, customers, vehicles
from dealership.seed import seed_sample_data
from dealership.storage import get_storage

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("dealership")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    current = get_settings()
    logger.info("Starting %s (USE_SQLITE=%s)", current.app_name, current.use_sqlite)
    db.connect(current)
    await init_db(db)
    logger.info("Database initialized (%s)", db.backend_name)

    if current.seed_on_startup:
        async with db.session() as session:
            await seed_sample_data(session)
        logger.info("Sample data seeding completed")

    get_storage.cache_clear()
    storage = get_storage()
    if storage.is_configured:
        storage.ensure_client()
        logger.info("Object storage ready (bucket %s)", storage.bucket)
    else:
        logger.warning("Object storage not configured: %s", "; ".join(storage.configuration_errors()))

    logger.info("API available at: %s", current.api_prefix)

    yield

    # Shutdown
    logger.info("Shutting down %s", current.app_name)
    await db.disconnect()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## Dealer Management System API

    Back-office API for a vehicle dealership.

    ### Entities:
    * **Vehicles**: Inventory with VIN, pricing and availability
    * **Customers**: Customer contact records
    * **Contracts**: Rental and lease contracts linking a vehicle and a customer
    * **Contract files**: Documents and images stored in object storage
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(vehicles.router, prefix=settings.api_prefix)
app.include_router(customers.router, prefix=settings.api_prefix)
app.include_router(contracts.router, prefix=settings.api_prefix)
app.include_router(contract_files.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Dealer Management System API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.app_version,
        "database": db.backend_name if db.is_connected else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.post("/seed-data")
async def seed_data():
    """Insert sample vehicles and customers into empty tables."""
    async with db.session() as session:
        inserted = await seed_sample_data(session)
    return {"message": "Sample data seeded successfully", "inserted": inserted}


@app.post("/migrate-db")
async def migrate_db():
    """Re-run the additive column migrations."""
    outcomes = await run_migrations(db.engine)
    return {
        "message": "Database migration completed",
        "steps": [
            {"table": o.table, "column": o.column, "status": o.status}
            for o in outcomes
        ],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dealership.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.debug,
    )
