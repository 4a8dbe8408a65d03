"""
FastAPI Main Application
"""
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security.api_key import APIKeyHeader
from datetime import datetime
import logging
import sys
import os

# Path setup
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core import get_settings
from app.api import (
    health,
    products,
    clients,
    stock,
    sales,
    quotations,
    invoices,
    deliveries,
    production,
    losses,
    accounting,
    employees,
    objectives,
    reports,
    settings as settings_api,
    catalog,
    admin,
    maintenance,
)

settings = get_settings()

# Logging - logs/ n'est pas toujours accessible en écriture
log_handlers = [logging.StreamHandler(sys.stdout)]
try:
    os.makedirs('logs', exist_ok=True)
    log_handlers.append(logging.FileHandler('logs/app.log', encoding='utf-8'))
except (OSError, PermissionError):
    pass

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=log_handlers
)
logger = logging.getLogger(__name__)

# FastAPI App
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## Cornerstone GESCO API

    Gestion commerciale d'une briqueterie:
    - Produits, stock (seuils min/max), clients
    - Ventes, devis, factures (TVA, FAC-YYYYMM-NNN), livraisons
    - Production, pertes, objectifs
    - Comptabilité (dépenses, résultat), employés, heures supplémentaires
    - Rapports par période + export CSV

    **Maintenance:** factures en retard et devis expirés marqués chaque jour
    **Import:** reprise des données de l'ancien backend Supabase
    """,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# API Key Security
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str = Depends(api_key_header)):
    """API key verification"""
    if api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key"
        )
    return api_key


# Startup
@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    try:
        from database import Base, engine
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database initialized")
    except Exception as e:
        logger.error(f"❌ Database initialization error: {e}")

    if not settings.scheduler_enabled:
        logger.info("⏸️  Maintenance scheduler disabled (SCHEDULER_ENABLED=false)")
        return

    try:
        from services.scheduled_maintenance import get_scheduler
        scheduler = get_scheduler()
        await scheduler.start()
        logger.info(f"✅ Maintenance scheduler started (daily at {scheduler.maintenance_time.strftime('%H:%M')})")
    except Exception as e:
        logger.error(f"❌ Failed to start scheduler: {e}", exc_info=True)


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown"""
    logger.info("Shutting down...")

    try:
        from services.scheduled_maintenance import get_scheduler
        await get_scheduler().stop()
    except Exception as e:
        logger.error(f"Error stopping scheduler: {e}")


# Root
@app.get("/", tags=["Root"])
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
        "timestamp": datetime.now()
    }


# Include routers
app.include_router(health.router)  # No auth required

for module in (
    products,
    clients,
    stock,
    sales,
    quotations,
    invoices,
    deliveries,
    production,
    losses,
    accounting,
    employees,
    objectives,
    reports,
    settings_api,
    catalog,
    maintenance,
    admin,
):
    app.include_router(module.router, dependencies=[Depends(verify_api_key)])

logger.info(f"✅ {len(app.routes)} routes registered (module routers protected with API key)")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
