"""
FastAPI app entrypoint.

Starts the compliance scheduler (GST reminders, compliance nagging, log cleanup) unless
ENABLE_CRON_JOBS=false; the admin routes can run any job manually either way.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from compliance import __version__
from compliance.api.routes import admin, notifications
from compliance.config import settings
from compliance.db.session import SessionLocal
from compliance.scheduler.runner import build_compliance_scheduler
from compliance.services.compliance_store import ComplianceStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    compliance_scheduler = build_compliance_scheduler(settings, SessionLocal)
    compliance_scheduler.configure()
    app.state.compliance_scheduler = compliance_scheduler
    app.state.compliance_store = ComplianceStore(SessionLocal)
    if settings.enable_cron_jobs:
        compliance_scheduler.start()
    else:
        logger.info("Cron jobs disabled (ENABLE_CRON_JOBS=false); manual triggers only")
    logger.info("NammaCompliance API ready")
    yield
    compliance_scheduler.shutdown()


app = FastAPI(title="NammaCompliance API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin.router, prefix="/admin", tags=["admin"])
app.include_router(notifications.router, tags=["notifications"])


@app.get("/health")
def health() -> dict[str, str]:
    return {
        "status": "ok",
        "message": "NammaCompliance API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


@app.get("/info")
def info() -> dict:
    return {
        "name": "NammaCompliance API",
        "version": __version__,
        "description": "GST compliance and licensing management system for Karnataka vendors",
        "environment": settings.environment,
        "features": {
            "authentication": True,
            "fileUploads": False,
            "emailNotifications": settings.enable_email_notifications,
            "cronJobs": settings.enable_cron_jobs,
            "whatsappNotifications": settings.enable_whatsapp_notifications,
        },
    }
