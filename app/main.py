from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import settings
from .core.database import close_db_connections, init_models
from .core.error_handlers import general_exception_handler
from .core.logging import setup_logging

# Import all routers
from .routers import (
    health, auth, users, classes, students, attendance, fees, notifications, reports, stats, cron
)

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

    if settings.auto_create_tables:
        await init_models()

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_db_connections()
    logger.info("Shutdown complete")

app = FastAPI(
    title="Attendance Tracker API",
    description="School attendance tracking with admin-approved accounts, fees, notifications and scheduled reports",
    version=settings.app_version,
    lifespan=lifespan
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {process_time:.3f}s")
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

app.add_exception_handler(Exception, general_exception_handler)

# Include all routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(users.preferences_router)
app.include_router(classes.router)
app.include_router(students.router)
app.include_router(attendance.router)
app.include_router(fees.router)
app.include_router(notifications.router)
app.include_router(reports.router)
app.include_router(stats.router)
app.include_router(cron.router)

@app.get("/")
async def root():
    return {
        "message": "Attendance Tracker API",
        "version": settings.app_version,
        "features": ["Admin approval", "Attendance", "Classes", "Students", "Fees", "Notifications", "Reports"],
        "status": "active"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.environment == "development")
