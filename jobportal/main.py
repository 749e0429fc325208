# ==============================================================
# 📁 jobportal/main.py – Job Portal API
# ==============================================================
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .db import create_db_and_tables
from .results import GENERIC_MESSAGE

# Routers
from .routers import applications, auth, dashboard, interviews, jobs, notifications, profiles

logger = logging.getLogger(__name__)


# 🚀 App Init
app = FastAPI(title=settings.APP_NAME)


# 🌐 CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 🔌 Routers
app.include_router(auth.router,          prefix="/auth",          tags=["auth"])
app.include_router(profiles.router,      prefix="/profiles",      tags=["profiles"])
app.include_router(jobs.router,          prefix="/jobs",          tags=["jobs"])
app.include_router(applications.router,  prefix="/applications",  tags=["applications"])
app.include_router(interviews.router,    prefix="/interviews",    tags=["interviews"])
app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
app.include_router(dashboard.router,     prefix="/dashboard",     tags=["dashboard"])


# 🧯 Anything a handler did not turn into a result
@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("[APP] Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": GENERIC_MESSAGE})


# 💡 Health Check
@app.get("/health")
def health():
    return {"status": "ok"}


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.on_event("startup")
def on_startup():
    configure_logging()
    create_db_and_tables()
    logger.info("[APP] %s started (env=%s)", settings.APP_NAME, settings.APP_ENV)


@app.get("/")
def root():
    return {"message": f"{settings.APP_NAME} is running"}
