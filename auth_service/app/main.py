# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import AuthBase, auth_engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.models import users  # noqa: F401  registers the users table
from shared.wrappers.request_logging import RequestLoggingMiddleware
from .routers import authrouter, userrouter

# Create tables
AuthBase.metadata.create_all(bind=auth_engine)

# This MUST exist for uvicorn
app = FastAPI(title=f"{settings.APP_NAME} - Auth")

# 1️⃣ CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2️⃣ Request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
setup_exception_handlers(app)

# Routers
app.include_router(authrouter.router)
app.include_router(userrouter.router)


@app.get("/health")
def health():
    return {"status": "healthy"}
