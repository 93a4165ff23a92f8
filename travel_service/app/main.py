# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, travel_engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.request_logging import RequestLoggingMiddleware
from . import models  # noqa: F401  registers the travel tables
from .router import bookings_router, destinations_router, packages_router

# Create tables
Base.metadata.create_all(bind=travel_engine)

app = FastAPI(title=f"{settings.APP_NAME} - Travel")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)

app.include_router(destinations_router.router)
app.include_router(packages_router.router)
app.include_router(bookings_router.router)


@app.get("/health")
def health():
    return {"status": "healthy"}
