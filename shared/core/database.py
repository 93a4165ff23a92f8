from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from shared.core.config import AUTH_DATABASE_URL, TRAVEL_DATABASE_URL

# Separate bases
AuthBase = declarative_base()
Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2


def build_engine(url: str):
    # sqlite is only used for local runs and tests; one shared connection
    # keeps in-memory databases alive across sessions
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,      # max temporary extra connections
        pool_timeout=30       # wait time before failing
    )


# Auth DB
auth_engine = build_engine(AUTH_DATABASE_URL)
AuthSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=auth_engine)

# Travel DB
travel_engine = build_engine(TRAVEL_DATABASE_URL)
TravelSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=travel_engine)


# Dependency


def get_auth_db():
    db = AuthSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_travel_db():
    db = TravelSessionLocal()
    try:
        yield db
    finally:
        db.close()
