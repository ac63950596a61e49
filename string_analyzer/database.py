from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import os
from dotenv import load_dotenv
import logging

load_dotenv()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# DATABASE URL HANDLING
# ------------------------------------------------------------------------------

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    # Records only live as long as the process
    logger.info("DATABASE_URL not set, using in-memory SQLite store.")
    DATABASE_URL = "sqlite://"


# ------------------------------------------------------------------------------
# DATABASE ENGINE & SESSION
# ------------------------------------------------------------------------------
def build_engine(url: str):
    """Create an engine suited to the given database URL."""
    if url in IN_MEMORY_URLS:
        # One shared connection, otherwise every session sees an empty database.
        # Sessions share its transaction too, so a rollback in one request can
        # discard another request's uncommitted work; the store assumes a single writer.
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=280,
    )


try:
    engine = build_engine(DATABASE_URL)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base = declarative_base()
except Exception as e:
    logger.error(f"❌ Failed to create SQLAlchemy engine: {e}")
    raise e


# ------------------------------------------------------------------------------
# DB DEPENDENCY
# ------------------------------------------------------------------------------
def get_db():
    """Dependency to provide a DB session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ------------------------------------------------------------------------------
# INITIALIZATION
# ------------------------------------------------------------------------------
def init_db(bind=None):
    """Initialize database tables (runs once on startup)."""
    from string_analyzer.models import analysis  # ensure models are imported
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("✅ Database tables created successfully.")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise
