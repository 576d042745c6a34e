from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

from cohort_engine.infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

# Create Base instance
Base = declarative_base()

DATABASE_URL = settings.database_url

# Engine creation
is_sqlite = DATABASE_URL.startswith("sqlite:")
if is_sqlite:
    # SQLite connections are shared across FastAPI worker threads
    engine = create_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}, pool_pre_ping=True
    )
    logger.info("Using SQLite database")
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)
    logger.info("Using PostgreSQL database")

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency function to get a database session.
    Used with FastAPI's dependency injection system.

    Yields:
        Session: A SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create every table registered on Base."""
    # Import models so they register with Base.metadata
    import cohort_engine.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


def check_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Error connecting to the database: {str(e)}")
        return False
