from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from app.config import settings

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    # SQLite-specific settings
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    **(
        {}
        if _is_sqlite
        else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
    ),
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/taxis")
        def list_taxis(db: Session = Depends(get_db)):
            return db.query(Taxi).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
