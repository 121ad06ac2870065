from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from voyages.core.config.settings import get_settings

DATABASE_URL = get_settings().DATABASE_URL


def enable_sqlite_foreign_keys(engine):
    """SQLite only checks foreign keys when asked to, once per connection."""
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create engine
if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

# Create session
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
