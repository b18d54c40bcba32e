from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from repair_cafe.core.config import settings

_connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

# The engine owns the connection pool for the relational datastore.
engine = create_engine(
    settings.DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always release the connection, even if the endpoint raised.
        db.close()
