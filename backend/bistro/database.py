from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .config import settings

_url = settings.resolved_database_url
_is_sqlite = _url.startswith("sqlite")

# check_same_thread=False: FastAPI runs sync endpoints in a threadpool
engine = create_engine(
    _url,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    pool_pre_ping=not _is_sqlite,
)


if _is_sqlite:
    @event.listens_for(engine, "connect")
    def enable_sqlite_fk(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
