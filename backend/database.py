# backend/database.py
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from dotenv import load_dotenv

from config import settings

load_dotenv()

# 1. Adres bazy z konfiguracji (zmienna DATABASE_URL lub domyślny SQLite)
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# 2. Hosted Postgres hands out postgres://, SQLAlchemy requires postgresql://
if SQLALCHEMY_DATABASE_URL and SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

# 3. Konfiguracja zależna od bazy
if "sqlite" in SQLALCHEMY_DATABASE_URL:
    connect_args = {"check_same_thread": False} # Tylko dla SQLite
else:
    connect_args = {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """Run a unit of work that either commits as a whole or rolls back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db():
    # Import models so every table is registered on Base.metadata
    import models.users, models.resident, models.session, models.log  # noqa: F401
    Base.metadata.create_all(bind=engine)
