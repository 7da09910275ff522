import os

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./reviews.db")


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Build the process-wide engine. Called once at import; never rebuilt per request."""
    connect_args: dict = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, echo=echo, pool_pre_ping=True)


engine = create_db_engine(DATABASE_URL, echo=os.getenv("SQL_ECHO", "").lower() in ("1", "true", "yes"))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
