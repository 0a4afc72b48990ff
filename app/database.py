# database.py
import logging
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from app.config import build_sqlalchemy_db_url, settings


logger = logging.getLogger(__name__)


def _is_sqlite(db_url: str) -> bool:
    return db_url.startswith("sqlite")


def _build_connect_args(db_url: str) -> dict:
    if _is_sqlite(db_url):
        return {"check_same_thread": False, "timeout": settings.sqlite_busy_timeout}
    return {}


def mask_db_url(db_url: str) -> str:
    try:
        return str(make_url(db_url).set(password="***"))
    except ArgumentError:
        return db_url


def _install_sqlite_hooks(target: Engine) -> None:
    # pysqlite emits its own deferred BEGIN, which breaks SAVEPOINT and lets two
    # writers deadlock on lock upgrade. Take over transaction control instead.
    @event.listens_for(target, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(target, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(db_url: str) -> Engine:
    built = create_engine(db_url, pool_pre_ping=True, future=True, connect_args=_build_connect_args(db_url))
    if _is_sqlite(db_url):
        _install_sqlite_hooks(built)
    logger.info("SQLAlchemy ORM db_url=%s", mask_db_url(db_url))
    return built


_db_url = build_sqlalchemy_db_url(settings)
engine = build_engine(_db_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
