import json

from fastapi import Request
from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config.environment import db_URI
from models.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str = db_URI):
        self.url = url
        # keep non-ASCII tags searchable as plain text
        engine_kwargs = {"json_serializer": lambda obj: json.dumps(obj, ensure_ascii=False)}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        import models  # noqa: F401  registers every table on Base.metadata

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database ready: {self.engine.url.render_as_string(hide_password=True)}")

    def drop_all(self):
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()

    def session(self) -> Session:
        return self.SessionLocal()


def get_db(request: Request):
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
