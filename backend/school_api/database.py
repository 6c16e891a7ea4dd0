"""Database engine and helpers.

`Database` wraps the SQLModel/SQLAlchemy engine for one connection
string. The application builds a single instance at startup, keeps it
on `app.state.db`, and hands out one `Session` per request through the
`get_session` dependency. Scripts and tests build their own instance.

Tables are created on first successful contact with the store, so an
app started while the store is down recovers once it becomes reachable.
"""

from typing import Iterator

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from . import models  # noqa: F401  (registers the tables on SQLModel.metadata)
from .errors import StoreError


class Database:
    """Handle to the record store: owns the engine, opens sessions."""

    def __init__(self, url: str, echo: bool = False):
        kwargs = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **kwargs)
        self.tables_ready = False

    def create_db_and_tables(self) -> None:
        """Create the `student` and `course` tables if they are missing.

        Raises `StoreError` when the store cannot be reached; the next
        call tries again.
        """
        try:
            SQLModel.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreError("Database unavailable", operation="connect", cause=str(e)) from e
        self.tables_ready = True

    def session(self) -> Session:
        if not self.tables_ready:
            self.create_db_and_tables()
        return Session(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_session(request: Request) -> Iterator[Session]:
    """Yield a database `Session` for FastAPI dependency injection.

    The session comes from the `Database` stored on the application and
    is closed when the request scope finishes.
    """
    db: Database = request.app.state.db
    with db.session() as session:
        yield session
