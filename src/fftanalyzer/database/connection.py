# database/connection.py
from sqlalchemy import event
from sqlmodel import SQLModel, create_engine


class DatabaseConnection:
    """
    Manages the database engine.

    SQLite engines are opened with ``check_same_thread=False`` so sessions can
    be created on worker threads, and with foreign keys enforced so deleting a
    record cascades to its samples.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args = {"check_same_thread": False} if self.is_sqlite else {}
        self.engine = create_engine(url, echo=echo, connect_args=connect_args)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def create_tables(self) -> None:
        """Create all tables defined in SQLModel metadata."""
        # Register table models on the metadata before create_all
        from . import models  # noqa: F401

        SQLModel.metadata.create_all(self.engine)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

