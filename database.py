# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- A Database object owning the engine for a SQLite file in a configurable directory
- Session helpers for the persistence store and FastAPI routes
- Reopen / connection-check / export utilities

Usage:
     from config import Settings
     from database import Database

     db = Database(Settings.from_env())
     db.open()
     with db.session() as session:
          session.query(Address).all()
"""
import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import Settings
from models import Base

logger = logging.getLogger(__name__)


class Database:
     """
     Owns the engine and session factory for one SQLite file.

     Not thread-safe: callers serialize access (one request at a time, or a
     single worker), matching the single-user deployment.
     """

     def __init__(self, settings: Settings):
          self.settings = settings
          self.engine: Optional[Engine] = None
          self.SessionLocal: Optional[sessionmaker] = None

     @property
     def path(self) -> Path:
          return self.settings.database_file

     @property
     def url(self) -> str:
          return f"sqlite:///{self.path}"

     @property
     def is_open(self) -> bool:
          return self.engine is not None

     def open(self) -> None:
          """
          Connect to the database file and create missing tables.

          The directory is created if needed.
          """
          if self.is_open:
               return
          self.path.parent.mkdir(parents=True, exist_ok=True)

          self.engine = create_engine(
               self.url,
               echo=self.settings.sql_echo,  # Log SQL if SQL_ECHO=true
               connect_args={"check_same_thread": False},
          )
          self.SessionLocal = sessionmaker(
               bind=self.engine,
               autocommit=False,
               autoflush=False,
               expire_on_commit=False,
          )
          self.init_db()
          logger.info("Opened database at %s", self.path)

     def close(self) -> None:
          """Dispose of the engine; a later open() reconnects."""
          if self.engine is not None:
               self.engine.dispose()
               logger.info("Closed database at %s", self.path)
          self.engine = None
          self.SessionLocal = None

     def reopen(self, directory: Optional[str] = None) -> None:
          """
          Close the current connection and open the database again,
          optionally in a new directory.

          Args:
               directory: New directory for the database file (keeps the current one if None)
          """
          self.close()
          if directory is not None:
               self.settings.database_dir = directory
          self.open()

     def init_db(self) -> None:
          """
          Initialize database tables.

          Creates all tables defined in the models if they don't exist.
          For upgrades of existing files, use Alembic migrations instead.
          """
          Base.metadata.create_all(bind=self.engine, checkfirst=True)

     def table_names(self) -> list[str]:
          return inspect(self.engine).get_table_names()

     @contextmanager
     def session(self) -> Generator[Session, None, None]:
          """
          Context manager for database sessions.

          Usage:
               with db.session() as session:
                    addresses = session.query(Address).all()

          Yields:
               Session: SQLAlchemy database session
          """
          if not self.is_open:
               self.open()
          session = self.SessionLocal()
          try:
               yield session
               session.commit()
          except Exception:
               session.rollback()
               raise
          finally:
               session.close()

     def check_connection(self) -> bool:
          """
          Test database connectivity.

          Returns:
               bool: True if connection successful, False otherwise
          """
          try:
               if not self.is_open:
                    self.open()
               with self.engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
               return True
          except Exception as e:
               logger.error("Database connection failed: %s", e)
               return False

     def export_to(self, destination: str) -> Path:
          """
          Copy the database file to ``destination`` (a directory or file path).

          Returns:
               Path of the written copy
          """
          target = Path(destination).expanduser()
          if target.is_dir() or destination.endswith(("/", "\\")):
               target.mkdir(parents=True, exist_ok=True)
               target = target / self.path.name
          else:
               target.parent.mkdir(parents=True, exist_ok=True)
          # Release pooled connections so the copy sees a consistent file
          if self.engine is not None:
               self.engine.dispose()
          shutil.copy2(self.path, target)
          logger.info("Exported database to %s", target)
          return target
