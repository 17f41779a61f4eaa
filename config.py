# config.py
"""
Application settings loaded from the environment (and an optional .env file).

Usage:
     from config import Settings

     settings = Settings.from_env()
     settings.database_file  # -> Path to the SQLite file
"""
import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_DIR = str(Path.home() / "Documents" / "PropertyTenancyData")
DEFAULT_DATABASE_FILENAME = "PropertyTenancy.sqlite3"


def _env_bool(name: str, default: str = "false") -> bool:
     return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
     """
     Runtime configuration.

     Every value can be overridden with an environment variable of the same
     name in upper case (DATABASE_DIR, SQL_ECHO, ...).
     """

     def __init__(
          self,
          database_dir: Optional[str] = None,
          database_filename: str = DEFAULT_DATABASE_FILENAME,
          sql_echo: bool = False,
          strict_date_parsing: bool = False,
          rent_reminder_lead_days: int = 3,
          renewal_reminder_lead_days: int = 7,
          renewal_months: int = 11,
          currency_symbol: str = "₹",
          log_level: str = "INFO",
     ):
          self.database_dir = database_dir or DEFAULT_DATABASE_DIR
          self.database_filename = database_filename
          self.sql_echo = sql_echo
          self.strict_date_parsing = strict_date_parsing
          self.rent_reminder_lead_days = rent_reminder_lead_days
          self.renewal_reminder_lead_days = renewal_reminder_lead_days
          self.renewal_months = renewal_months
          self.currency_symbol = currency_symbol
          self.log_level = log_level

     @classmethod
     def from_env(cls) -> "Settings":
          """Build settings from environment variables, falling back to defaults."""
          return cls(
               database_dir=os.getenv("DATABASE_DIR", DEFAULT_DATABASE_DIR),
               database_filename=os.getenv("DATABASE_FILENAME", DEFAULT_DATABASE_FILENAME),
               sql_echo=_env_bool("SQL_ECHO"),
               strict_date_parsing=_env_bool("STRICT_DATE_PARSING"),
               rent_reminder_lead_days=int(os.getenv("RENT_REMINDER_LEAD_DAYS", "3")),
               renewal_reminder_lead_days=int(os.getenv("RENEWAL_REMINDER_LEAD_DAYS", "7")),
               renewal_months=int(os.getenv("RENEWAL_MONTHS", "11")),
               currency_symbol=os.getenv("CURRENCY_SYMBOL", "₹"),
               log_level=os.getenv("LOG_LEVEL", "INFO"),
          )

     @property
     def database_file(self) -> Path:
          return Path(self.database_dir).expanduser() / self.database_filename

     def reset_database_dir(self) -> None:
          """Point the database back at the default directory."""
          self.database_dir = DEFAULT_DATABASE_DIR

     def __repr__(self):
          return f"<Settings(database_dir='{self.database_dir}', strict_date_parsing={self.strict_date_parsing})>"


def validate_database_dir(path: str) -> Tuple[bool, str]:
     """
     Check that a directory can hold the database file.

     An existing directory must be writable; a missing one is created.

     Returns:
          (valid: bool, message: str)
     """
     if not path or not path.strip():
          return False, "Path cannot be empty"

     directory = Path(path).expanduser()
     if directory.exists():
          if not directory.is_dir():
               return False, "Path exists but is not a directory"
          if os.access(directory, os.W_OK):
               return True, "Path is valid and writable"
          return False, "Path exists but is not writable"

     try:
          directory.mkdir(parents=True, exist_ok=True)
     except OSError as e:
          logger.warning("Cannot create database directory %s: %s", directory, e)
          return False, f"Cannot create directory: {e}"
     return True, "Path created successfully"
