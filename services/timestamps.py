# services/timestamps.py
"""
Conversion between datetimes and the persisted date text.

Dates are stored as ``yyyy-MM-dd HH:mm:ss`` so the database file stays
compatible with earlier versions of the app.
"""
import logging
from datetime import datetime
from typing import Optional

from .errors import DateParseError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def now() -> datetime:
     """Current local time truncated to the stored precision."""
     return datetime.now().replace(microsecond=0)


def to_wall_clock(value: datetime) -> datetime:
     """
     Local wall-clock form of a moment.

     Stored dates and due dates are naive local times; an aware value (an
     ISO-8601 string with "Z" or an offset) is converted to local time and
     its tzinfo dropped so the two can be compared.
     """
     if value.tzinfo is not None and value.utcoffset() is not None:
          return value.astimezone().replace(tzinfo=None)
     return value.replace(tzinfo=None)


def format_timestamp(value: datetime) -> str:
     """Render a datetime in the persisted text format (seconds precision)."""
     return to_wall_clock(value).strftime(DATE_FORMAT)


def parse_timestamp(value: Optional[str], strict: bool = False) -> datetime:
     """
     Parse persisted date text.

     Args:
          value: Text read from a date column
          strict: Raise instead of substituting the current time

     Returns:
          The parsed datetime, or now() when the text is malformed

     Raises:
          DateParseError: If ``strict`` and the text does not parse
     """
     try:
          return datetime.strptime(value, DATE_FORMAT)
     except (TypeError, ValueError):
          if strict:
               raise DateParseError(value)
          logger.warning("Unparseable stored date %r, substituting now", value)
          return now()
