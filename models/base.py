from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Table and column names are declared explicitly so the on-disk schema
     (camelCase columns, dates as text) stays readable by older copies of
     the database file.
     """
