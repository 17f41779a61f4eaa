# services/errors.py
"""
Typed failures raised by the persistence store.

A missing record on a single read is not an error: the store returns None.
"""


class TenancyStoreError(Exception):
     """Base class for persistence failures."""


class InvalidId(TenancyStoreError):
     """The operation needs a previously assigned identity that is absent."""

     def __init__(self, entity: str, record_id=None):
          self.entity = entity
          self.record_id = record_id
          if record_id is None:
               message = f"{entity} has no identity; save it before updating"
          else:
               message = f"{entity} with ID {record_id} not found"
          super().__init__(message)


class SaveFailed(TenancyStoreError):
     """An insert did not complete."""


class UpdateFailed(TenancyStoreError):
     """An update did not complete."""


class DeleteFailed(TenancyStoreError):
     """A delete did not complete."""


class DateParseError(ValueError):
     """Stored date text does not match the yyyy-MM-dd HH:mm:ss format."""

     def __init__(self, value: str):
          self.value = value
          super().__init__(f"Cannot parse stored date {value!r}")
