# dependencies.py
"""
FastAPI dependencies shared by the routers.

The app factory in main.py builds one Database, TenancyStore and
ReminderScheduler and stores them on ``app.state``; routes receive them
through these functions instead of importing module-level singletons.
"""
from fastapi import HTTPException, Request, status

from config import Settings
from database import Database
from services import (
     DateParseError,
     DeleteFailed,
     InvalidId,
     ReminderScheduler,
     RentSchedule,
     SaveFailed,
     TenancyStore,
     TenancyStoreError,
     UpdateFailed,
)


def get_settings(request: Request) -> Settings:
     return request.app.state.settings


def get_database(request: Request) -> Database:
     return request.app.state.database


def get_store(request: Request) -> TenancyStore:
     return request.app.state.store


def get_scheduler(request: Request) -> ReminderScheduler:
     return request.app.state.scheduler


def get_rent_schedule(request: Request) -> RentSchedule:
     settings = request.app.state.settings
     return RentSchedule(
          request.app.state.store,
          renewal_months=settings.renewal_months,
          renewal_reminder_lead_days=settings.renewal_reminder_lead_days,
     )


def http_error(error: Exception) -> HTTPException:
     """Translate a store failure into the HTTP error returned to the client."""
     if isinstance(error, InvalidId):
          return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
     if isinstance(error, (SaveFailed, UpdateFailed, DeleteFailed)):
          return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
     if isinstance(error, DateParseError):
          return HTTPException(
               status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
               detail=f"Stored data is corrupt: {error}",
          )
     if isinstance(error, TenancyStoreError):
          return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
     raise error
