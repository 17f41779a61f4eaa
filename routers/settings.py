# routers/settings.py
"""
Settings API routes.

The only persisted setting is the directory holding the database file.
Changing it closes the current connection, reopens at the new location and
creates any missing tables there.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, validate_database_dir
from database import Database
from dependencies import get_database, get_settings
from schemas import DatabasePathUpdate, DatabaseStatus, ExportRequest, SettingsResponse

router = APIRouter(prefix="/api/settings", tags=["settings"])


def _settings_response(settings: Settings) -> SettingsResponse:
     return SettingsResponse(
          database_dir=settings.database_dir,
          database_file=str(settings.database_file),
          strict_date_parsing=settings.strict_date_parsing,
          rent_reminder_lead_days=settings.rent_reminder_lead_days,
          renewal_reminder_lead_days=settings.renewal_reminder_lead_days,
          renewal_months=settings.renewal_months,
     )


def _reopen(db: Database, directory: str) -> None:
     try:
          db.reopen(directory)
     except (OSError, SQLAlchemyError) as e:
          raise HTTPException(
               status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
               detail=f"Could not open database in {directory}: {e}"
          )


@router.get("", response_model=SettingsResponse, summary="Current settings")
def read_settings(settings: Settings = Depends(get_settings)):
     return _settings_response(settings)


@router.put("/database-path", response_model=SettingsResponse, summary="Move the database")
def update_database_path(
     body: DatabasePathUpdate,
     settings: Settings = Depends(get_settings),
     db: Database = Depends(get_database),
):
     """
     Validate the directory (creating it if needed), then reopen the
     database there.
     """
     valid, message = validate_database_dir(body.path)
     if not valid:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
     _reopen(db, body.path)
     return _settings_response(settings)


@router.post("/database-path/reset", response_model=SettingsResponse, summary="Use the default location")
def reset_database_path(
     settings: Settings = Depends(get_settings),
     db: Database = Depends(get_database),
):
     settings.reset_database_dir()
     _reopen(db, settings.database_dir)
     return _settings_response(settings)


@router.get("/database/check", response_model=DatabaseStatus, summary="Test the database connection")
def check_database(db: Database = Depends(get_database)):
     if db.check_connection():
          return DatabaseStatus(ok=True, message="Database connection successful", path=str(db.path))
     return DatabaseStatus(ok=False, message="Database connection failed", path=str(db.path))


@router.post("/database/export", response_model=DatabaseStatus, summary="Copy the database file")
def export_database(body: ExportRequest, db: Database = Depends(get_database)):
     try:
          target = db.export_to(body.destination)
     except OSError as e:
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail=f"Export failed: {e}"
          )
     return DatabaseStatus(ok=True, message="Database exported", path=str(target))
