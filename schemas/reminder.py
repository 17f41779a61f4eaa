"""
Pydantic schemas for reminder and settings endpoints.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class PendingReminderResponse(BaseModel):
     """A notification waiting to be delivered."""
     identifier: str
     title: str
     body: str
     fire_at: datetime
     kind: Optional[str] = None
     tenancy_id: Optional[int] = None

     model_config = ConfigDict(from_attributes=True)


class ScheduleResultResponse(BaseModel):
     """Outcome of a scheduling call."""
     scheduled: list[str] = Field(default_factory=list)
     failed: list[str] = Field(default_factory=list)
     cleared: list[str] = Field(default_factory=list)

     model_config = ConfigDict(from_attributes=True)


class CheckRequest(BaseModel):
     """Optional 'as of' moment for bulk checks (defaults to now)."""
     as_of: Optional[datetime] = None


class SettingsResponse(BaseModel):
     database_dir: str
     database_file: str
     strict_date_parsing: bool
     rent_reminder_lead_days: int
     renewal_reminder_lead_days: int
     renewal_months: int


class DatabasePathUpdate(BaseModel):
     """Request body for PUT /api/settings/database-path."""
     path: str = Field(..., description="Directory that will hold the database file")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {"path": "/home/landlord/Documents/PropertyTenancyData"}
          }
     )


class DatabaseStatus(BaseModel):
     ok: bool
     message: str
     path: Optional[str] = None


class ExportRequest(BaseModel):
     destination: str = Field(..., description="Directory or file path for the copy")
