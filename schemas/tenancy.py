"""
Pydantic schemas for tenancies and their due-date read model.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from .address import Address


def _now() -> datetime:
     return datetime.now().replace(microsecond=0)


class TenancyBase(BaseModel):
     """Fields shared by unsaved and saved tenancies."""
     name: str = Field(default="", description="Tenant name")
     contact: str = Field(default="", description="Phone number or e-mail")
     address_id: Optional[int] = Field(None, gt=0, description="Linked address, if any")
     lease_start_date: datetime = Field(default_factory=_now)
     lease_agreement_signed: bool = False
     advance_amount: float = Field(default=0.0, ge=0, description="Advance / deposit held")
     agreed_rent: float = Field(default=0.0, ge=0, description="Monthly rent")
     monthly_due_date: int = Field(
          default=1,
          ge=1,
          le=28,
          description="Day of month rent is due (capped at 28 so every month has it)",
     )
     agreement_signed_date: datetime = Field(default_factory=_now)
     comments: str = ""


class TenancyCreate(TenancyBase):
     """Schema for a tenancy that has not been saved yet."""

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "John",
                    "contact": "+91 98450 00000",
                    "address_id": 1,
                    "lease_start_date": "2024-01-01T00:00:00",
                    "lease_agreement_signed": True,
                    "advance_amount": 50000.0,
                    "agreed_rent": 15000.0,
                    "monthly_due_date": 5,
                    "agreement_signed_date": "2024-01-01T00:00:00",
                    "comments": ""
               }
          }
     )


class Tenancy(TenancyBase):
     """
     A saved tenancy.

     ``address`` is resolved through an outer join and is None when the
     tenancy has no address or its address has been deleted.
     """
     id: int = Field(..., gt=0, description="Identity assigned by the store")
     address: Optional[Address] = None

     model_config = ConfigDict(from_attributes=True)


class RenewalStatus(str, Enum):
     """Where a tenancy sits relative to its renewal date."""
     UPCOMING = "UPCOMING"
     REMINDER_WINDOW = "REMINDER_WINDOW"
     DUE = "DUE"


class TenancyDueResponse(BaseModel):
     """Due-date read model for one tenancy."""
     tenancy_id: int
     reference_date: datetime = Field(..., description="Latest payment date, or lease start if unpaid")
     next_due_date: datetime
     is_overdue: bool
     renewal_due_date: datetime
     renewal_status: RenewalStatus

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenancy_id": 1,
                    "reference_date": "2024-02-05T00:00:00",
                    "next_due_date": "2024-03-05T00:00:00",
                    "is_overdue": False,
                    "renewal_due_date": "2024-12-01T00:00:00",
                    "renewal_status": "UPCOMING"
               }
          }
     )
