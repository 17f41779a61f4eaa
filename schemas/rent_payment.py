"""
Pydantic schemas for recording rent payments.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


def _now() -> datetime:
     return datetime.now().replace(microsecond=0)


class RentPaymentCreate(BaseModel):
     """Request body for POST /api/payments."""
     tenancy_id: int = Field(..., gt=0, description="Tenancy the rent is for")
     amount: float = Field(..., gt=0, description="Amount received")
     paid_on: datetime = Field(default_factory=_now, description="When the rent was received")
     notes: str = ""

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "tenancy_id": 1,
                    "amount": 15000.00,
                    "paid_on": "2024-02-05T00:00:00",
                    "notes": "UPI transfer"
               }
          }
     )


class RentPayment(RentPaymentCreate):
     """A saved (immutable) rent payment."""
     id: int = Field(..., gt=0)

     model_config = ConfigDict(from_attributes=True)


class RentPaymentRecorded(BaseModel):
     """Response for POST /api/payments."""
     id: int = Field(..., description="Identity of the new payment")
     tenancy_id: int
     next_due_date: datetime = Field(..., description="Due date of the next installment")
     reminders_scheduled: list[str] = Field(default_factory=list)
     reminders_failed: list[str] = Field(default_factory=list)


class AmountText(BaseModel):
     """Request body for POST /api/payments/parse-amount."""
     text: str = Field(..., description="Amount as typed, e.g. '₹15,000.50'")


class ParsedAmount(BaseModel):
     text: str
     amount: float
     formatted: Optional[str] = None
