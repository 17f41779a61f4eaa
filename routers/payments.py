# routers/payments.py
"""
Rent payment API.

POST /api/payments records rent received: appends it to the tenancy's
ledger, clears that tenancy's pending rent notifications and schedules the
next month's reminder. Payments are append-only; there is no update or
delete route.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from config import Settings
from dependencies import get_scheduler, get_settings, get_store, http_error
from schemas import AmountText, ParsedAmount, RentPayment, RentPaymentCreate, RentPaymentRecorded
from services import (
     DateParseError,
     ReminderScheduler,
     TenancyStore,
     TenancyStoreError,
     format_amount,
     parse_amount_text,
     record_rent_payment,
)

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("", response_model=List[RentPayment], summary="List all payments")
def list_payments(store: TenancyStore = Depends(get_store)):
     """Every recorded payment, newest first."""
     try:
          return store.get_all_rent_payments()
     except DateParseError as e:
          raise http_error(e)


@router.post(
     "",
     response_model=RentPaymentRecorded,
     status_code=status.HTTP_201_CREATED,
     summary="Record a rent payment",
)
async def record_payment(
     body: RentPaymentCreate,
     store: TenancyStore = Depends(get_store),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     """
     Record that rent was received.

     1. Validates the tenancy exists (404 otherwise).
     2. Appends the payment.
     3. Clears pending rent reminders for the tenancy and schedules the next cycle.

     Reminder failures do not fail the request; they are listed in
     **reminders_failed**.
     """
     try:
          recorded = await record_rent_payment(store, scheduler, body)
     except (TenancyStoreError, DateParseError) as e:
          raise http_error(e)

     return RentPaymentRecorded(
          id=recorded.payment_id,
          tenancy_id=recorded.tenancy_id,
          next_due_date=recorded.next_due_date,
          reminders_scheduled=recorded.reminders.scheduled,
          reminders_failed=recorded.reminders.failed,
     )


@router.post("/parse-amount", response_model=ParsedAmount, summary="Parse a typed amount")
def parse_amount(body: AmountText, settings: Settings = Depends(get_settings)):
     amount = parse_amount_text(body.text)
     return ParsedAmount(
          text=body.text,
          amount=amount,
          formatted=format_amount(amount, settings.currency_symbol) or None,
     )
