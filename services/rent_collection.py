# services/rent_collection.py
"""
Rent Collection Service - recording a payment and rolling reminders forward.

When rent is received:
1. Append the payment to the tenancy's ledger
2. Clear the tenancy's pending rent reminder / overdue notifications
3. Schedule the reminder pair for the next cycle's due date, counted from
   the payment date

Persistence failures are raised to the caller; notification failures are
only logged (they are reported in the returned ScheduleResult).
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from schemas import RentPaymentCreate
from .due_dates import next_due_date_from
from .errors import InvalidId
from .reminders import ReminderScheduler, ScheduleResult
from .store import TenancyStore

logger = logging.getLogger(__name__)

AMOUNT_CHARACTERS = frozenset("0123456789.")


@dataclass
class RecordedPayment:
     payment_id: int
     tenancy_id: int
     next_due_date: datetime
     reminders: ScheduleResult


async def record_rent_payment(
     store: TenancyStore,
     scheduler: ReminderScheduler,
     payment: RentPaymentCreate,
) -> RecordedPayment:
     """
     Save a rent payment and reschedule the tenancy's rent reminders.

     Args:
          store: Persistence store
          scheduler: Reminder scheduler
          payment: The payment to record

     Returns:
          RecordedPayment with the new id and the next due date

     Raises:
          InvalidId: If the tenancy does not exist
          SaveFailed: If the payment could not be written
     """
     tenancy = store.get_tenancy(payment.tenancy_id)
     if tenancy is None:
          raise InvalidId("Tenancy", payment.tenancy_id)

     payment_id = store.save_rent_payment(payment)

     next_due = next_due_date_from(payment.paid_on, tenancy.monthly_due_date)
     reminders = await scheduler.on_payment_recorded(tenancy, next_due)
     if not reminders.ok:
          logger.warning(
               "Payment %s saved but %d reminders could not be scheduled",
               payment_id, len(reminders.failed),
          )

     return RecordedPayment(
          payment_id=payment_id,
          tenancy_id=tenancy.id,
          next_due_date=next_due,
          reminders=reminders,
     )


def parse_amount_text(text: str) -> float:
     """
     Lenient amount parsing for typed or formatted input.

     Keeps digits and the decimal point ("₹15,000.50" -> 15000.5);
     anything that still is not a number gives 0.0.
     """
     filtered = "".join(ch for ch in (text or "") if ch in AMOUNT_CHARACTERS)
     try:
          return float(filtered)
     except ValueError:
          return 0.0


def format_amount(amount: float, currency_symbol: str = "₹") -> str:
     """Display form of an amount; empty for zero so forms show a blank field."""
     if amount <= 0:
          return ""
     return f"{currency_symbol}{amount:,.2f}"
