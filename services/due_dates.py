# services/due_dates.py
"""
Due-Date Calculator - rent and renewal dates for a tenancy.

Rent:
1. Start from the latest payment's paid_on (or the lease start when nothing
   has been paid yet)
2. Add one calendar month
3. Move to the tenancy's due day at midnight, keeping year/month from step 2

Renewal: the agreement is due for renewal 11 months after it was signed,
which opens the one-month notice window before the lease year ends.

Everything except RentSchedule is pure and does no I/O. Incoming moments
are compared in local wall-clock time; aware values are converted first.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from schemas import Tenancy, RentPayment, TenancyDueResponse, RenewalStatus
from .timestamps import to_wall_clock

RENEWAL_MONTHS = 11
RENEWAL_REMINDER_LEAD_DAYS = 7


def _as_datetime(moment: Union[date, datetime]) -> datetime:
     if isinstance(moment, datetime):
          return to_wall_clock(moment)
     return datetime(moment.year, moment.month, moment.day)


def add_months(moment: Union[date, datetime], months: int) -> datetime:
     """
     Calendar month arithmetic.

     Days past the end of the target month clamp to its last day
     (Jan 31 + 1 month -> Feb 29 in a leap year).
     """
     return _as_datetime(moment) + relativedelta(months=months)


def next_due_date_from(reference: Union[date, datetime], monthly_due_day: int) -> datetime:
     """
     Next installment date after ``reference`` for a given due day.

     Args:
          reference: Payment date (or lease start) the cycle counts from
          monthly_due_day: Day of month rent is due (1-28)

     Returns:
          Midnight on ``monthly_due_day`` of the month after ``reference``.
          If that day does not exist in the month, the plain one-month step
          is returned instead of an invalid date.
     """
     stepped = add_months(reference, 1)
     try:
          return datetime(stepped.year, stepped.month, monthly_due_day)
     except (TypeError, ValueError):
          return stepped


def rent_reference_date(tenancy: Tenancy, latest_payment: Optional[RentPayment] = None) -> datetime:
     """Latest payment date, or the lease start if the tenancy is unpaid."""
     if latest_payment is not None:
          return _as_datetime(latest_payment.paid_on)
     return _as_datetime(tenancy.lease_start_date)


def next_rent_due_date(tenancy: Tenancy, latest_payment: Optional[RentPayment] = None) -> datetime:
     """When the next rent installment is due."""
     return next_due_date_from(
          rent_reference_date(tenancy, latest_payment),
          tenancy.monthly_due_date,
     )


def is_overdue(
     tenancy: Tenancy,
     as_of: Union[date, datetime],
     latest_payment: Optional[RentPayment] = None,
) -> bool:
     """True when the next due date is strictly before ``as_of``."""
     return next_rent_due_date(tenancy, latest_payment) < _as_datetime(as_of)


def lease_renewal_due_date(
     tenancy: Tenancy,
     lead_days: int = 0,
     renewal_months: int = RENEWAL_MONTHS,
) -> datetime:
     """
     Renewal date: agreement signed date + ``renewal_months``.

     ``lead_days`` moves the date earlier for an early-warning variant.
     """
     due = add_months(tenancy.agreement_signed_date, renewal_months)
     return due - timedelta(days=lead_days)


def is_renewal_due(
     tenancy: Tenancy,
     today: Union[date, datetime],
     lead_days: int = 0,
     renewal_months: int = RENEWAL_MONTHS,
) -> bool:
     return _as_datetime(today) >= lease_renewal_due_date(tenancy, lead_days, renewal_months)


def renewal_status(
     tenancy: Tenancy,
     today: Union[date, datetime],
     reminder_lead_days: int = RENEWAL_REMINDER_LEAD_DAYS,
     renewal_months: int = RENEWAL_MONTHS,
) -> RenewalStatus:
     """Classify a tenancy against its renewal date and the week before it."""
     today = _as_datetime(today)
     due = lease_renewal_due_date(tenancy, renewal_months=renewal_months)
     if due <= today:
          return RenewalStatus.DUE
     if due - timedelta(days=reminder_lead_days) <= today:
          return RenewalStatus.REMINDER_WINDOW
     return RenewalStatus.UPCOMING


class RentSchedule:
     """
     Due-date calculator bound to a store.

     Reads the latest payment from persistence on every call, so results
     stay correct when invoked long after the payment was recorded.
     """

     def __init__(self, store, renewal_months: int = RENEWAL_MONTHS,
                  renewal_reminder_lead_days: int = RENEWAL_REMINDER_LEAD_DAYS):
          self.store = store
          self.renewal_months = renewal_months
          self.renewal_reminder_lead_days = renewal_reminder_lead_days

     def reference_date(self, tenancy: Tenancy) -> datetime:
          return rent_reference_date(tenancy, self.store.get_latest_rent_payment(tenancy.id))

     def next_due_date(self, tenancy: Tenancy) -> datetime:
          return next_rent_due_date(tenancy, self.store.get_latest_rent_payment(tenancy.id))

     def is_overdue(self, tenancy: Tenancy, as_of: Union[date, datetime]) -> bool:
          return is_overdue(tenancy, as_of, self.store.get_latest_rent_payment(tenancy.id))

     def summary(self, tenancy: Tenancy, as_of: Union[date, datetime]) -> TenancyDueResponse:
          """Due-date read model for one tenancy as of a moment."""
          latest = self.store.get_latest_rent_payment(tenancy.id)
          next_due = next_rent_due_date(tenancy, latest)
          return TenancyDueResponse(
               tenancy_id=tenancy.id,
               reference_date=rent_reference_date(tenancy, latest),
               next_due_date=next_due,
               is_overdue=next_due < _as_datetime(as_of),
               renewal_due_date=lease_renewal_due_date(tenancy, renewal_months=self.renewal_months),
               renewal_status=renewal_status(
                    tenancy,
                    as_of,
                    reminder_lead_days=self.renewal_reminder_lead_days,
                    renewal_months=self.renewal_months,
               ),
          )
