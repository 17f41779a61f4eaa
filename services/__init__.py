from .errors import (
     TenancyStoreError,
     InvalidId,
     SaveFailed,
     UpdateFailed,
     DeleteFailed,
     DateParseError,
)
from .store import TenancyStore
from .due_dates import (
     add_months,
     next_due_date_from,
     next_rent_due_date,
     is_overdue,
     lease_renewal_due_date,
     is_renewal_due,
     renewal_status,
     RentSchedule,
)
from .notifications import NotificationRequest, NotificationService, InMemoryNotificationCenter
from .reminders import (
     ReminderId,
     ReminderKind,
     ReminderState,
     ReminderScheduler,
     ScheduleResult,
     detach,
)
from .rent_collection import RecordedPayment, record_rent_payment, parse_amount_text, format_amount

__all__ = [
     "TenancyStoreError",
     "InvalidId",
     "SaveFailed",
     "UpdateFailed",
     "DeleteFailed",
     "DateParseError",
     "TenancyStore",
     "add_months",
     "next_due_date_from",
     "next_rent_due_date",
     "is_overdue",
     "lease_renewal_due_date",
     "is_renewal_due",
     "renewal_status",
     "RentSchedule",
     "NotificationRequest",
     "NotificationService",
     "InMemoryNotificationCenter",
     "ReminderId",
     "ReminderKind",
     "ReminderState",
     "ReminderScheduler",
     "ScheduleResult",
     "detach",
     "RecordedPayment",
     "record_rent_payment",
     "parse_amount_text",
     "format_amount",
]
