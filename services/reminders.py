# services/reminders.py
"""
Reminder Scheduler - rent and renewal notifications for tenancies.

Per (tenancy, due date) the rent reminders move through:

     NONE -> REMINDER_SCHEDULED -> OVERDUE_SCHEDULED -> CLEARED

- Scheduling a due date queues a reminder (due date - 3 days) and an overdue
  signal (on the due date); whichever time arrives first is delivered first
- Recording a payment clears every pending rent notification of the tenancy
  and schedules the next cycle
- Renewal notifications are a separate pair (a week before the 11-month
  mark, and on it) that is cleared and rescheduled on every check

Identifiers are "<kind>:<tenancy_id>:<due_epoch>" and are parsed exactly
when clearing, so tenancy 1 never matches tenancy 12.

Scheduling never raises: failures from the notification service are logged
and returned in ScheduleResult.failed.
"""
import asyncio
import calendar
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Awaitable, Dict, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError

from schemas import Tenancy
from .due_dates import (
     RENEWAL_MONTHS,
     RENEWAL_REMINDER_LEAD_DAYS,
     lease_renewal_due_date,
     next_rent_due_date,
     renewal_status,
)
from .errors import TenancyStoreError
from .notifications import NotificationRequest, NotificationService
from .timestamps import to_wall_clock

logger = logging.getLogger(__name__)

RENT_REMINDER_LEAD_DAYS = 3


class ReminderKind(str, Enum):
     RENT_REMINDER = "rent_reminder"
     RENT_OVERDUE = "rent_overdue"
     RENEWAL_REMINDER = "tenancy_renewal_reminder"
     RENEWAL_DUE = "tenancy_renewal_due"


RENT_KINDS = frozenset({ReminderKind.RENT_REMINDER, ReminderKind.RENT_OVERDUE})
RENEWAL_KINDS = frozenset({ReminderKind.RENEWAL_REMINDER, ReminderKind.RENEWAL_DUE})


class ReminderState(str, Enum):
     NONE = "NONE"
     REMINDER_SCHEDULED = "REMINDER_SCHEDULED"
     OVERDUE_SCHEDULED = "OVERDUE_SCHEDULED"
     CLEARED = "CLEARED"


def due_epoch(moment: datetime) -> int:
     """Whole seconds since the epoch of the wall-clock time, read as UTC."""
     return calendar.timegm(to_wall_clock(moment).timetuple())


def start_of_day(moment: datetime) -> datetime:
     moment = to_wall_clock(moment)
     return datetime(moment.year, moment.month, moment.day)


@dataclass(frozen=True)
class ReminderId:
     """Structured notification identifier."""
     kind: ReminderKind
     tenancy_id: int
     due_epoch: int

     def __str__(self):
          return f"{self.kind.value}:{self.tenancy_id}:{self.due_epoch}"

     @classmethod
     def for_due_date(cls, kind: ReminderKind, tenancy_id: int, due_date: datetime) -> "ReminderId":
          return cls(kind, tenancy_id, due_epoch(due_date))

     @classmethod
     def parse(cls, identifier: str) -> Optional["ReminderId"]:
          """
          Parse an identifier produced by str(ReminderId).

          Returns None for anything else (foreign identifiers, malformed text).
          """
          parts = identifier.split(":")
          if len(parts) != 3:
               return None
          kind, tenancy_id, epoch = parts
          try:
               return cls(ReminderKind(kind), int(tenancy_id), int(epoch))
          except ValueError:
               return None


@dataclass
class ScheduleResult:
     """Identifiers touched by one scheduling call."""
     scheduled: List[str] = field(default_factory=list)
     failed: List[str] = field(default_factory=list)
     cleared: List[str] = field(default_factory=list)

     @property
     def ok(self) -> bool:
          return not self.failed

     def merge(self, other: "ScheduleResult") -> "ScheduleResult":
          self.scheduled.extend(other.scheduled)
          self.failed.extend(other.failed)
          self.cleared.extend(other.cleared)
          return self


_background_tasks: Set[asyncio.Task] = set()


def _log_task_failure(task: asyncio.Task) -> None:
     _background_tasks.discard(task)
     if task.cancelled():
          return
     exc = task.exception()
     if exc is not None:
          logger.error("Background reminder task failed: %s", exc, exc_info=exc)


def detach(coro: Awaitable) -> asyncio.Task:
     """
     Run a scheduling coroutine in the background.

     For callers that do not want to wait for the notification service;
     failures are logged when the task finishes.
     """
     task = asyncio.ensure_future(coro)
     _background_tasks.add(task)
     task.add_done_callback(_log_task_failure)
     return task


class ReminderScheduler:
     """
     Turns due dates into pending notifications and keeps them de-duplicated.

     ``store`` is only needed by the bulk checks, which re-read tenancies and
     payments so they can run long after the triggering event.
     """

     def __init__(
          self,
          notifications: NotificationService,
          store=None,
          rent_reminder_lead_days: int = RENT_REMINDER_LEAD_DAYS,
          renewal_reminder_lead_days: int = RENEWAL_REMINDER_LEAD_DAYS,
          renewal_months: int = RENEWAL_MONTHS,
          currency_symbol: str = "₹",
     ):
          self.notifications = notifications
          self.store = store
          self.rent_reminder_lead_days = rent_reminder_lead_days
          self.renewal_reminder_lead_days = renewal_reminder_lead_days
          self.renewal_months = renewal_months
          self.currency_symbol = currency_symbol
          # tenancy id -> due epoch of its most recently cleared rent cycle
          self._cleared: Dict[int, int] = {}

     @classmethod
     def from_settings(cls, settings, notifications: NotificationService, store=None) -> "ReminderScheduler":
          return cls(
               notifications,
               store=store,
               rent_reminder_lead_days=settings.rent_reminder_lead_days,
               renewal_reminder_lead_days=settings.renewal_reminder_lead_days,
               renewal_months=settings.renewal_months,
               currency_symbol=settings.currency_symbol,
          )

     # ------------------------------------------------------------------
     # Notification service access (failures are logged, never raised)
     # ------------------------------------------------------------------

     async def _submit(self, request: NotificationRequest, result: ScheduleResult) -> None:
          try:
               await self.notifications.add(request)
          except Exception as e:
               logger.error("Failed to schedule %s: %s", request.identifier, e)
               result.failed.append(request.identifier)
               return
          logger.info("Scheduled %s at %s", request.identifier, request.fire_at)
          result.scheduled.append(request.identifier)

     async def _pending(self) -> List[NotificationRequest]:
          try:
               return await self.notifications.pending_requests()
          except Exception as e:
               logger.error("Failed to list pending notifications: %s", e)
               return []

     async def _clear(self, tenancy_id: int, kinds: frozenset) -> ScheduleResult:
          result = ScheduleResult()
          matched = []
          for request in await self._pending():
               parsed = ReminderId.parse(request.identifier)
               if parsed is not None and parsed.tenancy_id == tenancy_id and parsed.kind in kinds:
                    matched.append(parsed)
          if not matched:
               return result

          identifiers = [str(parsed) for parsed in matched]
          try:
               await self.notifications.remove_pending(identifiers)
          except Exception as e:
               logger.error("Failed to clear notifications for tenancy %s: %s", tenancy_id, e)
               result.failed.extend(identifiers)
               return result

          for parsed in matched:
               if parsed.kind in RENT_KINDS:
                    self._mark_cleared(parsed.tenancy_id, parsed.due_epoch)
          result.cleared.extend(identifiers)
          logger.info("Cleared %d notifications for tenancy %s", len(identifiers), tenancy_id)
          return result

     def _mark_cleared(self, tenancy_id: int, epoch: int) -> None:
          # Older cycles are forgotten, so this holds one entry per tenancy
          if epoch >= self._cleared.get(tenancy_id, epoch):
               self._cleared[tenancy_id] = epoch

     def forget_tenancy(self, tenancy_id: int) -> None:
          """Drop what is remembered about a deleted tenancy's cleared cycle."""
          self._cleared.pop(tenancy_id, None)

     def _amount(self, value: float) -> str:
          return f"{self.currency_symbol}{value:,.2f}"

     # ------------------------------------------------------------------
     # Rent
     # ------------------------------------------------------------------

     async def clear_rent_reminders(self, tenancy_id: int) -> ScheduleResult:
          """Revoke every pending rent reminder/overdue signal of a tenancy."""
          return await self._clear(tenancy_id, RENT_KINDS)

     async def schedule_rent_reminder(self, tenancy: Tenancy, due_date: datetime) -> ScheduleResult:
          """
          Queue the reminder pair for one due date.

          Existing rent notifications of the tenancy are cleared first so only
          one cycle is ever pending.
          """
          result = await self.clear_rent_reminders(tenancy.id)
          if self._cleared.get(tenancy.id) == due_epoch(due_date):
               del self._cleared[tenancy.id]

          reminder_at = start_of_day(due_date - timedelta(days=self.rent_reminder_lead_days))
          await self._submit(
               NotificationRequest(
                    identifier=str(ReminderId.for_due_date(ReminderKind.RENT_REMINDER, tenancy.id, due_date)),
                    title="Rent Payment Due",
                    body=f"Rent payment of {self._amount(tenancy.agreed_rent)} is due for "
                         f"{tenancy.name} on {due_date:%d %b %Y}",
                    fire_at=reminder_at,
                    user_info={"type": ReminderKind.RENT_REMINDER.value, "tenancyId": tenancy.id},
               ),
               result,
          )
          await self._submit(
               NotificationRequest(
                    identifier=str(ReminderId.for_due_date(ReminderKind.RENT_OVERDUE, tenancy.id, due_date)),
                    title="Rent Payment Overdue",
                    body=f"Rent payment for {tenancy.name} is now overdue",
                    fire_at=start_of_day(due_date),
                    user_info={"type": ReminderKind.RENT_OVERDUE.value, "tenancyId": tenancy.id},
               ),
               result,
          )
          return result

     async def schedule_overdue_notice(
          self,
          tenancy: Tenancy,
          due_date: datetime,
          now: Optional[datetime] = None,
     ) -> ScheduleResult:
          """Queue an immediate overdue notification for a missed due date."""
          result = ScheduleResult()
          await self._submit(
               NotificationRequest(
                    identifier=str(ReminderId.for_due_date(ReminderKind.RENT_OVERDUE, tenancy.id, due_date)),
                    title="Rent Payment Overdue!",
                    body=f"Rent payment of {self._amount(tenancy.agreed_rent)} for {tenancy.name} "
                         f"was due on {due_date:%d %b %Y}",
                    fire_at=to_wall_clock(now or datetime.now()),
                    user_info={"type": ReminderKind.RENT_OVERDUE.value, "tenancyId": tenancy.id},
               ),
               result,
          )
          return result

     async def on_payment_recorded(self, tenancy: Tenancy, next_due_date: datetime) -> ScheduleResult:
          """Clear the tenancy's pending rent notifications and schedule the next cycle."""
          result = await self.clear_rent_reminders(tenancy.id)
          return result.merge(await self.schedule_rent_reminder(tenancy, next_due_date))

     async def reminder_state(self, tenancy_id: int, due_date: datetime) -> ReminderState:
          """Where the rent notifications for one (tenancy, due date) pair stand."""
          epoch = due_epoch(due_date)
          kinds = set()
          for request in await self._pending():
               parsed = ReminderId.parse(request.identifier)
               if parsed is not None and parsed.tenancy_id == tenancy_id and parsed.due_epoch == epoch:
                    kinds.add(parsed.kind)

          if ReminderKind.RENT_REMINDER in kinds:
               return ReminderState.REMINDER_SCHEDULED
          if ReminderKind.RENT_OVERDUE in kinds:
               return ReminderState.OVERDUE_SCHEDULED
          if self._cleared.get(tenancy_id) == epoch:
               return ReminderState.CLEARED
          return ReminderState.NONE

     async def check_overdue_rent(self, now: Optional[datetime] = None) -> ScheduleResult:
          """
          Re-derive every tenancy's next due date from the store.

          Overdue tenancies get an immediate overdue notice; the rest get the
          reminder pair for their upcoming due date. A tenancy whose records
          cannot be read is logged and skipped.
          """
          now = to_wall_clock(now or datetime.now())
          result = ScheduleResult()
          logger.info("Checking for overdue rent payments")
          for tenancy_id in self._tenancy_ids():
               try:
                    tenancy = self.store.get_tenancy(tenancy_id)
                    if tenancy is None:
                         continue
                    next_due = next_rent_due_date(tenancy, self.store.get_latest_rent_payment(tenancy_id))
               except (SQLAlchemyError, TenancyStoreError, ValueError) as e:
                    logger.exception("Skipping tenancy %s in overdue check: %s", tenancy_id, e)
                    continue
               if next_due < now:
                    result.merge(await self.schedule_overdue_notice(tenancy, next_due, now))
               else:
                    result.merge(await self.schedule_rent_reminder(tenancy, next_due))
          return result

     def _tenancy_ids(self) -> List[int]:
          try:
               return self.store.get_tenancy_ids()
          except (SQLAlchemyError, TenancyStoreError) as e:
               logger.exception("Could not list tenancies: %s", e)
               return []

     # ------------------------------------------------------------------
     # Renewal
     # ------------------------------------------------------------------

     async def clear_renewal_reminders(self, tenancy_id: int) -> ScheduleResult:
          return await self._clear(tenancy_id, RENEWAL_KINDS)

     async def schedule_renewal_reminders(self, tenancy: Tenancy) -> ScheduleResult:
          """
          Replace the tenancy's renewal pair: a reminder one week before the
          renewal date and a notice on the date itself.
          """
          result = await self.clear_renewal_reminders(tenancy.id)
          renewal_due = lease_renewal_due_date(tenancy, renewal_months=self.renewal_months)
          reminder_at = renewal_due - timedelta(days=self.renewal_reminder_lead_days)
          user_info = {
               "tenancyId": tenancy.id,
               "tenancyName": tenancy.name,
               "renewalDueDate": due_epoch(renewal_due),
          }

          await self._submit(
               NotificationRequest(
                    identifier=str(ReminderId.for_due_date(ReminderKind.RENEWAL_REMINDER, tenancy.id, renewal_due)),
                    title="Tenancy Renewal Approaching",
                    body=f"Tenancy agreement for {tenancy.name} is due for renewal in 1 week.",
                    fire_at=start_of_day(reminder_at),
                    user_info={"type": ReminderKind.RENEWAL_REMINDER.value, **user_info},
               ),
               result,
          )
          await self._submit(
               NotificationRequest(
                    identifier=str(ReminderId.for_due_date(ReminderKind.RENEWAL_DUE, tenancy.id, renewal_due)),
                    title="Tenancy Renewal Due",
                    body=f"Tenancy agreement for {tenancy.name} expires in 1 month. Consider renewal urgently!",
                    fire_at=start_of_day(renewal_due),
                    user_info={"type": ReminderKind.RENEWAL_DUE.value, **user_info},
               ),
               result,
          )
          return result

     async def check_renewals(self, now: Optional[datetime] = None) -> ScheduleResult:
          """Reschedule renewal notifications for every tenancy in the store."""
          now = to_wall_clock(now or datetime.now())
          result = ScheduleResult()
          logger.info("Checking for tenancy renewals")
          for tenancy_id in self._tenancy_ids():
               try:
                    tenancy = self.store.get_tenancy(tenancy_id)
               except (SQLAlchemyError, TenancyStoreError, ValueError) as e:
                    logger.exception("Skipping tenancy %s in renewal check: %s", tenancy_id, e)
                    continue
               if tenancy is None:
                    continue
               result.merge(await self.schedule_renewal_reminders(tenancy))
               status = renewal_status(
                    tenancy,
                    now,
                    reminder_lead_days=self.renewal_reminder_lead_days,
                    renewal_months=self.renewal_months,
               )
               logger.info(
                    "Tenancy %s (%s): signed %s, renewal due %s, status %s",
                    tenancy.id,
                    tenancy.name,
                    f"{tenancy.agreement_signed_date:%Y-%m-%d}",
                    f"{lease_renewal_due_date(tenancy, renewal_months=self.renewal_months):%Y-%m-%d}",
                    status.value,
               )
          return result

     # ------------------------------------------------------------------
     # Housekeeping
     # ------------------------------------------------------------------

     async def pending(self) -> List[NotificationRequest]:
          return await self._pending()

     async def clear_all(self) -> ScheduleResult:
          """Remove every pending notification."""
          result = ScheduleResult()
          pending = await self._pending()
          try:
               await self.notifications.remove_all()
          except Exception as e:
               logger.error("Failed to clear all notifications: %s", e)
               result.failed.extend(r.identifier for r in pending)
               return result
          for request in pending:
               parsed = ReminderId.parse(request.identifier)
               if parsed is not None and parsed.kind in RENT_KINDS:
                    self._mark_cleared(parsed.tenancy_id, parsed.due_epoch)
          result.cleared.extend(r.identifier for r in pending)
          logger.info("Cleared all %d pending notifications", len(pending))
          return result
