# routers/reminders.py
"""
Reminder API routes.

Inspect pending notifications, run the overdue / renewal checks on demand,
and clear notifications for a tenancy or altogether.
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Path, Query

from dependencies import get_scheduler
from schemas import CheckRequest, PendingReminderResponse, ScheduleResultResponse
from services import ReminderId, ReminderScheduler, ReminderState

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


def _result(result) -> ScheduleResultResponse:
     return ScheduleResultResponse(
          scheduled=result.scheduled,
          failed=result.failed,
          cleared=result.cleared,
     )


@router.get("", response_model=List[PendingReminderResponse], summary="List pending notifications")
async def list_pending(
     tenancy_id: Optional[int] = Query(None, gt=0, description="Only this tenancy's notifications"),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     pending = []
     for request in await scheduler.pending():
          parsed = ReminderId.parse(request.identifier)
          if tenancy_id is not None and (parsed is None or parsed.tenancy_id != tenancy_id):
               continue
          pending.append(
               PendingReminderResponse(
                    identifier=request.identifier,
                    title=request.title,
                    body=request.body,
                    fire_at=request.fire_at,
                    kind=parsed.kind.value if parsed else None,
                    tenancy_id=parsed.tenancy_id if parsed else None,
               )
          )
     return pending


@router.post("/check-overdue", response_model=ScheduleResultResponse, summary="Run the overdue rent check")
async def check_overdue(
     body: Optional[CheckRequest] = Body(None),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     as_of = body.as_of if body else None
     return _result(await scheduler.check_overdue_rent(as_of))


@router.post("/check-renewals", response_model=ScheduleResultResponse, summary="Run the renewal check")
async def check_renewals(
     body: Optional[CheckRequest] = Body(None),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     as_of = body.as_of if body else None
     return _result(await scheduler.check_renewals(as_of))


@router.get("/tenancies/{tenancy_id}/state", summary="Reminder state for one due date")
async def get_reminder_state(
     tenancy_id: int = Path(..., gt=0),
     due_date: datetime = Query(..., description="Due date the reminders were scheduled for"),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     state: ReminderState = await scheduler.reminder_state(tenancy_id, due_date)
     return {"tenancy_id": tenancy_id, "due_date": due_date, "state": state.value}


@router.delete(
     "/tenancies/{tenancy_id}",
     response_model=ScheduleResultResponse,
     summary="Clear a tenancy's notifications"
)
async def clear_tenancy(
     tenancy_id: int = Path(..., gt=0),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     result = await scheduler.clear_rent_reminders(tenancy_id)
     result.merge(await scheduler.clear_renewal_reminders(tenancy_id))
     return _result(result)


@router.delete("", response_model=ScheduleResultResponse, summary="Clear all notifications")
async def clear_all(scheduler: ReminderScheduler = Depends(get_scheduler)):
     return _result(await scheduler.clear_all())
