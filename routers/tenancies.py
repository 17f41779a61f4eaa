# routers/tenancies.py
"""
Tenancy API routes.

CRUD for tenancies plus the read models the app lists them with:
- due dates (next installment, overdue flag, renewal date and status)
- payment history and the latest payment
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from dependencies import get_rent_schedule, get_scheduler, get_store, http_error
from schemas import RentPayment, Tenancy, TenancyCreate, TenancyDueResponse
from services import (
     DateParseError,
     ReminderScheduler,
     RentSchedule,
     TenancyStore,
     TenancyStoreError,
)

router = APIRouter(prefix="/api/tenancies", tags=["tenancies"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require_address(store: TenancyStore, address_id: Optional[int]) -> None:
     """404 unless the referenced address exists (no address is fine)."""
     if address_id is not None and store.get_address(address_id) is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Address with ID {address_id} not found"
          )


def _load_tenancy(store: TenancyStore, tenancy_id: int) -> Tenancy:
     try:
          tenancy = store.get_tenancy(tenancy_id)
     except DateParseError as e:
          raise http_error(e)
     if tenancy is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Tenancy with ID {tenancy_id} not found"
          )
     return tenancy


@router.post(
     "",
     response_model=Tenancy,
     status_code=status.HTTP_201_CREATED,
     summary="Create a tenancy"
)
async def create_tenancy(
     body: TenancyCreate,
     store: TenancyStore = Depends(get_store),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     """
     Save a new tenancy and schedule its renewal notifications.

     - **monthly_due_date**: day of month rent is due, 1-28
     - **address_id**: optional; must reference an existing address
     """
     _require_address(store, body.address_id)
     try:
          tenancy_id = store.save_tenancy(body)
     except TenancyStoreError as e:
          raise http_error(e)

     tenancy = _load_tenancy(store, tenancy_id)
     await scheduler.schedule_renewal_reminders(tenancy)
     return tenancy


@router.get("", response_model=List[Tenancy], summary="List tenancies")
def list_tenancies(store: TenancyStore = Depends(get_store)):
     try:
          return store.get_all_tenancies()
     except DateParseError as e:
          raise http_error(e)


@router.get("/{tenancy_id}", response_model=Tenancy, summary="Get a tenancy")
def get_tenancy(tenancy_id: int = Path(..., gt=0), store: TenancyStore = Depends(get_store)):
     return _load_tenancy(store, tenancy_id)


@router.put("/{tenancy_id}", response_model=Tenancy, summary="Update a tenancy")
async def update_tenancy(
     body: TenancyCreate,
     tenancy_id: int = Path(..., gt=0),
     store: TenancyStore = Depends(get_store),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     """Replace a saved tenancy; renewal notifications follow the new signed date."""
     _require_address(store, body.address_id)
     try:
          store.update_tenancy(Tenancy(id=tenancy_id, **body.model_dump()))
     except TenancyStoreError as e:
          raise http_error(e)

     tenancy = _load_tenancy(store, tenancy_id)
     await scheduler.schedule_renewal_reminders(tenancy)
     return tenancy


@router.delete("/{tenancy_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a tenancy")
async def delete_tenancy(
     tenancy_id: int = Path(..., gt=0),
     store: TenancyStore = Depends(get_store),
     scheduler: ReminderScheduler = Depends(get_scheduler),
):
     try:
          store.delete_tenancy(tenancy_id)
     except TenancyStoreError as e:
          raise http_error(e)
     await scheduler.clear_rent_reminders(tenancy_id)
     await scheduler.clear_renewal_reminders(tenancy_id)
     scheduler.forget_tenancy(tenancy_id)
     return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{tenancy_id}/due", response_model=TenancyDueResponse, summary="Due dates for a tenancy")
def get_due_dates(
     tenancy_id: int = Path(..., gt=0),
     as_of: Optional[datetime] = Query(None, description="Reference moment (defaults to now)"),
     store: TenancyStore = Depends(get_store),
     schedule: RentSchedule = Depends(get_rent_schedule),
):
     tenancy = _load_tenancy(store, tenancy_id)
     try:
          return schedule.summary(tenancy, as_of or datetime.now())
     except DateParseError as e:
          raise http_error(e)


@router.get("/{tenancy_id}/payments", response_model=List[RentPayment], summary="Payment history")
def list_tenancy_payments(tenancy_id: int = Path(..., gt=0), store: TenancyStore = Depends(get_store)):
     """Payments for one tenancy, newest first."""
     _load_tenancy(store, tenancy_id)
     try:
          return store.get_rent_payments(tenancy_id)
     except DateParseError as e:
          raise http_error(e)


@router.get("/{tenancy_id}/payments/latest", response_model=RentPayment, summary="Latest payment")
def get_latest_payment(tenancy_id: int = Path(..., gt=0), store: TenancyStore = Depends(get_store)):
     _load_tenancy(store, tenancy_id)
     try:
          payment = store.get_latest_rent_payment(tenancy_id)
     except DateParseError as e:
          raise http_error(e)
     if payment is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"No payments recorded for tenancy {tenancy_id}"
          )
     return payment
