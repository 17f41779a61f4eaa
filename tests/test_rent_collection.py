"""Tests for recording rent payments and amount parsing."""

from __future__ import annotations

from datetime import datetime

import pytest

from conftest import make_tenancy
from schemas import RentPaymentCreate
from services import (
    InMemoryNotificationCenter,
    InvalidId,
    ReminderId,
    ReminderKind,
    ReminderScheduler,
    TenancyStore,
    format_amount,
    parse_amount_text,
    record_rent_payment,
)


class TestRecordRentPayment:
    @pytest.mark.asyncio
    async def test_saves_payment_and_rolls_reminders_forward(
        self, store: TenancyStore, scheduler: ReminderScheduler, center: InMemoryNotificationCenter
    ) -> None:
        tenancy_id = store.save_tenancy(make_tenancy(monthly_due_date=5))
        await scheduler.schedule_rent_reminder(store.get_tenancy(tenancy_id), datetime(2024, 2, 5))

        recorded = await record_rent_payment(
            store,
            scheduler,
            RentPaymentCreate(tenancy_id=tenancy_id, amount=15000.0, paid_on=datetime(2024, 2, 5, 11, 0)),
        )

        assert recorded.tenancy_id == tenancy_id
        assert recorded.next_due_date == datetime(2024, 3, 5)
        assert recorded.reminders.ok
        assert len(recorded.reminders.cleared) == 2
        assert store.get_latest_rent_payment(tenancy_id).id == recorded.payment_id

        pending = [ReminderId.parse(r.identifier) for r in await center.pending_requests()]
        assert {p.kind for p in pending} == {ReminderKind.RENT_REMINDER, ReminderKind.RENT_OVERDUE}
        assert {p.due_epoch for p in pending} == {1709596800}

    @pytest.mark.asyncio
    async def test_unknown_tenancy_raises_and_saves_nothing(
        self, store: TenancyStore, scheduler: ReminderScheduler
    ) -> None:
        with pytest.raises(InvalidId):
            await record_rent_payment(store, scheduler, RentPaymentCreate(tenancy_id=4, amount=100.0))

        assert store.get_all_rent_payments() == []


class TestAmountText:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("15000", 15000.0),
            ("₹15,000.50", 15000.5),
            ("  1,00,000 ", 100000.0),
            ("abc", 0.0),
            ("", 0.0),
            ("1.2.3", 0.0),
        ],
    )
    def test_parse_amount_text(self, text: str, expected: float) -> None:
        assert parse_amount_text(text) == expected

    def test_format_amount(self) -> None:
        assert format_amount(15000.5) == "₹15,000.50"
        assert format_amount(99.0, "$") == "$99.00"
        assert format_amount(0.0) == ""
