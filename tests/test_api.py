"""HTTP-level tests for the FastAPI app (httpx AsyncClient over ASGI)."""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import AsyncClient

ADDRESS = {
    "title": "Unit 2",
    "line1": "456 Street",
    "line2": "",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pin_code": "560001",
}

TENANCY = {
    "name": "John",
    "contact": "+91 98450 00000",
    "lease_start_date": "2024-01-15T00:00:00",
    "lease_agreement_signed": True,
    "advance_amount": 50000.0,
    "agreed_rent": 15000.0,
    "monthly_due_date": 15,
    "agreement_signed_date": "2024-01-01T00:00:00",
    "comments": "",
}


async def _create_tenancy(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/tenancies", json={**TENANCY, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------


class TestAddressRoutes:
    @pytest.mark.asyncio
    async def test_crud(self, client: AsyncClient) -> None:
        created = await client.post("/api/addresses", json=ADDRESS)
        assert created.status_code == 201
        address_id = created.json()["id"]

        updated = await client.put(f"/api/addresses/{address_id}", json={**ADDRESS, "city": "Mysuru"})
        assert updated.status_code == 200
        assert (await client.get(f"/api/addresses/{address_id}")).json()["city"] == "Mysuru"

        listed = await client.get("/api/addresses")
        assert [a["id"] for a in listed.json()] == [address_id]

        deleted = await client.delete(f"/api/addresses/{address_id}")
        assert deleted.status_code == 204
        assert (await client.get(f"/api/addresses/{address_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_update_unknown_address_is_404(self, client: AsyncClient) -> None:
        response = await client.put("/api/addresses/99", json=ADDRESS)

        assert response.status_code == 404
        assert "99" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_non_positive_id_is_rejected(self, client: AsyncClient) -> None:
        assert (await client.get("/api/addresses/0")).status_code == 422


# ---------------------------------------------------------------------------
# Tenancies
# ---------------------------------------------------------------------------


class TestTenancyRoutes:
    @pytest.mark.asyncio
    async def test_create_links_address_and_schedules_renewal(self, client: AsyncClient) -> None:
        address_id = (await client.post("/api/addresses", json=ADDRESS)).json()["id"]

        tenancy = await _create_tenancy(client, address_id=address_id)

        assert tenancy["address"]["title"] == "Unit 2"
        pending = (await client.get("/api/reminders", params={"tenancy_id": tenancy["id"]})).json()
        assert {p["kind"] for p in pending} == {"tenancy_renewal_reminder", "tenancy_renewal_due"}

    @pytest.mark.asyncio
    async def test_unknown_address_is_404(self, client: AsyncClient) -> None:
        response = await client.post("/api/tenancies", json={**TENANCY, "address_id": 5})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_due_day_above_28_is_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/api/tenancies", json={**TENANCY, "monthly_due_date": 29})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client)

        updated = await client.put(f"/api/tenancies/{tenancy['id']}", json={**TENANCY, "agreed_rent": 16000.0})
        assert updated.status_code == 200
        assert updated.json()["agreed_rent"] == 16000.0

        assert (await client.delete(f"/api/tenancies/{tenancy['id']}")).status_code == 204
        assert (await client.get(f"/api/tenancies/{tenancy['id']}")).status_code == 404
        assert (await client.get("/api/reminders", params={"tenancy_id": tenancy["id"]})).json() == []

    @pytest.mark.asyncio
    async def test_update_unknown_tenancy_is_404(self, client: AsyncClient) -> None:
        response = await client.put("/api/tenancies/42", json=TENANCY)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_due_dates(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client)

        response = await client.get(
            f"/api/tenancies/{tenancy['id']}/due", params={"as_of": "2024-02-20T00:00:00"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["next_due_date"] == "2024-02-15T00:00:00"
        assert body["is_overdue"] is True
        assert body["renewal_due_date"] == "2024-12-01T00:00:00"
        assert body["renewal_status"] == "UPCOMING"

    @pytest.mark.asyncio
    async def test_latest_payment_without_payments_is_404(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client)

        response = await client.get(f"/api/tenancies/{tenancy['id']}/payments/latest")

        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


class TestPaymentRoutes:
    @pytest.mark.asyncio
    async def test_record_payment_schedules_next_cycle(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client, monthly_due_date=5)

        response = await client.post(
            "/api/payments",
            json={"tenancy_id": tenancy["id"], "amount": 15000.0, "paid_on": "2024-02-05T10:00:00"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["next_due_date"] == "2024-03-05T00:00:00"
        assert body["reminders_failed"] == []
        assert sorted(body["reminders_scheduled"]) == [
            f"rent_overdue:{tenancy['id']}:1709596800",
            f"rent_reminder:{tenancy['id']}:1709596800",
        ]

        latest = await client.get(f"/api/tenancies/{tenancy['id']}/payments/latest")
        assert latest.json()["id"] == body["id"]

        state = await client.get(
            f"/api/reminders/tenancies/{tenancy['id']}/state", params={"due_date": "2024-03-05T00:00:00"}
        )
        assert state.json()["state"] == "REMINDER_SCHEDULED"

    @pytest.mark.asyncio
    async def test_payment_for_unknown_tenancy_is_404(self, client: AsyncClient) -> None:
        response = await client.post("/api/payments", json={"tenancy_id": 9, "amount": 100.0})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_non_positive_amount_is_rejected(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client)

        response = await client.post("/api/payments", json={"tenancy_id": tenancy["id"], "amount": 0})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_parse_amount(self, client: AsyncClient) -> None:
        response = await client.post("/api/payments/parse-amount", json={"text": "₹15,000.50"})

        assert response.json() == {"text": "₹15,000.50", "amount": 15000.5, "formatted": "₹15,000.50"}


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


class TestReminderRoutes:
    @pytest.mark.asyncio
    async def test_check_overdue_and_clear(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client)

        checked = await client.post("/api/reminders/check-overdue", json={"as_of": "2024-02-20T09:00:00"})
        assert checked.status_code == 200
        assert checked.json()["scheduled"] == [f"rent_overdue:{tenancy['id']}:1707955200"]

        cleared = await client.delete(f"/api/reminders/tenancies/{tenancy['id']}")
        assert len(cleared.json()["cleared"]) == 3
        assert (await client.get("/api/reminders")).json() == []

    @pytest.mark.asyncio
    async def test_check_renewals_without_body(self, client: AsyncClient) -> None:
        await _create_tenancy(client)

        response = await client.post("/api/reminders/check-renewals")

        assert response.status_code == 200
        assert len(response.json()["scheduled"]) == 2

    @pytest.mark.asyncio
    async def test_clear_all(self, client: AsyncClient) -> None:
        await _create_tenancy(client)
        await _create_tenancy(client, name="Second")

        response = await client.delete("/api/reminders")

        assert len(response.json()["cleared"]) == 4


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestSettingsRoutes:
    @pytest.mark.asyncio
    async def test_move_database(self, client: AsyncClient, tmp_path: Path) -> None:
        await _create_tenancy(client)
        new_dir = tmp_path / "moved"

        response = await client.put("/api/settings/database-path", json={"path": str(new_dir)})

        assert response.status_code == 200
        assert response.json()["database_dir"] == str(new_dir)
        assert (new_dir / "PropertyTenancy.sqlite3").exists()
        # Fresh file at the new location
        assert (await client.get("/api/tenancies")).json() == []

    @pytest.mark.asyncio
    async def test_invalid_path_is_400(self, client: AsyncClient, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")

        response = await client.put("/api/settings/database-path", json={"path": str(not_a_dir)})

        assert response.status_code == 400
        assert response.json()["detail"] == "Path exists but is not a directory"

    @pytest.mark.asyncio
    async def test_check_and_export(self, client: AsyncClient, tmp_path: Path) -> None:
        check = await client.get("/api/settings/database/check")
        assert check.json()["ok"] is True

        export_dir = tmp_path / "backup"
        export_dir.mkdir()
        exported = await client.post("/api/settings/database/export", json={"destination": str(export_dir)})

        assert exported.status_code == 200
        assert Path(exported.json()["path"]) == export_dir / "PropertyTenancy.sqlite3"
        assert (export_dir / "PropertyTenancy.sqlite3").exists()


# ---------------------------------------------------------------------------
# Timezone-aware moments
# ---------------------------------------------------------------------------


class TestAwareMoments:
    @pytest.mark.asyncio
    async def test_due_dates_with_utc_as_of(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client)

        response = await client.get(
            f"/api/tenancies/{tenancy['id']}/due", params={"as_of": "2024-02-20T00:00:00Z"}
        )

        assert response.status_code == 200
        assert response.json()["next_due_date"] == "2024-02-15T00:00:00"
        assert response.json()["is_overdue"] is True

    @pytest.mark.asyncio
    async def test_check_overdue_with_offset_as_of(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client)

        response = await client.post(
            "/api/reminders/check-overdue", json={"as_of": "2024-02-20T00:00:00+05:30"}
        )

        assert response.status_code == 200
        assert response.json()["scheduled"] == [f"rent_overdue:{tenancy['id']}:1707955200"]
        [pending] = [p for p in (await client.get("/api/reminders")).json() if p["kind"] == "rent_overdue"]
        assert not pending["fire_at"].endswith("Z")
        assert "+" not in pending["fire_at"]

    @pytest.mark.asyncio
    async def test_check_renewals_with_utc_as_of(self, client: AsyncClient) -> None:
        await _create_tenancy(client)

        response = await client.post("/api/reminders/check-renewals", json={"as_of": "2024-11-25T12:00:00Z"})

        assert response.status_code == 200
        assert len(response.json()["scheduled"]) == 2

    @pytest.mark.asyncio
    async def test_payment_with_offset_paid_on(self, client: AsyncClient) -> None:
        tenancy = await _create_tenancy(client, monthly_due_date=5)

        response = await client.post(
            "/api/payments",
            json={"tenancy_id": tenancy["id"], "amount": 15000.0, "paid_on": "2024-02-05T10:00:00+05:30"},
        )

        assert response.status_code == 201
        assert response.json()["next_due_date"] == "2024-03-05T00:00:00"
        latest = (await client.get(f"/api/tenancies/{tenancy['id']}/payments/latest")).json()
        assert latest["paid_on"].startswith("2024-02-0")
        assert "+" not in latest["paid_on"]
