"""Tests for booking, hard blocks and the appointment ledger."""

import uuid

import pytest
from unittest.mock import patch, AsyncMock
from sqlalchemy import select

from salon.modules.notifications.models import OutboundMessage

MONDAY = "2030-01-07"


def _booking(salon_client, salon_service, start="10:00", **kw):
    body = {
        "clientId": str(salon_client.id),
        "serviceId": str(salon_service.id),
        "date": MONDAY,
        "startTime": start,
        "clientNotes": "Trim only",
        "inspoPhotos": ["https://example.com/look.jpg"],
    }
    body.update(kw)
    return body


@pytest.mark.asyncio
async def test_book_appointment(client, salon_client, salon_service):
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, endTime="10:30"))
    assert resp.status_code == 201
    data = resp.json()
    assert data["status"] == "pending"
    assert data["endTime"] == "11:00"  # derived from the 60 minute service
    assert data["durationMinutes"] == 60
    assert data["totalCost"] == 85.0
    assert data["isBlocked"] is False
    assert data["inspoPhotos"] == ["https://example.com/look.jpg"]


@pytest.mark.asyncio
async def test_overlapping_booking_conflicts(client, salon_client, salon_service):
    assert (await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))).status_code == 201

    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="10:30"))
    assert resp.status_code == 409
    assert resp.json() == {"error": "This time slot is already booked."}

    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="10:00"))
    assert resp.status_code == 409

    # back-to-back is fine
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="11:00"))
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_booking_removes_slots(client, weekday_hours, salon_client, salon_service):
    await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))
    resp = await client.get("/api/availability/slots", params={"date": MONDAY})
    slots = resp.json()["slots"]
    assert "10:00" not in slots and "10:30" not in slots
    assert "09:30" in slots and "11:00" in slots


@pytest.mark.asyncio
async def test_booking_unknown_service_or_client(client, salon_client, salon_service):
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, serviceId=str(uuid.uuid4())))
    assert resp.status_code == 404
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, clientId=str(uuid.uuid4())))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_booking_bad_input(client, salon_client, salon_service):
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, date="07/01/2030"))
    assert resp.status_code == 400
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="25:00"))
    assert resp.status_code == 400
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="23:30"))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_status_transitions(client, salon_client, salon_service):
    appt_id = (await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))).json()["id"]

    resp = await client.post(f"/api/appointments/{appt_id}/status", json={"status": "confirmed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "confirmed"

    resp = await client.post(f"/api/appointments/{appt_id}/status", json={"status": "pending"})
    assert resp.status_code == 400

    resp = await client.post(f"/api/appointments/{appt_id}/status", json={"status": "no-show", "notes": "Did not arrive"})
    assert resp.status_code == 200
    assert resp.json()["notes"] == "Did not arrive"

    resp = await client.post(f"/api/appointments/{appt_id}/status", json={"status": "completed"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_cancel_frees_the_slot(client, salon_client, salon_service):
    appt_id = (await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))).json()["id"]

    resp = await client.post(f"/api/appointments/{appt_id}/cancel")
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"

    resp = await client.post(f"/api/appointments/{appt_id}/cancel")
    assert resp.status_code == 400

    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_hard_block_occupies_and_unblocks(client, weekday_hours, salon_client, salon_service):
    resp = await client.post("/api/appointments/block", json={"date": MONDAY, "startTime": "13:00", "endTime": "15:00", "reason": "Supplier visit"})
    assert resp.status_code == 201
    block = resp.json()
    assert block["isBlocked"] is True
    assert block["clientId"] is None
    assert block["status"] == "confirmed"
    assert block["totalCost"] == 0

    slots = (await client.get("/api/availability/slots", params={"date": MONDAY})).json()["slots"]
    assert "13:00" not in slots and "14:30" not in slots and "15:00" in slots

    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="12:30"))
    assert resp.status_code == 409

    resp = await client.delete(f"/api/appointments/blocked/{MONDAY}")
    assert resp.status_code == 200
    assert resp.json()["removed"] == 1
    resp = await client.delete(f"/api/appointments/blocked/{MONDAY}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_ledger_get_list_delete(client, salon_client, salon_service):
    appt_id = (await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))).json()["id"]
    await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, date="2030-01-14"))

    assert (await client.get(f"/api/appointments/{appt_id}")).status_code == 200
    assert (await client.get(f"/api/appointments/{uuid.uuid4()}")).status_code == 404

    resp = await client.get("/api/appointments", params={"date": MONDAY})
    assert [a["id"] for a in resp.json()] == [appt_id]
    resp = await client.get("/api/appointments", params={"clientId": str(salon_client.id)})
    assert len(resp.json()) == 2
    resp = await client.get("/api/appointments", params={"status": "confirmed"})
    assert resp.json() == []

    assert (await client.delete(f"/api/appointments/{appt_id}")).status_code == 200
    assert (await client.get(f"/api/appointments/{appt_id}")).status_code == 404


@pytest.mark.asyncio
async def test_booking_records_client_notifications(client, db, salon_client, salon_service):
    appt_id = (await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))).json()["id"]
    await client.post(f"/api/appointments/{appt_id}/status", json={"status": "confirmed"})

    rows = (await db.execute(select(OutboundMessage).where(OutboundMessage.to == "ada@example.com"))).scalars().all()
    assert {m.template for m in rows} == {"booking_received", "booking_confirmed"}
    assert all("Ada Lovelace" in m.body for m in rows)
    sms = (await db.execute(select(OutboundMessage).where(OutboundMessage.channel == "sms"))).scalars().all()
    assert len(sms) == 2


@pytest.mark.asyncio
async def test_hard_block_cannot_be_cancelled_by_client(client, weekday_hours):
    block_id = (await client.post("/api/appointments/block", json={"date": MONDAY, "startTime": "13:00", "endTime": "15:00", "reason": "Supplier visit"})).json()["id"]

    resp = await client.post(f"/api/appointments/{block_id}/cancel")
    assert resp.status_code == 400
    assert (await client.get(f"/api/appointments/{block_id}")).json()["status"] == "confirmed"

    slots = (await client.get("/api/availability/slots", params={"date": MONDAY})).json()["slots"]
    assert "13:00" not in slots and "14:30" not in slots


@pytest.mark.asyncio
async def test_unique_start_index_rejects_double_booking(client, salon_client, salon_service):
    with patch("salon.modules.appointments.service.AppointmentService._check_free", new_callable=AsyncMock):
        first = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))
        assert first.status_code == 201

        resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service))
        assert resp.status_code == 409
        assert resp.json() == {"error": "This time slot is already booked."}

        resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="14:00"))
        assert resp.status_code == 201

    resp = await client.get("/api/appointments", params={"date": MONDAY})
    assert sorted(a["startTime"] for a in resp.json()) == ["10:00", "14:00"]


@pytest.mark.asyncio
async def test_booking_cannot_end_at_midnight(client, salon_client, salon_service):
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="23:00"))
    assert resp.status_code == 400
    resp = await client.post("/api/appointments/book", json=_booking(salon_client, salon_service, start="22:59"))
    assert resp.status_code == 201
    assert resp.json()["endTime"] == "23:59"
