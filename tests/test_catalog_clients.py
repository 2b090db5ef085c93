"""Tests for the service catalogue and client endpoints."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_create_and_list_services(client):
    resp = await client.post("/api/services", json={"name": "Balayage", "category": "coloring", "durationMinutes": 150, "price": 220})
    assert resp.status_code == 201
    svc = resp.json()
    assert svc["durationMinutes"] == 150

    await client.post("/api/services", json={"name": "Retired cut", "durationMinutes": 30, "price": 20, "active": False})

    listed = (await client.get("/api/services")).json()
    assert [s["name"] for s in listed] == ["Balayage"]
    assert (await client.get(f"/api/services/{svc['id']}")).json()["name"] == "Balayage"
    assert (await client.get(f"/api/services/{uuid.uuid4()}")).status_code == 404


@pytest.mark.asyncio
async def test_service_rejects_unknown_category(client):
    resp = await client.post("/api/services", json={"name": "Mystery", "category": "nails", "durationMinutes": 30, "price": 10})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_and_get_client(client):
    resp = await client.post("/api/clients", json={"name": "Grace Hopper", "email": "grace@example.com"})
    assert resp.status_code == 201
    client_id = resp.json()["id"]
    assert (await client.get(f"/api/clients/{client_id}")).json()["email"] == "grace@example.com"
    assert (await client.get(f"/api/clients/{uuid.uuid4()}")).status_code == 404
