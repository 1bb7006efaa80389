"""Booking API integration tests."""

from __future__ import annotations

import uuid
from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def _payload(provider_id: object, dates: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    payload = {
        "provider_id": str(provider_id),
        "price_per_day": "300000",
        "dates": dates,
        "client_name": "Rina",
        "client_email": "traveller@example.com",
        "client_phone": "+62 812 0000 0000",
        "service_type": "translator",
        "message": "Airport pickup, please",
    }
    payload.update(overrides)
    return payload


async def test_booking_lifecycle(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    provider_id = app_context["translator"]
    client_headers = app_context["client_headers"]
    provider_headers = app_context["provider_headers"]

    created = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "range", "start": "2025-03-01", "end": "2025-03-03"}),
        headers=client_headers,
    )
    assert created.status_code == 201
    booking = created.json()
    assert booking["status"] == "pending"
    assert booking["client_id"] == "client-1"
    assert booking["booking_date"] is None
    assert booking["date_range"] == ["2025-03-01", "2025-03-02", "2025-03-03"]
    assert float(booking["total_price"]) == 900000
    assert booking["version"] == 1

    fetched = await client.get(f"/api/bookings/{booking['id']}", headers=client_headers)
    assert fetched.status_code == 200

    confirmed = await client.patch(
        f"/api/bookings/{booking['id']}/status",
        json={"status": "confirmed", "expected_version": 1},
        headers=provider_headers,
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"
    assert confirmed.json()["version"] == 2

    stale = await client.patch(
        f"/api/bookings/{booking['id']}/status",
        json={"status": "completed", "expected_version": 1},
        headers=provider_headers,
    )
    assert stale.status_code == 409

    completed = await client.patch(
        f"/api/bookings/{booking['id']}/status",
        json={"status": "completed", "admin_notes": "Paid in cash"},
        headers=app_context["admin_headers"],
    )
    assert completed.status_code == 200
    assert completed.json()["admin_notes"] == "Paid in cash"

    invalid = await client.patch(
        f"/api/bookings/{booking['id']}/status",
        json={"status": "cancelled"},
        headers=app_context["admin_headers"],
    )
    assert invalid.status_code == 400


async def test_overlap_returns_conflicting_dates(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    provider_id = app_context["translator"]

    first = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "range", "start": "2025-03-01", "end": "2025-03-03"}),
        headers=app_context["client_headers"],
    )
    assert first.status_code == 201

    second = await client.post(
        "/api/bookings",
        json=_payload(
            provider_id,
            {"kind": "range", "start": "2025-03-03", "end": "2025-03-05"},
            client_email="someone@example.com",
        ),
        headers=app_context["other_client_headers"],
    )
    assert second.status_code == 409
    detail = second.json()["detail"]
    assert detail["conflicting_dates"] == ["2025-03-03"]
    assert "2025-03-03" in detail["message"]

    other_provider = await client.post(
        "/api/bookings",
        json=_payload(
            app_context["guide"],
            {"kind": "range", "start": "2025-03-03", "end": "2025-03-05"},
        ),
        headers=app_context["other_client_headers"],
    )
    assert other_provider.status_code == 201


async def test_client_cancel_then_rebook(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    provider_id = app_context["translator"]
    client_headers = app_context["client_headers"]

    created = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "single", "date": "2025-05-20"}),
        headers=client_headers,
    )
    assert created.status_code == 201
    booking_id = created.json()["id"]
    assert created.json()["booking_date"] == "2025-05-20"

    confirm_attempt = await client.patch(
        f"/api/bookings/{booking_id}/status",
        json={"status": "confirmed"},
        headers=client_headers,
    )
    assert confirm_attempt.status_code == 403

    cancelled = await client.patch(
        f"/api/bookings/{booking_id}/status",
        json={"status": "cancelled"},
        headers=client_headers,
    )
    assert cancelled.status_code == 200

    rebooked = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "single", "date": "2025-05-20"}),
        headers=app_context["other_client_headers"],
    )
    assert rebooked.status_code == 201


async def test_request_validation_errors_are_400(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    provider_id = app_context["translator"]
    headers = app_context["client_headers"]

    reversed_range = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "range", "start": "2025-03-05", "end": "2025-03-01"}),
        headers=headers,
    )
    assert reversed_range.status_code == 400
    assert reversed_range.json()["detail"]["field"] == "dates.end"

    bad_day = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "single", "date": "2025-02-30"}),
        headers=headers,
    )
    assert bad_day.status_code == 400

    no_dates = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "explicit", "dates": []}),
        headers=headers,
    )
    assert no_dates.status_code == 400
    assert no_dates.json()["detail"]["field"] == "dates"

    negative_price = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "single", "date": "2025-03-01"}, price_per_day="-5"),
        headers=headers,
    )
    assert negative_price.status_code == 400
    fields = [error["field"] for error in negative_price.json()["errors"]]
    assert "price_per_day" in fields

    unknown_kind = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "weekly", "date": "2025-03-01"}),
        headers=headers,
    )
    assert unknown_kind.status_code == 400


async def test_unknown_or_inactive_provider_is_404(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = app_context["client_headers"]
    for provider_id in (uuid.uuid4(), app_context["retired"]):
        response = await client.post(
            "/api/bookings",
            json=_payload(provider_id, {"kind": "single", "date": "2025-03-01"}),
            headers=headers,
        )
        assert response.status_code == 404


async def test_authentication_is_required(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    provider_id = app_context["translator"]

    anonymous = await client.post(
        "/api/bookings",
        json=_payload(provider_id, {"kind": "single", "date": "2025-03-01"}),
    )
    assert anonymous.status_code == 401

    forged = await client.get(
        "/api/bookings", headers={"Authorization": "Bearer not-a-token"}
    )
    assert forged.status_code == 401


async def test_listing_is_scoped_by_role(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    translator = app_context["translator"]
    guide = app_context["guide"]

    mine = await client.post(
        "/api/bookings",
        json=_payload(translator, {"kind": "single", "date": "2025-03-01"}),
        headers=app_context["client_headers"],
    )
    theirs = await client.post(
        "/api/bookings",
        json=_payload(
            guide,
            {"kind": "single", "date": "2025-03-02"},
            client_email="someone@example.com",
        ),
        headers=app_context["other_client_headers"],
    )
    assert mine.status_code == 201
    assert theirs.status_code == 201

    client_view = await client.get("/api/bookings", headers=app_context["client_headers"])
    assert [item["id"] for item in client_view.json()] == [mine.json()["id"]]

    hidden = await client.get(
        f"/api/bookings/{theirs.json()['id']}", headers=app_context["client_headers"]
    )
    assert hidden.status_code == 404

    provider_view = await client.get("/api/bookings", headers=app_context["provider_headers"])
    assert [item["id"] for item in provider_view.json()] == [mine.json()["id"]]

    foreign = await client.get(
        "/api/bookings",
        params={"provider_id": str(guide)},
        headers=app_context["provider_headers"],
    )
    assert foreign.status_code == 403

    admin_view = await client.get(
        "/api/bookings",
        params={"status": "pending", "provider_id": str(guide)},
        headers=app_context["admin_headers"],
    )
    assert [item["id"] for item in admin_view.json()] == [theirs.json()["id"]]
