"""Availability calendar API integration tests."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from httpx import AsyncClient

from guidebook.services.calendar_dates import iter_window, js_day_of_week

pytestmark = pytest.mark.asyncio


def _base(provider_id: object) -> str:
    return f"/api/applications/{provider_id}/availability"


async def test_default_document_is_public(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.get(_base(app_context["translator"]))
    assert response.status_code == 200
    body = response.json()
    assert body["is_available"] is True
    assert body["timezone"] == "Asia/Jakarta"
    assert body["schedule"] == []
    assert body["recurring_patterns"] == []
    assert body["unavailable_periods"] == []


async def test_mutations_require_the_provider_or_an_admin(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    url = f"{_base(app_context['translator'])}/days/2099-03-02"

    anonymous = await client.put(url, json={"is_available": True})
    assert anonymous.status_code == 401

    as_client = await client.put(
        url, json={"is_available": True}, headers=app_context["client_headers"]
    )
    assert as_client.status_code == 403

    other_provider = await client.put(
        f"{_base(app_context['guide'])}/days/2099-03-02",
        json={"is_available": True},
        headers=app_context["provider_headers"],
    )
    assert other_provider.status_code == 403

    as_admin = await client.put(
        url, json={"is_available": True}, headers=app_context["admin_headers"]
    )
    assert as_admin.status_code == 200


async def test_replace_document_reports_rejected_dates(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.put(
        _base(app_context["translator"]),
        json={
            "is_available": True,
            "timezone": "Asia/Makassar",
            "schedule": [
                {"date": "2099-03-02", "is_available": True},
                {"date": "2099-03-03", "is_available": False},
                {"date": "2099-02-31", "is_available": True},
            ],
            "recurring_patterns": [{"day_of_week": 1, "is_active": True}],
            "unavailable_periods": [
                {"start_date": "2099-04-01", "end_date": "2099-04-03", "reason": "Leave"}
            ],
        },
        headers=app_context["provider_headers"],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["rejected_dates"] == ["2099-02-31"]
    availability = body["availability"]
    assert availability["timezone"] == "Asia/Makassar"
    assert availability["schedule"] == [{"day": "2099-03-02", "is_available": True}]
    assert availability["recurring_patterns"] == [{"day_of_week": 1, "is_active": True}]
    assert availability["unavailable_periods"][0]["reason"] == "Leave"

    non_ascii = await client.put(
        _base(app_context["translator"]),
        json={
            "schedule": [
                {"date": "2099-01-05", "is_available": True},
                {"date": "2099-01-0²", "is_available": True},
            ],
        },
        headers=app_context["provider_headers"],
    )
    assert non_ascii.status_code == 200
    assert non_ascii.json()["rejected_dates"] == ["2099-01-0²"]
    assert non_ascii.json()["availability"]["schedule"] == [
        {"day": "2099-01-05", "is_available": True}
    ]

    bad_timezone = await client.put(
        _base(app_context["translator"]),
        json={"timezone": "Not/AZone"},
        headers=app_context["provider_headers"],
    )
    assert bad_timezone.status_code == 400
    assert bad_timezone.json()["detail"]["field"] == "timezone"


async def test_day_toggle_and_offered_queries(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    base = _base(app_context["translator"])
    headers = app_context["provider_headers"]

    for _ in range(2):
        toggled = await client.put(
            f"{base}/days/2099-03-02", json={"is_available": True}, headers=headers
        )
        assert toggled.status_code == 200
    assert [entry["day"] for entry in toggled.json()["schedule"]] == ["2099-03-02"]

    day = await client.get(f"{base}/days/2099-03-02")
    assert day.json() == {
        "provider_id": str(app_context["translator"]),
        "day": "2099-03-02",
        "offered": True,
    }

    offered = await client.get(
        f"{base}/offered", params={"start": "2099-03-01", "end": "2099-03-31"}
    )
    assert offered.status_code == 200
    assert offered.json()["dates"] == ["2099-03-02"]
    assert offered.json()["total"] == 1

    withdrawn = await client.put(
        f"{base}/days/2099-03-02", json={"is_available": False}, headers=headers
    )
    assert withdrawn.json()["schedule"] == []

    malformed = await client.put(
        f"{base}/days/2099-13-40", json={"is_available": True}, headers=headers
    )
    assert malformed.status_code == 400


async def test_patterns_bulk_and_clear(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    base = _base(app_context["translator"])
    headers = app_context["provider_headers"]
    window = {"window_start": "2099-03-01", "window_end": "2099-03-31"}

    pattern = await client.post(
        f"{base}/patterns", json={"day_of_week": 5, "is_active": True}, headers=headers
    )
    assert pattern.status_code == 200

    period = await client.post(
        f"{base}/unavailable-periods",
        json={"start_date": "2099-03-01", "end_date": "2099-03-10", "reason": "Holiday"},
        headers=headers,
    )
    assert period.status_code == 201

    applied = await client.post(f"{base}/patterns/apply", json=window, headers=headers)
    assert applied.status_code == 200
    fridays = [
        day.isoformat()
        for day in iter_window(date(2099, 3, 11), date(2099, 3, 31))
        if js_day_of_week(day) == 5
    ]
    assert applied.json()["stamped_dates"] == fridays

    bulk = await client.post(f"{base}/bulk", json=window, headers=headers)
    assert bulk.status_code == 200
    assert len(bulk.json()["schedule"]) == 21

    cleared = await client.delete(
        f"{base}/schedule",
        params={"window_start": "2099-03-20", "window_end": "2099-03-31"},
        headers=headers,
    )
    assert cleared.status_code == 200
    assert cleared.json()["schedule"][-1]["day"] == "2099-03-19"

    reversed_window = await client.post(
        f"{base}/bulk",
        json={"window_start": "2099-03-31", "window_end": "2099-03-01"},
        headers=headers,
    )
    assert reversed_window.status_code == 400

    bad_weekday = await client.post(
        f"{base}/patterns", json={"day_of_week": 7}, headers=headers
    )
    assert bad_weekday.status_code == 400


async def test_unknown_provider_availability_is_404(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.get(
        "/api/applications/7f1c2a58-4c1e-4d0e-9a55-0d8a1f7e2b10/availability"
    )
    assert response.status_code == 404
