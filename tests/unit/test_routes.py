from datetime import datetime, timedelta

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

import pytest

from conftest import MANAGER, OTHER_TENANT, STAFF, TENANT, ticket_payload
from maintenance_desk.api import health_router, notification_router, router, staff_router, stats_router
from maintenance_desk.security.error_handler import MaintenanceError, maintenance_exception_handler


def build_app(context):
    app = FastAPI()
    app.state.context = context
    app.add_exception_handler(MaintenanceError, maintenance_exception_handler)
    app.add_exception_handler(StarletteHTTPException, maintenance_exception_handler)
    app.include_router(health_router)
    app.include_router(router)
    app.include_router(staff_router)
    app.include_router(stats_router)
    app.include_router(notification_router)
    return app


def headers(actor):
    return {"X-User-Id": actor.id, "X-User-Role": actor.role.value}


@pytest.fixture
def client(context):
    return TestClient(build_app(context))


@pytest.fixture
def ticket_id(client):
    payload = ticket_payload()
    payload.pop("created_by")
    response = client.post("/api/tickets", json=payload, headers=headers(TENANT))
    return response.json()["ticket_id"]


@pytest.mark.unit
def test_missing_identity_returns_401(client):
    response = client.get("/api/tickets")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "E005"


@pytest.mark.unit
def test_unknown_role_returns_403(client):
    response = client.get("/api/tickets", headers={"X-User-Id": "x", "X-User-Role": "landlord"})
    assert response.status_code == 403


@pytest.mark.unit
def test_create_ticket_defaults_requester(client, context):
    payload = ticket_payload()
    payload.pop("created_by")

    response = client.post("/api/tickets", json=payload, headers=headers(TENANT))

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["ticket"]["created_by"] == "u1"
    assert data["ticket"]["status"] == "new"
    assert context.tickets.get_ticket(data["ticket_id"]).title == "Leaky faucet"


@pytest.mark.unit
def test_create_ticket_with_blank_title_returns_422(client):
    response = client.post("/api/tickets", json=ticket_payload(title=" "), headers=headers(TENANT))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "E009"


@pytest.mark.unit
def test_tenant_only_lists_own_tickets(client, context, ticket_id):
    context.tickets.create(ticket_payload(created_by="u2"))

    mine = client.get("/api/tickets", headers=headers(TENANT)).json()
    everything = client.get("/api/tickets", headers=headers(MANAGER)).json()

    assert [t["id"] for t in mine["tickets"]] == [ticket_id]
    assert everything["count"] == 2


@pytest.mark.unit
def test_other_tenant_cannot_read_ticket(client, ticket_id):
    response = client.get(f"/api/tickets/{ticket_id}", headers=headers(OTHER_TENANT))
    assert response.status_code == 403


@pytest.mark.unit
def test_unknown_ticket_returns_404(client):
    response = client.get("/api/tickets/missing", headers=headers(MANAGER))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "E007"


@pytest.mark.unit
def test_assignment_flow(client, clock, ticket_id):
    visit = (clock.now + timedelta(days=1)).isoformat()

    denied = client.post(
        f"/api/tickets/{ticket_id}/assign",
        json={"staff_id": "staff-2", "scheduled_date": visit},
        headers=headers(STAFF),
    )
    assert denied.status_code == 403

    past = client.post(
        f"/api/tickets/{ticket_id}/assign",
        json={"staff_id": "staff-2", "scheduled_date": (clock.now - timedelta(days=1)).isoformat()},
        headers=headers(MANAGER),
    )
    assert past.status_code == 422

    response = client.post(
        f"/api/tickets/{ticket_id}/assign",
        json={"staff_id": "staff-2", "scheduled_date": visit},
        headers=headers(MANAGER),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "assigned"
    assert response.json()["assigned_to"] == "staff-2"


@pytest.mark.unit
def test_status_change(client, clock, ticket_id):
    response = client.post(f"/api/tickets/{ticket_id}/status", json={"status": "resolved"}, headers=headers(STAFF))

    assert response.status_code == 200
    assert response.json()["status"] == "resolved"
    assert response.json()["completed_date"] is not None

    bad = client.post(f"/api/tickets/{ticket_id}/status", json={"status": "done"}, headers=headers(STAFF))
    assert bad.status_code == 422

    tenant = client.post(f"/api/tickets/{ticket_id}/status", json={"status": "closed"}, headers=headers(TENANT))
    assert tenant.status_code == 403


@pytest.mark.unit
def test_private_notes_hidden_from_tenant(client, ticket_id):
    client.post(f"/api/tickets/{ticket_id}/notes", json={"text": "Please knock"}, headers=headers(TENANT))
    client.post(
        f"/api/tickets/{ticket_id}/notes",
        json={"text": "Check for mold", "is_private": True},
        headers=headers(STAFF),
    )

    tenant_view = client.get(f"/api/tickets/{ticket_id}", headers=headers(TENANT)).json()
    staff_view = client.get(f"/api/tickets/{ticket_id}", headers=headers(STAFF)).json()

    assert [n["text"] for n in tenant_view["notes"]] == ["Please knock"]
    assert len(staff_view["notes"]) == 2
    assert staff_view["notes"][1]["created_by"] == "staff-2"


@pytest.mark.unit
def test_feedback_bounds(client, ticket_id):
    rejected = client.post(f"/api/tickets/{ticket_id}/feedback", json={"rating": 6}, headers=headers(TENANT))
    assert rejected.status_code == 422

    accepted = client.post(
        f"/api/tickets/{ticket_id}/feedback",
        json={"rating": 5, "comment": "great"},
        headers=headers(TENANT),
    )
    assert accepted.status_code == 200
    assert accepted.json()["feedback"] == {"rating": 5, "comment": "great"}


@pytest.mark.unit
def test_patch_rejects_lifecycle_fields(client, ticket_id):
    response = client.patch(f"/api/tickets/{ticket_id}", json={"status": "closed"}, headers=headers(MANAGER))
    assert response.status_code == 422

    response = client.patch(f"/api/tickets/{ticket_id}", json={"priority": "urgent"}, headers=headers(MANAGER))
    assert response.status_code == 200
    assert response.json()["priority"] == "urgent"


@pytest.mark.unit
def test_delete_keeps_audit_trail(client, ticket_id):
    assert client.delete(f"/api/tickets/{ticket_id}", headers=headers(STAFF)).status_code == 403
    assert client.delete(f"/api/tickets/{ticket_id}", headers=headers(MANAGER)).status_code == 200
    assert client.get(f"/api/tickets/{ticket_id}", headers=headers(MANAGER)).status_code == 404

    audit = client.get(f"/api/tickets/{ticket_id}/audit", headers=headers(STAFF)).json()
    assert [entry["operation"] for entry in audit["entries"]] == ["CREATE_TICKET", "DELETE_TICKET"]

    assert client.get(f"/api/tickets/{ticket_id}/audit", headers=headers(TENANT)).status_code == 403


@pytest.mark.unit
def test_statistics_and_dashboards(client, context, ticket_id):
    context.tickets.change_status(ticket_id, "closed")

    assert client.get("/api/stats", headers=headers(TENANT)).status_code == 403

    statistics = client.get("/api/stats", headers=headers(MANAGER)).json()["statistics"]
    assert statistics["total_tickets"] == 1
    assert statistics["resolution_rate"] == 1.0

    tenant = client.get("/api/dashboard", headers=headers(TENANT)).json()
    assert tenant["role"] == "tenant"
    assert tenant["summary"]["completed"] == 1

    manager = client.get("/api/dashboard", headers=headers(MANAGER)).json()
    assert manager["statistics"]["resolved_tickets"] == 1


@pytest.mark.unit
def test_dashboard_with_naive_visit_date(client, context, ticket_id):
    context.tickets.assign(ticket_id, "staff-2", datetime(2030, 1, 1, 9, 0))

    response = client.get("/api/dashboard", headers=headers(STAFF))

    assert response.status_code == 200
    assert [t["id"] for t in response.json()["upcoming"]] == [ticket_id]


@pytest.mark.unit
def test_staff_routes(client, clock, context, ticket_id):
    plumbers = client.get("/api/staff", params={"category": "plumbing"}, headers=headers(MANAGER)).json()
    assert [m["id"] for m in plumbers["staff"]] == ["staff-1", "staff-2"]

    everyone = client.get("/api/staff", headers=headers(MANAGER)).json()
    assert everyone["count"] == 3

    context.assignments.assign(ticket_id, "staff-2", clock.now + timedelta(days=1))
    metrics = client.get("/api/staff/staff-2/metrics", headers=headers(MANAGER)).json()
    assert metrics["metrics"]["total_assigned"] == 1
    assert metrics["summary"]["active"] == 1

    assert client.get("/api/staff/nobody/metrics", headers=headers(MANAGER)).status_code == 404


@pytest.mark.unit
def test_notification_routes(client):
    created = client.post(
        "/api/notifications",
        json={"type": "success", "title": "Ticket resolved", "message": "Your sink is fixed"},
        headers=headers(TENANT),
    )
    assert created.status_code == 201
    notification_id = created.json()["notification"]["id"]

    feed = client.get("/api/notifications", headers=headers(TENANT)).json()
    assert feed["unread_count"] == 1

    read = client.post(f"/api/notifications/{notification_id}/read", headers=headers(TENANT)).json()
    assert read["unread_count"] == 0
    assert client.post("/api/notifications/missing/read", headers=headers(TENANT)).status_code == 404

    cleared = client.delete("/api/notifications", headers=headers(TENANT)).json()
    assert cleared["unread_count"] == 0


@pytest.mark.unit
def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["staff"] == 3
