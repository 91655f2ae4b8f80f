import json
import time

from sqlalchemy import select

from app.core.security import sign_webhook_payload
from app.models.employee import Employee
from tests.conftest import TEST_WEBHOOK_SECRET

URL = "/api/v1/webhooks/clerk"


def signed_request(event: dict, msg_id: str = "msg_2abc"):
    body = json.dumps(event).encode()
    timestamp = str(int(time.time()))
    signature = sign_webhook_payload(TEST_WEBHOOK_SECRET, msg_id, timestamp, body)
    headers = {
        "svix-id": msg_id,
        "svix-timestamp": timestamp,
        "svix-signature": f"v1,{signature}",
        "content-type": "application/json",
    }
    return body, headers


def user_event(event_type: str, clerk_id: str = "user_abc", email: str = "asha.rao@pepl.co.in", **data):
    payload = {
        "id": clerk_id,
        "first_name": "Asha",
        "last_name": "Rao",
        "image_url": "https://img.clerk.com/asha.png",
        "email_addresses": [{"id": "idn_1", "email_address": email}],
    }
    payload.update(data)
    return {"type": event_type, "object": "event", "data": payload}


async def _employee_by_clerk_id(db_session, clerk_id):
    result = await db_session.execute(select(Employee).where(Employee.clerk_id == clerk_id))
    return result.scalar_one_or_none()


async def test_user_created_builds_shell_employee(anon_client, db_session, company):
    body, headers = signed_request(user_event("user.created"))

    response = await anon_client.post(URL, content=body, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    employee = await _employee_by_clerk_id(db_session, "user_abc")
    assert employee is not None
    assert employee.employee_code.startswith("EMP-")
    assert employee.personal_email == "asha.rao@pepl.co.in"
    assert employee.status == "active"
    assert employee.company_id == company.id


async def test_user_created_links_existing_employee(anon_client, db_session, make_employee):
    existing = await make_employee(personal_email="asha.rao@pepl.co.in")
    body, headers = signed_request(user_event("user.created"))

    response = await anon_client.post(URL, content=body, headers=headers)
    assert response.status_code == 200

    await db_session.refresh(existing)
    assert existing.clerk_id == "user_abc"
    assert existing.profile_picture == "https://img.clerk.com/asha.png"
    assert existing.employee_code == "EMP-0001"


async def test_user_updated_changes_names(anon_client, db_session, make_employee):
    employee = await make_employee(clerk_id="user_abc")
    body, headers = signed_request(user_event("user.updated", first_name="Ashwini"))

    response = await anon_client.post(URL, content=body, headers=headers)
    assert response.status_code == 200

    await db_session.refresh(employee)
    assert employee.first_name == "Ashwini"
    assert employee.last_name == "Rao"


async def test_user_deleted_terminates_employee(anon_client, db_session, make_employee):
    employee = await make_employee(clerk_id="user_abc")
    body, headers = signed_request({"type": "user.deleted", "data": {"id": "user_abc", "deleted": True}})

    response = await anon_client.post(URL, content=body, headers=headers)
    assert response.status_code == 200

    await db_session.refresh(employee)
    assert employee.status == "terminated"
    assert employee.deleted_at is not None


async def test_unknown_event_is_acknowledged(anon_client, company):
    body, headers = signed_request({"type": "session.created", "data": {"id": "sess_1"}})

    response = await anon_client.post(URL, content=body, headers=headers)
    assert response.status_code == 200


async def test_bad_signature_is_rejected(anon_client, db_session, company):
    body, headers = signed_request(user_event("user.created"))
    headers["svix-signature"] = "v1,aW52YWxpZC1zaWduYXR1cmU="

    response = await anon_client.post(URL, content=body, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid signature"
    assert await _employee_by_clerk_id(db_session, "user_abc") is None


async def test_missing_headers_are_rejected(anon_client):
    response = await anon_client.post(URL, json=user_event("user.created"))
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing svix headers"


async def test_malformed_payload_is_rejected(anon_client, company):
    body, headers = signed_request({"type": "user.created", "data": {"first_name": "No id"}})

    response = await anon_client.post(URL, content=body, headers=headers)
    assert response.status_code == 400
