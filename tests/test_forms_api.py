from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from hrforms.clients.hr_api import get_hr_api_client
from hrforms.core.security import create_jwt, decode_jwt
from hrforms.forms.sessions import FormSessionStore, get_form_sessions
from main import app


client = TestClient(app)


def auth(sub="u1", user_code="C77"):
    token = create_jwt({"sub": sub, "user_code": user_code, "role": "hr"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def wiring(hr_api):
    sessions = FormSessionStore()
    app.dependency_overrides[get_hr_api_client] = hr_api.client
    app.dependency_overrides[get_form_sessions] = lambda: sessions
    yield sessions
    app.dependency_overrides.clear()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_form_routes_need_a_token():
    assert client.get("/api/v1/forms").status_code == 401
    bad = {"Authorization": "Bearer not-a-jwt"}
    assert client.post("/api/v1/forms/roll-off", headers=bad).status_code == 401
    no_code = {"Authorization": "Bearer " + create_jwt({"sub": "u1"})}
    assert client.get("/api/v1/me", headers=no_code).status_code == 401


def test_me_exposes_user_code():
    response = client.get("/api/v1/me", headers=auth())
    assert response.status_code == 200
    assert response.json()["user"]["user_code"] == "C77"


def test_list_pages():
    response = client.get("/api/v1/forms", headers=auth())
    assert response.status_code == 200
    pages = {p["name"]: p for p in response.json()}
    assert set(pages) == {"roll-on", "roll-off", "team-movement"}
    assert pages["roll-on"]["required_status"] == 203
    assert pages["team-movement"]["inline_edit"] is True


def test_unknown_page_and_unopened_session_are_404():
    assert client.post("/api/v1/forms/payroll", headers=auth()).status_code == 404
    assert client.get("/api/v1/forms/roll-off", headers=auth()).status_code == 404


def test_roll_off_end_to_end(hr_api):
    headers = auth()
    mounted = client.post("/api/v1/forms/roll-off", headers=headers)
    assert mounted.status_code == 200
    assert mounted.json()["view"]["lookups_loaded"] is True

    found = client.post("/api/v1/forms/roll-off/search", json={"employee_no": "E100"}, headers=headers).json()
    assert found["ok"] is True
    view = found["view"]
    assert view["state"] == "found"
    assert view["status"] == 72
    assert view["can_edit"] is True
    assert view["display"]["SERVICELINEID"] == "APAC"

    opened = client.post("/api/v1/forms/roll-off/edit", headers=headers).json()
    assert opened["ok"] is True
    assert opened["view"]["state"] == "edit_open"

    edited = client.patch(
        "/api/v1/forms/roll-off/edit", json={"field": "BASELOCATIONID", "value": "2"}, headers=headers
    ).json()
    assert edited["accepted"] is True
    assert edited["view"]["buffer"]["BASELOCATIONID"] == 2

    dated = client.patch(
        "/api/v1/forms/roll-off/edit", json={"field": "ROLLOFFDATE", "date": "2024-06-30"}, headers=headers
    ).json()
    assert dated["view"]["buffer"]["ROLLOFFDATE"] == "2024-06-30"

    saved = client.post("/api/v1/forms/roll-off/edit/save", headers=headers).json()
    assert saved["view"]["notification"]["title"] == "Changes Saved"
    assert saved["view"]["display"]["BASELOCATIONID"] == "Pune"

    submitted = client.post("/api/v1/forms/roll-off/submit", headers=headers).json()
    assert submitted["ok"] is True
    assert submitted["view"]["notification"]["description"] == "Inserted"
    path, body = hr_api.posted[-1]
    assert path == "/insert_rolloff_details"
    assert body["Entered_By"] == "C77"
    assert body["BaseLocationID"] == 2
    assert body["RollOffDate"] == "2024-06-30"
    assert body["Sl_No"] is None


def test_clearing_a_date_field(hr_api):
    headers = auth()
    client.post("/api/v1/forms/roll-off", headers=headers)
    client.post("/api/v1/forms/roll-off/search", json={"employee_no": "E100"}, headers=headers)
    client.post("/api/v1/forms/roll-off/edit", headers=headers)
    cleared = client.patch(
        "/api/v1/forms/roll-off/edit", json={"field": "ROLLOFFDATE", "is_date": True}, headers=headers
    ).json()
    assert "ROLLOFFDATE" not in cleared["view"]["buffer"]


def test_blank_search_is_a_validation_notification(hr_api):
    headers = auth()
    client.post("/api/v1/forms/roll-off", headers=headers)
    before = len(hr_api.requests)
    result = client.post("/api/v1/forms/roll-off/search", json={}, headers=headers).json()
    assert result["ok"] is False
    assert result["view"]["notification"]["variant"] == "destructive"
    assert len(hr_api.requests) == before


def test_closed_gate_blocks_edit_and_submit(hr_api):
    hr_api.statuses["E100"] = 203
    headers = auth()
    client.post("/api/v1/forms/roll-off", headers=headers)
    client.post("/api/v1/forms/roll-off/search", json={"employee_no": "E100"}, headers=headers)
    opened = client.post("/api/v1/forms/roll-off/edit", headers=headers).json()
    assert opened["ok"] is False
    assert opened["view"]["can_edit"] is False
    assert client.post("/api/v1/forms/roll-off/submit", headers=headers).status_code == 409
    assert client.patch(
        "/api/v1/forms/roll-off/edit", json={"field": "SL_NO", "value": "1"}, headers=headers
    ).status_code == 409
    assert hr_api.posted == []


def test_invalid_user_code_is_not_accepted(hr_api):
    headers = auth()
    client.post("/api/v1/forms/roll-on", headers=headers)
    client.post("/api/v1/forms/roll-on/search", json={"employee_no": "E200"}, headers=headers)
    client.post("/api/v1/forms/roll-on/edit", headers=headers)
    result = client.patch(
        "/api/v1/forms/roll-on/edit", json={"field": "CUSERID", "value": "X1"}, headers=headers
    ).json()
    assert result["accepted"] is False
    assert result["view"]["buffer"]["CUSERID"] == "C200"
    unknown = client.patch("/api/v1/forms/roll-on/edit", json={"field": "NOPE", "value": "1"}, headers=headers)
    assert unknown.status_code == 422


def test_team_movement_flow_and_history(hr_api):
    headers = auth(user_code="C9")
    client.post("/api/v1/forms/team-movement", headers=headers)
    view = client.post(
        "/api/v1/forms/team-movement/search", json={"employee_no": "E100"}, headers=headers
    ).json()["view"]
    assert view["buffer"] == {}
    assert view["history"][0]["TO_ORGANIZATIONID"] == "Retail"

    missing = client.post("/api/v1/forms/team-movement/submit", headers=headers).json()
    assert missing["ok"] is False
    assert hr_api.posted == []

    for field, value in (("TO_SERVICELINEID", "4"), ("TO_BASELOCATIONID", "2"), ("TO_ORGANIZATIONID", 21)):
        client.patch("/api/v1/forms/team-movement/edit", json={"field": field, "value": value}, headers=headers)
    client.patch(
        "/api/v1/forms/team-movement/edit", json={"field": "BILL_START_DATE", "date": "2024-07-01"}, headers=headers
    )
    done = client.post("/api/v1/forms/team-movement/submit", headers=headers).json()
    assert done["ok"] is True
    _, body = hr_api.posted[-1]
    assert body["Entered_By"] == "C9"
    assert body["ToOrganizationID"] == 21
    assert body["FromOrganizationID"] == 20


def test_lookups_for_a_mounted_page():
    headers = auth()
    assert client.get("/api/v1/lookups/roll-on", headers=headers).status_code == 404
    client.post("/api/v1/forms/roll-on", headers=headers)
    data = client.get("/api/v1/lookups/roll-on", headers=headers).json()
    assert data["loaded"] is True
    fields = {f["field"]: f for f in data["fields"]}
    assert fields["GENDERID"]["category"] == 16
    assert [o["LookUpValueName"] for o in fields["SERVICELINEID"]["options"]] == ["APAC", "EMEA"]


def test_sessions_are_per_user(wiring):
    client.post("/api/v1/forms/roll-off", headers=auth(sub="a"))
    client.post("/api/v1/forms/roll-off/search", json={"employee_no": "E100"}, headers=auth(sub="a"))
    client.post("/api/v1/forms/roll-off", headers=auth(sub="b"))
    view_b = client.get("/api/v1/forms/roll-off", headers=auth(sub="b")).json()
    assert view_b["state"] == "idle"
    closed = client.delete("/api/v1/forms/roll-off", headers=auth(sub="a")).json()
    assert closed["status"] == "closed"
    assert wiring.get("a", "roll-off") is None
    assert client.get("/api/v1/forms/roll-off", headers=auth(sub="a")).status_code == 404


def test_oversized_ids_render_and_edit_without_errors(hr_api):
    hr_api.rows["RollOff"]["E100"][0]["serviceLineId"] = "9" * 5000
    headers = auth()
    client.post("/api/v1/forms/roll-off", headers=headers)
    client.post("/api/v1/forms/roll-off/search", json={"employee_no": "E100"}, headers=headers)
    view = client.get("/api/v1/forms/roll-off", headers=headers)
    assert view.status_code == 200
    assert view.json()["display"]["SERVICELINEID"] == "TBD"

    client.post("/api/v1/forms/roll-off/edit", headers=headers)
    edited = client.patch(
        "/api/v1/forms/roll-off/edit", json={"field": "BASELOCATIONID", "value": "9" * 5000}, headers=headers
    )
    assert edited.status_code == 200
    assert edited.json()["view"]["buffer"]["BASELOCATIONID"] is None


def test_expired_token_is_rejected():
    token = create_jwt({"sub": "u1", "user_code": "C77"}, expires_delta=timedelta(minutes=-5))
    response = client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_expiry_is_measured_in_utc():
    token = create_jwt({"sub": "u1", "user_code": "C77"}, expires_delta=timedelta(hours=1))
    exp = decode_jwt(token)["exp"]
    now = datetime.now(timezone.utc).timestamp()
    assert 3500 < exp - now <= 3600
