from datetime import datetime


def test_health_is_public(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_endpoints_require_staff(client):
    resp = client.post("/api/scans", json={"code": "LPRDS-001"})
    assert resp.status_code == 401
    assert resp.get_json()["status"] == "unauthenticated"


def test_session_staff_id_is_accepted(client):
    with client.session_transaction() as sess:
        sess["staff_id"] = 3
    assert client.get("/api/compliance").status_code == 200


def test_scan_flow(client, clock, staff_headers):
    clock.set(datetime(2026, 3, 2, 8, 0))
    first = client.post("/api/scans", json={"code": "LPRDS-001"}, headers=staff_headers)
    assert first.status_code == 201
    body = first.get_json()
    assert body["status"] == "accepted"
    assert body["action"] == "arrival"
    assert body["attendance"]["arrival_scanned_by"] == 7

    clock.set(datetime(2026, 3, 2, 8, 3))
    dup = client.post("/api/scans", json={"code": "LPRDS-001", "action": "departure"}, headers=staff_headers)
    assert dup.status_code == 409
    assert dup.get_json()["status"] == "duplicate_scan_too_soon"
    assert dup.get_json()["cooldown_minutes"] == 5

    clock.set(datetime(2026, 3, 2, 8, 10))
    preview = client.post("/api/scans/preview", json={"code": "LPRDS-001"}, headers=staff_headers)
    assert preview.get_json()["suggested_action"] == "departure"

    day = client.get("/api/attendance/1?date=2026-03-02", headers=staff_headers).get_json()
    assert day["attendance"]["is_present"] is True


def test_scan_errors_map_to_status(client, staff_headers):
    bad = client.post("/api/scans", json={"code": "garbage"}, headers=staff_headers)
    assert (bad.status_code, bad.get_json()["status"]) == (400, "invalid_code_format")

    gone = client.post("/api/scans", json={"code": "LPRDS-006"}, headers=staff_headers)
    assert (gone.status_code, gone.get_json()["status"]) == (404, "child_not_found_or_inactive")

    action = client.post("/api/scans", json={"code": "LPRDS-001", "action": "lunch"}, headers=staff_headers)
    assert (action.status_code, action.get_json()["status"]) == (400, "invalid")


def test_scan_image_requires_file(client, staff_headers):
    resp = client.post("/api/scans/image", data={}, headers=staff_headers)
    assert resp.status_code == 400


def test_badge_png(client, staff_headers):
    resp = client.get("/api/children/1/badge.png", headers=staff_headers)
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert client.get("/api/children/99/badge.png", headers=staff_headers).status_code == 404


def test_assign_group_errors(client, staff_headers):
    old = client.post("/api/children/2/assign-group", json={"group_id": 1}, headers=staff_headers)
    assert old.status_code == 422
    assert old.get_json()["reason"] == "too_old"

    missing = client.post("/api/children/2/assign-group", json={}, headers=staff_headers)
    assert missing.status_code == 400


def test_group_options_include_formatted_age(client, staff_headers):
    body = client.get("/api/children/1/group-options", headers=staff_headers).get_json()
    assert body["age_months"] == 18
    assert body["age"] == "1 year 6 months"
    assert len(body["options"]) == 4


def test_change_section_without_fit(client, staff_headers):
    body = client.post("/api/children/2/section", json={"section": "creche_etoile"}, headers=staff_headers).get_json()
    assert body["status"] == "unassigned"
    assert body["assignment"] is None


def test_compliance_endpoints(client, staff_headers):
    one = client.get("/api/sections/creche_nuage/compliance", headers=staff_headers).get_json()
    assert one["status"] == "compliant"
    assert client.get("/api/sections/nowhere/compliance", headers=staff_headers).status_code == 404
    assert client.get("/api/compliance/alerts", headers=staff_headers).get_json()["alerts"] == []


def test_roll_call_and_report(client, staff_headers):
    resp = client.post("/api/attendance/2/absent", json={"date": "2026-03-02"}, headers=staff_headers)
    assert resp.get_json()["attendance"]["is_present"] is False

    report = client.get("/api/reports/daily?date=2026-03-02", headers=staff_headers).get_json()
    assert report["summary"]["absent"] == 1

    bad_date = client.get("/api/reports/daily?date=03-02-2026", headers=staff_headers)
    assert bad_date.status_code == 400

    csv = client.get("/api/reports/daily.csv?date=2026-03-02", headers=staff_headers)
    assert csv.mimetype == "text/csv"
    assert "attendance_2026-03-02.csv" in csv.headers["Content-Disposition"]


def test_manual_arrival_and_departure(client, clock, staff_headers):
    early = client.post("/api/attendance/1/arrival", headers=staff_headers)
    assert (early.status_code, early.get_json()["status"]) == (400, "invalid")

    client.post("/api/attendance/1/present", json={}, headers=staff_headers)
    arrival = client.post("/api/attendance/1/arrival", headers=staff_headers).get_json()
    assert arrival["attendance"]["arrival_time"] == "2026-03-02T07:45:00"
    assert arrival["attendance"]["arrival_scanned_by"] == 7

    clock.set(datetime(2026, 3, 2, 17, 0))
    departure = client.post("/api/attendance/1/departure", headers=staff_headers).get_json()
    assert departure["attendance"]["departure_time"] == "2026-03-02T17:00:00"

    missing = client.post("/api/attendance/999/departure", headers=staff_headers)
    assert missing.status_code == 404
