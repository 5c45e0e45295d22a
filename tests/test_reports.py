"""Moderation reports: filing, withdrawing and admin decisions."""

from bson import ObjectId


async def _report_user(client, headers, reporter, target, reason="spam"):
    return await client.post(
        "/reports",
        json={"reportType": "user", "contentId": str(target["_id"]), "reason": reason, "description": "Bot"},
        headers=headers(reporter),
    )


async def test_create_report(client, headers, alice, bob):
    resp = await _report_user(client, headers, alice, bob)

    assert resp.status_code == 201
    report = resp.json()["report"]
    assert report["reporter_id"] == str(alice["_id"])
    assert report["status"]["state"] == "pending"
    assert report["status"]["is_resolved"] is False
    assert report["status"]["action_taken"] == "none"


async def test_duplicate_report_is_409(client, headers, alice, bob):
    await _report_user(client, headers, alice, bob)

    resp = await _report_user(client, headers, alice, bob)

    assert resp.status_code == 409


async def test_invalid_type_or_reason_is_400(client, headers, alice, bob):
    resp = await client.post("/reports", json={"reportType": "galaxy"}, headers=headers(alice))
    assert resp.status_code == 400
    assert resp.json()["code"] == "report.invalid"

    resp = await _report_user(client, headers, alice, bob, reason="boredom")
    assert resp.status_code == 400


async def test_targeted_report_needs_existing_content(client, headers, alice):
    resp = await client.post("/reports", json={"reportType": "post", "reason": "spam"}, headers=headers(alice))
    assert resp.status_code == 400

    resp = await client.post(
        "/reports",
        json={"reportType": "post", "contentId": str(ObjectId()), "reason": "spam"},
        headers=headers(alice),
    )
    assert resp.status_code == 404


async def test_untargeted_reports_need_no_content(client, headers, alice):
    for _ in range(2):
        resp = await client.post(
            "/reports", json={"reportType": "other", "description": "Something odd"}, headers=headers(alice)
        )
        assert resp.status_code == 201


async def test_report_project(client, headers, owner, alice, make_project):
    project = await make_project(owner)

    resp = await client.post(
        "/reports",
        json={"reportType": "project", "contentId": str(project["_id"]), "reason": "inappropriate content"},
        headers=headers(alice),
    )

    assert resp.status_code == 201


async def test_my_reports(client, headers, alice, bob, owner):
    await _report_user(client, headers, alice, bob)
    await _report_user(client, headers, alice, owner)
    await _report_user(client, headers, bob, alice)

    resp = await client.get("/reports/my-reports", headers=headers(alice))

    assert resp.json()["total_reports"] == 2


async def test_report_visible_to_reporter_and_admin_only(client, headers, alice, bob, owner, admin):
    report = (await _report_user(client, headers, alice, bob)).json()["report"]

    assert (await client.get(f"/reports/{report['id']}", headers=headers(alice))).status_code == 200
    assert (await client.get(f"/reports/{report['id']}", headers=headers(admin))).status_code == 200
    assert (await client.get(f"/reports/{report['id']}", headers=headers(owner))).status_code == 403
    assert (await client.get("/reports/xyz", headers=headers(alice))).status_code == 400


async def test_reporter_cancels_pending_report(client, headers, alice, bob):
    report = (await _report_user(client, headers, alice, bob)).json()["report"]

    resp = await client.post(f"/reports/cancel/{report['id']}", headers=headers(bob))
    assert resp.status_code == 404

    resp = await client.post(f"/reports/cancel/{report['id']}", headers=headers(alice))
    assert resp.status_code == 200
    assert resp.json()["report"]["status"]["state"] == "cancelled"

    resp = await client.post(f"/reports/cancel/{report['id']}", headers=headers(alice))
    assert resp.status_code == 400


async def test_admin_resolves_report(client, headers, alice, bob, admin):
    report = (await _report_user(client, headers, alice, bob)).json()["report"]

    resp = await client.patch(
        f"/reports/resolve/{report['id']}",
        json={"actionTaken": "warning", "adminNote": "First strike"},
        headers=headers(admin),
    )

    assert resp.status_code == 200
    status = resp.json()["report"]["status"]
    assert status["state"] == "resolved"
    assert status["is_resolved"] is True
    assert status["action_taken"] == "warning"
    assert status["resolved_by"] == str(admin["_id"])

    resp = await client.patch(f"/reports/reject/{report['id']}", json={}, headers=headers(admin))
    assert resp.status_code == 400


async def test_admin_rejects_report(client, headers, alice, bob, admin):
    report = (await _report_user(client, headers, alice, bob)).json()["report"]

    resp = await client.patch(
        f"/reports/reject/{report['id']}", json={"adminNote": "Not spam"}, headers=headers(admin)
    )

    assert resp.status_code == 200
    assert resp.json()["report"]["status"]["state"] == "rejected"
    assert resp.json()["report"]["status"]["is_resolved"] is False


async def test_admin_endpoints_refuse_regular_users(client, headers, alice, bob):
    report = (await _report_user(client, headers, alice, bob)).json()["report"]

    assert (await client.get("/reports/admin", headers=headers(alice))).status_code == 403
    resp = await client.patch(f"/reports/resolve/{report['id']}", json={}, headers=headers(alice))
    assert resp.status_code == 403


async def test_admin_listing_with_statistics(client, headers, alice, bob, owner, admin):
    first = (await _report_user(client, headers, alice, bob)).json()["report"]
    await _report_user(client, headers, alice, owner)
    await _report_user(client, headers, bob, alice)
    await client.patch(f"/reports/resolve/{first['id']}", json={"actionTaken": "ban"}, headers=headers(admin))

    resp = await client.get("/reports/admin", params={"status": "pending", "limit": 1}, headers=headers(admin))

    body = resp.json()
    assert resp.status_code == 200
    assert len(body["reports"]) == 1
    assert body["pagination"]["total_reports"] == 2
    assert body["pagination"]["total_pages"] == 2
    assert body["statistics"] == {"pending": 2, "resolved": 1, "rejected": 0, "cancelled": 0, "total": 3}

    resp = await client.get("/reports/admin", params={"action_taken": "ban"}, headers=headers(admin))
    assert [r["id"] for r in resp.json()["reports"]] == [first["id"]]
