from __future__ import annotations

from conftest import ADMIN_ID, ALICE_ID, BOB_ID, OTHER_ADMIN_ID


def _create(http, headers, text="Need help", subdomain="acme"):
    return http.post("/comments", json={"text": text, "subdomain": subdomain}, headers=headers)


def test_worker_comment_admin_reply_worker_reads(http, auth_headers):
    worker = auth_headers(ALICE_ID)
    admin = auth_headers(ADMIN_ID)

    created = _create(http, worker)
    assert created.status_code == 201
    comment_id = created.get_json()["id"]

    mine = http.get("/comments/me", headers=worker).get_json()
    assert [c["id"] for c in mine] == [comment_id]
    assert mine[0]["isNew"] is True
    assert mine[0]["createdAt"].endswith("Z")

    replied = http.post(f"/comments/{comment_id}/replies", json={"text": "On it"}, headers=admin)
    assert replied.status_code == 201
    body = replied.get_json()
    assert len(body["replies"]) == 1
    assert body["replies"][0]["isAdminReply"] is True
    assert body["hasUnreadAdminReply"] is True
    assert body["lastReplyTimestamp"] is not None

    unread = http.get("/comments/unread-admin-replies", headers=worker).get_json()
    assert [c["id"] for c in unread] == [comment_id]

    marked = http.put(f"/comments/{comment_id}/mark-admin-replies-read", headers=worker)
    assert marked.status_code == 200
    assert marked.get_json()["message"] == "Admin replies marked as read for this comment"

    after = http.get("/comments/me", headers=worker).get_json()[0]
    assert after["hasUnreadAdminReply"] is False
    assert after["replies"][0]["isNew"] is False


def test_create_with_reserved_subdomain_is_rejected(http, auth_headers, comments):
    resp = _create(http, auth_headers(ALICE_ID), text="x", subdomain="main")

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Company name is missing, login again."}
    assert comments.list_by_worker(ALICE_ID) == []


def test_worker_cannot_post_into_another_tenant(http, auth_headers):
    resp = _create(http, auth_headers(ALICE_ID), text="hi", subdomain="globex")

    assert resp.status_code == 403
    assert resp.get_json() == {"success": False, "message": "Not authorized for this company"}
    assert http.get("/comments/globex", headers=auth_headers(OTHER_ADMIN_ID)).get_json() == []


def test_admins_cannot_create_comments(http, auth_headers, comments):
    assert _create(http, auth_headers(ADMIN_ID)).status_code == 403
    assert comments.list_by_tenant("acme") == []


def test_tenant_listing_includes_orphaned_comment(http, auth_headers, users):
    _create(http, auth_headers(BOB_ID), text="orphan")
    users.remove(BOB_ID)

    resp = http.get("/comments/acme", headers=auth_headers(ADMIN_ID))

    assert resp.status_code == 200
    (comment,) = resp.get_json()
    assert comment["worker"]["name"] == "Unknown Worker"
    assert comment["worker"]["department"] == {"name": "Unassigned"}


def test_tenant_listing_wire_shape(http, auth_headers):
    _create(http, auth_headers(ALICE_ID))

    (comment,) = http.get("/comments/acme", headers=auth_headers(ADMIN_ID)).get_json()

    assert comment["worker"] == {
        "id": ALICE_ID,
        "name": "Alice Worker",
        "username": "alice",
        "photo": "/photos/alice.png",
        "department": {"name": "Production"},
    }
    assert comment["workerId"] == ALICE_ID
    assert comment["attachment"] is None
    assert comment["replies"] == []


def test_requests_without_token_are_unauthorized(http):
    resp = http.get("/comments/me")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Not authorized, no token"


def test_invalid_token_is_unauthorized(http):
    resp = http.get("/comments/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_admin_only_routes_reject_workers(http, auth_headers):
    resp = http.get("/comments/acme", headers=auth_headers(ALICE_ID))
    assert resp.status_code == 403
    assert resp.get_json()["success"] is False


def test_worker_only_routes_reject_admins(http, auth_headers):
    assert http.get("/comments/me", headers=auth_headers(ADMIN_ID)).status_code == 403


def test_admin_cannot_list_other_tenant(http, auth_headers):
    assert http.get("/comments/acme", headers=auth_headers(OTHER_ADMIN_ID)).status_code == 403


def test_worker_comments_for_admin(http, auth_headers):
    _create(http, auth_headers(ALICE_ID), text="first")
    _create(http, auth_headers(BOB_ID), text="bob's")

    resp = http.get(f"/comments/worker/{ALICE_ID}", headers=auth_headers(ADMIN_ID))

    assert [c["text"] for c in resp.get_json()] == ["first"]


def test_mark_read_and_missing_comment(http, auth_headers):
    comment_id = _create(http, auth_headers(ALICE_ID)).get_json()["id"]
    admin = auth_headers(ADMIN_ID)

    ok = http.put(f"/comments/{comment_id}/read", headers=admin)
    assert ok.get_json() == {"message": "Comment marked as read"}

    missing = http.put("/comments/4242/read", headers=admin)
    assert missing.status_code == 404
    assert missing.get_json()["message"] == "Comment not found"


def test_bulk_mark_admin_replies_read_reports_count(http, auth_headers):
    worker = auth_headers(ALICE_ID)
    admin = auth_headers(ADMIN_ID)
    for text in ("a", "b"):
        comment_id = _create(http, worker, text=text).get_json()["id"]
        http.post(f"/comments/{comment_id}/replies", json={"text": "ok"}, headers=admin)

    resp = http.put("/comments/mark-admin-replies-read", headers=worker)

    assert resp.get_json() == {"message": "Admin replies marked as read", "modified": 2}
    assert http.get("/comments/unread-admin-replies", headers=worker).get_json() == []


def test_reply_without_text_is_bad_request(http, auth_headers):
    comment_id = _create(http, auth_headers(ALICE_ID)).get_json()["id"]

    resp = http.post(f"/comments/{comment_id}/replies", json={}, headers=auth_headers(ADMIN_ID))

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please add text to your reply"
