# tests/test_messaging_routes.py
import pytest

API = "/api/messaging"


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def create_conversation(client, token="tok-b1", **body):
    body.setdefault("vendorId", "v1")
    res = client.post(f"{API}/conversations", json=body, headers=bearer(token))
    assert res.status_code == 201, res.get_json()
    return res.get_json()["conversation"]


def unread_for(client, token):
    res = client.get(f"{API}/unread", headers=bearer(token))
    assert res.status_code == 200
    return res.get_json()["unreadCount"]


def test_buyer_vendor_exchange(client):
    conv = create_conversation(client, context="general")
    assert conv["context"] == "general"

    res = client.post(
        f"{API}/conversations/{conv['id']}/messages",
        json={"content": "Hi, how can I help?"},
        headers=bearer("tok-v1"),
    )
    assert res.status_code == 201
    assert res.get_json()["message"]["senderRole"] == "vendor"
    assert unread_for(client, "tok-b1") == 1

    res = client.post(f"{API}/conversations/{conv['id']}/read", headers=bearer("tok-b1"))
    assert res.status_code == 200
    assert res.get_json() == {"success": True}
    assert unread_for(client, "tok-b1") == 0

    res = client.post(
        f"{API}/conversations/{conv['id']}/messages",
        json={"content": "Is this in stock?"},
        headers=bearer("tok-b1"),
    )
    assert res.status_code == 201
    assert unread_for(client, "tok-v1") == 1

    for token in ("tok-b1", "tok-v1"):
        res = client.get(f"{API}/conversations/{conv['id']}/messages", headers=bearer(token))
        assert res.status_code == 200
        data = res.get_json()
        assert [(m["content"], m["senderRole"]) for m in data["messages"]] == [
            ("Hi, how can I help?", "vendor"),
            ("Is this in stock?", "buyer"),
        ]
        assert data["nextCursor"] is None


def test_non_participant_gets_404(client):
    conv = create_conversation(client)

    res = client.get(f"{API}/conversations/{conv['id']}", headers=bearer("tok-b2"))
    assert res.status_code == 404
    assert res.get_json() == {"error": "Conversation not found"}

    res = client.get(f"{API}/conversations/{conv['id']}/messages", headers=bearer("tok-b2"))
    assert res.status_code == 404


def test_conversation_shape_is_camel_case(client):
    conv = create_conversation(client, productId="p1")

    for key in ("buyerId", "vendorId", "vendorBusinessName", "productName", "isPinnedBuyer",
                "isMutedVendor", "unreadCountBuyer", "lastMessageAt", "createdAt", "updatedAt"):
        assert key in conv
    assert conv["context"] == "product_inquiry"
    assert conv["lastMessageAt"].endswith("+00:00")


def test_list_returns_page_and_unread(client):
    conv = create_conversation(client)
    client.post(f"{API}/conversations/{conv['id']}/messages", json={"content": "hello"}, headers=bearer("tok-v1"))

    res = client.get(f"{API}/conversations", headers=bearer("tok-b1"))
    data = res.get_json()

    assert res.status_code == 200
    assert [c["id"] for c in data["conversations"]] == [conv["id"]]
    assert data["nextCursor"] is None
    assert data["unreadCount"] == 1
    assert data["conversations"][0]["lastMessageContent"] == "hello"


def test_list_pages_with_cursor(client):
    ids = [create_conversation(client)["id"] for _ in range(5)]

    seen, cursor = [], None
    while True:
        query = {"limit": 2}
        if cursor:
            query["cursor"] = cursor
        data = client.get(f"{API}/conversations", query_string=query, headers=bearer("tok-b1")).get_json()
        seen.extend(c["id"] for c in data["conversations"])
        cursor = data["nextCursor"]
        if not cursor:
            break

    assert sorted(seen) == sorted(ids)
    assert len(seen) == len(set(seen))


def test_cookie_session_is_accepted(client):
    client.set_cookie("session_token", "tok-b1")
    res = client.get(f"{API}/conversations")
    assert res.status_code == 200


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer tok-expired"}, {"Authorization": "Bearer nope"}])
def test_requires_a_valid_session(client, headers):
    res = client.get(f"{API}/conversations", headers=headers)
    assert res.status_code == 401
    assert "error" in res.get_json()


def test_only_buyers_create(client):
    res = client.post(f"{API}/conversations", json={"vendorId": "v2"}, headers=bearer("tok-v1"))
    assert res.status_code == 403


def test_unknown_vendor(client):
    res = client.post(f"{API}/conversations", json={"vendorId": "ghost"}, headers=bearer("tok-b1"))
    assert res.status_code == 404
    assert res.get_json() == {"error": "Vendor not found"}


@pytest.mark.parametrize(
    "body",
    [{}, {"vendorId": ""}, {"vendorId": "v1", "context": "gossip"}],
)
def test_invalid_create_body(client, body):
    res = client.post(f"{API}/conversations", json=body, headers=bearer("tok-b1"))
    assert res.status_code == 400


def test_admins_use_admin_endpoints(client):
    assert client.get(f"{API}/conversations", headers=bearer("tok-admin")).status_code == 403
    assert unread_for(client, "tok-admin") == 0


def test_bad_query_params(client):
    assert client.get(f"{API}/conversations?cursor=garbage", headers=bearer("tok-b1")).status_code == 400
    assert client.get(f"{API}/conversations?limit=abc", headers=bearer("tok-b1")).status_code == 400
    assert client.get(f"{API}/conversations?status=deleted", headers=bearer("tok-b1")).status_code == 400


def test_message_length_limits(client):
    conv = create_conversation(client)
    url = f"{API}/conversations/{conv['id']}/messages"

    assert client.post(url, json={"content": "a" * 5001}, headers=bearer("tok-b1")).status_code == 400
    assert client.post(url, json={"content": "a" * 5000}, headers=bearer("tok-b1")).status_code == 201
    assert client.post(url, json={"content": "   "}, headers=bearer("tok-b1")).status_code == 400


def test_patch_flags_and_archive(client):
    conv = create_conversation(client)
    url = f"{API}/conversations/{conv['id']}"

    res = client.patch(url, json={"isPinned": True}, headers=bearer("tok-v1"))
    assert res.status_code == 200
    updated = res.get_json()["conversation"]
    assert updated["isPinnedVendor"] is True
    assert updated["isPinnedBuyer"] is False

    res = client.patch(url, json={"action": "archive"}, headers=bearer("tok-b1"))
    assert res.status_code == 200
    assert res.get_json() == {"success": True}

    archived = client.get(f"{API}/conversations?status=archived", headers=bearer("tok-b1")).get_json()
    assert [c["id"] for c in archived["conversations"]] == [conv["id"]]

    assert client.patch(url, json={"action": "delete"}, headers=bearer("tok-b1")).status_code == 400


def test_moderation_flow(client):
    conv = create_conversation(client)
    admin = f"/api/admin/messaging/conversations/{conv['id']}"

    assert client.post(f"{admin}/flag", json={"reason": "spam"}, headers=bearer("tok-b1")).status_code == 403

    res = client.post(f"{admin}/flag", json={"reason": "spam"}, headers=bearer("tok-admin"))
    assert res.status_code == 200
    assert res.get_json()["conversation"]["flagReason"] == "spam"

    flagged = client.get("/api/admin/messaging/flagged", headers=bearer("tok-admin")).get_json()
    assert [c["id"] for c in flagged["conversations"]] == [conv["id"]]

    assert client.post(f"{admin}/flag", json={"reason": "again"}, headers=bearer("tok-admin")).status_code == 409

    res = client.post(f"{admin}/close", json={"notes": "done"}, headers=bearer("tok-admin"))
    assert res.status_code == 200
    assert res.get_json()["conversation"]["status"] == "closed"

    res = client.post(
        f"{API}/conversations/{conv['id']}/messages", json={"content": "hello?"}, headers=bearer("tok-b1")
    )
    assert res.status_code == 403
    assert res.get_json() == {"error": "Conversation is closed"}

    listing = client.get(f"{API}/conversations", headers=bearer("tok-b1")).get_json()
    assert listing["conversations"] == []

    logs = client.get(f"{admin}/audit", headers=bearer("tok-admin")).get_json()["logs"]
    assert [log["actionName"] for log in logs] == [
        "CONVERSATION_CLOSED",
        "CONVERSATION_FLAGGED",
        "CONVERSATION_CREATED",
    ]


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/health/db").get_json() == {"db": "ok"}


def test_unknown_route_is_json(client):
    res = client.get(f"{API}/nowhere", headers=bearer("tok-b1"))
    assert res.status_code == 404
    assert "error" in res.get_json()


def test_unread_total_matches_flagged_conversation(client):
    conv = create_conversation(client)
    admin = f"/api/admin/messaging/conversations/{conv['id']}"
    client.post(f"{admin}/flag", json={"reason": "spam"}, headers=bearer("tok-admin"))
    client.post(f"{API}/conversations/{conv['id']}/messages", json={"content": "hello"}, headers=bearer("tok-v1"))

    data = client.get(f"{API}/conversations", headers=bearer("tok-b1")).get_json()

    [listed] = data["conversations"]
    assert listed["status"] == "flagged"
    assert listed["unreadCountBuyer"] == 1
    assert data["unreadCount"] == 1


def test_rejected_send_emits_nothing(client, notifier):
    conv = create_conversation(client)
    url = f"{API}/conversations/{conv['id']}/messages"

    assert client.post(url, json={"content": "a" * 5001}, headers=bearer("tok-b1")).status_code == 400
    assert notifier.created_messages == []

    assert client.post(url, json={"content": "hello"}, headers=bearer("tok-b1")).status_code == 201
    assert [e.recipient_id for e in notifier.created_messages] == ["v1"]
    assert [e.conversation_id for e in notifier.created_conversations] == [conv["id"]]
