"""HTTP envelopes for /api/v1/notifications."""

NOTIFICATIONS = "/api/v1/notifications"


def _send(client, headers, user_id, type="generic", payload=None):
    return client.post(
        NOTIFICATIONS,
        json={"user_id": user_id, "type": type, "payload": payload if payload is not None else {}},
        headers=headers,
    )


def test_send_and_list(client, client_headers, freelancer_headers, freelancer_profile) -> None:
    response = _send(client, client_headers, freelancer_profile.id, payload={"text": "hello"})

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Notification sent successfully"
    assert data["notification"]["type"] == "generic"
    assert data["notification"]["read"] is False

    inbox = client.get(NOTIFICATIONS, headers=freelancer_headers)
    assert inbox.status_code == 200
    body = inbox.json()
    assert body["unread_count"] == 1
    assert [n["payload"] for n in body["notifications"]] == [{"text": "hello"}]


def test_send_validates_typed_payload(client, client_headers, freelancer_profile) -> None:
    response = _send(
        client, client_headers, freelancer_profile.id, type="booking_request", payload={"x": 1}
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("Invalid booking_request payload")


def test_send_rejects_unknown_type(client, client_headers, freelancer_profile) -> None:
    response = _send(client, client_headers, freelancer_profile.id, type="nudge")

    assert response.status_code == 400
    assert response.json()["error"] == "Unsupported notification type: nudge"


def test_send_requires_fields(client, client_headers) -> None:
    response = client.post(NOTIFICATIONS, json={"type": "generic"}, headers=client_headers)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "user_id, type, and payload are required",
    }


def test_mark_one_and_all_read(client, client_headers, freelancer_profile, auth_headers_for) -> None:
    owner_headers = auth_headers_for(freelancer_profile.id)
    first = _send(client, client_headers, freelancer_profile.id).json()["notification"]["id"]
    for _ in range(2):
        _send(client, client_headers, freelancer_profile.id)

    marked = client.post(f"{NOTIFICATIONS}/{first}/read", headers=owner_headers)
    assert marked.status_code == 200
    assert marked.json()["notification"]["read"] is True

    unread = client.get(NOTIFICATIONS, params={"unread_only": "true"}, headers=owner_headers)
    assert len(unread.json()["notifications"]) == 2

    all_read = client.post(f"{NOTIFICATIONS}/read-all", headers=owner_headers)
    assert all_read.status_code == 200
    assert all_read.json() == {
        "success": True,
        "message": "Marked 2 notifications as read",
        "updated": 2,
    }
    assert client.get(NOTIFICATIONS, headers=owner_headers).json()["unread_count"] == 0


def test_cannot_mark_someone_elses_notification(
    client, client_headers, freelancer_profile
) -> None:
    notification_id = _send(client, client_headers, freelancer_profile.id).json()["notification"]["id"]

    response = client.post(f"{NOTIFICATIONS}/{notification_id}/read", headers=client_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Notification not found"}


def test_limit_out_of_range(client, client_headers) -> None:
    response = client.get(NOTIFICATIONS, params={"limit": 0}, headers=client_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_inbox_requires_auth(client) -> None:
    response = client.get(NOTIFICATIONS)

    assert response.status_code == 400
    assert response.json()["error"] == "Authentication required"
