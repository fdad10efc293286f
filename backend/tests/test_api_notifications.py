"""알림 목록/읽음 처리/설정 API를 검증하는 테스트입니다."""


def test_preferences_get_and_update(client, seed_users, auth_headers):
    headers = auth_headers("member001")
    get_resp = client.get("/api/notifications/preferences", headers=headers)
    assert get_resp.status_code == 200
    assert get_resp.json()["comment_enabled"] is True
    assert get_resp.json()["motion_enabled"] is True
    assert get_resp.json()["frequency"] == "realtime"

    update_resp = client.put(
        "/api/notifications/preferences",
        json={"comment_enabled": False, "motion_enabled": True, "frequency": "daily"},
        headers=headers,
    )
    assert update_resp.status_code == 200
    assert update_resp.json()["comment_enabled"] is False
    assert update_resp.json()["frequency"] == "daily"


def test_follower_receives_comment_notification_and_marks_read(client, discussion, seed_users, auth_headers):
    author_headers = auth_headers("author001")
    client.post(f"/api/discussions/{discussion.discussion_id}/follow", headers=author_headers)
    client.post(
        f"/api/discussions/{discussion.discussion_id}/comments",
        json={"body": "ping"},
        headers=auth_headers("member001"),
    )

    notis = client.get("/api/notifications", params={"unread_only": True}, headers=author_headers).json()
    assert [n["noti_type"] for n in notis] == ["discussion_comment"]

    read = client.patch(f"/api/notifications/{notis[0]['noti_id']}/read", headers=author_headers)
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    assert client.get("/api/notifications", params={"unread_only": True}, headers=author_headers).json() == []


def test_mark_read_of_missing_notification_returns_404(client, seed_users, auth_headers):
    resp = client.patch("/api/notifications/9999/read", headers=auth_headers("member001"))
    assert resp.status_code == 404
