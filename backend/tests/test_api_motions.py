"""제안/투표 API와 현재 제안 조회를 검증하는 테스트입니다."""

from datetime import datetime, timedelta, timezone


def _create_motion(client, discussion, headers, **extra):
    payload = {"discussion_id": discussion.discussion_id, "name": "Adopt budget"}
    payload.update(extra)
    resp = client.post("/api/motions", json=payload, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_motion_updates_count_and_current_motion(client, discussion, seed_users, auth_headers):
    headers = auth_headers("author001")
    motion = _create_motion(client, discussion, headers)

    detail = client.get(f"/api/discussions/{discussion.discussion_id}", headers=headers).json()
    assert detail["motions_count"] == 1
    current = client.get(f"/api/discussions/{discussion.discussion_id}/current-motion", headers=headers).json()
    assert current["motion_id"] == motion["motion_id"]


def test_closed_motion_is_not_current(client, discussion, seed_users, auth_headers):
    headers = auth_headers("author001")
    motion = _create_motion(client, discussion, headers)
    closed = client.post(f"/api/motions/{motion['motion_id']}/close", headers=headers)
    assert closed.status_code == 200
    assert closed.json()["closed_at"] is not None

    current = client.get(f"/api/discussions/{discussion.discussion_id}/current-motion", headers=headers)
    assert current.status_code == 200
    assert current.json() is None


def test_vote_and_list_votes(client, discussion, seed_users, auth_headers):
    motion = _create_motion(client, discussion, auth_headers("author001"))
    member_headers = auth_headers("member001")
    vote = client.post(
        f"/api/motions/{motion['motion_id']}/votes",
        json={"position": "yes", "statement": "ship it"},
        headers=member_headers,
    )
    assert vote.status_code == 200
    votes = client.get(f"/api/motions/{motion['motion_id']}/votes", headers=member_headers).json()
    assert [(v["user_id"], v["position"]) for v in votes] == [(seed_users["member"].user_id, "yes")]


def test_invalid_vote_position_is_rejected(client, discussion, seed_users, auth_headers):
    motion = _create_motion(client, discussion, auth_headers("author001"))
    resp = client.post(
        f"/api/motions/{motion['motion_id']}/votes",
        json={"position": "maybe"},
        headers=auth_headers("member001"),
    )
    assert resp.status_code == 422


def test_delete_motion_decrements_count(client, discussion, seed_users, auth_headers):
    headers = auth_headers("author001")
    motion = _create_motion(client, discussion, headers)
    resp = client.delete(f"/api/motions/{motion['motion_id']}", headers=headers)
    assert resp.status_code == 200
    detail = client.get(f"/api/discussions/{discussion.discussion_id}", headers=headers).json()
    assert detail["motions_count"] == 0
    assert client.get(f"/api/motions/{motion['motion_id']}", headers=headers).status_code == 404


def test_closing_time_with_offset_is_compared_in_utc(client, discussion, seed_users, auth_headers):
    headers = auth_headers("author001")
    seoul = timezone(timedelta(hours=9))
    closed_at = datetime.now(seoul) - timedelta(hours=1)
    _create_motion(client, discussion, headers, closed_at=closed_at.isoformat())

    current = client.get(f"/api/discussions/{discussion.discussion_id}/current-motion", headers=headers)
    assert current.status_code == 200
    assert current.json() is None
