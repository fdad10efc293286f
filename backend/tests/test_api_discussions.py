"""토론 API(생성, 조회수, 검색, 버전, 팔로우, 댓글, 보관, 삭제)를 검증하는 테스트입니다."""

import pytest

from consensus.schemas.group import GroupCreate
from consensus.services import group_service


@pytest.fixture
def private_group(db, seed_users):
    row = group_service.create_group(
        db,
        GroupCreate(name="Board", discussion_privacy_options="private_only"),
        seed_users["author"],
    )
    return row


def test_create_discussion_inherits_group_privacy(client, private_group, seed_users, auth_headers):
    resp = client.post(
        "/api/discussions",
        json={"group_id": private_group.group_id, "title": "Salaries"},
        headers=auth_headers("author001"),
    )
    assert resp.status_code == 200
    assert resp.json()["private"] is True


def test_create_public_discussion_in_private_only_group_fails(client, private_group, seed_users, auth_headers):
    resp = client.post(
        "/api/discussions",
        json={"group_id": private_group.group_id, "title": "Salaries", "private": False},
        headers=auth_headers("author001"),
    )
    assert resp.status_code == 422
    errors = resp.json()["detail"]["errors"]
    assert list(errors.keys()) == ["private"]
    assert len(errors["private"]) == 1


def test_create_private_discussion_in_public_only_group_fails(client, seed_users, auth_headers):
    public_group = client.post(
        "/api/groups",
        json={"name": "Town hall", "discussion_privacy_options": "public_only"},
        headers=auth_headers("author001"),
    ).json()
    resp = client.post(
        "/api/discussions",
        json={"group_id": public_group["group_id"], "title": "Open agenda", "private": True},
        headers=auth_headers("author001"),
    )
    assert resp.status_code == 422
    assert list(resp.json()["detail"]["errors"].keys()) == ["private"]


def test_clearing_privacy_does_not_expose_private_only_discussion(client, private_group, seed_users, auth_headers):
    headers = auth_headers("author001")
    created = client.post(
        "/api/discussions",
        json={"group_id": private_group.group_id, "title": "Salaries"},
        headers=headers,
    ).json()
    resp = client.put(f"/api/discussions/{created['discussion_id']}", json={"private": None}, headers=headers)
    assert resp.status_code == 422
    hidden = client.get(f"/api/discussions/{created['discussion_id']}", headers=auth_headers("outsider001"))
    assert hidden.status_code == 404


def test_get_discussion_counts_views(client, discussion, seed_users, auth_headers):
    headers = auth_headers("member001")
    first = client.get(f"/api/discussions/{discussion.discussion_id}", headers=headers)
    second = client.get(f"/api/discussions/{discussion.discussion_id}", headers=headers)
    assert first.json()["total_views"] == 1
    assert second.json()["total_views"] == 2


def test_private_discussion_hidden_from_non_members(client, private_group, seed_users, auth_headers):
    created = client.post(
        "/api/discussions",
        json={"group_id": private_group.group_id, "title": "Salaries"},
        headers=auth_headers("author001"),
    ).json()
    resp = client.get(f"/api/discussions/{created['discussion_id']}", headers=auth_headers("outsider001"))
    assert resp.status_code == 404


def test_search_only_returns_own_discussions(client, group, seed_users, auth_headers):
    client.post(
        "/api/discussions",
        json={"group_id": group.group_id, "title": "jam toast"},
        headers=auth_headers("author001"),
    )
    client.post(
        "/api/discussions",
        json={"group_id": group.group_id, "title": "jam sandwich"},
        headers=auth_headers("member001"),
    )
    resp = client.get("/api/discussions/search", params={"q": "jam"}, headers=auth_headers("author001"))
    assert resp.status_code == 200
    assert [d["title"] for d in resp.json()] == ["jam toast"]


def test_update_description_adds_version(client, discussion, seed_users, auth_headers):
    headers = auth_headers("author001")
    before = client.get(f"/api/discussions/{discussion.discussion_id}/versions", headers=headers).json()
    resp = client.put(
        f"/api/discussions/{discussion.discussion_id}",
        json={"description": "second draft"},
        headers=headers,
    )
    assert resp.status_code == 200
    after = client.get(f"/api/discussions/{discussion.discussion_id}/versions", headers=headers).json()
    assert len(after) == len(before) + 1
    assert after[0]["changed_fields"] == ["description"]

    stamp = client.get(f"/api/discussions/{discussion.discussion_id}/last-versioned-at", headers=headers).json()
    assert stamp["last_versioned_at"] == after[0]["created_at"]


def test_only_author_can_update(client, discussion, seed_users, auth_headers):
    resp = client.put(
        f"/api/discussions/{discussion.discussion_id}",
        json={"description": "hijack"},
        headers=auth_headers("member001"),
    )
    assert resp.status_code == 403


def test_follow_and_unfollow(client, discussion, seed_users, auth_headers):
    headers = auth_headers("member001")
    follow = client.post(f"/api/discussions/{discussion.discussion_id}/follow", headers=headers)
    assert follow.json()["following"] is True
    followers = client.get(f"/api/discussions/{discussion.discussion_id}/followers", headers=headers).json()
    assert [f["username"] for f in followers] == ["member001"]

    unfollow = client.post(f"/api/discussions/{discussion.discussion_id}/unfollow", headers=headers)
    assert unfollow.json()["following"] is False
    followers = client.get(f"/api/discussions/{discussion.discussion_id}/followers", headers=headers).json()
    assert followers == []


def test_comments_and_participants(client, discussion, seed_users, auth_headers):
    member_headers = auth_headers("member001")
    created = client.post(
        f"/api/discussions/{discussion.discussion_id}/comments",
        json={"body": "Looks good"},
        headers=member_headers,
    )
    assert created.status_code == 200
    comments = client.get(f"/api/discussions/{discussion.discussion_id}/comments", headers=member_headers).json()
    assert [c["body"] for c in comments] == ["Looks good"]

    participants = client.get(
        f"/api/discussions/{discussion.discussion_id}/participants", headers=member_headers
    ).json()
    assert {p["username"] for p in participants} == {"author001", "member001"}

    deleted = client.delete(f"/api/discussions/comments/{created.json()['comment_id']}", headers=member_headers)
    assert deleted.status_code == 200
    detail = client.get(f"/api/discussions/{discussion.discussion_id}", headers=member_headers).json()
    assert detail["last_comment_at"] is None


def test_non_member_cannot_comment(client, discussion, seed_users, auth_headers):
    resp = client.post(
        f"/api/discussions/{discussion.discussion_id}/comments",
        json={"body": "drive-by"},
        headers=auth_headers("outsider001"),
    )
    assert resp.status_code == 403


def test_archive_hides_discussion_from_group_listing(client, group, discussion, seed_users, auth_headers):
    headers = auth_headers("member001")
    resp = client.post(f"/api/discussions/{discussion.discussion_id}/archive", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["archived_at"] is not None

    listed = client.get(f"/api/groups/{group.group_id}/discussions", headers=headers).json()
    assert listed == []
    listed = client.get(
        f"/api/groups/{group.group_id}/discussions", params={"include_archived": True}, headers=headers
    ).json()
    assert [d["discussion_id"] for d in listed] == [discussion.discussion_id]


def test_delete_discussion(client, discussion, seed_users, auth_headers):
    headers = auth_headers("author001")
    assert client.delete(f"/api/discussions/{discussion.discussion_id}", headers=auth_headers("member001")).status_code == 403
    resp = client.delete(f"/api/discussions/{discussion.discussion_id}", headers=headers)
    assert resp.status_code == 200
    assert client.get(f"/api/discussions/{discussion.discussion_id}", headers=headers).status_code == 404
