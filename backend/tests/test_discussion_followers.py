"""토론 팔로워 계산(명시적 팔로우, 그룹 기본 팔로우, 언팔로우 우선) 규칙을 검증하는 테스트입니다."""

import pytest

from consensus.services import discussion_service, group_service, reader_service


@pytest.fixture
def follower_setup(db, group, discussion, make_user):
    users = {
        "follower": make_user("follower"),
        "unfollower": make_user("unfollower"),
        "group_follower": make_user("group_follower"),
        "group_member": make_user("group_member"),
        "non_member": make_user("non_member"),
    }
    for key in ("follower", "unfollower", "group_follower", "group_member"):
        group_service.add_member(db, group, users[key])

    reader_service.follow(db, reader_service.reader_for(db, discussion, users["follower"]))
    reader_service.unfollow(db, reader_service.reader_for(db, discussion, users["unfollower"]))
    group_service.follow_by_default(db, group_service.membership_for(db, group, users["group_follower"]))
    return users


def _follower_ids(db, discussion):
    return {u.user_id for u in discussion_service.followers(db, discussion)}


def test_followers_include_explicit_and_default_followers(db, discussion, follower_setup):
    ids = _follower_ids(db, discussion)
    assert follower_setup["follower"].user_id in ids
    assert follower_setup["group_follower"].user_id in ids


def test_followers_exclude_unfollowers_plain_members_and_non_members(db, discussion, follower_setup):
    ids = _follower_ids(db, discussion)
    assert follower_setup["unfollower"].user_id not in ids
    assert follower_setup["group_member"].user_id not in ids
    assert follower_setup["non_member"].user_id not in ids


def test_explicit_unfollow_overrides_follow_by_default(db, group, discussion, follower_setup):
    unfollower = follower_setup["unfollower"]
    group_service.follow_by_default(db, group_service.membership_for(db, group, unfollower))
    assert unfollower.user_id not in _follower_ids(db, discussion)


def test_explicit_follow_by_non_member_is_ignored(db, discussion, follower_setup):
    non_member = follower_setup["non_member"]
    reader_service.follow(db, reader_service.reader_for(db, discussion, non_member))
    assert non_member.user_id not in _follower_ids(db, discussion)


def test_reader_for_returns_single_reader_per_pair(db, discussion, seed_users):
    first = reader_service.reader_for(db, discussion, seed_users["member"])
    second = reader_service.reader_for(db, discussion, seed_users["member"])
    assert first.reader_id == second.reader_id
    assert len(reader_service.readers_of(db, discussion)) == 1


def test_deactivated_member_keeps_explicit_follow(db, discussion, follower_setup):
    follower = follower_setup["follower"]
    follower.is_active = False
    db.commit()
    assert follower.user_id in _follower_ids(db, discussion)
