"""Seed the database with sample groups and discussions."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from consensus.database import SessionLocal, engine, Base
import consensus.models  # noqa: F401

from consensus.models.user import User
from consensus.models.group import Group, Membership, PRIVATE_ONLY, PUBLIC_OR_PRIVATE
from consensus.models.discussion import Discussion


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Users
        users = [
            User(username="alice", name="앨리스", email="alice@example.com"),
            User(username="bob", name="밥", email="bob@example.com"),
            User(username="carol", name="캐럴", email="carol@example.com"),
        ]
        db.add_all(users)
        db.flush()

        # Groups
        groups = [
            Group(name="운영위원회", description="운영 안건 논의", discussion_privacy_options=PRIVATE_ONLY),
            Group(name="커뮤니티", description="자유 토론", discussion_privacy_options=PUBLIC_OR_PRIVATE),
        ]
        db.add_all(groups)
        db.flush()

        # Memberships
        db.add_all([
            Membership(group_id=groups[0].group_id, user_id=users[0].user_id, following_by_default=True),
            Membership(group_id=groups[0].group_id, user_id=users[1].user_id),
            Membership(group_id=groups[1].group_id, user_id=users[0].user_id),
            Membership(group_id=groups[1].group_id, user_id=users[2].user_id),
        ])

        # Discussions
        db.add_all([
            Discussion(group_id=groups[0].group_id, author_id=users[0].user_id,
                       title="2027년 예산안", description="예산 초안을 검토합니다.", private=True),
            Discussion(group_id=groups[1].group_id, author_id=users[2].user_id,
                       title="정기 모임 장소", description="다음 모임 장소를 정해요."),
        ])

        db.commit()
        print("Seed data created successfully.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
