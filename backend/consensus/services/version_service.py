"""엔티티 버전(audit trail) 저장/조회 공용 기능을 제공하는 도메인 서비스입니다."""

import json
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from consensus.models.content_version import ContentVersion


def snapshot_of(row: Any, fields: Iterable[str]) -> Dict[str, Any]:
    return {field: getattr(row, field) for field in fields}


def changed_fields(before: Dict[str, Any], after: Dict[str, Any]) -> List[str]:
    return sorted(key for key in after if before.get(key) != after.get(key))


def create_content_version(
    db: Session,
    *,
    entity_type: str,
    entity_id: int,
    changed_by: Optional[int],
    change_type: str,
    snapshot: Dict[str, Any],
    fields: Optional[List[str]] = None,
    commit: bool = True,
) -> ContentVersion:
    current_max = (
        db.query(func.max(ContentVersion.version_no))
        .filter(
            ContentVersion.entity_type == entity_type,
            ContentVersion.entity_id == entity_id,
        )
        .scalar()
    )
    version_no = (current_max or 0) + 1

    row = ContentVersion(
        entity_type=entity_type,
        entity_id=entity_id,
        version_no=version_no,
        change_type=change_type,
        snapshot=json.dumps(snapshot, ensure_ascii=False, default=str),
        changed_fields=json.dumps(fields or [], ensure_ascii=False),
        changed_by=changed_by,
    )
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    return row


def record_changes(
    db: Session,
    *,
    entity_type: str,
    entity_id: int,
    changed_by: Optional[int],
    before: Dict[str, Any],
    after: Dict[str, Any],
) -> Optional[ContentVersion]:
    """Append an ``update`` version when a tracked field changed.

    ``before``/``after`` only hold the tracked fields, so edits outside the
    allow-list never produce a version.
    """
    fields = changed_fields(before, after)
    if not fields:
        return None
    return create_content_version(
        db,
        entity_type=entity_type,
        entity_id=entity_id,
        changed_by=changed_by,
        change_type="update",
        snapshot=after,
        fields=fields,
    )


def list_versions(db: Session, *, entity_type: str, entity_id: int) -> List[ContentVersion]:
    return (
        db.query(ContentVersion)
        .filter(
            ContentVersion.entity_type == entity_type,
            ContentVersion.entity_id == entity_id,
        )
        .order_by(ContentVersion.version_no.desc())
        .all()
    )


def count_versions(db: Session, *, entity_type: str, entity_id: int) -> int:
    return (
        db.query(func.count(ContentVersion.version_id))
        .filter(
            ContentVersion.entity_type == entity_type,
            ContentVersion.entity_id == entity_id,
        )
        .scalar()
    )


def latest_update_version(db: Session, *, entity_type: str, entity_id: int) -> Optional[ContentVersion]:
    return (
        db.query(ContentVersion)
        .filter(
            ContentVersion.entity_type == entity_type,
            ContentVersion.entity_id == entity_id,
            ContentVersion.change_type != "create",
        )
        .order_by(ContentVersion.version_no.desc())
        .first()
    )


def delete_versions(db: Session, *, entity_type: str, entity_id: int) -> int:
    return (
        db.query(ContentVersion)
        .filter(
            ContentVersion.entity_type == entity_type,
            ContentVersion.entity_id == entity_id,
        )
        .delete(synchronize_session=False)
    )


def parse_snapshot(row: ContentVersion) -> Dict[str, Any]:
    try:
        return json.loads(row.snapshot or "{}")
    except json.JSONDecodeError:
        return {}


def parse_changed_fields(row: ContentVersion) -> List[str]:
    try:
        value = json.loads(row.changed_fields or "[]")
    except json.JSONDecodeError:
        return []
    return [str(item) for item in value] if isinstance(value, list) else []


def to_response(row: ContentVersion) -> Dict[str, Any]:
    return {
        "version_id": row.version_id,
        "entity_type": row.entity_type,
        "entity_id": row.entity_id,
        "version_no": row.version_no,
        "change_type": row.change_type,
        "snapshot": parse_snapshot(row),
        "changed_fields": parse_changed_fields(row),
        "changed_by": row.changed_by,
        "created_at": row.created_at,
    }
