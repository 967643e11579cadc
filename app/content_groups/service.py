import logging

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.errors import NotFoundError, PersistenceError, StorageUnavailableError, ValidationError
from app.models.content_group import ContentGroup
from app.models.document import Document
from app.models.user import User
from app.schemas.document import FileIn

logger = logging.getLogger(__name__)


def _documents_for(group_id: int, files: list[FileIn]) -> list[Document]:
    return [
        Document(
            group_id=group_id,
            name=f.name,
            path=f.path,
            parent_path=f.parent_path or "",
            content=f.content or "",
            is_directory=bool(f.is_directory),
        )
        for f in files
    ]


def _failure(e: SQLAlchemyError) -> Exception:
    if isinstance(e, OperationalError):
        return StorageUnavailableError("Database connection failed, please try again later")
    return PersistenceError(f"Failed to create content group: {getattr(e, 'orig', None) or e}")


def create_content_group(
    db: Session,
    owner: User,
    name: str | None,
    files: list[FileIn] | None = None,
    transactional: bool = True,
) -> ContentGroup:
    """Create a content group and one document per file descriptor.

    With ``transactional`` the group and its documents commit together; a failed
    document insert rolls the group back too. Without it the group is committed
    first and survives a failure in the document inserts.
    """
    if not name or not name.strip():
        raise ValidationError("Content group name is required")
    files = files or []
    logger.info("Creating content group %r with %d file(s)", name, len(files))

    group = ContentGroup(name=name, user_id=owner.id)

    if transactional:
        try:
            db.add(group)
            db.flush()
            db.add_all(_documents_for(group.id, files))
            db.flush()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Content group creation rolled back: %s", e)
            raise _failure(e) from e
        db.refresh(group)
        logger.info("Content group %s created with %d document(s)", group.id, len(files))
        return group

    try:
        db.add(group)
        db.commit()
        db.refresh(group)
    except SQLAlchemyError as e:
        db.rollback()
        raise _failure(e) from e

    if files:
        try:
            db.add_all(_documents_for(group.id, files))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                "Documents for content group %s failed; group kept without documents: %s", group.id, e
            )
            raise _failure(e) from e
    logger.info("Content group %s created with %d document(s)", group.id, len(files))
    return group


def list_content_groups(db: Session, owner: User) -> list[ContentGroup]:
    return (db.query(ContentGroup)
              .filter(ContentGroup.user_id == owner.id)
              .order_by(ContentGroup.created_at.desc(), ContentGroup.id.desc())
              .all())


def get_content_group(db: Session, owner: User, group_id: int) -> ContentGroup:
    group = db.query(ContentGroup).filter(
        ContentGroup.id == group_id,
        ContentGroup.user_id == owner.id,
    ).first()
    if group is None:
        raise NotFoundError("Content group not found")
    return group


def delete_content_group(db: Session, owner: User, group_id: int) -> None:
    """Delete a group; its documents and their summaries go with it."""
    group = get_content_group(db, owner, group_id)
    db.delete(group)
    db.commit()
    logger.info("Content group %s deleted", group_id)
