import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.errors import ConflictError, NotFoundError
from app.models.content_group import ContentGroup
from app.models.document import Document
from app.models.summary import utcnow
from app.models.user import User
from app.content_groups.service import get_content_group
from app.schemas.document import FileIn

logger = logging.getLogger(__name__)


def _owned(db: Session, owner: User):
    return (db.query(Document)
              .join(ContentGroup, ContentGroup.id == Document.group_id)
              .filter(ContentGroup.user_id == owner.id))


def list_documents(db: Session, owner: User, group_id: int) -> list[Document]:
    # an unknown or foreign group simply has no documents for this caller
    return _owned(db, owner).filter(Document.group_id == group_id).all()


def get_document_by_path(db: Session, owner: User, group_id: int, path: str) -> Document:
    doc = _owned(db, owner).filter(Document.group_id == group_id, Document.path == path).first()
    if doc is None:
        raise NotFoundError("Document not found")
    return doc


def get_document(db: Session, owner: User, document_id: int) -> Document:
    doc = _owned(db, owner).filter(Document.id == document_id).first()
    if doc is None:
        raise NotFoundError("Document not found")
    return doc


def create_document(db: Session, owner: User, group_id: int, file: FileIn) -> Document:
    get_content_group(db, owner, group_id)
    doc = Document(
        group_id=group_id,
        name=file.name,
        path=file.path,
        parent_path=file.parent_path or "",
        content=file.content or "",
        is_directory=file.is_directory,
    )
    db.add(doc)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"A document with path {file.path!r} already exists in this group") from e
    db.refresh(doc)
    return doc


def update_document(db: Session, owner: User, document_id: int, content: str) -> Document:
    doc = get_document(db, owner, document_id)
    doc.content = content
    doc.updated_at = utcnow()
    db.commit(); db.refresh(doc)
    logger.info("Document %s updated (%d chars)", doc.id, len(content))
    return doc


def delete_document(db: Session, owner: User, document_id: int) -> None:
    doc = get_document(db, owner, document_id)
    db.delete(doc)
    db.commit()
    logger.info("Document %s deleted", document_id)
