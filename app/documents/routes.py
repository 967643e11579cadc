
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.auth.deps import get_db, get_current_user
from app.errors import ValidationError
from app.models.user import User
from app.schemas.document import DocumentCreate, DocumentUpdate, DocumentOut
from app.documents import service

router = APIRouter(prefix="/api/documents", tags=["documents"])

@router.get("", response_model=DocumentOut | list[DocumentOut])
def get_documents(
    group_id: int | None = Query(None, alias="groupId"),
    path: str | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if group_id is None:
        raise ValidationError("groupId is required")
    if path:
        return service.get_document_by_path(db, user, group_id, path)
    return service.list_documents(db, user, group_id)

@router.post("", response_model=DocumentOut)
def create_document(body: DocumentCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return service.create_document(db, user, body.group_id, body)

@router.put("", response_model=DocumentOut)
def update_document(body: DocumentUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if body.id is None:
        raise ValidationError("Document id is required")
    if body.content is None:
        raise ValidationError("Document content is required")
    return service.update_document(db, user, body.id, body.content)

@router.delete("")
def delete_document(
    doc_id: int | None = Query(None, alias="id"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if doc_id is None:
        raise ValidationError("Document id is required")
    service.delete_document(db, user, doc_id)
    return {"success": True}
