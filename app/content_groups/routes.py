
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth.deps import get_db, get_current_user
from app.db import session as db_session
from app.models.user import User
from app.schemas.content_group import ContentGroupCreate, ContentGroupOut
from app.content_groups.service import (
    create_content_group, list_content_groups, get_content_group, delete_content_group,
)

router = APIRouter(prefix="/api/content-groups", tags=["content-groups"])

@router.get("", response_model=list[ContentGroupOut])
def list_groups(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return list_content_groups(db, user)

@router.post("", response_model=ContentGroupOut)
def create_group(body: ContentGroupCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return create_content_group(
        db, user, body.name, body.files,
        transactional=db_session.supports_transactions,
    )

@router.get("/{group_id}", response_model=ContentGroupOut)
def get_group(group_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return get_content_group(db, user, group_id)

@router.delete("/{group_id}")
def delete_group(group_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    delete_content_group(db, user, group_id)
    return {"success": True}
