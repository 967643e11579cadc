
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.auth.deps import get_db, get_current_user
from app.errors import ValidationError
from app.models.user import User
from app.schemas.summary import SummaryRequest, SummaryResponse, SummaryOut, ModelsOut
from app.summaries.cache import summarize_document, get_summary
from app.summaries.providers import supported_models

router = APIRouter(prefix="/api/generate-summary", tags=["summaries"])

@router.post("", response_model=SummaryResponse)
def generate_summary(body: SummaryRequest, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    result = summarize_document(
        db, user,
        document_id=body.document_id,
        content=body.content,
        model=body.model,
        force_refresh=body.force_refresh,
    )
    return SummaryResponse(**vars(result))

@router.get("", response_model=SummaryOut)
def read_summary(
    document_id: int | None = Query(None, alias="documentId"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if document_id is None:
        raise ValidationError("documentId is required")
    return get_summary(db, user, document_id)

@router.options("", response_model=ModelsOut)
def list_models():
    return {"models": supported_models()}
