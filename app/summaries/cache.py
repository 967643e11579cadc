"""
Summary cache manager.

A stored summary is served as long as it was produced by the requested model
and no refresh is forced; otherwise the model's provider is called and the
single summary row for the document is updated in place (or created).

There is no lock between the cache read and the write: two concurrent
refreshes of the same document may both reach the provider and the last
commit wins.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.config import settings
from app.errors import NotFoundError, ProviderError, ValidationError
from app.models.summary import Summary, utcnow
from app.models.user import User
from app.documents.service import get_document
from app.summaries.providers import get_model, provider_config

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 150
FAILURE_POLICIES = ("preview", "raise")


@dataclass
class SummaryResult:
    summary: str
    cached: bool
    timestamp: datetime
    model: str
    stale: bool = False


def content_preview(content: str, limit: int = PREVIEW_CHARS) -> str:
    return re.sub(r"[#*]", "", (content or "")[:limit])


def fallback_summary(content: str) -> str:
    return f"Summary generation failed, preview: {content_preview(content)}..."


def _apply(summary: Summary, text: str, model: str, stale: bool) -> None:
    summary.content = text
    summary.model = model
    summary.stale = stale
    summary.generated_at = utcnow()


def summarize_document(
    db: Session,
    owner: User,
    document_id: int | None,
    content: str | None,
    model: str | None = None,
    force_refresh: bool = False,
    failure_policy: str | None = None,
) -> SummaryResult:
    model = model or settings.default_model
    failure_policy = failure_policy or settings.summary_failure_policy
    if failure_policy not in FAILURE_POLICIES:
        raise ValueError(f"Unknown summary failure policy: {failure_policy}")

    if not document_id:
        raise ValidationError("documentId is required")
    if not content:
        raise ValidationError("content is required")
    supported = get_model(model)

    doc = get_document(db, owner, document_id)
    summary = db.query(Summary).filter(Summary.document_id == doc.id).first()

    if summary is not None and not force_refresh and summary.model == model:
        logger.debug("Summary cache hit for document %s (%s)", doc.id, model)
        return SummaryResult(summary.content, True, summary.generated_at, summary.model, summary.stale)

    logger.info(
        "Generating summary for document %s with %s (force_refresh=%s, cached_model=%s)",
        doc.id, model, force_refresh, summary.model if summary else None,
    )
    stale = False
    try:
        text = supported.provider.summarize(content, provider_config(model))
    except ProviderError as e:
        if failure_policy == "raise":
            raise
        logger.warning("Summary generation for document %s failed, storing preview: %s", doc.id, e)
        text = fallback_summary(content)
        stale = True

    if summary is None:
        summary = Summary(document_id=doc.id)
        _apply(summary, text, model, stale)
        db.add(summary)
        try:
            db.commit()
        except IntegrityError:
            # another request inserted the row after our read; overwrite it
            db.rollback()
            logger.info("Summary for document %s was written concurrently, overwriting", doc.id)
            summary = db.query(Summary).filter(Summary.document_id == doc.id).one()
            _apply(summary, text, model, stale)
            db.commit()
    else:
        _apply(summary, text, model, stale)
        db.commit()
    db.refresh(summary)

    return SummaryResult(text, False, summary.generated_at, model, stale)


def get_summary(db: Session, owner: User, document_id: int) -> Summary:
    doc = get_document(db, owner, document_id)
    summary = db.query(Summary).filter(Summary.document_id == doc.id).first()
    if summary is None:
        raise NotFoundError("Summary not found")
    return summary
