
import logging
from pathlib import Path

import markdown
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from markupsafe import Markup
from sqlalchemy.orm import Session
from app.auth.deps import get_db, get_current_user
from app.config import settings
from app.content_groups.service import create_content_group, get_content_group, list_content_groups
from app.db import session as db_session
from app.documents.service import get_document, list_documents
from app.errors import ProviderError, ValidationError
from app.models.user import User
from app.schemas.document import FileIn
from app.summaries.cache import content_preview, summarize_document
from app.summaries.providers import supported_models

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter(prefix="/ui", tags=["ui"])

MAX_MB = 10

@router.get("", response_class=HTMLResponse)
def ui_home(request: Request, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    groups = list_content_groups(db, user)
    return templates.TemplateResponse(request, "index.html", {"groups": groups, "user": user})

def _upload_path(filename: str) -> tuple[str, str, str]:
    """Split a browser-supplied relative filename into (name, path, parent_path)."""
    parts = [p for p in filename.replace("\\", "/").split("/") if p not in ("", ".", "..")]
    if not parts:
        raise ValidationError(f"Invalid file name: {filename!r}")
    parent = "/" + "/".join(parts[:-1]) if len(parts) > 1 else "/"
    return parts[-1], "/" + "/".join(parts), parent

@router.post("/groups")
async def ui_upload(
    name: str = Form(...),
    files: list[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    descriptors, seen = [], set()
    for f in files or []:
        if not f.filename:
            continue
        data = await f.read()
        if len(data) > MAX_MB * 1024 * 1024:
            logger.warning("Skipping %s: larger than %dMB", f.filename, MAX_MB)
            continue
        filename, path, parent_path = _upload_path(f.filename)
        if path in seen:
            raise ValidationError(f"Duplicate file path in upload: {path}")
        seen.add(path)
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(f"{f.filename} is not valid UTF-8 text") from e
        descriptors.append(FileIn(name=filename, path=path, parent_path=parent_path, content=content))
    group = create_content_group(db, user, name, descriptors, transactional=db_session.supports_transactions)
    return RedirectResponse(url=f"/ui/groups/{group.id}", status_code=303)

@router.get("/groups/{group_id}", response_class=HTMLResponse)
def ui_group(request: Request, group_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    group = get_content_group(db, user, group_id)
    docs = sorted(list_documents(db, user, group_id), key=lambda d: d.path)
    return templates.TemplateResponse(request, "group.html", {"group": group, "docs": docs})

@router.get("/documents/{doc_id}", response_class=HTMLResponse)
def ui_document(
    request: Request,
    doc_id: int,
    model: str | None = None,
    refresh: bool = False,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    doc = get_document(db, user, doc_id)
    model = model or (doc.summary.model if doc.summary else settings.default_model)

    result, error, preview = None, None, None
    if doc.content and not doc.is_directory:
        try:
            result = summarize_document(db, user, doc.id, doc.content, model=model, force_refresh=refresh)
        except ProviderError as e:
            error = e.message
            preview = content_preview(doc.content)

    html = Markup(markdown.markdown(doc.content or "", extensions=["fenced_code", "tables"]))
    return templates.TemplateResponse(
        request,
        "document.html",
        {
            "doc": doc,
            "html": html,
            "result": result,
            "error": error,
            "preview": preview,
            "model": model,
            "models": supported_models(),
        },
    )
