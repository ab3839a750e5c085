"""
Project documents router.

One uploaded file can be linked to several places of the building at once
(a floor, individual units, 'Geral'): every selected context gets its own
row pointing at the same stored file.
"""
from pathlib import Path
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import ProjectDocument
from sitetrack.schemas.media import ProjectDocument as ProjectDocumentSchema, ProjectDocumentUpdate
from sitetrack.utils import storage
from sitetrack.utils.access import (
    ProjectAccess,
    guest_can_see_document,
    guest_unit_name,
    require_project_access,
    require_staff,
)

router = APIRouter(tags=["Documents"])

DOCUMENT_CATEGORIES = {"structural", "architectural", "electrical", "hydraulic", "finishing", "others"}


def _get_document(db: Session, project_id: int, document_id: int) -> ProjectDocument:
    document = db.query(ProjectDocument).filter(
        ProjectDocument.id == document_id,
        ProjectDocument.project_id == project_id,
    ).first()
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.get("/projects/{project_id}/documents", response_model=List[ProjectDocumentSchema])
def list_documents(
    category: Optional[str] = None,
    context: Optional[str] = None,
    ctx: ProjectAccess = Depends(require_project_access),
    db: Session = Depends(get_db),
):
    """
    Documents, newest first. Guests only get documents linked to their
    unit or to the whole building.
    """
    query = db.query(ProjectDocument).filter(ProjectDocument.project_id == ctx.project.id)
    if category:
        query = query.filter(ProjectDocument.category == category)
    if context:
        query = query.filter(ProjectDocument.context == context)
    documents = query.order_by(ProjectDocument.created_at.desc()).all()

    if not ctx.access.is_staff:
        unit_name = guest_unit_name(ctx.project, ctx.access)
        documents = [doc for doc in documents if guest_can_see_document(doc.context, unit_name)]
    return documents


@router.post("/projects/{project_id}/documents", response_model=List[ProjectDocumentSchema])
def upload_document(
    title: str = Form(...),
    category: str = Form("others"),
    contexts: List[str] = Form(...),
    file: UploadFile = File(...),
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    if not title.strip():
        raise HTTPException(status_code=400, detail="Document title cannot be empty")
    if category not in DOCUMENT_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown document category '{category}'")
    contexts = [c.strip() for c in dict.fromkeys(contexts) if c and c.strip()]
    if not contexts:
        raise HTTPException(status_code=400, detail="Select at least one place for the document")

    file_url = storage.upload(file, f"documents/{ctx.project.id}")
    file_type = Path(file.filename or "").suffix.lstrip(".").lower() or "unknown"

    documents = [
        ProjectDocument(
            project_id=ctx.project.id,
            title=title.strip(),
            category=category,
            context=context,
            file_url=file_url,
            file_type=file_type,
            created_by=ctx.user.email,
        )
        for context in contexts
    ]
    db.add_all(documents)
    try:
        commit_or_500(db, "save documents")
    except HTTPException:
        # Rows were not saved; drop the stored file with them
        storage.delete(file_url)
        raise

    for document in documents:
        db.refresh(document)
    return documents


@router.put("/projects/{project_id}/documents/{document_id}", response_model=ProjectDocumentSchema)
def update_document(
    document_id: int,
    data: ProjectDocumentUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    document = _get_document(db, ctx.project.id, document_id)
    changes = data.model_dump(exclude_unset=True)
    if "title" in changes and not (changes["title"] or "").strip():
        raise HTTPException(status_code=400, detail="Document title cannot be empty")

    for field, value in changes.items():
        setattr(document, field, value)
    commit_or_500(db, "update document")
    db.refresh(document)
    return document


@router.delete("/projects/{project_id}/documents/{document_id}")
def delete_document(
    document_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Delete one document row; the file goes once no other row points at it."""
    document = _get_document(db, ctx.project.id, document_id)
    file_url = document.file_url
    db.delete(document)
    commit_or_500(db, "delete document")

    still_used = db.query(ProjectDocument).filter(ProjectDocument.file_url == file_url).first()
    if not still_used:
        storage.delete(file_url)
    return {"message": "Document deleted successfully"}
