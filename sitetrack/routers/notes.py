"""
Notes board ("mural") router.

Notes are short messages between the site team, optionally assigned to
someone by email, with a workflow status and threaded replies.

Each unit also has its own mural: notes whose context is the unit id. The
unit's guests read it, post to it and reply there; staff reach every
unit's mural.
"""
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import Note, NoteReply
from sitetrack.schemas.note import (
    Note as NoteSchema,
    NoteCreate,
    NoteReply as NoteReplySchema,
    NoteReplyCreate,
    NoteStatusChange,
    NoteUpdate,
)
from sitetrack.utils import storage
from sitetrack.utils.access import ProjectAccess, require_project_access, require_staff
from sitetrack.utils.notifications import notify, preview
from sitetrack.utils.progress import find_unit, project_levels

router = APIRouter(tags=["Notes"])


def _get_note(db: Session, project_id: int, note_id: int) -> Note:
    note = db.query(Note).filter(Note.id == note_id, Note.project_id == project_id).first()
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


def _unit_scope(ctx: ProjectAccess, context: Optional[str]) -> Optional[str]:
    """The unit id a note belongs to, None for board-wide notes."""
    if context and find_unit(project_levels(ctx.project.structure), context) is not None:
        return context
    return None


def _add_reply(db: Session, ctx: ProjectAccess, note: Note, content: str) -> NoteReply:
    if not content.strip():
        raise HTTPException(status_code=400, detail="Reply cannot be empty")

    reply = NoteReply(note_id=note.id, content=content, created_by=ctx.user.email)
    db.add(reply)
    notify(
        db, ctx.project.id,
        f"Nova resposta em \"{preview(note.title or note.content)}\": {preview(content)}",
        ctx.user.email,
        unit_id=_unit_scope(ctx, note.context),
    )
    commit_or_500(db, "add note reply")
    db.refresh(reply)
    return reply


@router.get("/projects/{project_id}/notes", response_model=List[NoteSchema])
def list_notes(
    status: Optional[str] = None,
    include_completed: bool = True,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    query = db.query(Note).filter(Note.project_id == ctx.project.id)
    if status:
        query = query.filter(Note.status == status)
    if not include_completed:
        query = query.filter(Note.status != "completed")
    return query.order_by(Note.created_at.desc()).all()


@router.post("/projects/{project_id}/notes", response_model=NoteSchema)
def create_note(
    data: NoteCreate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    if not data.content.strip():
        raise HTTPException(status_code=400, detail="Note content cannot be empty")

    note = Note(
        project_id=ctx.project.id,
        created_by=ctx.user.email,
        is_completed=data.status == "completed",
        attachments=[],
        **data.model_dump(),
    )
    if note.assigned_to:
        note.assigned_to = note.assigned_to.lower()
    db.add(note)
    notify(
        db, ctx.project.id,
        f"Nova nota no mural: {preview(note.title or note.content)}",
        ctx.user.email,
        unit_id=_unit_scope(ctx, note.context),
    )
    commit_or_500(db, "create note")
    db.refresh(note)
    return note


@router.put("/projects/{project_id}/notes/{note_id}", response_model=NoteSchema)
def update_note(
    note_id: int,
    data: NoteUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    note = _get_note(db, ctx.project.id, note_id)
    changes = data.model_dump(exclude_unset=True)
    if "content" in changes and not (changes["content"] or "").strip():
        raise HTTPException(status_code=400, detail="Note content cannot be empty")

    for field, value in changes.items():
        setattr(note, field, value)
    if "assigned_to" in changes and note.assigned_to:
        note.assigned_to = note.assigned_to.lower()
    if "status" in changes:
        note.is_completed = note.status == "completed"

    commit_or_500(db, "update note")
    db.refresh(note)
    return note


@router.post("/projects/{project_id}/notes/{note_id}/status", response_model=NoteSchema)
def change_note_status(
    note_id: int,
    data: NoteStatusChange,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Move a note through pending / in_progress / blocked / completed."""
    note = _get_note(db, ctx.project.id, note_id)
    note.status = data.status
    note.is_completed = data.status == "completed"
    commit_or_500(db, "change note status")
    db.refresh(note)
    return note


@router.delete("/projects/{project_id}/notes/{note_id}")
def delete_note(
    note_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    note = _get_note(db, ctx.project.id, note_id)
    attachments = list(note.attachments or [])
    db.delete(note)
    commit_or_500(db, "delete note")
    for url in attachments:
        storage.delete(url)
    return {"message": "Note deleted successfully"}


@router.post("/projects/{project_id}/notes/{note_id}/replies", response_model=NoteReplySchema)
def add_reply(
    note_id: int,
    data: NoteReplyCreate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    note = _get_note(db, ctx.project.id, note_id)
    return _add_reply(db, ctx, note, data.content)


@router.post("/projects/{project_id}/notes/{note_id}/attachments", response_model=NoteSchema)
def upload_attachment(
    note_id: int,
    file: UploadFile = File(...),
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    note = _get_note(db, ctx.project.id, note_id)
    url = storage.upload(file, f"projects/{ctx.project.id}/notes")
    # JSON columns only notice reassignment, not in-place appends
    note.attachments = list(note.attachments or []) + [url]
    try:
        commit_or_500(db, "attach file to note")
    except HTTPException:
        storage.delete(url)
        raise
    db.refresh(note)
    return note


def require_unit_mural(unit_id: str, ctx: ProjectAccess = Depends(require_project_access)) -> ProjectAccess:
    """Staff reach any unit of the structure; guests only their own unit."""
    if find_unit(project_levels(ctx.project.structure), unit_id) is None:
        raise HTTPException(status_code=404, detail="Unit not found")
    if not ctx.access.is_staff and ctx.access.unit_id != unit_id:
        raise HTTPException(status_code=403, detail="This mural belongs to another unit")
    return ctx


def _get_unit_note(db: Session, project_id: int, unit_id: str, note_id: int) -> Note:
    note = _get_note(db, project_id, note_id)
    if note.context != unit_id:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@router.get("/projects/{project_id}/units/{unit_id}/notes", response_model=List[NoteSchema])
def list_unit_notes(
    unit_id: str,
    ctx: ProjectAccess = Depends(require_unit_mural),
    db: Session = Depends(get_db),
):
    """The unit's mural, newest first, each note with its replies oldest first."""
    return (
        db.query(Note)
        .filter(Note.project_id == ctx.project.id, Note.context == unit_id)
        .order_by(Note.created_at.desc(), Note.id.desc())
        .all()
    )


@router.post("/projects/{project_id}/units/{unit_id}/notes", response_model=NoteSchema)
def create_unit_note(
    unit_id: str,
    data: NoteCreate,
    ctx: ProjectAccess = Depends(require_unit_mural),
    db: Session = Depends(get_db),
):
    if not data.content.strip():
        raise HTTPException(status_code=400, detail="Note content cannot be empty")

    fields = data.model_dump(exclude={"context"})
    if not ctx.access.is_staff:
        # Guests post messages; workflow fields stay with the site team
        fields.update(status="pending", assigned_to=None, due_date=None)

    note = Note(
        project_id=ctx.project.id,
        created_by=ctx.user.email,
        context=unit_id,
        is_completed=fields["status"] == "completed",
        attachments=[],
        **fields,
    )
    if note.assigned_to:
        note.assigned_to = note.assigned_to.lower()
    db.add(note)
    notify(
        db, ctx.project.id,
        f"Nova mensagem no mural da unidade: {preview(note.title or note.content)}",
        ctx.user.email,
        unit_id=unit_id,
    )
    commit_or_500(db, "create unit note")
    db.refresh(note)
    return note


@router.post("/projects/{project_id}/units/{unit_id}/notes/{note_id}/replies", response_model=NoteReplySchema)
def add_unit_reply(
    unit_id: str,
    note_id: int,
    data: NoteReplyCreate,
    ctx: ProjectAccess = Depends(require_unit_mural),
    db: Session = Depends(get_db),
):
    note = _get_unit_note(db, ctx.project.id, unit_id, note_id)
    return _add_reply(db, ctx, note, data.content)
