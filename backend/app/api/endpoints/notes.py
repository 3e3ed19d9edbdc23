"""Account note endpoints."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.api.endpoints.accounts import get_account_or_404
from app.db.models.note import Note
from app.schemas.note import NoteCreate, NoteResponse

router = APIRouter(tags=["Notes"])


@router.get("/accounts/{account_id}/notes", response_model=List[NoteResponse])
async def list_notes(
    account_id: str,
    db: Session = Depends(get_db)
):
    """List an account's notes, newest first."""
    get_account_or_404(db, account_id)
    notes = db.query(Note).filter(Note.account_id == account_id).order_by(Note.note_id.desc()).all()
    return [NoteResponse.model_validate(note) for note in notes]


@router.post("/accounts/{account_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    account_id: str,
    note_in: NoteCreate,
    db: Session = Depends(get_db)
):
    """Add a note to an account."""
    get_account_or_404(db, account_id)
    note = Note(account_id=account_id, **note_in.model_dump())
    db.add(note)
    db.commit()
    db.refresh(note)
    return NoteResponse.model_validate(note)


@router.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: int,
    db: Session = Depends(get_db)
):
    """Delete note."""
    note = db.query(Note).filter(Note.note_id == note_id).first()
    if not note:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Note not found"
        )
    db.delete(note)
    db.commit()
