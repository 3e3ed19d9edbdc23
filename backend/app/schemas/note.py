"""Note schemas."""
from datetime import datetime
from typing import Optional
from pydantic import Field

from app.schemas.common import CamelModel


class NoteCreate(CamelModel):
    """Schema for creating a note."""
    description: str = Field(..., min_length=1)
    created_by: Optional[str] = None


class NoteResponse(NoteCreate):
    """Schema for note response."""
    note_id: int
    account_id: str
    created_at: datetime
