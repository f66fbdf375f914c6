from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from tripbook.db.dal import Database
from tripbook.models.notes import NoteIn, NoteOut, NoteUpdateIn
from tripbook.routers.deps import get_db

router = APIRouter(prefix="/notes", tags=["notes"])


def _row_to_note(row: dict) -> NoteOut:
    return NoteOut(
        id=row["id"],
        title=row["title"],
        content=row.get("content"),
        url=row.get("url"),
        created_at=datetime.fromisoformat(row["created_at"].replace("Z", "")),
        updated_at=datetime.fromisoformat(row["updated_at"].replace("Z", "")),
    )


@router.post("/", response_model=NoteOut, status_code=201, summary="Create a note or ticket")
async def create_note(payload: NoteIn, db: Database = Depends(get_db)):
    note_id = db.insert_note(payload.model_dump())
    row = db.get_note(note_id)
    if not row:
        raise HTTPException(status_code=500, detail="note not found after insert")
    return _row_to_note(row)


@router.get("/", response_model=List[NoteOut], summary="List notes, newest first")
async def list_notes(db: Database = Depends(get_db)):
    return [_row_to_note(r) for r in db.list_notes()]


@router.get("/{note_id}", response_model=NoteOut, summary="Get a note")
async def get_note(note_id: int, db: Database = Depends(get_db)):
    row = db.get_note(note_id)
    if not row:
        raise HTTPException(status_code=404, detail="note not found")
    return _row_to_note(row)


@router.patch("/{note_id}", response_model=NoteOut, summary="Edit a note")
async def patch_note(note_id: int, payload: NoteUpdateIn, db: Database = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True)
    if "title" in changes and changes["title"] is None:
        raise HTTPException(status_code=400, detail="title cannot be empty")
    try:
        db.update_note(note_id, changes)
    except ValueError:
        raise HTTPException(status_code=404, detail="note not found")
    row = db.get_note(note_id)
    if not row:
        raise HTTPException(status_code=500, detail="note disappeared after update")
    return _row_to_note(row)


@router.delete("/{note_id}", status_code=204, summary="Delete a note")
async def delete_note(note_id: int, db: Database = Depends(get_db)):
    # Itinerary links are cleared by the ON DELETE SET NULL constraint.
    try:
        db.delete_note(note_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="note not found")
    return None
