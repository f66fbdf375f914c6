from datetime import datetime
from typing import List
import uuid

from fastapi import APIRouter, Depends, HTTPException

from tripbook.db.dal import Database
from tripbook.models.notes import ChecklistIn, ChecklistItem, ChecklistItemIn, ChecklistOut
from tripbook.routers.deps import get_db

router = APIRouter(prefix="/checklists", tags=["checklists"])


def _row_to_checklist(row: dict) -> ChecklistOut:
    return ChecklistOut(
        id=row["id"],
        category=row["category"],
        items=[ChecklistItem(**item) for item in row["items"]],
        created_at=datetime.fromisoformat(row["created_at"].replace("Z", "")),
        updated_at=datetime.fromisoformat(row["updated_at"].replace("Z", "")),
    )


def _load(db: Database, checklist_id: int) -> dict:
    row = db.get_checklist(checklist_id)
    if not row:
        raise HTTPException(status_code=404, detail="checklist not found")
    return row


def _save_items(db: Database, checklist_id: int, items: List[dict]) -> ChecklistOut:
    db.set_checklist_items(checklist_id, items)
    return _row_to_checklist(_load(db, checklist_id))


@router.post("/", response_model=ChecklistOut, status_code=201, summary="Create a checklist category")
async def create_checklist(payload: ChecklistIn, db: Database = Depends(get_db)):
    checklist_id = db.insert_checklist(payload.category)
    return _row_to_checklist(_load(db, checklist_id))


@router.get("/", response_model=List[ChecklistOut], summary="List checklists")
async def list_checklists(db: Database = Depends(get_db)):
    return [_row_to_checklist(r) for r in db.list_checklists()]


@router.delete("/{checklist_id}", status_code=204, summary="Delete a checklist")
async def delete_checklist(checklist_id: int, db: Database = Depends(get_db)):
    try:
        db.delete_checklist(checklist_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="checklist not found")
    return None


@router.post(
    "/{checklist_id}/items",
    response_model=ChecklistOut,
    status_code=201,
    summary="Append an item",
)
async def add_item(
    checklist_id: int, payload: ChecklistItemIn, db: Database = Depends(get_db)
):
    row = _load(db, checklist_id)
    item = ChecklistItem(id=uuid.uuid4().hex, name=payload.name, checked=False)
    return _save_items(db, checklist_id, [*row["items"], item.model_dump()])


@router.post(
    "/{checklist_id}/items/{item_id}/toggle",
    response_model=ChecklistOut,
    summary="Flip an item's checked state",
)
async def toggle_item(checklist_id: int, item_id: str, db: Database = Depends(get_db)):
    row = _load(db, checklist_id)
    if not any(i.get("id") == item_id for i in row["items"]):
        raise HTTPException(status_code=404, detail="checklist item not found")
    items = [
        {**i, "checked": not i.get("checked", False)} if i.get("id") == item_id else i
        for i in row["items"]
    ]
    return _save_items(db, checklist_id, items)


@router.delete(
    "/{checklist_id}/items/{item_id}",
    response_model=ChecklistOut,
    summary="Remove an item",
)
async def delete_item(checklist_id: int, item_id: str, db: Database = Depends(get_db)):
    row = _load(db, checklist_id)
    items = [i for i in row["items"] if i.get("id") != item_id]
    if len(items) == len(row["items"]):
        raise HTTPException(status_code=404, detail="checklist item not found")
    return _save_items(db, checklist_id, items)
