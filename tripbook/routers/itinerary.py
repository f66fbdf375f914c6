from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from tripbook.core.config import Settings
from tripbook.db.dal import Database
from tripbook.models.itinerary import (
    DateSelectionIn,
    ItineraryIn,
    ItineraryIndexOut,
    ItineraryOut,
    ItineraryUpdateIn,
)
from tripbook.routers.deps import get_app_settings, get_db
from tripbook.services.app_settings import (
    clear_date_selection,
    get_date_selection,
    save_date_selection,
)
from tripbook.services.itinerary_index import (
    filter_by_date,
    index_itinerary,
    maps_route_link,
    resolve_selection,
    select_date,
    upcoming,
)

router = APIRouter(prefix="/itinerary", tags=["itinerary"])


def _today_iso(today: Optional[date]) -> str:
    return (today or date.today()).isoformat()


def _row_to_out(row: dict) -> ItineraryOut:
    return ItineraryOut(
        id=row["id"],
        title=row["title"],
        date=date.fromisoformat(row["date"]) if row.get("date") else None,
        time=row.get("time"),
        location=row.get("location"),
        city=row.get("city"),
        notes=row.get("notes"),
        linked_note_id=row.get("linked_note_id"),
        created_at=datetime.fromisoformat(row["created_at"].replace("Z", "")),
        updated_at=datetime.fromisoformat(row["updated_at"].replace("Z", "")),
    )


def _rows_matching(rows: List[dict], entries) -> List[dict]:
    keep = {e.id for e in entries}
    return [r for r in rows if str(r["id"]) in keep]


def _check_linked_note(db: Database, note_id: Optional[int]) -> None:
    if note_id is not None and db.get_note(note_id) is None:
        raise HTTPException(status_code=400, detail="linked note not found")


def _build_index(db: Database, settings: Settings, today: str) -> ItineraryIndexOut:
    rows = db.list_itinerary()
    idx = index_itinerary(rows, today)
    state = get_date_selection(db)
    resolved = resolve_selection(state, idx)
    if resolved != state:
        save_date_selection(db, resolved)
    day_entries = filter_by_date(rows, resolved.selected_date)
    return ItineraryIndexOut(
        unique_dates=idx.unique_dates,
        default_selected=idx.default_selected,
        selected_date=resolved.selected_date,
        auto_selected=resolved.auto_selected,
        maps_link=maps_route_link(day_entries, settings.maps_dir_base_url),
    )


@router.post("/", response_model=ItineraryOut, status_code=201, summary="Add an itinerary entry")
async def create_entry(payload: ItineraryIn, db: Database = Depends(get_db)):
    _check_linked_note(db, payload.linked_note_id)
    entry_id = db.insert_itinerary(payload.model_dump())
    row = db.get_itinerary(entry_id)
    if not row:
        raise HTTPException(status_code=500, detail="entry not found after insert")
    return _row_to_out(row)


@router.get("/", response_model=List[ItineraryOut], summary="List itinerary entries")
async def list_entries(
    date_filter: Optional[str] = Query(
        None,
        alias="date",
        description="ISO date or 'unscheduled' for entries without a date",
    ),
    db: Database = Depends(get_db),
):
    rows = db.list_itinerary()
    if date_filter is not None:
        rows = _rows_matching(rows, filter_by_date(rows, date_filter))
    return [_row_to_out(r) for r in rows]


@router.get(
    "/index",
    response_model=ItineraryIndexOut,
    summary="Distinct days, default and current day selection",
)
async def itinerary_index(
    today: Optional[date] = Query(None, description="Override today's date"),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return _build_index(db, settings, _today_iso(today))


@router.get(
    "/upcoming",
    response_model=List[ItineraryOut],
    summary="Entries from today onwards plus unscheduled ones",
)
async def upcoming_entries(
    today: Optional[date] = Query(None, description="Override today's date"),
    db: Database = Depends(get_db),
):
    rows = db.list_itinerary()
    return [_row_to_out(r) for r in _rows_matching(rows, upcoming(rows, _today_iso(today)))]


@router.put("/selection", response_model=ItineraryIndexOut, summary="Select a day")
async def set_selection(
    payload: DateSelectionIn,
    today: Optional[date] = Query(None, description="Override today's date"),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    idx = index_itinerary(db.list_itinerary(), _today_iso(today))
    if payload.selected_date not in idx.unique_dates:
        raise HTTPException(status_code=400, detail="no itinerary entries on that date")
    save_date_selection(db, select_date(get_date_selection(db), payload.selected_date))
    return _build_index(db, settings, _today_iso(today))


@router.delete("/selection", status_code=204, summary="Reset the day selection")
async def reset_selection_endpoint(db: Database = Depends(get_db)):
    clear_date_selection(db)
    return None


@router.get("/{entry_id}", response_model=ItineraryOut, summary="Get an itinerary entry")
async def get_entry(entry_id: int, db: Database = Depends(get_db)):
    row = db.get_itinerary(entry_id)
    if not row:
        raise HTTPException(status_code=404, detail="itinerary entry not found")
    return _row_to_out(row)


@router.patch("/{entry_id}", response_model=ItineraryOut, summary="Edit an itinerary entry")
async def patch_entry(
    entry_id: int, payload: ItineraryUpdateIn, db: Database = Depends(get_db)
):
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("title") is None and "title" in changes:
        raise HTTPException(status_code=400, detail="title cannot be empty")
    _check_linked_note(db, changes.get("linked_note_id"))
    try:
        db.update_itinerary(entry_id, changes)
    except ValueError:
        raise HTTPException(status_code=404, detail="itinerary entry not found")
    row = db.get_itinerary(entry_id)
    if not row:
        raise HTTPException(status_code=500, detail="entry disappeared after update")
    return _row_to_out(row)


@router.delete("/{entry_id}", status_code=204, summary="Delete an itinerary entry")
async def delete_entry(entry_id: int, db: Database = Depends(get_db)):
    try:
        db.delete_itinerary(entry_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="itinerary entry not found")
    return None
