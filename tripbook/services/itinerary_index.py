"""Itinerary date indexing and day selection.

- ``index_itinerary`` lists distinct dates ascending (ISO strings sort
  chronologically) and appends the ``unscheduled`` bucket when any entry has
  no date.
- ``resolve_selection`` applies the automatic default exactly once, when the
  collection first becomes non-empty. A manual pick via ``select_date`` is
  never overwritten by later recomputation; only ``reset_selection`` clears it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from tripbook.models.constants import UNSCHEDULED
from tripbook.models.itinerary import ItineraryEntry

EntryLike = Union[ItineraryEntry, Mapping[str, Any]]

GOOGLE_MAPS_DIR_URL = "https://www.google.com/maps/dir/"


@dataclass(frozen=True)
class ItineraryIndex:
    unique_dates: List[str]
    default_selected: Optional[str]


@dataclass(frozen=True)
class DateSelection:
    auto_selected: bool = False
    selected_date: Optional[str] = None


def normalize_entries(entries: Iterable[EntryLike]) -> List[ItineraryEntry]:
    return [
        e if isinstance(e, ItineraryEntry) else ItineraryEntry.model_validate(dict(e))
        for e in entries
    ]


def sort_itinerary(entries: Iterable[EntryLike]) -> List[ItineraryEntry]:
    return sorted(normalize_entries(entries), key=lambda e: (e.date or "", e.time or ""))


def index_itinerary(entries: Iterable[EntryLike], today: Optional[str]) -> ItineraryIndex:
    items = normalize_entries(entries)
    dates = sorted({e.date for e in items if e.date})
    if any(not e.date for e in items):
        dates.append(UNSCHEDULED)
    if not dates:
        default = None
    elif today and today in dates:
        default = today
    else:
        default = dates[0]
    return ItineraryIndex(unique_dates=dates, default_selected=default)


def filter_by_date(
    entries: Iterable[EntryLike], selected: Optional[str]
) -> List[ItineraryEntry]:
    if not selected:
        return []
    items = normalize_entries(entries)
    if selected == UNSCHEDULED:
        return [e for e in items if not e.date]
    return [e for e in items if e.date == selected]


def resolve_selection(state: DateSelection, index: ItineraryIndex) -> DateSelection:
    if state.selected_date is not None or index.default_selected is None:
        return state
    return DateSelection(auto_selected=True, selected_date=index.default_selected)


def select_date(state: DateSelection, selected: str) -> DateSelection:
    return replace(state, selected_date=selected)


def reset_selection() -> DateSelection:
    return DateSelection()


def upcoming(entries: Iterable[EntryLike], today: str) -> List[ItineraryEntry]:
    """Entries still ahead (or not yet scheduled), in itinerary order."""
    return [e for e in sort_itinerary(entries) if not e.date or e.date >= today]


def maps_route_link(
    entries: Sequence[EntryLike], base_url: str = GOOGLE_MAPS_DIR_URL
) -> Optional[str]:
    """Directions URL visiting each entry's location in order.

    Needs at least two locations; returns None otherwise.
    """
    locations = [
        e.location.strip()
        for e in normalize_entries(entries)
        if e.location and e.location.strip()
    ]
    if len(locations) < 2:
        return None
    route = "/".join(quote(loc, safe="") for loc in locations)
    return f"{base_url.rstrip('/')}/{route}"
