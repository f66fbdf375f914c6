from tripbook.models.constants import UNSCHEDULED
from tripbook.services.itinerary_index import (
    DateSelection,
    filter_by_date,
    index_itinerary,
    maps_route_link,
    reset_selection,
    resolve_selection,
    select_date,
    sort_itinerary,
    upcoming,
)

ENTRIES = [
    {"id": 1, "title": "Museum", "date": "2024-05-02", "time": "10:00"},
    {"id": 2, "title": "Arrive", "date": "2024-05-01", "time": "15:30"},
    {"id": 3, "title": "Maybe onsen", "date": None},
    {"id": 4, "title": "Breakfast", "date": "2024-05-01", "time": "08:00"},
]


def test_dates_sorted_with_unscheduled_last():
    idx = index_itinerary(ENTRIES[:3], "2024-05-01")
    assert idx.unique_dates == ["2024-05-01", "2024-05-02", UNSCHEDULED]
    assert idx.default_selected == "2024-05-01"


def test_default_is_earliest_when_today_absent():
    idx = index_itinerary(ENTRIES, "2030-01-01")
    assert idx.default_selected == "2024-05-01"


def test_today_is_preferred_when_present():
    assert index_itinerary(ENTRIES, "2024-05-02").default_selected == "2024-05-02"


def test_empty_itinerary_has_no_selection():
    idx = index_itinerary([], "2024-05-01")
    assert idx.unique_dates == []
    assert idx.default_selected is None


def test_only_unscheduled_entries():
    idx = index_itinerary([{"title": "Someday"}, {"title": "", "date": ""}], "2024-05-01")
    assert idx.unique_dates == [UNSCHEDULED]
    assert idx.default_selected == UNSCHEDULED


def test_filter_by_exact_date_and_sentinel():
    assert [e.id for e in filter_by_date(ENTRIES, "2024-05-01")] == ["2", "4"]
    assert [e.id for e in filter_by_date(ENTRIES, UNSCHEDULED)] == ["3"]
    assert filter_by_date(ENTRIES, None) == []


def test_selection_is_set_once_then_sticky():
    empty = resolve_selection(DateSelection(), index_itinerary([], "2024-05-01"))
    assert empty == DateSelection()

    first = resolve_selection(empty, index_itinerary(ENTRIES, "2024-05-01"))
    assert first == DateSelection(auto_selected=True, selected_date="2024-05-01")

    # A later recomputation with a different "today" does not move it
    again = resolve_selection(first, index_itinerary(ENTRIES, "2024-05-02"))
    assert again is first


def test_manual_selection_survives_recomputation():
    manual = select_date(DateSelection(auto_selected=True, selected_date="2024-05-01"), UNSCHEDULED)
    assert resolve_selection(manual, index_itinerary(ENTRIES, "2024-05-01")).selected_date == UNSCHEDULED


def test_reset_allows_a_new_automatic_pick():
    state = reset_selection()
    assert state.selected_date is None
    picked = resolve_selection(state, index_itinerary(ENTRIES, "2024-05-02"))
    assert picked.selected_date == "2024-05-02"


def test_sort_by_date_then_time_with_missing_first():
    assert [e.id for e in sort_itinerary(ENTRIES)] == ["3", "4", "2", "1"]


def test_upcoming_keeps_future_and_unscheduled():
    assert [e.id for e in upcoming(ENTRIES, "2024-05-02")] == ["3", "1"]


def test_maps_link_needs_two_locations():
    assert maps_route_link([{"location": "Tokyo Station"}]) is None
    link = maps_route_link(
        [{"location": "Tokyo Station"}, {"location": "  "}, {"location": "Shibuya/Crossing"}]
    )
    assert link == "https://www.google.com/maps/dir/Tokyo%20Station/Shibuya%2FCrossing"
