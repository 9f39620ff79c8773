"""Unit tests: map_core.session (loading, filter handlers, shell operations)."""
import pytest

from map_core.basemaps import Basemap
from map_core.constants import DEFAULT_CENTER, FALLBACK_ZOOM
from map_core.session import coerce_location_list, create_session
from map_core.viewport import RecenterOutcome

pytestmark = pytest.mark.unit

LOCATIONS = [
    {
        "id": "1",
        "name": "Menteng Hub",
        "address": "Jl. HOS Cokroaminoto",
        "lat": -6.196,
        "lng": 106.832,
        "stage": "operational",
        "businesses": [{"name": "Kopi Kenangan", "category": "Cafe", "active": True}],
    },
    {
        "id": "2",
        "name": "Kemang Point",
        "address": "Jl. Kemang Raya",
        "lat": -6.261,
        "lng": 106.813,
        "stage": "build",
        "businesses": [{"name": "Apotek Sehat", "category": "Pharmacy", "active": True}],
    },
    {
        "id": "3",
        "name": None,
        "address": "Pluit",
        "lat": -6.117,
        "lng": 106.790,
        "businesses": [],
    },
]


def _fetch_returning(payload):
    async def fetch():
        return payload
    return fetch


@pytest.fixture
def session():
    return create_session()


def _messages(session):
    return [t.message for t in session.notifier.visible()]


def test_coerce_accepts_wrapped_and_bare_lists():
    assert coerce_location_list({"locations": LOCATIONS}) == LOCATIONS
    assert coerce_location_list(LOCATIONS) == LOCATIONS


@pytest.mark.parametrize("payload", [None, {}, {"locations": "nope"}, 42, "text"])
def test_coerce_malformed_is_empty(payload):
    assert coerce_location_list(payload) == []


def test_coerce_drops_non_object_items():
    assert coerce_location_list([LOCATIONS[0], 5, "x"]) == [LOCATIONS[0]]


@pytest.mark.asyncio
async def test_load_and_render_draws_every_location(session):
    markers = await session.load_and_render(_fetch_returning({"locations": LOCATIONS}))
    assert [m.location_id for m in markers] == ["1", "2", "3"]
    assert session.categories == ["Cafe", "Pharmacy"]
    assert len(session.surface.markers) == 3


@pytest.mark.asyncio
async def test_load_and_render_failed_fetch_renders_empty(session):
    async def failing():
        raise ConnectionError("repository unreachable")

    markers = await session.load_and_render(failing)
    assert markers == []
    assert session.locations == []
    assert session.categories == []


@pytest.mark.asyncio
async def test_load_and_render_malformed_payload_renders_empty(session):
    markers = await session.load_and_render(_fetch_returning({"items": []}))
    assert markers == []


@pytest.mark.asyncio
async def test_reload_replaces_markers(session):
    await session.load_and_render(_fetch_returning(LOCATIONS))
    await session.load_and_render(_fetch_returning(LOCATIONS[:1]))
    assert [m.location_id for m in session.surface.markers] == ["1"]


def test_search_and_category_narrow_markers(session):
    session.set_locations(LOCATIONS)
    markers = session.on_search_changed("kopi")
    assert [m.location_id for m in markers] == ["1"]
    markers = session.on_category_changed("Pharmacy")
    assert markers == []
    session.on_search_changed("")
    markers = session.on_category_changed("Pharmacy")
    assert [m.location_id for m in markers] == ["2"]
    assert session.filter_active is True


def test_clearing_filters_restores_all(session):
    session.set_locations(LOCATIONS)
    session.on_search_changed("kemang")
    session.on_search_changed(None)
    assert len(session.on_category_changed(None)) == 3
    assert session.filter_active is False


def test_whitespace_query_is_not_a_filter(session):
    session.set_locations(LOCATIONS)
    assert len(session.on_search_changed("   ")) == 3
    assert session.filter_active is False


def test_recenter_uses_filtered_count(session):
    session.set_locations(LOCATIONS)
    session.on_search_changed("jl.")
    assert session.on_recenter_requested() is RecenterOutcome.filtered
    assert "Showing 2 filtered locations" in _messages(session)


def test_recenter_without_matches_falls_back(session):
    session.set_locations(LOCATIONS)
    session.on_search_changed("no such place")
    assert session.on_recenter_requested() is RecenterOutcome.fallback
    assert session.surface.center == DEFAULT_CENTER
    assert session.surface.zoom == FALLBACK_ZOOM


def test_layer_switch_and_lock(session):
    assert session.on_layer_switch("satellite") is Basemap.satellite
    assert session.surface.layers == [Basemap.satellite]
    assert session.on_region_lock_toggled() is False
    assert session.surface.max_bounds is None


def test_orientation_reset_on_raster_surface(session):
    assert session.on_orientation_reset_requested() is False
    assert "Map reset to standard orientation" in _messages(session)


def test_view_change_outside_region_snaps_back(session):
    assert session.on_view_changed((1.29, 103.85), 10) is False
    assert session.on_view_changed((40.7, -74.0), 8) is True
    assert _messages(session) == ["Map is locked to Indonesia"]


def test_marker_hover_by_string_id(session):
    session.set_locations(LOCATIONS)
    session.on_search_changed("")
    marker = session.on_marker_hover("3", True)
    assert marker.current_label == "Survey"


def test_sessions_get_distinct_ids():
    assert create_session().session_id != create_session().session_id


def test_locked_session_keeps_view_in_region_for_far_locations(session):
    session.set_locations([{"id": "ldn", "name": "London", "address": "UK", "lat": 51.5, "lng": -0.12}])
    session.on_search_changed("")
    assert session.controller.locked is True
    assert session.controller.region.contains(*session.surface.center)
