"""Map viewer API: one session per open map, driven by viewer events."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from db import get_db
from map_core import store
from map_core.render import render_html
from map_core.session import MapSession, create_session
from repositories.location_repository import list_locations as repo_list_locations
from schemas.locations import MarkerVisualResponse
from schemas.map import (
    BoundsResponse,
    CategoryRequest,
    ControlResponse,
    HoverRequest,
    LayerRequest,
    MapStateResponse,
    RenderedMarkerResponse,
    SearchRequest,
    ToastResponse,
    ViewRequest,
)

router = APIRouter(prefix="/map", tags=["map"])


def _get_session(session_id: str) -> MapSession:
    session = store.get_by_id(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Map session not found")
    return session


def map_state(session: MapSession) -> MapStateResponse:
    """Snapshot of a session for the viewer."""
    surface = session.surface
    controller = session.controller
    max_bounds = None
    if surface.max_bounds is not None:
        b = surface.max_bounds
        max_bounds = BoundsResponse(south=b.south, west=b.west, north=b.north, east=b.east)
    return MapStateResponse(
        session_id=session.session_id,
        layer=controller.current_layer,
        locked=controller.locked,
        center=surface.center,
        zoom=surface.zoom,
        bearing=surface.bearing,
        max_bounds=max_bounds,
        search_query=session.search_query,
        selected_category=session.selected_category,
        categories=session.categories,
        total_locations=len(session.locations),
        markers=[
            RenderedMarkerResponse(
                location_id="" if m.location_id is None else str(m.location_id),
                lat=m.lat,
                lng=m.lng,
                visual=MarkerVisualResponse(
                    kind=m.visual.kind.value,
                    color_value=m.visual.color_value,
                    image_ref=m.visual.image_ref,
                    inactive=m.visual.inactive,
                ),
                label=m.current_label,
                popup_html=m.popup_html,
                hovered=m.hovered,
            )
            for m in controller.markers
        ],
        controls=[
            ControlResponse(
                key=c.key,
                icon=c.icon,
                tooltip=c.tooltip,
                position=c.position,
                group=c.group,
                active=c.active(),
            )
            for c in surface.controls.values()
        ],
        toasts=[ToastResponse(message=t.message, duration_s=t.duration_s) for t in session.notifier.visible()],
    )


@router.post("/sessions", response_model=MapStateResponse, status_code=status.HTTP_201_CREATED)
async def open_session(db: Session = Depends(get_db)) -> MapStateResponse:
    """Open a map viewer: load locations, render markers, fit the view."""

    async def fetch() -> dict:
        return {"locations": [loc.as_record() for loc in repo_list_locations(db)]}

    session = create_session()
    await session.load_and_render(fetch)
    store.add(session)
    return map_state(session)


@router.get("/sessions/{session_id}", response_model=MapStateResponse)
def get_session(session_id: str) -> MapStateResponse:
    return map_state(_get_session(session_id))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def close_session(session_id: str) -> None:
    if not store.remove(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Map session not found")


@router.post("/sessions/{session_id}/search", response_model=MapStateResponse)
def search(session_id: str, body: SearchRequest) -> MapStateResponse:
    session = _get_session(session_id)
    session.on_search_changed(body.query)
    return map_state(session)


@router.post("/sessions/{session_id}/category", response_model=MapStateResponse)
def select_category(session_id: str, body: CategoryRequest) -> MapStateResponse:
    session = _get_session(session_id)
    session.on_category_changed(body.category)
    return map_state(session)


@router.post("/sessions/{session_id}/layer", response_model=MapStateResponse)
def switch_layer(session_id: str, body: LayerRequest) -> MapStateResponse:
    session = _get_session(session_id)
    session.on_layer_switch(body.layer)
    return map_state(session)


@router.post("/sessions/{session_id}/recenter", response_model=MapStateResponse)
def recenter(session_id: str) -> MapStateResponse:
    session = _get_session(session_id)
    session.on_recenter_requested()
    return map_state(session)


@router.post("/sessions/{session_id}/orientation", response_model=MapStateResponse)
def reset_orientation(session_id: str) -> MapStateResponse:
    session = _get_session(session_id)
    session.on_orientation_reset_requested()
    return map_state(session)


@router.post("/sessions/{session_id}/lock", response_model=MapStateResponse)
def toggle_lock(session_id: str) -> MapStateResponse:
    session = _get_session(session_id)
    session.on_region_lock_toggled()
    return map_state(session)


@router.post("/sessions/{session_id}/view", response_model=MapStateResponse)
def view_changed(session_id: str, body: ViewRequest) -> MapStateResponse:
    """Pan/zoom ended; re-applies the region lock if the center left the region."""
    session = _get_session(session_id)
    session.on_view_changed((body.lat, body.lng), body.zoom)
    return map_state(session)


@router.post("/sessions/{session_id}/controls/{key}", response_model=MapStateResponse)
def activate_control(session_id: str, key: str) -> MapStateResponse:
    session = _get_session(session_id)
    if key not in session.surface.controls:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Control not found")
    session.activate_control(key)
    return map_state(session)


@router.post("/sessions/{session_id}/markers/{location_id}/hover", response_model=MapStateResponse)
def hover_marker(session_id: str, location_id: str, body: HoverRequest) -> MapStateResponse:
    session = _get_session(session_id)
    if session.on_marker_hover(location_id, body.inside) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Marker not found")
    return map_state(session)


@router.get("/sessions/{session_id}/render", response_class=HTMLResponse)
def render(session_id: str) -> HTMLResponse:
    """Leaflet page for the session's current map."""
    return HTMLResponse(content=render_html(_get_session(session_id)))
