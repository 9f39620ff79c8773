"""Map controls as descriptors, mounted by one generic routine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from map_core.basemaps import Basemap
from map_core.surface import MapSurface

if TYPE_CHECKING:
    from map_core.session import MapSession


@dataclass(frozen=True)
class ControlDescriptor:
    """What a control looks like and what it does when activated."""

    key: str
    icon: str
    tooltip: str
    on_activate: Callable[[], object]
    position: str = "topleft"
    group: Optional[str] = None
    is_active: Optional[Callable[[], bool]] = None

    def active(self) -> bool:
        return bool(self.is_active()) if self.is_active is not None else False


def mount_controls(surface: MapSurface, descriptors: Sequence[ControlDescriptor]) -> list[str]:
    """Mount each descriptor on the surface; returns the mounted keys in order."""
    keys = []
    for descriptor in descriptors:
        surface.add_control(descriptor.key, descriptor)
        keys.append(descriptor.key)
    return keys


def activate_control(surface: MapSurface, key: str) -> object:
    """Run a mounted control's action. Unknown keys raise KeyError."""
    descriptor: ControlDescriptor = surface.controls[key]
    return descriptor.on_activate()


def _layer_control(session: MapSession, layer: Basemap) -> ControlDescriptor:
    return ControlDescriptor(
        key=f"layer:{layer.value}",
        icon=layer.icon,
        tooltip=layer.switcher_title,
        on_activate=lambda: session.on_layer_switch(layer),
        position="topright",
        group="layers",
        is_active=lambda: session.controller.current_layer is layer,
    )


def default_controls(session: MapSession) -> list[ControlDescriptor]:
    """Recenter, compass, region lock and one button per basemap, bound to ``session``."""
    controls = [
        ControlDescriptor(
            key="recenter",
            icon="🎯",
            tooltip="Re-center Map (Smart Fit)",
            on_activate=session.on_recenter_requested,
        ),
        ControlDescriptor(
            key="compass",
            icon="🧭",
            tooltip="Reset Orientation (North Up)",
            on_activate=session.on_orientation_reset_requested,
        ),
        ControlDescriptor(
            key="lock",
            icon="🔒",
            tooltip=f"Lock map to {session.controller.region_name}",
            on_activate=session.on_region_lock_toggled,
            is_active=lambda: session.controller.locked,
        ),
    ]
    controls.extend(_layer_control(session, layer) for layer in Basemap)
    return controls
