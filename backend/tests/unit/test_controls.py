"""Unit tests: map_core.controls (descriptor mounting and activation)."""
import pytest

from map_core.basemaps import Basemap
from map_core.controls import ControlDescriptor, activate_control, mount_controls
from map_core.session import create_session
from map_core.surface import MapSurface
from map_core.viewport import RecenterOutcome

pytestmark = pytest.mark.unit


def test_mount_and_activate_generic_descriptor():
    surface = MapSurface()
    calls = []
    descriptor = ControlDescriptor(key="ping", icon="•", tooltip="Ping", on_activate=lambda: calls.append(1) or "pong")
    assert mount_controls(surface, [descriptor]) == ["ping"]
    assert activate_control(surface, "ping") == "pong"
    assert calls == [1]
    assert descriptor.active() is False


def test_mount_duplicate_key_raises():
    surface = MapSurface()
    descriptor = ControlDescriptor(key="ping", icon="•", tooltip="Ping", on_activate=lambda: None)
    mount_controls(surface, [descriptor])
    with pytest.raises(ValueError):
        mount_controls(surface, [descriptor])


def test_activate_unknown_key_raises():
    with pytest.raises(KeyError):
        activate_control(MapSurface(), "missing")


def test_default_controls_are_mounted():
    session = create_session()
    keys = list(session.surface.controls)
    assert keys[:3] == ["recenter", "compass", "lock"]
    assert keys[3:] == [f"layer:{layer.value}" for layer in Basemap]
    assert session.surface.controls["layer:satellite"].position == "topright"


def test_default_controls_dispatch_to_session():
    session = create_session()
    assert session.activate_control("recenter") is RecenterOutcome.fallback
    assert session.activate_control("compass") is False
    assert session.activate_control("lock") is False
    assert session.surface.controls["lock"].active() is False
    assert session.activate_control("layer:positron") is Basemap.positron
    assert session.surface.controls["layer:positron"].active() is True
    assert session.surface.controls["layer:osm"].active() is False
