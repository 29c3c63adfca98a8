"""
Tests for TimelineEngine: rebuilds, external edits, resize and shared zoom.
"""
import pytest

from conftest import FakeHost, FakeSurface
from emissions import Emission, EmissionSet
from enums import ElementRole, MenuAction
from ui.timeline.engine import TimelineEngine
from view_state import ZoomContext


def test_attach_creates_fixed_layers(engine, surface):
    assert engine.background.get("width") == surface.width
    assert engine.background.get("height") == surface.height
    assert engine.axis_backdrop.get("height") == 25
    assert engine.role_of(engine.background) == ElementRole.BACKGROUND
    assert engine.role_of(engine.axis_backdrop) == ElementRole.AXIS_BACKDROP
    assert engine.role_of(engine.playback.line) == ElementRole.PLAY_LINE


def test_two_emission_scenario(engine, two_emissions):
    engine.set_set(two_emissions)

    a, b = list(engine.blocks)
    assert a.rect.get("x") == pytest.approx(0)
    assert b.rect.get("x") == pytest.approx(100)
    assert engine.max_extent == pytest.approx(300)
    assert b.time_label.get("text") == "1000 (ms)"
    assert a.row == 1 and b.row == 2


def test_extent_covers_every_block(engine):
    emissions = EmissionSet([Emission("x", 3500), Emission("y", 200)])
    engine.set_set(emissions)
    assert engine.max_extent == pytest.approx(450)
    assert all(engine.max_extent >= entry.right_edge for entry in engine.blocks)


def test_extent_floor_for_empty_set(engine):
    engine.set_set(EmissionSet())
    assert engine.max_extent == pytest.approx(300)
    assert len(engine.blocks) == 0
    assert len(engine.grid) == 36


def test_rebuild_replaces_previous_items(engine, surface, two_emissions):
    engine.set_set(two_emissions)
    old_rects = [entry.rect for entry in engine.blocks]
    count = len(surface.items())

    engine.set_set(two_emissions)

    assert all(rect.removed for rect in old_rects)
    assert len(surface.items()) == count
    assert all(engine.role_of(rect) is None for rect in old_rects)


def test_block_layers_above_grid_and_separators(engine, two_emissions):
    engine.set_set(two_emissions)
    blocks = list(engine.blocks)
    top_grid = max(e.item.z for e in engine.grid)
    top_separator = max(entry.separator.z for entry in blocks)
    top_rect = max(entry.rect.z for entry in blocks)
    top_name = max(entry.name_label.z for entry in blocks)

    assert min(entry.rect.z for entry in blocks) > max(top_grid, top_separator, engine.playback.line.z)
    assert min(entry.name_label.z for entry in blocks) > top_rect
    assert min(entry.time_label.z for entry in blocks) > top_name


def test_duplicate_emission_gets_two_rows(engine):
    a = Emission("A", 100)
    engine.set_set(EmissionSet([a, a]))
    assert [entry.row for entry in engine.blocks] == [1, 2]
    assert engine.blocks.entry_for(a).row == 1


# Guards
# ------

def test_calls_before_attach_are_ignored(host, zoom, two_emissions):
    timeline = TimelineEngine(host, zoom)
    timeline.set_set(two_emissions)
    timeline.resize(640, 200)
    timeline.on_modifying_emission(two_emissions[0])
    timeline.on_modified_emission(two_emissions[0])
    assert timeline.active_set is None
    assert len(timeline.blocks) == 0


def test_set_set_none_keeps_drawing(engine, two_emissions):
    engine.set_set(two_emissions)
    engine.set_set(None)
    assert engine.active_set is two_emissions
    assert len(engine.blocks) == 2


def test_hooks_without_active_set_are_noops(engine, surface, two_emissions):
    count = len(surface.items())
    engine.on_modifying_emission(two_emissions[0])
    engine.on_modified_emission(two_emissions[0])
    assert len(surface.items()) == count


def test_stale_emission_is_ignored(engine, two_emissions):
    engine.set_set(two_emissions)
    stranger = Emission("gone", 2000)
    blocks = list(engine.blocks)

    engine.on_modifying_emission(stranger)
    engine.on_modified_emission(stranger)

    assert list(engine.blocks) == blocks
    assert all(entry.rect.translation == (0.0, 0.0) for entry in blocks)


def test_removed_emission_is_ignored(engine, two_emissions):
    engine.set_set(two_emissions)
    a = two_emissions[0]
    two_emissions.remove(a)
    blocks = list(engine.blocks)

    a.start_offset_ms = 900
    engine.on_modifying_emission(a)
    engine.on_modified_emission(a)

    assert list(engine.blocks) == blocks
    assert blocks[0].rect.translation == (0.0, 0.0)


# External edits
# --------------

def test_modifying_moves_only_that_block(engine, two_emissions):
    engine.set_set(two_emissions)
    a_entry, b_entry = list(engine.blocks)
    grid = list(engine.grid)

    two_emissions[1].start_offset_ms = 1500
    engine.on_modifying_emission(two_emissions[1])

    for item in b_entry.moving_items():
        assert item.translation == (pytest.approx(50), 0)
    assert b_entry.separator.translation == (0.0, 0.0)
    for item in a_entry.moving_items():
        assert item.translation == (0.0, 0.0)
    assert a_entry.rect.get("x") == pytest.approx(0)
    assert engine.grid == grid
    assert list(engine.blocks) == [a_entry, b_entry]


def test_modifying_is_relative_to_committed_offset(engine, two_emissions):
    engine.set_set(two_emissions)
    b_entry = list(engine.blocks)[1]

    two_emissions[1].start_offset_ms = 1200
    engine.on_modifying_emission(two_emissions[1])
    two_emissions[1].start_offset_ms = 900
    engine.on_modifying_emission(two_emissions[1])

    assert b_entry.rect.translation == (pytest.approx(-10), 0)


def test_modifying_after_drag_keeps_drag_translation(engine, two_emissions):
    engine.set_set(two_emissions)
    a_entry = list(engine.blocks)[0]
    a_entry.rect.drag(30)

    two_emissions[0].start_offset_ms = 400
    engine.on_modifying_emission(two_emissions[0])

    assert a_entry.rect.translation == (pytest.approx(40), 0)


def test_modified_rebuilds_without_sweep(engine, two_emissions):
    engine.set_set(two_emissions)
    two_emissions[1].start_offset_ms = 4000
    engine.on_modifying_emission(two_emissions[1])

    engine.on_modified_emission(two_emissions[1])

    b_entry = list(engine.blocks)[1]
    assert b_entry.rect.get("x") == pytest.approx(400)
    assert b_entry.rect.translation == (0.0, 0.0)
    assert engine.max_extent == pytest.approx(500)
    assert engine.playback.sweeps == 1


# Resize
# ------

def test_resize_rebuilds_same_set(engine, surface, two_emissions):
    engine.set_set(two_emissions)
    engine.resize(640, 200)

    assert surface.resized == [(640, 200)]
    assert engine.background.get("width") == 640
    assert engine.background.get("height") == 200
    assert engine.axis_backdrop.get("width") == 640
    assert engine.playback.line.get("height") == 200
    assert list(engine.blocks)[0].separator.get("width") == 640
    assert engine.playback.sweeps == 1


def test_resize_without_set_only_resizes(engine, surface):
    engine.resize(500, 100)
    assert surface.resized == [(500, 100)]
    assert len(engine.blocks) == 0
    assert engine.grid == []


# Context menu
# ------------

def test_block_context_menu_offers_clone_and_remove(engine, host, two_emissions):
    engine.set_set(two_emissions)
    b_entry = list(engine.blocks)[1]

    b_entry.rect.context_menu_callback((10, 20))

    position, entries = host.menus[0]
    assert position == (10, 20)
    assert [e.action if e else None for e in entries] == [MenuAction.CLONE, None, MenuAction.REMOVE]
    assert [e.label for e in entries if e] == ["Clone", "Remove"]

    entries[0].callback()
    entries[2].callback()
    assert host.calls == [("clone", two_emissions[1]), ("remove", two_emissions[1])]


# Lifecycle and shared zoom
# -------------------------

def test_dispose_clears_surface(host, zoom, two_emissions):
    surface = FakeSurface()
    timeline = TimelineEngine(host, zoom)
    timeline.attach(surface)
    timeline.set_set(two_emissions)

    timeline.dispose()

    assert surface.items() == []
    assert timeline.active_set is None
    assert timeline.surface is None
    zoom.set_scale_factor(80)
    assert len(timeline.blocks) == 0


def test_views_sharing_zoom_rebuild_together(zoom, two_emissions):
    first = TimelineEngine(FakeHost(), zoom)
    second = TimelineEngine(FakeHost(), zoom)
    first.attach(FakeSurface())
    second.attach(FakeSurface())
    other = EmissionSet([Emission("C", 1000)])
    first.set_set(two_emissions)
    second.set_set(other)

    first.background.wheel_callback(1000)

    assert list(first.blocks)[1].rect.get("x") == pytest.approx(50)
    assert list(second.blocks)[0].rect.get("x") == pytest.approx(50)
    assert second.scale_factor == pytest.approx(50)
    first.dispose()
    second.dispose()


def test_separate_zoom_contexts_are_independent(two_emissions):
    first = TimelineEngine(FakeHost(), ZoomContext(scale_factor=100))
    second = TimelineEngine(FakeHost(), ZoomContext(scale_factor=100))
    first.attach(FakeSurface())
    second.attach(FakeSurface())
    first.set_set(two_emissions)
    second.set_set(two_emissions)

    first.background.wheel_callback(1000)

    assert first.scale_factor == pytest.approx(50)
    assert second.scale_factor == pytest.approx(100)
    assert list(second.blocks)[1].rect.get("x") == pytest.approx(100)


def test_pan_is_per_view(zoom, two_emissions):
    first = TimelineEngine(FakeHost(), zoom)
    second = TimelineEngine(FakeHost(), zoom)
    first.attach(FakeSurface())
    second.attach(FakeSurface())
    first.set_set(two_emissions)
    second.set_set(two_emissions)

    first.background.drag(30)

    assert first.pan_offset == pytest.approx(30)
    assert second.pan_offset == 0
