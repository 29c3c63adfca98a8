"""
Tests for background panning and wheel zoom.
"""
import pytest

from emissions import EmissionSet
from enums import ElementRole


@pytest.fixture
def drawn(engine, two_emissions):
    engine.set_set(two_emissions)
    return engine


def _pan(engine, *deltas):
    engine.background.drag(*deltas)


def test_pan_moves_blocks_labels_grid_and_play_line(drawn):
    before = {item: item.get("x") for item, _ in drawn.movable_elements()}

    _pan(drawn, 10, 40)

    for item, x in before.items():
        assert item.get("x") == pytest.approx(drawn.base_x_of(item) + 40)
    assert drawn.playback.line.get("x") == pytest.approx(40)
    assert drawn.pan_offset == pytest.approx(40)


def test_pans_chain_from_committed_offset(drawn):
    _pan(drawn, 40)
    _pan(drawn, -15)

    entry = list(drawn.blocks)[1]
    assert entry.rect.get("x") == pytest.approx(entry.base_x + 25)
    assert entry.name_label.get("x") == pytest.approx(entry.name_base_x + 25)
    assert drawn.pan_offset == pytest.approx(25)


def test_fixed_elements_do_not_pan(drawn):
    _pan(drawn, 60)

    assert drawn.background.get("x") == 0
    assert drawn.axis_backdrop.get("x") == 0


def test_separators_stay_put_while_rows_pan(drawn):
    # Row separators are left out of panning even though their row moves
    _pan(drawn, 60)

    for entry in drawn.blocks:
        assert entry.separator.get("x") == 0
        assert entry.rect.get("x") == pytest.approx(entry.base_x + 60)


def test_movable_set_excludes_fixed_roles(drawn):
    roles = {drawn.role_of(item) for item, _ in drawn.movable_elements()}
    assert ElementRole.BACKGROUND not in roles
    assert ElementRole.AXIS_BACKDROP not in roles
    assert ElementRole.SEPARATOR not in roles
    assert {ElementRole.BLOCK, ElementRole.NAME_LABEL, ElementRole.TIME_LABEL,
            ElementRole.GRID_LINE, ElementRole.GRID_LABEL, ElementRole.PLAY_LINE} <= roles


def test_dragged_block_keeps_its_translation_when_panned(drawn, two_emissions):
    entry = list(drawn.blocks)[0]
    entry.rect.drag(30)

    _pan(drawn, 20)

    assert entry.rect.visual_x == pytest.approx(entry.base_x + 20 + 30)
    assert two_emissions[0].start_offset_ms == 300


def test_block_drag_after_pan_ignores_pan_offset(drawn, two_emissions):
    _pan(drawn, 70)
    list(drawn.blocks)[1].rect.drag(50)
    assert two_emissions[1].start_offset_ms == 1500


def test_rebuild_resets_pan(drawn, two_emissions):
    _pan(drawn, 45)
    drawn.set_set(two_emissions)

    assert drawn.pan_offset == 0
    entry = list(drawn.blocks)[1]
    assert entry.rect.get("x") == pytest.approx(100)


def test_wheel_zooms_out_and_rebuilds(drawn, zoom):
    drawn.background.wheel_callback(1000)

    assert zoom.scale_factor == pytest.approx(50)
    entry = list(drawn.blocks)[1]
    assert entry.rect.get("x") == pytest.approx(50)
    lines = [e for e in drawn.grid if e.role == ElementRole.GRID_LINE]
    assert lines[1].base_x == pytest.approx(10)


def test_wheel_zoom_floor(drawn, zoom):
    for _ in range(5):
        drawn.background.wheel_callback(1000)
    assert zoom.scale_factor == pytest.approx(30)


def test_wheel_zoom_in(drawn, zoom):
    drawn.background.wheel_callback(-200)
    assert zoom.scale_factor == pytest.approx(110)
    assert list(drawn.blocks)[1].rect.get("x") == pytest.approx(110)


def test_wheel_without_set_only_changes_scale(engine, zoom, surface):
    engine.background.wheel_callback(100)
    assert zoom.scale_factor == pytest.approx(95)
    assert len(engine.blocks) == 0
    assert engine.grid == []


def test_empty_set_still_pans_grid(engine):
    engine.set_set(EmissionSet([]))
    first_line = engine.grid[1].item
    _pan(engine, 12)
    assert first_line.get("x") == pytest.approx(engine.grid[1].base_x + 12)
