"""Tests for controller snapshots and JSON persistence."""

import pytest

from pygbaudio.core import create_sound_controller
from pygbaudio.utils import StateManager, StateManagerError


def test_snapshot_and_restore(tmp_path, controller):
    manager = StateManager(tmp_path)
    controller.trigger_square1(0x783)
    controller.update(50000)
    saved = controller.get_state()

    manager.create_snapshot(controller, "note", "after first note")
    controller.update(300000)
    manager.restore_snapshot(controller, "note")

    assert controller.get_state() == saved


def test_save_and_load_file(tmp_path, controller):
    manager = StateManager(tmp_path)
    controller.trigger_square1(0x7C1)
    controller.update(99999)
    manager.create_snapshot(controller, "saved")

    path = manager.save_snapshot_to_file("saved", "saved.json")

    other_manager = StateManager(tmp_path)
    assert other_manager.load_snapshot_from_file(path) == "saved"

    restored = create_sound_controller()
    other_manager.restore_snapshot(restored, "saved")
    assert restored.get_state() == controller.get_state()


def test_missing_snapshot(tmp_path, controller):
    manager = StateManager(tmp_path)
    with pytest.raises(StateManagerError):
        manager.restore_snapshot(controller, "nope")
    with pytest.raises(StateManagerError):
        manager.delete_snapshot("nope")


def test_invalid_file(tmp_path):
    manager = StateManager(tmp_path)
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")

    with pytest.raises(StateManagerError):
        manager.load_snapshot_from_file(str(bad))
    with pytest.raises(StateManagerError):
        manager.load_snapshot_from_file(str(tmp_path / "missing.json"))


def test_list_and_delete(tmp_path, controller):
    manager = StateManager(tmp_path)
    manager.create_snapshot(controller, "a")
    manager.create_snapshot(controller, "b")

    names = {entry['name'] for entry in manager.list_snapshots()}
    assert names == {"a", "b"}

    manager.delete_snapshot("a")
    assert manager.get_statistics()['snapshots_count'] == 1


def test_foreign_document_rejected(tmp_path):
    manager = StateManager(tmp_path)
    other = tmp_path / "other.json"
    other.write_text('{"type": "snapshot", "data": {}}', encoding="utf-8")

    with pytest.raises(StateManagerError):
        manager.load_snapshot_from_file(other)
