"""
test_device_state.py
--------------------
Unit tests for anonverse.state.device_state.LocalDeviceState.
"""
import json

from anonverse.state.device_state import LocalDeviceState


class TestGuestFlag:
    def test_missing_file_means_unset(self, device):
        assert device.guest_flag is False

    def test_set_and_clear(self, device):
        device.set_guest_flag()
        assert device.guest_flag is True
        assert json.loads(device.path.read_text())[device.guest_key] == "true"

        device.clear_guest_flag()
        assert device.guest_flag is False
        assert device.guest_key not in json.loads(device.path.read_text())

    def test_other_keys_are_preserved(self, device):
        device.path.write_text(json.dumps({"theme": "dark"}))
        device.set_guest_flag()
        device.clear_guest_flag()
        assert json.loads(device.path.read_text()) == {"theme": "dark"}

    def test_changes_visible_to_other_instances(self, device):
        other = LocalDeviceState(device.path, guest_key=device.guest_key)
        device.set_guest_flag()
        assert other.guest_flag is True

    def test_only_string_true_counts(self, device):
        device.path.write_text(json.dumps({device.guest_key: True}))
        assert device.guest_flag is False


class TestCorruptState:
    def test_unreadable_json_is_treated_as_empty(self, device, caplog):
        device.path.write_text("{not json")
        assert device.guest_flag is False
        assert "unreadable" in caplog.text.lower()

    def test_non_object_is_treated_as_empty(self, device):
        device.path.write_text(json.dumps(["anonverse_guest"]))
        assert device.guest_flag is False
        device.set_guest_flag()
        assert device.guest_flag is True

    def test_creates_parent_directories(self, tmp_path):
        state = LocalDeviceState(tmp_path / "nested" / "dir" / "device.json", guest_key="g")
        state.set_guest_flag()
        assert state.path.exists()
