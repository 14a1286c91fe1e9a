import os

import pytest

from waybar.modules.backlight import (
    Backlight,
    BacklightDevice,
    best_device,
    enumerate_devices,
    read_device,
    upsert_device,
)


def make_device(root, name, actual, maximum, actual_attr="actual_brightness"):
    path = root / name
    path.mkdir(parents=True, exist_ok=True)
    (path / actual_attr).write_text(f"{actual}\n")
    (path / "max_brightness").write_text(f"{maximum}\n")
    return path


def test_best_device_prefers_named_device():
    devices = [BacklightDevice("a", 1, 10), BacklightDevice("b", 1, 5)]
    assert best_device(devices, "b") is devices[1]


def test_best_device_falls_back_to_highest_max():
    devices = [BacklightDevice("a", 1, 10), BacklightDevice("b", 1, 50)]
    assert best_device(devices, "missing") is devices[1]


def test_best_device_first_of_equal_max():
    devices = [BacklightDevice("a", 1, 10), BacklightDevice("b", 2, 10)]
    assert best_device(devices) is devices[0]


def test_best_device_empty():
    assert best_device([], "x") is None


def test_upsert_adds_and_updates():
    devices = []
    upsert_device(devices, "intel", 3, 7)
    assert devices == [BacklightDevice("intel", 3, 7)]
    upsert_device(devices, "intel", 4, 8)
    assert devices == [BacklightDevice("intel", 4, 8)]
    upsert_device(devices, "other", 1, 2)
    assert [device.name for device in devices] == ["intel", "other"]


def test_read_device(tmp_path):
    path = make_device(tmp_path, "intel_backlight", 120, 960)
    assert read_device(str(path)) == BacklightDevice("intel_backlight", 120, 960)


def test_read_device_amdgpu_uses_brightness(tmp_path):
    path = make_device(tmp_path, "amdgpu_bl0", 42, 255, actual_attr="brightness")
    assert read_device(str(path)) == BacklightDevice("amdgpu_bl0", 42, 255)


def test_read_device_missing_attribute(tmp_path):
    path = tmp_path / "broken"
    path.mkdir()
    (path / "max_brightness").write_text("10\n")
    with pytest.raises(RuntimeError):
        read_device(str(path))


def test_enumerate_devices(tmp_path):
    make_device(tmp_path, "b", 1, 2)
    make_device(tmp_path, "a", 3, 4)
    devices = enumerate_devices([], str(tmp_path))
    assert devices == [BacklightDevice("a", 3, 4), BacklightDevice("b", 1, 2)]


def test_enumerate_devices_missing_root(tmp_path):
    assert enumerate_devices([], str(tmp_path / "nope")) == []


def test_backlight_without_devices(tmp_path):
    with pytest.raises(RuntimeError, match="No backlight found"):
        Backlight("", {}, str(tmp_path))


def test_backlight_percent(tmp_path):
    make_device(tmp_path, "intel", 50, 100)
    module = Backlight("", {}, str(tmp_path))
    module.update()
    assert module.markup == "50%"


def test_backlight_zero_max_is_full(tmp_path):
    make_device(tmp_path, "intel", 0, 0)
    module = Backlight("", {}, str(tmp_path))
    module.update()
    assert module.markup == "100%"


def test_backlight_preferred_device(tmp_path):
    make_device(tmp_path, "big", 10, 1000)
    make_device(tmp_path, "small", 5, 10)
    module = Backlight("", {"device": "small", "format": "{percent}"}, str(tmp_path))
    module.update()
    assert module.markup == "50"


def test_backlight_skips_unchanged_and_picks_up_changes(tmp_path):
    path = make_device(tmp_path, "intel", 50, 100)
    module = Backlight("", {"on-update": "notify"}, str(tmp_path))
    module.update()
    assert module.commands == ["notify"]
    module.update()
    assert module.commands == ["notify"]
    (path / "actual_brightness").write_text("25\n")
    module.update()
    assert module.markup == "25%"
    assert module.commands == ["notify", "notify"]


def test_backlight_state_class(tmp_path):
    make_device(tmp_path, "intel", 90, 100)
    module = Backlight("", {"states": {"bright": 80}}, str(tmp_path))
    module.update()
    assert "bright" in module.classes


def test_backlight_uses_icon(tmp_path):
    make_device(tmp_path, "intel", 100, 100)
    config = {"format": "{icon}", "format-icons": ["low", "high"]}
    module = Backlight("", config, str(tmp_path))
    module.update()
    assert module.markup == "high"
    assert os.path.isdir(module.root)