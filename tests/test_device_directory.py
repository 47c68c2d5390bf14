import pytest

from mac_volume.audio.device_directory import (
    Device,
    has_output_streams,
    list_devices,
    list_output_devices,
    resolve_by_name,
)
from mac_volume.audio.exceptions import CoreAudioError


def test_list_devices_only_returns_output_capable(hardware):
    devices = list_devices(hardware)

    assert devices == [
        Device(40, "MacBook Pro Speakers", True),
        Device(52, "External Headphones", True),
    ]
    assert all(hardware.output_streams[d.id] > 0 for d in devices)


def test_list_devices_skips_objects_without_stream_info(hardware):
    hardware.names[77] = "Aggregate Clock"

    names = [d.name for d in list_devices(hardware)]

    assert "Aggregate Clock" not in names


def test_list_devices_empty_when_device_list_fails(hardware, caplog):
    hardware.fail_device_list = "AudioObjectGetPropertyData"

    assert list_devices(hardware) == []
    assert "Failed to get device list" in caplog.text


def test_has_output_streams(hardware):
    assert has_output_streams(hardware, 40)
    assert not has_output_streams(hardware, 61)
    assert not has_output_streams(hardware, 999)


def test_resolve_by_name_exact_match(hardware):
    assert resolve_by_name(hardware, "External Headphones") == 52


def test_resolve_by_name_is_case_sensitive(hardware):
    assert resolve_by_name(hardware, "external headphones") is None
    assert resolve_by_name(hardware, "External") is None


def test_resolve_by_name_includes_devices_without_output(hardware):
    assert resolve_by_name(hardware, "MacBook Pro Microphone") == 61


def test_resolve_by_name_first_match_wins(hardware):
    hardware.add_device(90, "External Headphones")

    assert resolve_by_name(hardware, "External Headphones") == 52


def test_resolve_by_name_none_when_device_list_fails(hardware):
    hardware.fail_device_list = "AudioObjectGetPropertyData"

    assert resolve_by_name(hardware, "External Headphones") is None


def test_list_output_devices_raises_on_failure(hardware):
    hardware.fail_device_list = "AudioObjectGetPropertyDataSize"

    with pytest.raises(CoreAudioError) as excinfo:
        list_output_devices(hardware)

    assert excinfo.value.operation == "AudioObjectGetPropertyDataSize"


def test_list_output_devices_empty_is_not_failure(hardware):
    hardware.output_streams = dict.fromkeys(hardware.output_streams, 0)

    assert list_output_devices(hardware) == []
