import ctypes

import pytest

from mac_volume.audio.coreaudio import SYSTEM_OBJECT, Scope, Selector
from mac_volume.audio.exceptions import CoreAudioError


class FakeHardware:
    """In-memory HAL exposing the same helpers as ``AudioHardware``."""

    def __init__(self):
        self.names = {}
        self.output_streams = {}
        self.volumes = {}
        self.fail_device_list = None
        self.read_only = set()
        self.unreadable = set()

    def add_device(self, device_id, name, output_streams=1, volume=0.5):
        self.names[device_id] = name
        self.output_streams[device_id] = output_streams
        if volume is not None:
            self.volumes[device_id] = ctypes.c_float(volume).value
        return device_id

    def get_data_size(self, object_id, address):
        if address.selector == Selector.STREAMS and address.scope == Scope.OUTPUT:
            if object_id not in self.output_streams:
                raise CoreAudioError("AudioObjectGetPropertyDataSize", -50)
            return 4 * self.output_streams[object_id]
        raise CoreAudioError("AudioObjectGetPropertyDataSize", -50)

    def get_object_ids(self, object_id, address):
        assert object_id == SYSTEM_OBJECT
        assert address.selector == Selector.DEVICES
        if self.fail_device_list:
            raise CoreAudioError(self.fail_device_list, -50)
        return list(self.names)

    def get_string(self, object_id, address):
        assert address.selector == Selector.NAME
        if object_id not in self.names:
            raise CoreAudioError("AudioObjectGetPropertyData", -50)
        return self.names[object_id]

    def get_float32(self, object_id, address):
        assert address.selector == Selector.VIRTUAL_MAIN_VOLUME
        assert address.scope == Scope.OUTPUT
        if object_id in self.unreadable or object_id not in self.volumes:
            raise CoreAudioError("AudioObjectGetPropertyData", 2003332927)
        return self.volumes[object_id]

    def set_float32(self, object_id, address, value):
        assert address.selector == Selector.VIRTUAL_MAIN_VOLUME
        if object_id in self.read_only or object_id not in self.volumes:
            raise CoreAudioError("AudioObjectSetPropertyData", 1852797029)
        self.volumes[object_id] = ctypes.c_float(value).value


class StubConfig:
    def __init__(self, values=None):
        self.values = values or {}

    def get_config(self, path, default=None):
        return self.values.get(path, default)


@pytest.fixture
def hardware():
    hw = FakeHardware()
    hw.add_device(40, "MacBook Pro Speakers", volume=0.25)
    hw.add_device(52, "External Headphones", volume=0.8)
    hw.add_device(61, "MacBook Pro Microphone", output_streams=0, volume=0.6)
    return hw


@pytest.fixture
def make_config():
    return StubConfig
