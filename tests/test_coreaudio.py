import pytest

from mac_volume.audio import coreaudio
from mac_volume.audio.coreaudio import (
    AudioHardware,
    AudioObjectPropertyAddress,
    PropertyAddress,
    Scope,
    Selector,
    fourcc,
    load_hardware,
)
from mac_volume.audio.exceptions import AudioError, CoreAudioError, CoreAudioUnavailable


def test_fourcc_codes_match_coreaudio_headers():
    assert Selector.DEVICES == 0x64657623
    assert Selector.NAME == 0x6C6E616D
    assert Selector.STREAMS == 0x73746D23
    assert Selector.VIRTUAL_MAIN_VOLUME == 0x766D7663
    assert Scope.GLOBAL == 0x676C6F62
    assert Scope.OUTPUT == fourcc("outp") == 0x6F757470


def test_property_address_defaults_to_global_main():
    address = PropertyAddress(Selector.NAME)

    assert address.scope == Scope.GLOBAL
    assert address.element == 0


def test_native_address_layout():
    native = AudioHardware._address(
        PropertyAddress(Selector.VIRTUAL_MAIN_VOLUME, Scope.OUTPUT)
    )

    assert isinstance(native, AudioObjectPropertyAddress)
    assert (native.mSelector, native.mScope, native.mElement) == (
        Selector.VIRTUAL_MAIN_VOLUME,
        Scope.OUTPUT,
        0,
    )


def test_load_refuses_non_macos(monkeypatch):
    monkeypatch.setattr(coreaudio.platform, "system", lambda: "Linux")

    with pytest.raises(CoreAudioUnavailable):
        AudioHardware.load()


def test_load_hardware_returns_none_when_unavailable(monkeypatch, caplog):
    monkeypatch.setattr(coreaudio.platform, "system", lambda: "Windows")

    assert load_hardware() is None
    assert "CoreAudio initialization failed" in caplog.text


def test_core_audio_error_carries_status():
    err = CoreAudioError("AudioObjectSetPropertyData", 1852797029)

    assert isinstance(err, AudioError)
    assert err.status == 1852797029
    assert "AudioObjectSetPropertyData" in str(err)
