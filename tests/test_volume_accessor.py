import pytest

from mac_volume.audio.volume_accessor import (
    from_percent,
    get_volume,
    set_volume,
    to_percent,
)


def test_get_volume(hardware):
    assert get_volume(hardware, 52) == pytest.approx(0.8)


def test_get_volume_none_on_failure(hardware):
    hardware.unreadable.add(52)

    assert get_volume(hardware, 52) is None


def test_set_volume_writes_value_unclamped(hardware):
    assert set_volume(hardware, 40, 1.5)
    assert hardware.volumes[40] == 1.5


def test_set_volume_false_on_failure(hardware):
    hardware.read_only.add(40)

    assert not set_volume(hardware, 40, 0.3)
    assert hardware.volumes[40] == 0.25


@pytest.mark.parametrize("percent", [0, 1, 29, 57, 80, 99, 100])
def test_percent_survives_float32_storage(hardware, percent):
    set_volume(hardware, 40, from_percent(percent))

    assert int(to_percent(get_volume(hardware, 40))) == percent
