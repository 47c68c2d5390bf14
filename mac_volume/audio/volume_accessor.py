import ctypes
from typing import Optional

from mac_volume.audio.coreaudio import PropertyAddress, Scope, Selector
from mac_volume.audio.exceptions import CoreAudioError
from mac_volume.utils.logging_config import get_logger

logger = get_logger(__name__)

MAIN_VOLUME_ADDRESS = PropertyAddress(Selector.VIRTUAL_MAIN_VOLUME, Scope.OUTPUT)


def float32(value: float) -> float:
    return ctypes.c_float(value).value


def to_percent(volume: float) -> float:
    """
    Scalar volume to percent, rounded to 32-bit precision like the HAL value.
    """
    return float32(float32(volume) * 100.0)


def from_percent(percent: float) -> float:
    return float32(float32(percent) / 100.0)


def get_volume(hardware, device_id: int) -> Optional[float]:
    """
    Read the device's virtual main output volume (0.0-1.0).
    """
    try:
        volume = hardware.get_float32(device_id, MAIN_VOLUME_ADDRESS)
        logger.debug(f"Object {device_id} volume read: {volume}")
        return volume
    except CoreAudioError as e:
        logger.warning(f"Volume read failed for object {device_id}: {e}")
        return None


def set_volume(hardware, device_id: int, value: float) -> bool:
    """
    Write ``value`` unchanged to the virtual main output volume.
    """
    try:
        hardware.set_float32(device_id, MAIN_VOLUME_ADDRESS, value)
        logger.debug(f"Object {device_id} volume set: {value}")
        return True
    except CoreAudioError as e:
        logger.warning(f"Volume write failed for object {device_id}: {e}")
        return False
