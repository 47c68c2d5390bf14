"""Enumerate HAL audio objects and resolve them by display name.

Nothing here is cached: every call re-queries the HAL, so devices plugged in or
removed since the last call are always reflected.
"""

from dataclasses import dataclass
from typing import List, Optional

from mac_volume.audio.coreaudio import (
    SYSTEM_OBJECT,
    PropertyAddress,
    Scope,
    Selector,
)
from mac_volume.audio.exceptions import CoreAudioError
from mac_volume.utils.logging_config import get_logger

logger = get_logger(__name__)

DEVICES_ADDRESS = PropertyAddress(Selector.DEVICES)
NAME_ADDRESS = PropertyAddress(Selector.NAME)
OUTPUT_STREAMS_ADDRESS = PropertyAddress(Selector.STREAMS, Scope.OUTPUT)


@dataclass(frozen=True)
class Device:
    id: int
    name: str
    has_output_streams: bool


def _all_object_ids(hardware) -> Optional[List[int]]:
    try:
        return hardware.get_object_ids(SYSTEM_OBJECT, DEVICES_ADDRESS)
    except CoreAudioError as e:
        logger.error(f"Failed to get device list: {e}")
        return None


def device_name(hardware, device_id: int) -> Optional[str]:
    try:
        return hardware.get_string(device_id, NAME_ADDRESS)
    except CoreAudioError as e:
        logger.debug(f"Skipping object {device_id}, name unavailable: {e}")
        return None


def has_output_streams(hardware, device_id: int) -> bool:
    """
    A device can render audio when its output-scope stream list is non-empty.
    """
    try:
        return hardware.get_data_size(device_id, OUTPUT_STREAMS_ADDRESS) > 0
    except CoreAudioError as e:
        logger.debug(f"Stream query failed for object {device_id}: {e}")
        return False


def list_output_devices(hardware) -> List[Device]:
    """List output-capable devices with their display names.

    Args:
        hardware: HAL binding, usually ``AudioHardware``

    Returns:
        List[Device]: Devices with at least one output stream

    Raises:
        CoreAudioError: The device list itself cannot be read
    """
    ids = hardware.get_object_ids(SYSTEM_OBJECT, DEVICES_ADDRESS)

    devices = []
    for device_id in ids:
        if not has_output_streams(hardware, device_id):
            continue
        name = device_name(hardware, device_id)
        if name is None:
            continue
        devices.append(Device(device_id, name, True))

    logger.debug(f"Found {len(devices)} output devices out of {len(ids)} objects")
    return devices


def list_devices(hardware) -> List[Device]:
    """
    Like list_output_devices, but logs and returns an empty list on failure.
    """
    try:
        return list_output_devices(hardware)
    except CoreAudioError as e:
        logger.error(f"Failed to get device list: {e}")
        return []


def resolve_by_name(hardware, name: str) -> Optional[int]:
    """Find the first audio object whose display name equals ``name``.

    The match is exact and case-sensitive. Objects without output streams are
    still candidates.
    """
    ids = _all_object_ids(hardware)
    if ids is None:
        return None

    for device_id in ids:
        if device_name(hardware, device_id) == name:
            logger.debug(f"Resolved {name!r} to object {device_id}")
            return device_id

    logger.info(f"Device not found: {name}")
    return None
