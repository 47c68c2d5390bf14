# Bind the CoreAudio HAL property API through ctypes.
import ctypes
import ctypes.util
import platform
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional

from mac_volume.audio.exceptions import CoreAudioError, CoreAudioUnavailable
from mac_volume.utils.logging_config import get_logger

logger = get_logger(__name__)


def fourcc(code: str) -> int:
    """
    Pack a four-character code into the UInt32 CoreAudio expects.
    """
    return int.from_bytes(code.encode("ascii"), "big")


NO_ERR = 0
SYSTEM_OBJECT = 1

# CFStringBuiltInEncodings.kCFStringEncodingUTF8
CF_STRING_ENCODING_UTF8 = 0x08000100


class Selector(IntEnum):
    DEVICES = fourcc("dev#")  # kAudioHardwarePropertyDevices
    NAME = fourcc("lnam")  # kAudioObjectPropertyName
    STREAMS = fourcc("stm#")  # kAudioDevicePropertyStreams
    VIRTUAL_MAIN_VOLUME = fourcc("vmvc")  # kAudioHardwareServiceDeviceProperty_VirtualMainVolume


class Scope(IntEnum):
    GLOBAL = fourcc("glob")
    OUTPUT = fourcc("outp")


ELEMENT_MAIN = 0


# Framework locations, used when find_library comes back empty.
class LIB_PATH(Enum):
    CORE_AUDIO = "/System/Library/Frameworks/CoreAudio.framework/CoreAudio"
    CORE_FOUNDATION = (
        "/System/Library/Frameworks/CoreFoundation.framework/CoreFoundation"
    )


@dataclass(frozen=True)
class PropertyAddress:
    selector: int
    scope: int = Scope.GLOBAL
    element: int = ELEMENT_MAIN


class AudioObjectPropertyAddress(ctypes.Structure):
    _fields_ = [
        ("mSelector", ctypes.c_uint32),
        ("mScope", ctypes.c_uint32),
        ("mElement", ctypes.c_uint32),
    ]


def _load_framework(name: str, fallback: str) -> ctypes.CDLL:
    lib_path = ctypes.util.find_library(name) or fallback
    try:
        lib = ctypes.cdll.LoadLibrary(lib_path)
        logger.debug(f"Loaded {name} framework: {lib_path}")
        return lib
    except OSError as e:
        logger.debug(f"Failed to load {name} framework from {lib_path}: {e}")
        raise CoreAudioUnavailable(f"Unable to load {name}: {e}") from e


class AudioHardware:
    """
    Thin typed wrapper over AudioObjectGetPropertyDataSize,
    AudioObjectGetPropertyData and AudioObjectSetPropertyData.
    """

    def __init__(self, core_audio: ctypes.CDLL, core_foundation: ctypes.CDLL):
        self._ca = core_audio
        self._cf = core_foundation
        self._declare_prototypes()

    @classmethod
    def load(cls) -> "AudioHardware":
        """Load the CoreAudio and CoreFoundation frameworks.

        Raises:
            CoreAudioUnavailable: The host is not macOS or the frameworks are missing
        """
        system = platform.system()
        if system != "Darwin":
            raise CoreAudioUnavailable(f"Unsupported operating system: {system}")
        return cls(
            _load_framework("CoreAudio", LIB_PATH.CORE_AUDIO.value),
            _load_framework("CoreFoundation", LIB_PATH.CORE_FOUNDATION.value),
        )

    def _declare_prototypes(self) -> None:
        addr_p = ctypes.POINTER(AudioObjectPropertyAddress)
        u32_p = ctypes.POINTER(ctypes.c_uint32)

        self._ca.AudioObjectGetPropertyDataSize.restype = ctypes.c_int32
        self._ca.AudioObjectGetPropertyDataSize.argtypes = [
            ctypes.c_uint32,
            addr_p,
            ctypes.c_uint32,
            ctypes.c_void_p,
            u32_p,
        ]
        self._ca.AudioObjectGetPropertyData.restype = ctypes.c_int32
        self._ca.AudioObjectGetPropertyData.argtypes = [
            ctypes.c_uint32,
            addr_p,
            ctypes.c_uint32,
            ctypes.c_void_p,
            u32_p,
            ctypes.c_void_p,
        ]
        self._ca.AudioObjectSetPropertyData.restype = ctypes.c_int32
        self._ca.AudioObjectSetPropertyData.argtypes = [
            ctypes.c_uint32,
            addr_p,
            ctypes.c_uint32,
            ctypes.c_void_p,
            ctypes.c_uint32,
            ctypes.c_void_p,
        ]

        self._cf.CFStringGetLength.restype = ctypes.c_long
        self._cf.CFStringGetLength.argtypes = [ctypes.c_void_p]
        self._cf.CFStringGetMaximumSizeForEncoding.restype = ctypes.c_long
        self._cf.CFStringGetMaximumSizeForEncoding.argtypes = [
            ctypes.c_long,
            ctypes.c_uint32,
        ]
        self._cf.CFStringGetCString.restype = ctypes.c_bool
        self._cf.CFStringGetCString.argtypes = [
            ctypes.c_void_p,
            ctypes.c_char_p,
            ctypes.c_long,
            ctypes.c_uint32,
        ]
        self._cf.CFRelease.restype = None
        self._cf.CFRelease.argtypes = [ctypes.c_void_p]

    @staticmethod
    def _address(address: PropertyAddress) -> AudioObjectPropertyAddress:
        return AudioObjectPropertyAddress(
            address.selector, address.scope, address.element
        )

    def _get(self, object_id: int, address: PropertyAddress, buffer, size: int) -> int:
        io_size = ctypes.c_uint32(size)
        status = self._ca.AudioObjectGetPropertyData(
            object_id,
            ctypes.byref(self._address(address)),
            0,
            None,
            ctypes.byref(io_size),
            ctypes.byref(buffer),
        )
        if status != NO_ERR:
            raise CoreAudioError("AudioObjectGetPropertyData", status)
        return io_size.value

    def get_data_size(self, object_id: int, address: PropertyAddress) -> int:
        size = ctypes.c_uint32(0)
        status = self._ca.AudioObjectGetPropertyDataSize(
            object_id, ctypes.byref(self._address(address)), 0, None, ctypes.byref(size)
        )
        if status != NO_ERR:
            raise CoreAudioError("AudioObjectGetPropertyDataSize", status)
        return size.value

    def get_object_ids(self, object_id: int, address: PropertyAddress) -> List[int]:
        size = self.get_data_size(object_id, address)
        count = size // ctypes.sizeof(ctypes.c_uint32)
        if count == 0:
            return []
        ids = (ctypes.c_uint32 * count)()
        written = self._get(object_id, address, ids, size)
        # The list can shrink between the size query and the read.
        return list(ids[: written // ctypes.sizeof(ctypes.c_uint32)])

    def get_string(self, object_id: int, address: PropertyAddress) -> str:
        cf_string = ctypes.c_void_p()
        self._get(object_id, address, cf_string, ctypes.sizeof(cf_string))
        if not cf_string.value:
            raise CoreAudioError("AudioObjectGetPropertyData", NO_ERR)
        try:
            return self._cfstring_to_str(cf_string.value)
        finally:
            self._cf.CFRelease(cf_string.value)

    def _cfstring_to_str(self, cf_string: int) -> str:
        length = self._cf.CFStringGetLength(cf_string)
        max_size = (
            self._cf.CFStringGetMaximumSizeForEncoding(length, CF_STRING_ENCODING_UTF8)
            + 1
        )
        buf = ctypes.create_string_buffer(max_size)
        if not self._cf.CFStringGetCString(
            cf_string, buf, max_size, CF_STRING_ENCODING_UTF8
        ):
            raise CoreAudioError("CFStringGetCString", NO_ERR)
        return buf.value.decode("utf-8")

    def get_float32(self, object_id: int, address: PropertyAddress) -> float:
        value = ctypes.c_float(0.0)
        self._get(object_id, address, value, ctypes.sizeof(value))
        return value.value

    def set_float32(self, object_id: int, address: PropertyAddress, value: float) -> None:
        data = ctypes.c_float(value)
        status = self._ca.AudioObjectSetPropertyData(
            object_id,
            ctypes.byref(self._address(address)),
            0,
            None,
            ctypes.sizeof(data),
            ctypes.byref(data),
        )
        if status != NO_ERR:
            raise CoreAudioError("AudioObjectSetPropertyData", status)


def load_hardware() -> Optional[AudioHardware]:
    """
    Load the HAL binding, logging instead of raising when it is unavailable.
    """
    try:
        return AudioHardware.load()
    except CoreAudioUnavailable as e:
        logger.error(f"CoreAudio initialization failed: {e}")
        return None

