import math
import sys
from typing import List, Optional

from mac_volume import __version__
from mac_volume.audio.coreaudio import load_hardware
from mac_volume.audio.device_directory import list_output_devices, resolve_by_name
from mac_volume.audio.exceptions import CoreAudioError
from mac_volume.audio.volume_accessor import (
    float32,
    from_percent,
    get_volume,
    set_volume,
    to_percent,
)
from mac_volume.utils.logging_config import get_logger

logger = get_logger(__name__)

PROG = "mac-volume"
DEFAULT_SET_PERCENT = 50.0
DEFAULT_STEP = 2.0
FLOAT32_MAX = 3.4028234663852886e38

USAGE = f"""{PROG} v{__version__} - Control the volume of a device on your mac

Usage:
  {PROG} list-devices
  {PROG} <Device Name> set <0 - 100>
  {PROG} <Device Name> get
  {PROG} <Device Name> inc [amount]
  {PROG} <Device Name> dec [amount]"""


def parse_number(text: str, default: float) -> float:
    """Parse a numeric argument, silently falling back to ``default``.

    Surrounding whitespace, digit separators and values that are not finite
    as a 32-bit float (``inf``, ``nan``, ``1e39``) count as unparseable.
    """
    value = None
    if text == text.strip() and "_" not in text:
        try:
            value = float(text)
        except ValueError:
            value = None
    if value is None or not math.isfinite(value) or abs(value) > FLOAT32_MAX:
        logger.debug(f"Unparseable number {text!r}, using {default}")
        return default
    return value


def format_float32(value: float) -> str:
    """
    Shortest decimal text that reads back as the same 32-bit float.
    """
    value = float32(value)
    for digits in range(1, 10):
        text = repr(float(f"{value:.{digits}g}"))
        if float32(float(text)) == value:
            return text
    return repr(value)


class CommandDispatcher:
    """
    Map positional argument shapes onto device volume operations.
    """

    def __init__(self, hardware=None, config=None):
        self._hardware = hardware
        self._config = config

    def _setting(self, path: str, default: float) -> float:
        if self._config is None:
            return default
        try:
            return float(self._config.get_config(path, default))
        except (TypeError, ValueError):
            logger.warning(f"Invalid value for {path}, using {default}")
            return default

    def _require_hardware(self):
        if self._hardware is None:
            self._hardware = load_hardware()
        if self._hardware is None:
            print("CoreAudio is not available on this system")
        return self._hardware

    def dispatch(self, args: List[str]) -> int:
        if len(args) == 1 and args[0] == "list-devices":
            return self.list_devices()
        if len(args) == 2 and args[1] == "get":
            return self.get(args[0])
        if len(args) == 3 and args[1] == "set":
            return self.set(args[0], args[2])
        if len(args) in (2, 3) and args[1] in ("inc", "dec"):
            return self.adjust(args[0], args[1], args[2] if len(args) == 3 else None)
        return self.help()

    def help(self) -> int:
        print(USAGE)
        return 0

    def list_devices(self) -> int:
        hardware = self._require_hardware()
        if hardware is None:
            return 1

        try:
            devices = list_output_devices(hardware)
        except CoreAudioError as e:
            logger.error(f"Device enumeration failed: {e}")
            if e.operation == "AudioObjectGetPropertyDataSize":
                print("Failed to get device list")
            else:
                print("Failed to get device data")
            return 0

        print("Available output devices:")
        for device in devices:
            print(f"  {device.name}")
        return 0

    def get(self, name: str) -> int:
        hardware = self._require_hardware()
        if hardware is None:
            return 1

        device_id = resolve_by_name(hardware, name)
        if device_id is None:
            print(f"Device not found: {name}")
            return 1

        volume = get_volume(hardware, device_id)
        if volume is None:
            print(f"Failed to get volume for {name}")
            return 1

        print(int(to_percent(volume)))
        return 0

    def set(self, name: str, value: str) -> int:
        hardware = self._require_hardware()
        if hardware is None:
            return 1

        percent = parse_number(
            value, self._setting("VOLUME.SET_FALLBACK", DEFAULT_SET_PERCENT)
        )

        # Set failures are reported but keep exit code 0.
        device_id = resolve_by_name(hardware, name)
        if device_id is None:
            print(f"Device not found: {name}")
            return 0

        if set_volume(hardware, device_id, from_percent(percent)):
            print(f"Set {name} volume to {format_float32(percent)}%")
        else:
            print(f"Failed to set volume for {name}")
        return 0

    def adjust(self, name: str, command: str, amount: Optional[str] = None) -> int:
        hardware = self._require_hardware()
        if hardware is None:
            return 1

        step = self._setting("VOLUME.STEP", DEFAULT_STEP)
        if amount is not None:
            step = parse_number(amount, step)

        device_id = resolve_by_name(hardware, name)
        if device_id is None:
            print(f"Device not found: {name}")
            return 1

        volume = get_volume(hardware, device_id)
        if volume is None:
            print(f"Failed to get current volume for {name}")
            return 1

        current = to_percent(volume)
        if command == "inc":
            new_percent = min(100.0, float32(current + step))
        else:
            new_percent = max(0.0, float32(current - step))
        logger.info(f"{name}: {command} {step} -> {current}% to {new_percent}%")

        if set_volume(hardware, device_id, from_percent(new_percent)):
            print(f"Set {name} volume to {int(new_percent)}%")
        else:
            print(f"Failed to set volume for {name}")
        return 0


def run(argv: List[str], hardware=None, config=None) -> int:
    """Run one command and return the process exit code.

    Args:
        argv: Arguments without the program name
        hardware: HAL binding; loaded on first device operation when omitted
        config: Object exposing ``get_config(path, default)``

    Returns:
        int: 0 on success or help, 1 when a device or its volume is unavailable
    """
    return CommandDispatcher(hardware, config).dispatch(list(argv))


def main():
    from mac_volume.utils.config_manager import ConfigManager
    from mac_volume.utils.logging_config import setup_logging

    exit_code = 1
    try:
        config = ConfigManager.get_instance()
        setup_logging(
            console_level=config.get_config("LOGGING.CONSOLE_LEVEL", "WARNING"),
            file_level=config.get_config("LOGGING.FILE_LEVEL", "INFO"),
            file_enabled=bool(config.get_config("LOGGING.FILE_ENABLED", True)),
        )
        exit_code = run(sys.argv[1:], config=config)
    except KeyboardInterrupt:
        logger.info("Program interrupted by user.")
        exit_code = 0
    except Exception as e:
        logger.error(f"Program exited with error: {e}", exc_info=True)
        exit_code = 1
    finally:
        sys.exit(exit_code)
