"""Exceptions."""


class AudioError(Exception):
    """Base error for audio subsystem failures."""


class CoreAudioUnavailable(AudioError):
    """Error to indicate the CoreAudio frameworks cannot be loaded on this host."""


class CoreAudioError(AudioError):
    """Error to indicate a HAL call returned a non-zero OSStatus."""

    def __init__(self, operation: str, status: int):
        super().__init__(f"{operation} failed with OSStatus {status}")
        self.operation = operation
        self.status = status
