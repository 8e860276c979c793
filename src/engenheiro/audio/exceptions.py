"""Exceptions for the audio package."""


class AudioError(Exception):
    """Base exception for voice session errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AudioDeviceError(AudioError):
    """Raised when an audio device cannot be opened or used."""

    pass


class MicrophoneUnavailableError(AudioDeviceError):
    """Raised when microphone access is denied or no input device exists."""

    pass


class LiveSessionError(AudioError):
    """Raised when the live session cannot be opened or fails mid-stream."""

    pass
