"""Local audio devices.

Hides the design decisions about:
- Which audio library drives the sound card (sounddevice / PortAudio)
- How captured blocks leave the audio thread
- How scheduled buffers are mixed onto the output stream clock
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .config import CAPTURE_FRAME_SIZE, CHANNELS, INPUT_SAMPLE_RATE, OUTPUT_SAMPLE_RATE
from .exceptions import AudioDeviceError, MicrophoneUnavailableError
from .scheduler import ScheduledSource

# sounddevice loads the PortAudio shared library at import time and raises
# OSError when it is missing
try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError):
    SOUNDDEVICE_AVAILABLE = False
    sd = None

FrameHandler = Callable[[NDArray[np.float32]], None]


class CaptureDevice(ABC):
    """Microphone input producing fixed-size mono float blocks."""

    @abstractmethod
    def open(self) -> None:
        """Acquire the input device.

        Raises:
            MicrophoneUnavailableError: If access is denied or no device exists
        """

    @abstractmethod
    def start(self, on_frame: FrameHandler) -> None:
        """Begin delivering blocks to ``on_frame``.

        ``on_frame`` may be called from a non-asyncio thread.

        Raises:
            MicrophoneUnavailableError: If the input stream cannot start
        """

    @abstractmethod
    def close(self) -> None:
        """Stop capture and release the device. Safe to call repeatedly."""


class PlaybackDevice(ABC):
    """Output device that plays scheduled sources on its own clock."""

    @abstractmethod
    def open(self) -> None:
        """Acquire the output device.

        Raises:
            AudioDeviceError: If the device cannot be opened
        """

    @abstractmethod
    def current_time(self) -> float:
        """Current output clock time in seconds."""

    @abstractmethod
    def start_source(self, source: ScheduledSource, on_ended: Callable[[], None]) -> None:
        """Play a source at its scheduled start time.

        ``on_ended`` runs on the event loop after natural completion only.
        """

    @abstractmethod
    def stop_source(self, source: ScheduledSource) -> None:
        """Silence a source immediately; its ``on_ended`` never fires."""

    @abstractmethod
    def close(self) -> None:
        """Stop output and release the device. Safe to call repeatedly."""


def _require_sounddevice(error_type: type[AudioDeviceError]) -> None:
    if not SOUNDDEVICE_AVAILABLE:
        raise error_type(
            "Audio devices require sounddevice and the PortAudio library. "
            "Install with: pip install sounddevice (and libportaudio2 on Linux)"
        )


class SoundDeviceMicrophone(CaptureDevice):
    """Microphone capture through a sounddevice ``InputStream``."""

    def __init__(
        self,
        sample_rate: int = INPUT_SAMPLE_RATE,
        frame_size: int = CAPTURE_FRAME_SIZE,
        device: int | str | None = None,
    ) -> None:
        self._sample_rate = sample_rate
        self._frame_size = frame_size
        self._device = device
        self._stream: Any | None = None
        self._on_frame: FrameHandler | None = None

    def open(self) -> None:
        _require_sounddevice(MicrophoneUnavailableError)
        try:
            self._stream = sd.InputStream(
                samplerate=self._sample_rate,
                channels=CHANNELS,
                dtype="float32",
                blocksize=self._frame_size,
                device=self._device,
                callback=self._callback,
            )
        except (sd.PortAudioError, ValueError) as e:
            raise MicrophoneUnavailableError(f"Microphone unavailable: {e}") from e

    def start(self, on_frame: FrameHandler) -> None:
        if self._stream is None:
            raise MicrophoneUnavailableError("Microphone is not open")
        self._on_frame = on_frame
        try:
            self._stream.start()
        except sd.PortAudioError as e:
            self._on_frame = None
            raise MicrophoneUnavailableError(f"Microphone failed to start: {e}") from e

    def _callback(self, indata: NDArray[np.float32], frames: int, time_info: Any, status: Any) -> None:
        handler = self._on_frame
        if handler is not None:
            # Copy: PortAudio reuses the buffer after the callback returns
            handler(indata[:, 0].copy())

    def close(self) -> None:
        self._on_frame = None
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()


class SoundDevicePlayback(PlaybackDevice):
    """Output through a sounddevice ``OutputStream`` mixing scheduled sources.

    The stream callback runs on the PortAudio thread. It renders every source
    overlapping the current output window at its sample offset and reports
    sources that played to the end back to the event loop.
    """

    def __init__(self, sample_rate: int = OUTPUT_SAMPLE_RATE, device: int | str | None = None) -> None:
        self._sample_rate = sample_rate
        self._device = device
        self._stream: Any | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._lock = threading.Lock()
        self._sources: dict[int, tuple[ScheduledSource, Callable[[], None]]] = {}

    def open(self) -> None:
        _require_sounddevice(AudioDeviceError)
        self._loop = asyncio.get_running_loop()
        try:
            self._stream = sd.OutputStream(
                samplerate=self._sample_rate,
                channels=CHANNELS,
                dtype="float32",
                device=self._device,
                callback=self._callback,
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as e:
            self._stream = None
            raise AudioDeviceError(f"Audio output unavailable: {e}") from e

    def current_time(self) -> float:
        if self._stream is None:
            return 0.0
        return float(self._stream.time)

    def start_source(self, source: ScheduledSource, on_ended: Callable[[], None]) -> None:
        with self._lock:
            self._sources[source.source_id] = (source, on_ended)

    def stop_source(self, source: ScheduledSource) -> None:
        with self._lock:
            self._sources.pop(source.source_id, None)

    def _callback(self, outdata: NDArray[np.float32], frames: int, time_info: Any, status: Any) -> None:
        outdata.fill(0)
        window_start = time_info.outputBufferDacTime
        window_end = window_start + frames / self._sample_rate
        ended: list[Callable[[], None]] = []

        with self._lock:
            for source_id, (source, on_ended) in list(self._sources.items()):
                if source.start_time >= window_end:
                    continue
                samples = source.buffer.samples
                offset = int(round((window_start - source.start_time) * self._sample_rate))
                out_from = max(0, -offset)
                src_from = max(0, offset)
                count = min(frames - out_from, samples.shape[0] - src_from)
                if count > 0:
                    outdata[out_from:out_from + count, 0] += samples[src_from:src_from + count]
                if src_from + max(count, 0) >= samples.shape[0]:
                    del self._sources[source_id]
                    ended.append(on_ended)

        if ended and self._loop is not None:
            for callback in ended:
                self._loop.call_soon_threadsafe(callback)

    def close(self) -> None:
        with self._lock:
            self._sources.clear()
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()
