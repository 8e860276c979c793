"""Streaming audio client.

Owns one real-time voice session: microphone frames go out through the live
session as soon as they are captured, inbound audio is decoded and placed on
the playback timeline by a PlaybackScheduler.
"""

import asyncio
from collections.abc import Callable
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .codec import decode_audio_buffer, make_audio_blob
from .devices import CaptureDevice, PlaybackDevice
from .exceptions import AudioError, LiveSessionError
from .scheduler import PlaybackScheduler
from .transport import LiveEvent, LiveSession, LiveTransport

TranscriptCallback = Callable[[str], None]
CloseCallback = Callable[[Exception | None], None]


class StreamingAudioClient:
    """Bidirectional voice session with gapless playback.

    Lifecycle:
        connect()     acquire microphone, open speaker, open the live session,
                      then start capture once the session reports it is ready
        disconnect()  stop capture, hard-stop playback, close the session;
                      idempotent and safe before connect()

    A remote close or failure goes through the same teardown and reports to
    ``on_close`` once per session, with the error or None.
    """

    def __init__(
        self,
        transport: LiveTransport,
        microphone: CaptureDevice,
        speaker: PlaybackDevice,
        on_transcript: TranscriptCallback | None = None,
        on_close: CloseCallback | None = None,
    ) -> None:
        self._transport = transport
        self._microphone = microphone
        self._speaker = speaker
        self._on_transcript = on_transcript
        self._on_close = on_close
        self._scheduler = PlaybackScheduler()
        self._session: LiveSession | None = None
        self._sender_task: asyncio.Task | None = None
        self._receiver_task: asyncio.Task | None = None
        self._debug_callback: Any | None = None

    @property
    def is_active(self) -> bool:
        """Whether a session is open."""
        return self._session is not None

    @property
    def scheduler(self) -> PlaybackScheduler:
        return self._scheduler

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Voice", message)

    async def connect(self) -> None:
        """Open the voice session.

        Raises:
            MicrophoneUnavailableError: If the microphone is denied or missing;
                nothing has been opened when this is raised
            AudioDeviceError: If the output device cannot be opened
            LiveSessionError: If the remote session cannot be opened

        Any failure releases whatever was opened before re-raising.
        """
        if self._session is not None:
            return

        self._microphone.open()
        self._debug("info", "Microphone acquired")

        try:
            self._speaker.open()
            session = await self._transport.connect()
        except AudioError as e:
            self._debug("error", f"Connect failed: {e.message}")
            self._microphone.close()
            self._speaker.close()
            raise

        self._debug("info", "Live session open")

        loop = asyncio.get_running_loop()
        frames: asyncio.Queue[NDArray[np.float32]] = asyncio.Queue()

        def on_frame(frame: NDArray[np.float32]) -> None:
            loop.call_soon_threadsafe(frames.put_nowait, frame)

        try:
            self._microphone.start(on_frame)
        except AudioError as e:
            self._debug("error", f"Capture failed to start: {e.message}")
            self._microphone.close()
            self._speaker.close()
            await session.close()
            raise

        # Frames captured before the sender starts wait in the queue
        self._session = session
        self._sender_task = asyncio.create_task(self._send_frames(session, frames))
        self._receiver_task = asyncio.create_task(self._receive_events(session))

    async def disconnect(self) -> None:
        """Tear down the session. Safe to call repeatedly or before connect()."""
        await self._teardown(None)

    async def _send_frames(
        self,
        session: LiveSession,
        frames: "asyncio.Queue[NDArray[np.float32]]",
    ) -> None:
        while True:
            frame = await frames.get()
            try:
                await session.send_audio(make_audio_blob(frame))
            except LiveSessionError as e:
                self._debug("error", e.message)
                await self._teardown(e)
                return

    async def _receive_events(self, session: LiveSession) -> None:
        try:
            async for event in session.receive():
                self._handle_event(event)
        except LiveSessionError as e:
            self._debug("error", e.message)
            await self._teardown(e)
            return
        self._debug("info", "Live session closed by remote")
        await self._teardown(None)

    def _handle_event(self, event: LiveEvent) -> None:
        if event.interrupted:
            self._debug("debug", "Interrupted, stopping playback")
            self._stop_playback()

        for data in event.audio:
            try:
                buffer = decode_audio_buffer(data)
            except ValueError as e:
                raise LiveSessionError(f"Malformed audio payload: {e}") from e
            source = self._scheduler.schedule(buffer, self._speaker.current_time())
            self._speaker.start_source(
                source, lambda source_id=source.source_id: self._scheduler.complete(source_id)
            )

        if event.transcript and self._on_transcript:
            self._on_transcript(event.transcript)

    def _stop_playback(self) -> None:
        for source in self._scheduler.stop_all():
            self._speaker.stop_source(source)

    async def _teardown(self, error: Exception | None) -> None:
        session, self._session = self._session, None
        self._microphone.close()
        self._stop_playback()

        if session is None:
            return

        current = asyncio.current_task()
        pending = []
        for task in (self._sender_task, self._receiver_task):
            if task is not None and task is not current and not task.done():
                task.cancel()
                pending.append(task)
        self._sender_task = None
        self._receiver_task = None

        self._speaker.close()
        await session.close()
        # Results are CancelledError from the cancel() above
        await asyncio.gather(*pending, return_exceptions=True)
        self._debug("info", "Voice session ended")

        if self._on_close:
            self._on_close(error)
