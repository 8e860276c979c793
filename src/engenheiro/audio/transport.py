"""Live session transport.

Hides the wire protocol of the real-time audio endpoint. The Gemini
implementation speaks the BidiGenerateContent WebSocket protocol directly:
a setup message, a ``setupComplete`` acknowledgement (the session "open"
event), base64 PCM frames in ``realtimeInput`` and ``serverContent``
messages carrying audio, transcription and turn signals.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosedError, WebSocketException

from .codec import AudioBlob
from .exceptions import LiveSessionError

GEMINI_LIVE_HOST = "generativelanguage.googleapis.com"
GEMINI_LIVE_PATH = "/ws/google.ai.generativelanguage.v1beta.GenerativeService.BidiGenerateContent"
DEFAULT_LIVE_MODEL = "gemini-2.5-flash-native-audio-preview-09-2025"
DEFAULT_VOICE = "Zephyr"


@dataclass(frozen=True)
class LiveEvent:
    """One inbound server message, reduced to what the client acts on."""

    audio: list[str] = field(default_factory=list)  # base64 PCM16 chunks, 24 kHz mono
    transcript: str | None = None
    interrupted: bool = False
    turn_complete: bool = False


class LiveSession(ABC):
    """An open bidirectional session."""

    @abstractmethod
    async def send_audio(self, blob: AudioBlob) -> None:
        """Send one encoded microphone frame."""

    @abstractmethod
    def receive(self) -> AsyncIterator[LiveEvent]:
        """Iterate inbound events until the remote side closes.

        Raises:
            LiveSessionError: If the session fails instead of closing cleanly
        """

    @abstractmethod
    async def close(self) -> None:
        """Request session closure. Safe to call repeatedly."""


class LiveTransport(ABC):
    """Factory for live sessions."""

    @abstractmethod
    async def connect(self) -> LiveSession:
        """Open a session and wait until the remote side reports it is ready.

        Raises:
            LiveSessionError: If the session cannot be opened
        """


def parse_server_message(payload: dict[str, Any]) -> LiveEvent | None:
    """Reduce a BidiGenerateContent server message to a LiveEvent.

    Returns:
        LiveEvent, or None for messages the client does not act on
        (setup acknowledgements, usage metadata, go-away notices)
    """
    server_content = payload.get("serverContent")
    if server_content is None:
        return None

    audio: list[str] = []
    texts: list[str] = []

    model_turn = server_content.get("modelTurn") or {}
    for part in model_turn.get("parts", []):
        inline_data = part.get("inlineData")
        if inline_data:
            mime_type = inline_data.get("mimeType", "audio/pcm")
            data = inline_data.get("data")
            if data and mime_type.startswith("audio/"):
                audio.append(data)
            continue
        text = part.get("text")
        if text:
            texts.append(text)

    output_transcription = server_content.get("outputTranscription") or {}
    if output_transcription.get("text"):
        texts.append(output_transcription["text"])

    return LiveEvent(
        audio=audio,
        transcript="".join(texts) or None,
        interrupted=bool(server_content.get("interrupted")),
        turn_complete=bool(server_content.get("turnComplete")),
    )


class GeminiLiveSession(LiveSession):
    """Session over an open Gemini Live WebSocket."""

    def __init__(self, websocket: Any) -> None:
        self._websocket = websocket

    async def send_audio(self, blob: AudioBlob) -> None:
        message = {"realtimeInput": {"audio": blob.to_dict()}}
        try:
            await self._websocket.send(json.dumps(message))
        except WebSocketException as e:
            raise LiveSessionError(f"Failed to send audio: {e}") from e

    async def receive(self) -> AsyncIterator[LiveEvent]:
        try:
            # Iteration ends on a clean close and raises on an abnormal one
            async for raw in self._websocket:
                try:
                    payload = json.loads(raw)
                except ValueError as e:
                    raise LiveSessionError(f"Malformed server message: {e}") from e
                if not isinstance(payload, dict):
                    raise LiveSessionError(f"Unexpected server message: {str(raw)[:200]}")
                event = parse_server_message(payload)
                if event is not None:
                    yield event
        except ConnectionClosedError as e:
            raise LiveSessionError(f"Live session closed unexpectedly: {e}") from e

    async def close(self) -> None:
        await self._websocket.close()


class GeminiLiveTransport(LiveTransport):
    """Opens Gemini Live sessions over a raw WebSocket.

    Hidden design decisions:
    - Endpoint URL and API key placement
    - Setup message layout (audio responses, voice, transcription)
    - Waiting for ``setupComplete`` before reporting the session as open
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_LIVE_MODEL,
        voice: str = DEFAULT_VOICE,
        system_instruction: str | None = None,
        host: str = GEMINI_LIVE_HOST,
    ) -> None:
        if not api_key:
            raise LiveSessionError("API Key is missing.")
        self._api_key = api_key
        self._model = model
        self._voice = voice
        self._system_instruction = system_instruction
        self._host = host

    @property
    def model(self) -> str:
        return self._model

    def _url(self) -> str:
        return f"wss://{self._host}{GEMINI_LIVE_PATH}?key={self._api_key}"

    def build_setup_message(self) -> dict[str, Any]:
        """Build the BidiGenerateContentSetup message."""
        model = self._model if self._model.startswith("models/") else f"models/{self._model}"
        setup: dict[str, Any] = {
            "model": model,
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": self._voice}}
                },
            },
            "outputAudioTranscription": {},
        }
        if self._system_instruction:
            setup["systemInstruction"] = {"parts": [{"text": self._system_instruction}]}
        return {"setup": setup}

    async def connect(self) -> LiveSession:
        try:
            websocket = await websockets.connect(self._url(), max_size=None)
        except (OSError, WebSocketException) as e:
            raise LiveSessionError(f"Failed to open live session: {e}") from e

        try:
            await websocket.send(json.dumps(self.build_setup_message()))
            reply = json.loads(await websocket.recv())
        except (OSError, WebSocketException) as e:
            await websocket.close()
            raise LiveSessionError(f"Live session setup failed: {e}") from e

        if "setupComplete" not in reply:
            await websocket.close()
            raise LiveSessionError(f"Unexpected setup reply: {json.dumps(reply)[:200]}")

        return GeminiLiveSession(websocket)
