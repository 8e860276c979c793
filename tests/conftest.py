"""Pytest configuration and shared fixtures."""
import asyncio
import os

import pytest

from engenheiro.audio import CaptureDevice, LiveEvent, LiveSession, LiveTransport, PlaybackDevice
from engenheiro.audio.exceptions import LiveSessionError, MicrophoneUnavailableError
from engenheiro.llm import GenerationClient, GenerationError, GenerationMode, GenerationResult
from engenheiro.report import TEXT_ANALYSIS_END, TEXT_ANALYSIS_START, VISUAL_PANEL_END, VISUAL_PANEL_START


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
    }


@pytest.fixture
def sample_report_text():
    """Return a complete five-section response with a visual block."""
    return (
        f"{VISUAL_PANEL_START}\n"
        "| Característica | Valor Nominal | Tolerância | Norma de Referência |\n"
        "|---|---|---|---|\n"
        "| Furo | 20 mm | H7 | [ISO 286](https://www.iso.org/standard/45975.html) |\n"
        "```svg\n<svg viewBox=\"0 0 10 10\"><circle r=\"4\"/></svg>\n```\n"
        f"{VISUAL_PANEL_END}\n"
        f"{TEXT_ANALYSIS_START}\n"
        "## 1. Interpretação Normativa\nA ISO 286 define o ajuste **H7/g6**.\n\n"
        "## 2. Avaliação Técnica\nFolga mínima de 7 µm.\n\n"
        "## 3. Riscos e Pontos Críticos\nDilatação térmica.\n\n"
        "## 4. Recomendações\nMedir com súbito calibrado.\n\n"
        "## 5. Conclusão Profissional\nAjuste adequado.\n"
        f"{TEXT_ANALYSIS_END}"
    )


# ---------------------------------------------------------------------------
# Generation client
# ---------------------------------------------------------------------------


class FakeGenerationClient(GenerationClient):
    """Returns canned replies, or raises a canned error."""

    def __init__(self, reply: str = "## 5. Conclusão Profissional\nOk.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, list, GenerationMode]] = []
        self.closed = False
        self.model = "fake-model"

    async def generate(self, prompt, attachments=None, mode=GenerationMode.PLAIN):
        self.calls.append((prompt, list(attachments or []), mode))
        if self.error is not None:
            raise self.error
        return GenerationResult(text=self.reply, model=self.model, mode=mode)

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeGenerationClient()


@pytest.fixture
def failing_client():
    return FakeGenerationClient(error=GenerationError("Quota exceeded"))


# ---------------------------------------------------------------------------
# Live transport and audio devices
# ---------------------------------------------------------------------------


class FakeLiveSession(LiveSession):
    """Session fed from a queue; ``None`` ends the stream, an exception fails it."""

    def __init__(self):
        self.sent = []
        self.inbox: asyncio.Queue = asyncio.Queue()
        self.close_count = 0

    async def send_audio(self, blob):
        self.sent.append(blob)

    async def receive(self):
        while True:
            item = await self.inbox.get()
            if item is None:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    async def close(self):
        self.close_count += 1

    def push(self, event: LiveEvent | Exception | None) -> None:
        self.inbox.put_nowait(event)


class FakeLiveTransport(LiveTransport):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sessions: list[FakeLiveSession] = []

    async def connect(self):
        if self.fail:
            raise LiveSessionError("Live session setup failed")
        session = FakeLiveSession()
        self.sessions.append(session)
        return session


class FakeMicrophone(CaptureDevice):
    def __init__(self, available: bool = True, start_error: Exception | None = None):
        self.available = available
        self.start_error = start_error
        self.opened = False
        self.close_count = 0
        self.on_frame = None

    def open(self):
        if not self.available:
            raise MicrophoneUnavailableError("Permission denied")
        self.opened = True

    def start(self, on_frame):
        if self.start_error is not None:
            raise self.start_error
        self.on_frame = on_frame

    def close(self):
        self.close_count += 1
        self.opened = False
        self.on_frame = None


class FakeSpeaker(PlaybackDevice):
    def __init__(self):
        self.now = 0.0
        self.opened = False
        self.close_count = 0
        self.playing = {}
        self.stopped = []

    def open(self):
        self.opened = True

    def current_time(self):
        return self.now

    def start_source(self, source, on_ended):
        self.playing[source.source_id] = (source, on_ended)

    def stop_source(self, source):
        self.playing.pop(source.source_id, None)
        self.stopped.append(source.source_id)

    def finish(self, source_id):
        """Simulate natural completion of a source."""
        _, on_ended = self.playing.pop(source_id)
        on_ended()

    def close(self):
        self.close_count += 1
        self.opened = False


@pytest.fixture
def transport():
    return FakeLiveTransport()


@pytest.fixture
def microphone():
    return FakeMicrophone()


@pytest.fixture
def speaker():
    return FakeSpeaker()
