from .client import CloseCallback, StreamingAudioClient, TranscriptCallback
from .devices import CaptureDevice, PlaybackDevice, SoundDeviceMicrophone, SoundDevicePlayback
from .transport import LiveTransport


def create_voice_client(
    transport: LiveTransport,
    microphone: CaptureDevice | None = None,
    speaker: PlaybackDevice | None = None,
    on_transcript: TranscriptCallback | None = None,
    on_close: CloseCallback | None = None,
) -> StreamingAudioClient:
    """Create a voice client.

    This factory function hides which audio devices a session uses by default.

    Args:
        transport: Live session transport
        microphone: Capture device (default: system microphone via sounddevice)
        speaker: Playback device (default: system output via sounddevice)
        on_transcript: Called with each transcript fragment
        on_close: Called once when the session ends, with the error or None

    Returns:
        Unconnected StreamingAudioClient
    """
    return StreamingAudioClient(
        transport=transport,
        microphone=microphone or SoundDeviceMicrophone(),
        speaker=speaker or SoundDevicePlayback(),
        on_transcript=on_transcript,
        on_close=on_close,
    )
