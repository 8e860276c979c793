"""Real-time voice module for engenheiro.

Hides the PCM wire format, the playback timeline and the live session
protocol behind StreamingAudioClient.
"""

from .client import StreamingAudioClient
from .codec import (
    AudioBlob,
    AudioBuffer,
    decode_audio_buffer,
    decode_pcm16_base64,
    encode_pcm16_base64,
    float_to_pcm16,
    make_audio_blob,
    pcm16_to_float,
)
from .config import INPUT_MIME_TYPE, INPUT_SAMPLE_RATE, OUTPUT_SAMPLE_RATE
from .devices import (
    SOUNDDEVICE_AVAILABLE,
    CaptureDevice,
    PlaybackDevice,
    SoundDeviceMicrophone,
    SoundDevicePlayback,
)
from .exceptions import AudioDeviceError, AudioError, LiveSessionError, MicrophoneUnavailableError
from .factory import create_voice_client
from .scheduler import PlaybackScheduler, ScheduledSource
from .transport import (
    GeminiLiveTransport,
    LiveEvent,
    LiveSession,
    LiveTransport,
    parse_server_message,
)

__all__ = [
    "AudioBlob",
    "AudioBuffer",
    "AudioDeviceError",
    "AudioError",
    "CaptureDevice",
    "GeminiLiveTransport",
    "INPUT_MIME_TYPE",
    "INPUT_SAMPLE_RATE",
    "LiveEvent",
    "LiveSession",
    "LiveSessionError",
    "LiveTransport",
    "MicrophoneUnavailableError",
    "OUTPUT_SAMPLE_RATE",
    "PlaybackDevice",
    "PlaybackScheduler",
    "SOUNDDEVICE_AVAILABLE",
    "ScheduledSource",
    "SoundDeviceMicrophone",
    "SoundDevicePlayback",
    "StreamingAudioClient",
    "create_voice_client",
    "decode_audio_buffer",
    "decode_pcm16_base64",
    "encode_pcm16_base64",
    "float_to_pcm16",
    "make_audio_blob",
    "parse_server_message",
]
