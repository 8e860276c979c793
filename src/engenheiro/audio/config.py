"""Audio format constants.

Centralizes the sample formats agreed with the live endpoint.
"""

# Microphone capture, sent to the remote side
INPUT_SAMPLE_RATE = 16000
INPUT_MIME_TYPE = f"audio/pcm;rate={INPUT_SAMPLE_RATE}"
CAPTURE_FRAME_SIZE = 4096  # Samples per captured block

# Streamed model speech, received from the remote side
OUTPUT_SAMPLE_RATE = 24000

CHANNELS = 1

# Full scale of signed 16-bit PCM
PCM16_SCALE = 32768.0
PCM16_MIN = -32768
PCM16_MAX = 32767
